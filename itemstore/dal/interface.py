from abc import ABC, abstractmethod
from typing import Any

from itemstore.models.table import Item


class IStorageEngine(ABC):
    """
    Backend capable of holding items in hash (and optional sort) keyed tables.

    Engines raise ``MissingTableError`` for unknown tables, ``ExistingTableError``
    when creating a table twice and ``MissingKeyError`` for items lacking a
    key attribute of the table schema.
    """

    @abstractmethod
    async def add_item(self, item: Item, table_name: str) -> Item:
        """Store the item, replacing any item under the same storage key."""
        ...

    @abstractmethod
    async def create_table(self, table_name: str, hash_key: str, sort_key: str | None = None) -> None:
        """Create a table. The table is usable as soon as this returns."""
        ...

    @abstractmethod
    async def get_items(self, table_name: str, hash_key_name: str, hash_key_value: Any) -> list[Item]:
        """Return every item whose hash key equals ``hash_key_value``."""
        ...
