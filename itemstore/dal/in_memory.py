from typing import Any

from itemstore.core.keys import matches_hash, storage_key
from itemstore.dal.interface import IStorageEngine
from itemstore.exceptions import ExistingTableError, MissingTableError
from itemstore.models.table import Item, KeySchema


class InMemoryStorageEngine(IStorageEngine):
    """Engine over process-local dicts. Not safe for concurrent writers."""

    def __init__(
        self,
        tables: dict[str, KeySchema] | None = None,
        items: dict[str, dict[str, Item]] | None = None,
    ):
        self.tables: dict[str, KeySchema] = tables if tables is not None else {}
        self.items: dict[str, dict[str, Item]] = items if items is not None else {}

    async def add_item(self, item: Item, table_name: str) -> Item:
        if table_name not in self.tables:
            raise MissingTableError(table_name)
        key = storage_key(item, self.tables[table_name])
        self.items.setdefault(table_name, {})[key] = item
        return item

    async def create_table(self, table_name: str, hash_key: str, sort_key: str | None = None) -> None:
        if table_name in self.tables:
            raise ExistingTableError(table_name)
        self.tables[table_name] = KeySchema(hash_key=hash_key, sort_key=sort_key)

    async def get_items(self, table_name: str, hash_key_name: str, hash_key_value: Any) -> list[Item]:
        if table_name not in self.tables:
            raise MissingTableError(table_name)
        return [
            item
            for key, item in self.items.get(table_name, {}).items()
            if matches_hash(key, hash_key_value)
        ]
