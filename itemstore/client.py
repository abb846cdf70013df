"""
Storage client.

Derives key attributes from table definitions and creates tables on the
first write to them.
"""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from aws_lambda_powertools import Logger

from itemstore.core.keys import compose_key, composite
from itemstore.dal.interface import IStorageEngine
from itemstore.exceptions import MissingTableError
from itemstore.models.table import Item, TableSpec

logger = Logger()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


class StorageClient:
    def __init__(
        self,
        engine: IStorageEngine,
        environment: str | None = None,
        get_id: Callable[[], str] = _new_id,
        get_now: Callable[[], str] = _utc_now,
    ) -> None:
        self.engine = engine
        self.environment = environment
        self.get_id = get_id
        self.get_now = get_now

    def table_name(self, name: str) -> str:
        """Physical table name for a logical one."""
        if self.environment:
            return f"{self.environment}-{name}"
        return name

    def format_item(self, item: Item, table: TableSpec) -> Item:
        """
        Build the stored form of an item.

        ``id`` and ``createdDate`` are only filled when missing. Key attributes
        are added afterwards so that they can be built from either of them.
        """
        result = dict(item)
        result.setdefault("id", self.get_id())
        result.setdefault("createdDate", self.get_now())

        hash_key, hash_value = compose_key(result, table.hash_keys)
        sort_key = None
        if table.sort_keys:
            sort_key, sort_value = compose_key(result, table.sort_keys)
        result[hash_key] = hash_value
        if sort_key is not None:
            result[sort_key] = sort_value
        return result

    async def add_item(self, item: Item, table: TableSpec) -> Item:
        """
        Store an item, creating its table if it does not exist yet.

        Args:
            item: Item attributes supplied by the caller
            table: Table definition the item belongs to

        Returns:
            The item as stored, including generated and key attributes

        Raises:
            MissingKeyError: If the item lacks a key component attribute
        """
        table_name = self.table_name(table.name)
        stored = self.format_item(item, table)
        try:
            return await self.engine.add_item(stored, table_name)
        except MissingTableError:
            logger.warning("Table missing on write, creating it", extra={"table_name": table_name})

        hash_key = composite(table.hash_keys)
        sort_key = composite(table.sort_keys) if table.sort_keys else None
        await self.engine.create_table(table_name, hash_key, sort_key)
        logger.info(
            "Created table on first write",
            extra={"table_name": table_name, "hash_key": hash_key, "sort_key": sort_key},
        )
        return await self.engine.add_item(stored, table_name)

    async def get_items(self, hash_key_name: str, hash_key_value: Any, table_name: str) -> list[Item]:
        """Return the items of a table sharing a hash key value. Never creates the table."""
        return await self.engine.get_items(self.table_name(table_name), hash_key_name, hash_key_value)
