"""
File backed storage engine.

Layout under ``location``::

    .filedb/<db_name>/tables.json     table name -> {"hashKey": ..., "sortKey": ...}
    .filedb/<db_name>/<table>.json    storage key -> item

Every mutation reads the whole JSON document, updates it and writes it back.
There is no locking, so two writers updating the same table concurrently can
lose one of the updates. File access runs in a worker thread.
"""

import asyncio
import json
import os
from typing import Any

from aws_lambda_powertools import Logger

from itemstore.constants import DEFAULT_DB_NAME, DEFAULT_LOCATION, FILE_DB_DIRECTORY, TABLES_FILE
from itemstore.core.keys import matches_hash, storage_key
from itemstore.dal.interface import IStorageEngine
from itemstore.exceptions import (
    ExistingTableError,
    MissingLocationError,
    MissingTableError,
    UnreadableTableError,
)
from itemstore.models.table import Item, KeySchema

logger = Logger()


def _verify_location_exists(location: str) -> None:
    try:
        os.lstat(location)
    except FileNotFoundError as e:
        raise MissingLocationError(location) from e


def _read_json(path: str) -> dict[str, Any]:
    with open(path) as file:
        data: dict[str, Any] = json.load(file)
    return data


def _write_json(path: str, data: dict[str, Any]) -> None:
    with open(path, "w") as file:
        json.dump(data, file)


class LocalDiskStorageEngine(IStorageEngine):
    def __init__(self, db_name: str = DEFAULT_DB_NAME, location: str = DEFAULT_LOCATION):
        self.db_name = db_name
        self.location = location
        self.file_db_root = os.path.join(location, FILE_DB_DIRECTORY)
        self.db_root = os.path.join(self.file_db_root, db_name)

    def _table_path(self, table_name: str) -> str:
        return os.path.join(self.db_root, f"{table_name}.json")

    def _read_tables(self) -> dict[str, KeySchema]:
        # A missing or unreadable tables file means no tables yet
        path = os.path.join(self.db_root, TABLES_FILE)
        try:
            return {name: KeySchema.model_validate(schema) for name, schema in _read_json(path).items()}
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, AttributeError):
            logger.warning("Ignoring unreadable tables file", extra={"path": path})
            return {}

    def _write_tables(self, tables: dict[str, KeySchema]) -> None:
        _write_json(
            os.path.join(self.db_root, TABLES_FILE),
            {name: schema.to_document() for name, schema in tables.items()},
        )

    def _load_items(self, table_name: str) -> dict[str, Item]:
        path = self._table_path(table_name)
        try:
            return _read_json(path)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.error(f"Error reading table file: {e}", extra={"table_name": table_name, "path": path})
            raise UnreadableTableError(table_name, path) from e

    async def _read_items(self, table_name: str) -> dict[str, Item]:
        return await asyncio.to_thread(self._load_items, table_name)

    async def _write_items(self, table_name: str, items: dict[str, Item]) -> None:
        await asyncio.to_thread(_write_json, self._table_path(table_name), items)

    def _create_db_if_necessary(self) -> None:
        _verify_location_exists(self.location)
        for directory in (self.file_db_root, self.db_root):
            if not os.path.exists(directory):
                os.mkdir(directory)
                logger.debug("Created database directory", extra={"directory": directory})

    def _get_schema(self, table_name: str) -> KeySchema:
        _verify_location_exists(self.db_root)
        tables = self._read_tables()
        if table_name not in tables:
            raise MissingTableError(table_name)
        return tables[table_name]

    def _add_table(self, table_name: str, schema: KeySchema) -> None:
        self._create_db_if_necessary()
        tables = self._read_tables()
        if table_name in tables:
            raise ExistingTableError(table_name)
        tables[table_name] = schema
        self._write_tables(tables)

    async def add_item(self, item: Item, table_name: str) -> Item:
        schema = await asyncio.to_thread(self._get_schema, table_name)
        key = storage_key(item, schema)
        items = await self._read_items(table_name)
        items[key] = item
        await self._write_items(table_name, items)
        logger.debug("Stored item on disk", extra={"table_name": table_name, "storage_key": key})
        return item

    async def create_table(self, table_name: str, hash_key: str, sort_key: str | None = None) -> None:
        await asyncio.to_thread(self._add_table, table_name, KeySchema(hash_key=hash_key, sort_key=sort_key))
        logger.debug("Created table on disk", extra={"table_name": table_name, "db_root": self.db_root})

    async def get_items(self, table_name: str, hash_key_name: str, hash_key_value: Any) -> list[Item]:
        await asyncio.to_thread(self._get_schema, table_name)
        items = await self._read_items(table_name)
        matching = [item for key, item in items.items() if matches_hash(key, hash_key_value)]
        logger.debug("Read items from disk", extra={"table_name": table_name, "count": len(matching)})
        return matching
