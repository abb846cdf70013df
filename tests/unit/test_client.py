from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from itemstore.client import StorageClient
from itemstore.dal.in_memory import InMemoryStorageEngine
from itemstore.dal.interface import IStorageEngine
from itemstore.dal.local_disk import LocalDiskStorageEngine
from itemstore.exceptions import ExistingTableError, MissingKeyError, MissingLocationError, MissingTableError
from itemstore.models.table import KeySchema, TableSpec

TABLE_NAME = "test-addItem-test-table"


@pytest.fixture
def engine():
    return InMemoryStorageEngine()


@pytest.fixture
def client(engine):
    return StorageClient(
        engine=engine,
        environment="test-addItem",
        get_id=lambda: "test-id",
        get_now=lambda: "2020-01-01T00:00:00",
    )


class TestAddItem:
    async def test_creates_table_and_adds_item(self, client, engine):
        returned = await client.add_item(
            {"testHashKey": "test-hash-key", "testSortKey": "test-sort-key"},
            TableSpec(name="test-table", hash_keys=["testHashKey"], sort_keys=["testSortKey"]),
        )

        assert engine.tables[TABLE_NAME] == KeySchema(hash_key="testHashKey", sort_key="testSortKey")
        expected = {
            "id": "test-id",
            "createdDate": "2020-01-01T00:00:00",
            "testHashKey": "test-hash-key",
            "testSortKey": "test-sort-key",
        }
        assert returned == expected
        assert engine.items[TABLE_NAME]["test-hash-key+test-sort-key"] == expected

    async def test_creates_table_without_sort_key(self, client, engine):
        returned = await client.add_item(
            {"testHashKey": "test-hash-key"},
            TableSpec(name="test-table", hash_keys=["testHashKey"]),
        )

        assert engine.tables[TABLE_NAME] == KeySchema(hash_key="testHashKey")
        assert returned == {"id": "test-id", "createdDate": "2020-01-01T00:00:00", "testHashKey": "test-hash-key"}
        assert engine.items[TABLE_NAME]["test-hash-key"] == returned

    async def test_adds_item_to_existing_table(self, client):
        engine = InMemoryStorageEngine(tables={TABLE_NAME: KeySchema(hash_key="testHashKey")})
        client.engine = engine

        await client.add_item({"testHashKey": "test-hash-key"}, TableSpec(name="test-table", hash_keys=["testHashKey"]))

        assert list(engine.items[TABLE_NAME]) == ["test-hash-key"]

    async def test_composite_hash_key(self, client, engine):
        returned = await client.add_item(
            {"firstHashKeyComponent": "a", "secondHashKeyComponent": "b"},
            TableSpec(name="test-table", hash_keys=["firstHashKeyComponent", "secondHashKeyComponent"]),
        )

        assert engine.tables[TABLE_NAME].hash_key == "firstHashKeyComponent|secondHashKeyComponent"
        assert returned["firstHashKeyComponent|secondHashKeyComponent"] == "a|b"
        assert engine.items[TABLE_NAME]["a|b"] == returned
        assert await client.get_items("firstHashKeyComponent|secondHashKeyComponent", "a|b", "test-table") == [returned]

    async def test_composite_sort_key(self, client, engine):
        returned = await client.add_item(
            {
                "testHashKey": "test-hash-key",
                "firstSortKeyComponent": "first",
                "secondSortKeyComponent": "second",
            },
            TableSpec(
                name="test-table",
                hash_keys=["testHashKey"],
                sort_keys=["firstSortKeyComponent", "secondSortKeyComponent"],
            ),
        )

        assert engine.tables[TABLE_NAME] == KeySchema(
            hash_key="testHashKey", sort_key="firstSortKeyComponent|secondSortKeyComponent"
        )
        assert returned["firstSortKeyComponent|secondSortKeyComponent"] == "first|second"
        assert engine.items[TABLE_NAME]["test-hash-key+first|second"] == returned

    async def test_missing_hash_key_component(self, client, engine):
        with pytest.raises(MissingKeyError):
            await client.add_item(
                {"firstHashKeyComponent": "a", "testSortKey": "s"},
                TableSpec(
                    name="test-table",
                    hash_keys=["firstHashKeyComponent", "secondHashKeyComponent"],
                    sort_keys=["testSortKey"],
                ),
            )
        assert engine.tables == {}

    async def test_missing_sort_key_component(self, client):
        with pytest.raises(MissingKeyError):
            await client.add_item(
                {"testHashKey": "h", "firstSortKeyComponent": "first"},
                TableSpec(
                    name="test-table",
                    hash_keys=["testHashKey"],
                    sort_keys=["firstSortKeyComponent", "secondSortKeyComponent"],
                ),
            )

    async def test_generated_id_and_date_in_hash_key(self, client, engine):
        await client.add_item(
            {"testHashKey": "test-hash-key", "testSortKey": "test-sort-key"},
            TableSpec(name="test-table", hash_keys=["testHashKey", "id", "createdDate"], sort_keys=["testSortKey"]),
        )

        assert "test-hash-key|test-id|2020-01-01T00:00:00+test-sort-key" in engine.items[TABLE_NAME]

    async def test_generated_id_and_date_in_sort_key(self, client, engine):
        await client.add_item(
            {"testHashKey": "test-hash-key", "testSortKey": "test-sort-key"},
            TableSpec(name="test-table", hash_keys=["testHashKey"], sort_keys=["testSortKey", "id", "createdDate"]),
        )

        assert "test-hash-key+test-sort-key|test-id|2020-01-01T00:00:00" in engine.items[TABLE_NAME]

    async def test_does_not_overwrite_id_or_created_date(self, client, engine):
        returned = await client.add_item(
            {"id": "x", "createdDate": "t", "testHashKey": "k"},
            TableSpec(name="test-table", hash_keys=["testHashKey"]),
        )

        assert returned["id"] == "x"
        assert returned["createdDate"] == "t"
        assert engine.items[TABLE_NAME]["k"]["id"] == "x"

    async def test_does_not_modify_caller_item(self, client):
        item = {"testHashKey": "k"}
        await client.add_item(item, TableSpec(name="test-table", hash_keys=["testHashKey"]))
        assert item == {"testHashKey": "k"}

    async def test_retries_only_once(self):
        engine = AsyncMock(spec=IStorageEngine)
        engine.add_item.side_effect = MissingTableError("test-table")
        client = StorageClient(engine=engine)

        with pytest.raises(MissingTableError):
            await client.add_item({"testHashKey": "k"}, TableSpec(name="test-table", hash_keys=["testHashKey"]))

        assert engine.add_item.await_count == 2
        engine.create_table.assert_awaited_once_with("test-table", "testHashKey", None)

    async def test_create_table_errors_propagate(self):
        engine = AsyncMock(spec=IStorageEngine)
        engine.add_item.side_effect = MissingTableError("test-table")
        engine.create_table.side_effect = ExistingTableError("test-table")
        client = StorageClient(engine=engine)

        with pytest.raises(ExistingTableError):
            await client.add_item({"testHashKey": "k"}, TableSpec(name="test-table", hash_keys=["testHashKey"]))

        assert engine.add_item.await_count == 1

    async def test_default_generators(self, engine):
        client = StorageClient(engine=engine)
        returned = await client.add_item({"testHashKey": "k"}, TableSpec(name="test-table", hash_keys=["testHashKey"]))

        assert len(returned["id"]) == 36
        assert datetime.fromisoformat(returned["createdDate"]).utcoffset().total_seconds() == 0

    async def test_local_disk_engine_without_database(self, tmp_path):
        client = StorageClient(engine=LocalDiskStorageEngine(db_name="test-db", location=str(tmp_path)))

        with pytest.raises(MissingLocationError):
            await client.add_item({"testHashKey": "h"}, TableSpec(name="test-table", hash_keys=["testHashKey"]))

    async def test_with_local_disk_engine(self, tmp_path):
        engine = LocalDiskStorageEngine(db_name="test-db", location=str(tmp_path))
        await engine.create_table("test-other-table", "otherHashKey")
        client = StorageClient(
            engine=engine,
            environment="test",
            get_id=lambda: "test-id",
            get_now=lambda: "2020-01-01T00:00:00",
        )
        table = TableSpec(name="test-table", hash_keys=["testHashKey"], sort_keys=["testSortKey"])

        first = await client.add_item({"testHashKey": "h", "testSortKey": "1"}, table)
        second = await client.add_item({"testHashKey": "h", "testSortKey": "2"}, table)

        assert await client.get_items("testHashKey", "h", "test-table") == [first, second]


class TestGetItems:
    async def test_gets_items(self):
        engine = InMemoryStorageEngine(
            tables={"test-getItems-test-table": KeySchema(hash_key="testHashKey", sort_key="testSortKey")},
            items={
                "test-getItems-test-table": {
                    "test-hash-key+1": {"testHashKey": "test-hash-key", "testSortKey": "1"},
                    "test-hash-key+2": {"testHashKey": "test-hash-key", "testSortKey": "2"},
                }
            },
        )
        client = StorageClient(engine=engine, environment="test-getItems")

        items = await client.get_items("testHashKey", "test-hash-key", "test-table")

        assert items == [
            {"testHashKey": "test-hash-key", "testSortKey": "1"},
            {"testHashKey": "test-hash-key", "testSortKey": "2"},
        ]

    async def test_returns_empty_list_when_no_items_exist(self):
        engine = InMemoryStorageEngine(tables={"test-getItems-test-table": KeySchema(hash_key="testHashKey")})
        client = StorageClient(engine=engine, environment="test-getItems")

        assert await client.get_items("testHashKey", "test-hash-key", "test-table") == []

    async def test_missing_table_is_not_created(self, engine):
        client = StorageClient(engine=engine, environment="test-getItems")

        with pytest.raises(MissingTableError):
            await client.get_items("testHashKey", "test-hash-key", "test-table")

        assert engine.tables == {}


class TestTableName:
    def test_prefixes_environment(self, client):
        assert client.table_name("test-table") == "test-addItem-test-table"

    def test_no_environment(self, engine):
        assert StorageClient(engine=engine).table_name("test-table") == "test-table"


class TestTableSpec:
    def test_requires_hash_keys(self):
        with pytest.raises(ValidationError):
            TableSpec(name="test-table", hash_keys=[])

    def test_rejects_empty_sort_keys(self):
        with pytest.raises(ValidationError):
            TableSpec(name="test-table", hash_keys=["testHashKey"], sort_keys=[])
