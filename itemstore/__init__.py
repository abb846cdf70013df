"""
Key/value item store over interchangeable storage engines.
"""

from itemstore.client import StorageClient
from itemstore.dal import (
    DynamoDBStorageEngine,
    InMemoryStorageEngine,
    IStorageEngine,
    LocalDiskStorageEngine,
)
from itemstore.exceptions import (
    ConfigurationError,
    ExistingTableError,
    MissingKeyError,
    MissingLocationError,
    MissingTableError,
    StorageError,
    TableCreationTimeoutError,
    UnreadableTableError,
)
from itemstore.models import Item, KeySchema, TableDescription, TableSpec

__all__ = [
    "ConfigurationError",
    "DynamoDBStorageEngine",
    "ExistingTableError",
    "IStorageEngine",
    "InMemoryStorageEngine",
    "Item",
    "KeySchema",
    "LocalDiskStorageEngine",
    "MissingKeyError",
    "MissingLocationError",
    "MissingTableError",
    "StorageClient",
    "StorageError",
    "TableCreationTimeoutError",
    "TableDescription",
    "TableSpec",
    "UnreadableTableError",
]
