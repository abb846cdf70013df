"""
Storage engines.
"""

from itemstore.dal.dynamodb import DynamoDBStorageEngine
from itemstore.dal.in_memory import InMemoryStorageEngine
from itemstore.dal.interface import IStorageEngine
from itemstore.dal.local_disk import LocalDiskStorageEngine

__all__ = ["DynamoDBStorageEngine", "IStorageEngine", "InMemoryStorageEngine", "LocalDiskStorageEngine"]
