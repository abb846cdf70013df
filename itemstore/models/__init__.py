"""
Table models shared by the storage client and engines.
"""

from itemstore.models.table import Item, KeySchema, TableDescription, TableSpec

__all__ = ["Item", "KeySchema", "TableDescription", "TableSpec"]
