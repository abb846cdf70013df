"""
Composite key derivation.

Key attribute names and values are built by joining key components with
``|``. Storage keys join the hash and sort values with ``+``. Neither
separator is escaped, so a component containing ``|`` or ``+`` can make two
different keys collide. Booleans are written as ``true``/``false`` so keys
match data written by earlier versions of the store.
"""

from collections.abc import Sequence
from typing import Any

from itemstore.constants import COMPONENT_SEPARATOR, HASH_SORT_SEPARATOR
from itemstore.exceptions import MissingKeyError
from itemstore.models.table import Item, KeySchema


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def composite(values: Sequence[Any]) -> Any:
    """
    Combine key components into a single value.

    A single component is returned unchanged, keeping its type. Several
    components are converted to strings and joined in order.
    """
    if not values:
        raise ValueError("At least one key component is required")
    if len(values) == 1:
        return values[0]
    return COMPONENT_SEPARATOR.join(stringify(value) for value in values)


def compose_key(item: Item, attributes: Sequence[str]) -> tuple[str, Any]:
    """
    Derive a key attribute name and value from component attributes.

    Args:
        item: Item holding the component attributes
        attributes: Ordered component attribute names

    Returns:
        Tuple of (key attribute name, key value)

    Raises:
        MissingKeyError: If the item lacks any component attribute
    """
    for attribute in attributes:
        if attribute not in item:
            raise MissingKeyError(attribute)
    return composite(attributes), composite([item[attribute] for attribute in attributes])


def storage_key(item: Item, schema: KeySchema) -> str:
    """Build the key an item is stored under within its table."""
    if schema.hash_key not in item:
        raise MissingKeyError(schema.hash_key)
    hash_value = stringify(item[schema.hash_key])
    if schema.sort_key is None:
        return hash_value
    if schema.sort_key not in item:
        raise MissingKeyError(schema.sort_key)
    return f"{hash_value}{HASH_SORT_SEPARATOR}{stringify(item[schema.sort_key])}"


def hash_segment(key: str) -> str:
    return key.split(HASH_SORT_SEPARATOR)[0]


def matches_hash(key: str, hash_key_value: Any) -> bool:
    return hash_segment(key) == stringify(hash_key_value)
