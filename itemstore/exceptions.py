"""
Exceptions raised by storage engines and the storage client.
"""


class StorageError(Exception):
    """Base exception for storage operations."""


class MissingTableError(StorageError):
    """Table does not exist."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' could not be found.")


class ExistingTableError(StorageError):
    """Table already exists."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' already exists.")


class MissingKeyError(StorageError):
    """Item lacks an attribute required by the table key schema."""

    def __init__(self, attribute: str | None = None) -> None:
        self.attribute = attribute
        if attribute is None:
            super().__init__("Item is missing a key attribute.")
        else:
            super().__init__(f"Item is missing key attribute '{attribute}'.")


class MissingLocationError(StorageError):
    """Filesystem location does not exist."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Directory '{location}' could not be found.")


class TableCreationTimeoutError(StorageError):
    """Table did not become ready within the allowed number of polls."""

    def __init__(self, table_name: str, attempts: int) -> None:
        self.table_name = table_name
        self.attempts = attempts
        super().__init__(f"Table '{table_name}' was still being created after {attempts} checks.")


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, missing_variables: list[str] | None = None) -> None:
        self.missing_variables = missing_variables or []
        super().__init__(message)

    @classmethod
    def missing(cls, variables: list[str]) -> "ConfigurationError":
        if len(variables) == 1:
            return cls(f"Environment variable '{variables[0]}' is not set", variables)
        names = ", ".join(f"'{name}'" for name in variables)
        return cls(f"Environment variables {names} are not set", variables)


class UnreadableTableError(StorageError):
    """Stored table data exists but cannot be read."""

    def __init__(self, table_name: str, path: str) -> None:
        self.table_name = table_name
        self.path = path
        super().__init__(f"Table '{table_name}' could not be read from '{path}'.")
