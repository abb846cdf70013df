from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

Item = dict[str, Any]


class TableSpec(BaseModel):
    """Caller-supplied table definition."""

    name: str = Field(..., min_length=1, description="Logical table name, before namespacing")
    hash_keys: list[str] = Field(..., min_length=1, description="Ordered hash key component attributes")
    sort_keys: Annotated[list[str], Field(min_length=1)] | None = Field(
        default=None, description="Ordered sort key component attributes, omitted for hash-only tables"
    )


class KeySchema(BaseModel):
    """Resolved key attribute names of a stored table."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    hash_key: str = Field(..., alias="hashKey")
    sort_key: str | None = Field(default=None, alias="sortKey")

    def to_document(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TableDescription(BaseModel):
    """Remote table state as reported by the table service."""

    name: str
    key_schema: KeySchema
    status: str
