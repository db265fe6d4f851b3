"""Response envelope shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base for API models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PaginationMeta(BaseModel):
    """Page metadata; pages = ceil(total / limit)."""

    page: int
    limit: int
    total: int
    pages: int


class Envelope(BaseModel, Generic[DataT]):
    """{success, message, data?, pagination?, errors?}"""

    success: bool = True
    message: str
    data: DataT | None = None
    pagination: PaginationMeta | None = None
    errors: list[Any] | None = Field(default=None, description="Per-field or debug details on failure")
