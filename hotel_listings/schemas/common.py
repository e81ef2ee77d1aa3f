from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base schema using camelCase field names on the wire.

    Python code keeps snake_case attributes; input is accepted in either form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Page(CamelModel, Generic[T]):
    """Paginated result: ``{items, total, page, pageSize, totalPages}``."""

    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int


class MessageResponse(CamelModel):
    message: str
