"""Response envelopes and the camelCase base model shared by all schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for request and response bodies.

    JSON keys are camelCase; request bodies also accept the snake_case
    field names. Responses are built straight from ORM objects.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(CamelModel):
    """Pagination metadata of a list response"""

    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next=page * limit < total,
            has_prev=page > 1,
        )


class DataResponse(CamelModel, Generic[T]):
    """Success envelope for a single resource"""

    data: T


class ListResponse(CamelModel, Generic[T]):
    """Success envelope for a page of resources"""

    data: list[T]
    meta: PaginationMeta


class DeleteAck(CamelModel):
    """Acknowledgment returned by delete endpoints"""

    id: str
    deleted: bool = True


class MessageResponse(CamelModel):
    """Acknowledgment of an action without a resource to return"""

    message: str
