from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from pymongo.asynchronous.collection import AsyncCollection

from eduregistry.errors import ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

MAX_PAGE_SIZE = 100


class PaginationResult(BaseModel, Generic[T]):
    """Pagination result wrapper for list endpoints."""

    items: list[T] = Field(..., description="List of items in current page")
    total: int = Field(..., description="Total number of items across all pages", ge=0)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.offset + len(self.items) < self.total


async def find_page(
    collection: AsyncCollection[dict[str, Any]],
    model: type[M],
    query: dict[str, Any],
    sort: list[tuple[str, int]],
    limit: int,
    offset: int,
) -> PaginationResult[M]:
    """Load one page of documents matching query, with the total count."""
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    if offset < 0:
        raise ValidationError("Offset cannot be negative")

    total = await collection.count_documents(query)
    cursor = collection.find(query).sort(sort).skip(offset).limit(limit)
    items = [model.model_validate(doc) async for doc in cursor]
    return PaginationResult(items=items, total=total, limit=limit, offset=offset)
