"""Paged query results."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class PaginatedResult(BaseModel, Generic[T]):
    """One page of a larger result set."""

    items: list[T] = Field(default_factory=list)
    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1)
    total_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @computed_field
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages
