# app/schemas/common.py

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, computed_field, field_validator

from app.core.config import settings

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Page request; out-of-range values are clamped instead of rejected"""
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE

    @field_validator("page")
    @classmethod
    def clamp_page(cls, v: int) -> int:
        return v if v >= 1 else 1

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        if v < 1:
            return settings.DEFAULT_PAGE_SIZE
        return min(v, settings.MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


class Page(BaseModel, Generic[T]):
    items: List[T] = []
    total_count: int = 0
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)
