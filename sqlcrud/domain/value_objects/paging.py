from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .field_value import ensure_identifier

T = TypeVar("T")


class Pageable(BaseModel):
    """Zero-based page request."""

    page: int = Field(0, ge=0, description="Zero-based page index")
    size: int = Field(20, gt=0, description="Maximum rows per page")
    sort: tuple[tuple[str, Literal["asc", "desc"]], ...] = Field(
        default=(), description="Ordering as (column, direction) pairs"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("sort", mode="before")
    @classmethod
    def _normalise_sort(cls, v: object) -> object:
        if not isinstance(v, (list, tuple)):
            return v
        out = []
        for item in v:
            if isinstance(item, str):
                column, direction = item, "asc"
            else:
                column, direction = item
            ensure_identifier(column, "sort column")
            out.append((column, str(direction).lower()))
        return tuple(out)

    @property
    def offset(self) -> int:
        return self.page * self.size

    def order_by(self) -> str:
        """Return an ``order by`` clause, empty when no sort is requested."""
        if not self.sort:
            return ""
        return " order by " + ", ".join(f"{col} {direction}" for col, direction in self.sort)


@dataclass
class Page(Generic[T]):
    """One page of results together with the total row count."""

    content: list[T]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size if self.size else 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def __len__(self) -> int:
        return len(self.content)

    def __iter__(self) -> Iterator[T]:
        return iter(self.content)
