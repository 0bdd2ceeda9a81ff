"""
Pagination Value Objects

Immutable request and response values shared by the persistence port and the
cache layer. Neither type knows about storage or transport.
"""

import math
from dataclasses import dataclass, field
from typing import Generic, Iterable, Sequence, Tuple, TypeVar

from ...constants import UNPAGED_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class Pageable:
    """
    Immutable pagination request.

    ``page`` is zero-based. ``size`` is the page length, or ``UNPAGED_SIZE``
    when the caller wants everything in one page.
    """

    page: int
    size: int

    def __post_init__(self) -> None:
        """Validate pagination bounds."""
        if self.page < 0:
            raise ValueError("Page number cannot be negative")
        if self.size <= 0:
            raise ValueError("Page size must be greater than 0")

    @classmethod
    def of(cls, page: int, size: int) -> "Pageable":
        """Create a pageable for the given zero-based page."""
        return cls(page, size)

    @classmethod
    def unpaged(cls) -> "Pageable":
        """Create a pageable that covers the whole result set."""
        return cls(0, UNPAGED_SIZE)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def is_paged(self) -> bool:
        return self.size != UNPAGED_SIZE

    def __str__(self) -> str:
        return f"Pageable(page={self.page}, size={self.size})"


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """
    One page of results plus pagination metadata.

    ``total_pages`` is derived from ``total_elements`` and ``size`` and is not
    part of equality: two results are equal when their data, total count,
    page and size are equal.
    """

    data: Sequence[T]
    total_elements: int
    page: int
    size: int
    total_pages: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        # frozen=True requires object.__setattr__ for derived fields
        object.__setattr__(self, "data", tuple(self.data))
        if self.size > 0:
            total_pages = math.ceil(self.total_elements / self.size)
        else:
            total_pages = 0
        object.__setattr__(self, "total_pages", total_pages)

    @classmethod
    def unpaged(cls, data: Iterable[T]) -> "PagedResult[T]":
        """Wrap a complete, non-paginated result as a single page."""
        items: Tuple[T, ...] = tuple(data)
        result = cls(items, len(items), 0, len(items))
        object.__setattr__(result, "total_pages", 1)
        return result

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def __str__(self) -> str:
        return (
            f"PagedResult(data size={len(self.data)}, "
            f"total_elements={self.total_elements}, page={self.page}, "
            f"size={self.size}, total_pages={self.total_pages})"
        )
