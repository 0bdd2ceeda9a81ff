"""Pagination value objects."""

from .value_objects import Pageable, PagedResult

__all__ = ["Pageable", "PagedResult"]
