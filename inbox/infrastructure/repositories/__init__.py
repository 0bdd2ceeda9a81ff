"""Repository implementations."""

from .cache_repository import CacheAsidePagedResultRepository

__all__ = ["CacheAsidePagedResultRepository"]
