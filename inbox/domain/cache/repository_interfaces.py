"""
Cache Repository Interfaces

Abstract ports of the cache-aside layer. The key-value store sits behind
``CacheStore``; domain services talk to ``PagedResultCacheRepository``.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Iterable, Optional, Set, Type, TypeVar, Union

from ..pagination.value_objects import Pageable, PagedResult
from .value_objects import TTL

T = TypeVar("T")

# Fallback supplier bound to the persistence collaborator
PageFetcher = Callable[[int, Pageable], Awaitable[Optional[PagedResult[T]]]]


class CacheStore(ABC):
    """
    Abstract key-value store used by the cache-aside layer.

    Every operation is a suspension point. A missing key is reported as
    ``None``; failing to reach the store raises a store error instead.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Union[str, bytes]]:
        """Return the stored payload or None when the key is absent."""
        pass

    @abstractmethod
    async def set_with_ttl(self, key: str, value: Union[str, bytes], ttl: TTL) -> bool:
        """Store payload under key with expiration."""
        pass

    @abstractmethod
    async def keys_matching(self, pattern: str) -> Set[str]:
        """Return every key matching a glob pattern."""
        pass

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> int:
        """Delete keys and return how many existed."""
        pass


class PagedResultCacheRepository(ABC):
    """
    Abstract cache-aside repository for paged results of one subject.

    Implementations derive keys from ``(subject_id, pageable)`` and never
    guarantee strong consistency with the source of truth.
    """

    @abstractmethod
    async def get(
        self, subject_id: int, pageable: Pageable, item_type: Type[T]
    ) -> Optional[PagedResult[T]]:
        """Return the cached page, or None on miss or corrupt payload."""
        pass

    @abstractmethod
    async def set(
        self,
        subject_id: int,
        pageable: Pageable,
        result: PagedResult[T],
        ttl: Optional[TTL] = None,
    ) -> bool:
        """Encode and store a page."""
        pass

    @abstractmethod
    async def get_or_fetch(
        self,
        subject_id: int,
        pageable: Pageable,
        item_type: Type[T],
        fetcher: PageFetcher,
    ) -> Optional[PagedResult[T]]:
        """Return the cached page or fetch, populate and return it."""
        pass

    @abstractmethod
    async def invalidate_subject(self, subject_id: int) -> int:
        """Delete every cached page of a subject."""
        pass

    @abstractmethod
    async def invalidate_key(self, subject_id: int, pageable: Pageable) -> bool:
        """Delete one cached page."""
        pass
