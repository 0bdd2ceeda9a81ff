"""
Cache-Aside Paged Result Repository

Composes key derivation, the envelope codec and a ``CacheStore`` into
"check cache, else fetch and populate" for paginated results.

Failure policy:
- store errors on lookup propagate and the fetcher is not called
- a corrupt payload is logged and treated as a miss
- fetcher errors propagate and nothing is cached
- store errors while populating after a fetch are logged only

There is no request coalescing: concurrent misses on the same key each call
the fetcher and each write the result, last write wins.
"""

import asyncio
import logging
from typing import Optional, Set, Type, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ...constants import CACHE_NAMESPACE
from ...domain.cache.repository_interfaces import (
    CacheStore,
    PageFetcher,
    PagedResultCacheRepository,
)
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.pagination.value_objects import Pageable, PagedResult
from ..serialization.envelope_codec import PagedResultCodec

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


class CacheAsidePagedResultRepository(PagedResultCacheRepository):
    """Cache-aside repository for the paged results of one namespace."""

    def __init__(
        self,
        store: CacheStore,
        codec: Optional[PagedResultCodec] = None,
        namespace: str = CACHE_NAMESPACE,
        default_ttl: Optional[TTL] = None,
    ):
        self._store = store
        self._codec = codec or PagedResultCodec()
        self.namespace = namespace
        self.default_ttl = default_ttl or TTL.paged_list()
        self._pending_writes: Set[asyncio.Task] = set()

    def derive_key(self, subject_id: int, pageable: Pageable) -> CacheKey:
        return CacheKey.paged_list(self.namespace, subject_id, pageable)

    async def get(
        self, subject_id: int, pageable: Pageable, item_type: Type[T]
    ) -> Optional[PagedResult[T]]:
        key = self.derive_key(subject_id, pageable)
        with tracer.start_as_current_span("paged_cache.get") as span:
            span.set_attribute("cache.key", key.value)
            span.set_attribute("cache.subject_id", subject_id)
            logger.debug(
                f"Cache lookup - key: {key} (subject={subject_id}, page={pageable.page}, size={pageable.size})"
            )

            result = await self._lookup(key, item_type)
            span.set_attribute("cache.hit", result is not None)
            return result

    async def set(
        self,
        subject_id: int,
        pageable: Pageable,
        result: PagedResult[T],
        ttl: Optional[TTL] = None,
    ) -> bool:
        key = self.derive_key(subject_id, pageable)
        cache_ttl = ttl or self.default_ttl
        with tracer.start_as_current_span("paged_cache.set") as span:
            span.set_attribute("cache.key", key.value)
            span.set_attribute("cache.ttl_seconds", cache_ttl.seconds)

            payload = self._codec.encode(result)
            return await self._write(key, payload, cache_ttl, len(result.data))

    async def get_or_fetch(
        self,
        subject_id: int,
        pageable: Pageable,
        item_type: Type[T],
        fetcher: PageFetcher,
    ) -> Optional[PagedResult[T]]:
        key = self.derive_key(subject_id, pageable)
        with tracer.start_as_current_span("paged_cache.get_or_fetch") as span:
            span.set_attribute("cache.key", key.value)
            span.set_attribute("cache.subject_id", subject_id)

            cached = await self._lookup(key, item_type)
            if cached is not None:
                span.set_attribute("cache.hit", True)
                return cached

            span.set_attribute("cache.hit", False)
            logger.info(
                f"Cache MISS - calling data source for key: {key}",
                extra={"subject_id": subject_id, "cache_key": key.value},
            )
            result = await fetcher(subject_id, pageable)
            if result is None:
                logger.info(f"Data source returned nothing for key: {key}, not caching")
                return None

            payload = self._codec.encode(result)
            await self._populate(key, payload, len(result.data))
            return result

    async def invalidate_subject(self, subject_id: int) -> int:
        pattern = CacheKey.subject_pattern(self.namespace, subject_id)
        with tracer.start_as_current_span("paged_cache.invalidate_subject") as span:
            span.set_attribute("cache.subject_id", subject_id)
            span.set_attribute("cache.pattern", pattern)
            logger.info(
                f"Invalidating cache for subject {subject_id} - pattern: {pattern}"
            )

            try:
                keys = await self._store.keys_matching(pattern)
                if not keys:
                    logger.info(f"No cache keys found for subject {subject_id}")
                    return 0

                deleted = await self._store.delete_many(keys)
            except Exception as e:
                logger.error(
                    f"Failed to invalidate cache for subject {subject_id}: {e}",
                    extra={"subject_id": subject_id, "pattern": pattern},
                )
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("cache.deleted", deleted)
            logger.info(
                f"Cache invalidated for subject {subject_id} - {deleted} keys deleted",
                extra={"subject_id": subject_id, "matched": len(keys), "deleted": deleted},
            )
            return deleted

    async def invalidate_key(self, subject_id: int, pageable: Pageable) -> bool:
        key = self.derive_key(subject_id, pageable)
        with tracer.start_as_current_span("paged_cache.invalidate_key") as span:
            span.set_attribute("cache.key", key.value)

            try:
                deleted = await self._store.delete_many([key.value])
            except Exception as e:
                logger.error(f"Failed to invalidate cache key {key}: {e}")
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            if deleted > 0:
                logger.info(f"Cache key deleted: {key}")
            else:
                logger.debug(f"Cache key not found: {key}")
            return deleted > 0

    async def wait_for_pending_writes(self) -> None:
        """Wait for populate writes still in flight (used on shutdown)."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes, return_exceptions=True)

    async def _lookup(
        self, key: CacheKey, item_type: Type[T]
    ) -> Optional[PagedResult[T]]:
        payload = await self._store.get(key.value)
        if payload is None:
            logger.info(f"Cache MISS - key: {key}")
            return None

        result = self._codec.decode(payload, item_type)
        if result is None:
            logger.warning(
                f"Cache payload unreadable, treating as MISS - key: {key}",
                extra={"cache_key": key.value},
            )
            return None

        logger.info(
            f"Cache HIT - key: {key}, length: {len(payload)}",
            extra={"cache_key": key.value, "elements": len(result.data)},
        )
        return result

    async def _write(self, key: CacheKey, payload: bytes, ttl: TTL, count: int) -> bool:
        try:
            stored = await self._store.set_with_ttl(key.value, payload, ttl)
        except Exception as e:
            logger.error(
                f"Failed to store cache entry {key}: {e}",
                extra={"cache_key": key.value},
            )
            raise

        logger.info(
            f"Cache SET - key: {key}, elements: {count}, ttl: {ttl.seconds}s",
            extra={"cache_key": key.value, "elements": count, "ttl": ttl.seconds},
        )
        return stored

    async def _populate(self, key: CacheKey, payload: bytes, count: int) -> None:
        """
        Write a freshly fetched page without failing the caller.

        The write runs as its own task behind ``asyncio.shield`` so a caller
        that goes away mid-request does not cancel it.
        """

        async def write() -> None:
            try:
                await self._write(key, payload, self.default_ttl, count)
            except Exception as e:
                logger.error(
                    f"Cache populate failed for key {key}; returning fetched data: {e}",
                    extra={"cache_key": key.value},
                    exc_info=True,
                )

        task = asyncio.ensure_future(write())
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)
        await asyncio.shield(task)
