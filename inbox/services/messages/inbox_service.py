"""
Message Inbox Service

Domain service behind the inbox endpoints. Reads go through the cache-aside
repository; collaborators that change a user's messages call
``invalidate_user_cache``.
"""

from typing import Optional

import structlog
from opentelemetry import trace

from ...constants import DEFAULT_PAGE_SIZE
from ...domain.cache.repository_interfaces import PagedResultCacheRepository
from ...domain.messages.entities import MessageInboxItem
from ...domain.messages.repository_interfaces import InboxMessageRepository
from ...domain.pagination.value_objects import Pageable, PagedResult

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)


class MessageInboxService:
    """Paginated inbox reads with cache-aside and explicit invalidation."""

    def __init__(
        self,
        message_repository: InboxMessageRepository,
        cache_repository: PagedResultCacheRepository,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.message_repository = message_repository
        self.cache_repository = cache_repository
        self.default_page_size = default_page_size

    def to_pageable(
        self, page: Optional[int] = None, size: Optional[int] = None
    ) -> Pageable:
        """
        Build the pageable for a request.

        Missing values fall back to the first page and the default page size.

        Raises:
            ValueError: If page is negative or size is not positive
        """
        return Pageable.of(
            0 if page is None else page,
            self.default_page_size if size is None else size,
        )

    async def get_messages_for_user(
        self, user_id: int, pageable: Optional[Pageable] = None
    ) -> PagedResult[MessageInboxItem]:
        """
        Get one page of a user's inbox.

        Args:
            user_id: Recipient user ID
            pageable: Requested page, first page of default size when None

        Returns:
            Page of inbox items, from cache when present

        Raises:
            RedisException: If the cache store cannot be queried
            MessageRepositoryException: If the data source fails on a miss
        """
        pageable = pageable or self.to_pageable()
        log = logger.bind(user_id=user_id, page=pageable.page, size=pageable.size)
        log.info("Fetching inbox messages")

        with tracer.start_as_current_span("inbox_service.get_messages_for_user") as span:
            span.set_attribute("user_id", user_id)
            try:
                result = await self.cache_repository.get_or_fetch(
                    user_id,
                    pageable,
                    MessageInboxItem,
                    self._fetch_from_source,
                )
            except Exception as e:
                log.error("Failed to fetch inbox messages", error=str(e))
                raise

        if result is None:
            # data source returned nothing: report an empty page
            result = PagedResult([], 0, pageable.page, pageable.size)

        log.info(
            "Inbox messages fetched",
            total_elements=result.total_elements,
            elements=len(result.data),
        )
        return result

    async def invalidate_user_cache(self, user_id: int) -> int:
        """
        Drop every cached inbox page of a user.

        Returns:
            Number of cache keys deleted
        """
        log = logger.bind(user_id=user_id)
        log.info("Invalidating inbox cache")
        try:
            deleted = await self.cache_repository.invalidate_subject(user_id)
        except Exception as e:
            log.error("Failed to invalidate inbox cache", error=str(e))
            raise

        log.info("Inbox cache invalidated", deleted_keys=deleted)
        return deleted

    async def _fetch_from_source(
        self, user_id: int, pageable: Pageable
    ) -> PagedResult[MessageInboxItem]:
        logger.debug(
            "Cache miss, reading inbox from repository",
            user_id=user_id,
            page=pageable.page,
            size=pageable.size,
        )
        return await self.message_repository.find_messages_by_user(user_id, pageable)
