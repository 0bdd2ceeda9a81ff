"""
Composition Root

Builds the inbox object graph once with explicit constructor injection and
tears it down on shutdown.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .domain.cache.value_objects import TTL
from .domain.messages.repository_interfaces import InboxMessageRepository
from .infrastructure.persistence.in_memory_repository import (
    InMemoryInboxMessageRepository,
)
from .infrastructure.redis.connection_factory import RedisConnectionFactory
from .infrastructure.redis.redis_store import RedisCacheStore
from .infrastructure.repositories.cache_repository import (
    CacheAsidePagedResultRepository,
)
from .infrastructure.serialization.envelope_codec import PagedResultCodec
from .services.messages.inbox_service import MessageInboxService

logger = structlog.get_logger()


@dataclass
class InboxContainer:
    """Long-lived collaborators shared by every request."""

    settings: Settings
    connection_factory: RedisConnectionFactory
    cache_store: RedisCacheStore
    cache_repository: CacheAsidePagedResultRepository
    message_repository: InboxMessageRepository
    inbox_service: MessageInboxService

    async def startup(self) -> None:
        await self.connection_factory.initialize()
        logger.info(
            "Message inbox started",
            environment=self.settings.ENVIRONMENT,
            cache_namespace=self.settings.CACHE_NAMESPACE,
        )

    async def close(self) -> None:
        await self.cache_repository.wait_for_pending_writes()
        await self.connection_factory.close()
        logger.info("Message inbox stopped")


def build_container(
    settings: Optional[Settings] = None,
    message_repository: Optional[InboxMessageRepository] = None,
    configure_logs: bool = True,
) -> InboxContainer:
    """
    Wire the inbox.

    Args:
        settings: Settings to use, ``get_settings()`` when None
        message_repository: Persistence adapter, in-memory when None
        configure_logs: Configure structlog and stdlib logging

    Returns:
        Container holding the wired collaborators
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings.SERVICE_NAME, settings.LOG_LEVEL)

    connection_factory = RedisConnectionFactory(settings)
    cache_store = RedisCacheStore(
        connection_factory,
        operation_timeout=settings.REDIS_OPERATION_TIMEOUT,
        scan_count=settings.REDIS_SCAN_COUNT,
    )
    cache_repository = CacheAsidePagedResultRepository(
        cache_store,
        codec=PagedResultCodec(),
        namespace=settings.CACHE_NAMESPACE,
        default_ttl=TTL.of_seconds(settings.CACHE_DEFAULT_TTL_SECONDS),
    )
    message_repository = message_repository or InMemoryInboxMessageRepository()
    inbox_service = MessageInboxService(
        message_repository,
        cache_repository,
        default_page_size=settings.INBOX_DEFAULT_PAGE_SIZE,
    )

    return InboxContainer(
        settings=settings,
        connection_factory=connection_factory,
        cache_store=cache_store,
        cache_repository=cache_repository,
        message_repository=message_repository,
        inbox_service=inbox_service,
    )
