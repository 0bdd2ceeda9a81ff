"""
Unit tests for the composition root.
"""

from unittest.mock import AsyncMock, patch

import pytest

from inbox.container import build_container
from inbox.core.config import Settings
from inbox.domain.pagination.value_objects import Pageable
from inbox.infrastructure.persistence.in_memory_repository import (
    InMemoryInboxMessageRepository,
)


class TestBuildContainer:
    """Test wiring of the inbox collaborators."""

    def test_wires_settings_through(self):
        settings = Settings(
            CACHE_NAMESPACE="inbox-v2",
            CACHE_DEFAULT_TTL_SECONDS=120,
            INBOX_DEFAULT_PAGE_SIZE=15,
        )

        container = build_container(settings, configure_logs=False)

        assert container.settings is settings
        assert container.cache_repository.namespace == "inbox-v2"
        assert container.cache_repository.default_ttl.seconds == 120
        assert container.inbox_service.to_pageable() == Pageable(0, 15)
        assert container.inbox_service.cache_repository is container.cache_repository
        assert isinstance(container.message_repository, InMemoryInboxMessageRepository)
        assert not container.connection_factory.is_initialized

    def test_uses_given_message_repository(self):
        repository = InMemoryInboxMessageRepository()

        container = build_container(Settings(), message_repository=repository, configure_logs=False)

        assert container.inbox_service.message_repository is repository

    @pytest.mark.asyncio
    async def test_startup_and_close(self):
        container = build_container(Settings(), configure_logs=False)

        with patch.object(
            container.connection_factory, "initialize", new=AsyncMock()
        ) as initialize, patch.object(
            container.connection_factory, "close", new=AsyncMock()
        ) as close:
            await container.startup()
            await container.close()

        initialize.assert_awaited_once()
        close.assert_awaited_once()
