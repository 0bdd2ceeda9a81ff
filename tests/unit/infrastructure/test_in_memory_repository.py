"""
Unit tests for the in-memory inbox message repository.
"""

from datetime import datetime, timedelta, timezone

import pytest

from inbox.domain.messages.entities import InboxMessageRecord
from inbox.domain.pagination.value_objects import Pageable
from inbox.infrastructure.persistence.in_memory_repository import (
    InMemoryInboxMessageRepository,
)

NOW = datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository(inbox_records):
    return InMemoryInboxMessageRepository(inbox_records, clock=lambda: NOW)


class TestInMemoryInboxMessageRepository:
    """Test paging over stored inbox records."""

    @pytest.mark.asyncio
    async def test_first_page_newest_first(self, repository):
        result = await repository.find_messages_by_user(42, Pageable(0, 10))

        assert [item.id_message for item in result.data] == list(range(25, 15, -1))
        assert result.total_elements == 25
        assert result.total_pages == 3
        assert result.has_next

    @pytest.mark.asyncio
    async def test_last_partial_page(self, repository):
        result = await repository.find_messages_by_user(42, Pageable(2, 10))

        assert [item.id_message for item in result.data] == [5, 4, 3, 2, 1]
        assert not result.has_next
        assert result.has_previous

    @pytest.mark.asyncio
    async def test_page_past_end(self, repository):
        result = await repository.find_messages_by_user(42, Pageable(5, 10))

        assert result.data == ()
        assert result.total_elements == 25

    @pytest.mark.asyncio
    async def test_unknown_user(self, repository):
        result = await repository.find_messages_by_user(999, Pageable(0, 20))

        assert result.data == ()
        assert result.total_elements == 0
        assert result.total_pages == 0

    @pytest.mark.asyncio
    async def test_unpaged(self, repository):
        result = await repository.find_messages_by_user(7, Pageable.unpaged())

        assert [item.id_message for item in result.data] == [102, 101, 100]
        assert result.total_elements == 3
        assert result.total_pages == 1

    @pytest.mark.asyncio
    async def test_items_are_mapped(self, repository):
        result = await repository.find_messages_by_user(42, Pageable(0, 1))
        item = result.data[0]

        assert item.message == "Message 25"
        assert item.sender_name == "User #1025"
        assert item.is_read == "N"
        assert item.num_attachments == 1
        assert item.time_received == "35 minutes ago"

    @pytest.mark.asyncio
    async def test_add(self, repository):
        await repository.add(
            InboxMessageRecord(
                id_message=500,
                recipient_id=42,
                sender_id=9,
                subject="Newest",
                created_at=NOW - timedelta(seconds=5),
            )
        )

        result = await repository.find_messages_by_user(42, Pageable(0, 20))

        assert result.data[0].id_message == 500
        assert result.data[0].time_received == "5 seconds ago"
        assert result.total_elements == 26
