"""
Main pytest configuration for all tests.

Fixtures, fakes and utilities shared by unit and integration tests.
"""

import fnmatch
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

import pytest

# Set test environment variables before importing package modules
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"

from inbox.domain.cache.repository_interfaces import CacheStore
from inbox.domain.cache.value_objects import TTL
from inbox.domain.messages.entities import InboxMessageRecord, MessageInboxItem
from inbox.domain.pagination.value_objects import PagedResult
from inbox.infrastructure.redis.exceptions import RedisConnectionException
from inbox.infrastructure.repositories.cache_repository import (
    CacheAsidePagedResultRepository,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryCacheStore(CacheStore):
    """
    CacheStore fake with TTL expiry and failure injection.

    ``fail_on`` holds operation names ("get", "set", "keys", "delete") that
    raise a store error.
    """

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.entries: Dict[str, Tuple[Union[str, bytes], float]] = {}
        self.ttls: Dict[str, int] = {}
        self.fail_on: Set[str] = set()
        self.calls: List[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise RedisConnectionException(message=f"injected {operation} failure")

    def _alive(self, key: str) -> bool:
        entry = self.entries.get(key)
        if entry is None:
            return False
        if entry[1] <= self.clock():
            del self.entries[key]
            return False
        return True

    async def get(self, key: str) -> Optional[Union[str, bytes]]:
        self._check("get")
        if not self._alive(key):
            return None
        return self.entries[key][0]

    async def set_with_ttl(self, key: str, value: Union[str, bytes], ttl: TTL) -> bool:
        self._check("set")
        self.entries[key] = (value, self.clock() + ttl.seconds)
        self.ttls[key] = ttl.seconds
        return True

    async def keys_matching(self, pattern: str) -> Set[str]:
        self._check("keys")
        return {
            key
            for key in list(self.entries)
            if self._alive(key) and fnmatch.fnmatchcase(key, pattern)
        }

    async def delete_many(self, keys: Iterable[str]) -> int:
        self._check("delete")
        deleted = 0
        for key in list(keys):
            if self._alive(key):
                del self.entries[key]
                deleted += 1
        return deleted


class CountingFetcher:
    """Fallback supplier that records its calls."""

    def __init__(self, result=None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls: List[tuple] = []

    async def __call__(self, subject_id, pageable):
        self.calls.append((subject_id, pageable))
        if self.error is not None:
            raise self.error
        return self.result


def make_items(count: int, start_id: int = 1) -> List[MessageInboxItem]:
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return [
        MessageInboxItem(
            id_message=start_id + i,
            is_read="Y" if i % 2 else "N",
            message=f"Subject {start_id + i}",
            num_attachments=i % 3,
            sender_name=f"User #{100 + i}",
            created_at=created - timedelta(minutes=i),
            time_received=f"{i} minutes ago",
        )
        for i in range(count)
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryCacheStore(clock)


@pytest.fixture
def cache_repository(memory_store):
    return CacheAsidePagedResultRepository(memory_store)


@pytest.fixture
def sample_page():
    """First page of 20 out of 21 messages."""
    return PagedResult(make_items(20), 21, 0, 20)


@pytest.fixture
def inbox_records():
    """25 messages for user 42 and 3 for user 7."""
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    records = [
        InboxMessageRecord(
            id_message=i,
            recipient_id=42,
            sender_id=1000 + i,
            subject=f"Message {i}",
            created_at=base + timedelta(minutes=i),
            is_read="N",
            num_attachments=i % 2,
        )
        for i in range(1, 26)
    ]
    records += [
        InboxMessageRecord(
            id_message=100 + i,
            recipient_id=7,
            sender_id=42,
            subject=f"Other {i}",
            created_at=base + timedelta(hours=i),
        )
        for i in range(3)
    ]
    return records
