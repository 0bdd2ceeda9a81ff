"""
In-Memory Inbox Message Repository

Process-local implementation of ``InboxMessageRepository``. Used for local
runs and tests; relational storage lives outside this package.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from ...domain.messages.entities import InboxMessageRecord, MessageInboxItem
from ...domain.messages.repository_interfaces import InboxMessageRepository
from ...domain.pagination.value_objects import Pageable, PagedResult

logger = logging.getLogger(__name__)


class InMemoryInboxMessageRepository(InboxMessageRepository):
    """Inbox messages kept in a dict keyed by recipient."""

    def __init__(
        self,
        records: Optional[Iterable[InboxMessageRecord]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._records: Dict[int, List[InboxMessageRecord]] = defaultdict(list)
        self._clock = clock
        self._lock = asyncio.Lock()
        for record in records or []:
            self._records[record.recipient_id].append(record)

    async def add(self, record: InboxMessageRecord) -> None:
        async with self._lock:
            self._records[record.recipient_id].append(record)

    async def find_messages_by_user(
        self, user_id: int, pageable: Pageable
    ) -> PagedResult[MessageInboxItem]:
        async with self._lock:
            records = sorted(
                self._records.get(user_id, []),
                key=lambda record: (record.created_at, record.id_message),
                reverse=True,
            )

        now = self._clock() if self._clock else None

        if not pageable.is_paged:
            items = [record.to_inbox_item(now) for record in records]
            logger.info(
                f"Loaded all inbox messages - user_id: {user_id}, elements: {len(items)}"
            )
            return PagedResult.unpaged(items)

        window = records[pageable.offset : pageable.offset + pageable.size]
        items = [record.to_inbox_item(now) for record in window]
        logger.info(
            f"Loaded inbox page - user_id: {user_id}, page: {pageable.page}, "
            f"size: {pageable.size}, elements: {len(items)}, total: {len(records)}"
        )
        return PagedResult(items, len(records), pageable.page, pageable.size)
