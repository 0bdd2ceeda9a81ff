"""
Inbox Message Repository Interfaces

Persistence port consulted by the cache-aside layer on a miss.
"""

from abc import ABC, abstractmethod

from ..pagination.value_objects import Pageable, PagedResult
from .entities import MessageInboxItem


class InboxMessageRepository(ABC):
    """Source of truth for a user's inbox."""

    @abstractmethod
    async def find_messages_by_user(
        self, user_id: int, pageable: Pageable
    ) -> PagedResult[MessageInboxItem]:
        """
        Fetch one page of a user's inbox, newest first.

        Unpaged requests return every message as a single page.

        Raises:
            MessageRepositoryException: If the data source cannot be read
        """
        pass
