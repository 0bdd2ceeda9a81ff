"""Inbox message services."""

from .inbox_service import MessageInboxService

__all__ = ["MessageInboxService"]
