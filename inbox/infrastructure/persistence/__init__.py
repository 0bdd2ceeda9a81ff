"""Persistence adapters behind the inbox message port."""

from .in_memory_repository import InMemoryInboxMessageRepository

__all__ = ["InMemoryInboxMessageRepository"]
