"""
Inbox Message Entities

Element type of the cached inbox pages and the stored message record the
persistence side maps from.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def _plural(count: int, unit: str, plural: Optional[str] = None) -> str:
    label = unit if count == 1 else (plural or f"{unit}s")
    return f"{count} {label} ago"


def format_time_received(
    created_at: Optional[datetime], now: Optional[datetime] = None
) -> str:
    """
    Human readable age of a message, e.g. ``"5 minutes ago"``.

    Messages older than a year are shown as ``dd/mm/YYYY``. Naive timestamps
    are taken as UTC.
    """
    if created_at is None:
        return "unknown"

    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = max(0, int((now - created_at).total_seconds()))
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return _plural(seconds, "second")
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return created_at.strftime("%d/%m/%Y")


class MessageInboxItem(BaseModel):
    """
    One row of a user's inbox.

    Serialized with camelCase names (``idMessage``, ``isRead``...) so pages
    cached by earlier deployments decode unchanged. ``is_read`` keeps the
    stored ``"Y"``/``"N"`` flag; ``read`` is its boolean view.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id_message: Optional[int] = Field(None, alias="idMessage")
    is_read: Optional[str] = Field(None, alias="isRead")
    message: Optional[str] = None
    num_attachments: Optional[int] = Field(None, alias="numAttachments", ge=0)
    sender_name: Optional[str] = Field(None, alias="senderName")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    time_received: Optional[str] = Field(None, alias="timeReceived")

    @computed_field
    @property
    def read(self) -> bool:
        return self.is_read == "Y"

    @property
    def has_attachments(self) -> bool:
        return self.num_attachments is not None and self.num_attachments > 0


@dataclass(frozen=True)
class InboxMessageRecord:
    """Stored message as delivered to one recipient."""

    id_message: int
    recipient_id: int
    sender_id: int
    subject: str
    created_at: datetime
    is_read: str = "N"
    num_attachments: int = 0

    def to_inbox_item(self, now: Optional[datetime] = None) -> MessageInboxItem:
        """Map to the inbox element type."""
        return MessageInboxItem(
            id_message=self.id_message,
            is_read=self.is_read,
            message=self.subject,
            num_attachments=self.num_attachments,
            sender_name=f"User #{self.sender_id}",
            created_at=self.created_at,
            time_received=format_time_received(self.created_at, now),
        )
