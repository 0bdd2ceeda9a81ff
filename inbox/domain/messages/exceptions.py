"""
Inbox Message Exceptions

Data-access errors raised by the persistence collaborator.
"""

from typing import Any, Dict, Optional


class MessageRepositoryException(Exception):
    """Raised when inbox messages cannot be read from the source of truth."""

    def __init__(
        self,
        message: str,
        user_id: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.error_code = "MESSAGE_REPOSITORY_ERROR"
        self.details: Dict[str, Any] = {}
        if user_id is not None:
            self.details["user_id"] = user_id
        if original_error:
            self.details["original_error"] = str(original_error)
            self.details["original_error_type"] = type(original_error).__name__
        super().__init__(self.message)
        if original_error:
            self.__cause__ = original_error
