"""
Cache Domain Exceptions

Errors raised by the cache-aside layer itself, independent of the store.
"""

from typing import Any, Dict, Optional


class CacheException(Exception):
    """Base exception for cache layer errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class CacheSerializationException(CacheException):
    """Raised when a paged result cannot be encoded for storage.

    This signals a programming defect (an element type the codec cannot
    serialize), so it is never downgraded to a miss.
    """

    def __init__(
        self,
        element_type: str,
        original_error: Optional[Exception] = None,
    ):
        details = {"element_type": element_type}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"Failed to serialize PagedResult[{element_type}]",
            error_code="CACHE_SERIALIZATION_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error
