"""
Cache Value Objects

Immutable value objects for the inbox cache.
Key derivation is deterministic and stable across process restarts.
"""

import hashlib
from dataclasses import dataclass
from datetime import timedelta

from ...constants import (
    CACHE_GLOB_CHARACTERS,
    CACHE_KEY_SEPARATOR,
    CACHE_LIST_MARKER,
    DEFAULT_CACHE_TTL_SECONDS,
)
from ..pagination.value_objects import Pageable


def pagination_digest(pageable: Pageable) -> str:
    """
    Fixed-length fingerprint of the pagination parameters.

    MD5 is used only as a fast, fixed-width digest of ``page=<p>&size=<s>``;
    the hex form matches entries written by earlier deployments.
    """
    params = f"page={pageable.page}&size={pageable.size}"
    return hashlib.md5(params.encode("utf-8"), usedforsecurity=False).hexdigest()


def _validate_key_part(name: str, value: str) -> None:
    if not value:
        raise ValueError(f"Cache {name} cannot be empty")
    if any(char.isspace() for char in value):
        raise ValueError(f"Cache {name} cannot contain whitespace")
    if any(char in CACHE_GLOB_CHARACTERS for char in value):
        raise ValueError(f"Cache {name} cannot contain glob characters: {value!r}")


def _validate_subject_id(subject_id: int) -> None:
    if isinstance(subject_id, bool) or not isinstance(subject_id, int):
        raise ValueError(f"Subject ID must be an integer, got {subject_id!r}")


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Paged list keys have the form ``<namespace>-<subjectId>-list-<md5hex>``.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > 250:
            raise ValueError("Cache key too long (max 250 characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def paged_list(
        cls, namespace: str, subject_id: int, pageable: Pageable
    ) -> "CacheKey":
        """Derive the key of one cached page for one subject."""
        _validate_key_part("namespace", namespace)
        _validate_subject_id(subject_id)
        return cls(
            CACHE_KEY_SEPARATOR.join(
                [
                    namespace,
                    str(subject_id),
                    CACHE_LIST_MARKER,
                    pagination_digest(pageable),
                ]
            )
        )

    @staticmethod
    def subject_pattern(namespace: str, subject_id: int) -> str:
        """Glob pattern matching every cached page of one subject."""
        _validate_key_part("namespace", namespace)
        _validate_subject_id(subject_id)
        return CACHE_KEY_SEPARATOR.join(
            [namespace, str(subject_id), CACHE_LIST_MARKER, "*"]
        )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Provides type-safe TTL configuration with validation.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def of_seconds(cls, seconds: int) -> "TTL":
        """Create TTL from seconds."""
        return cls(seconds)

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "TTL":
        """Create TTL from a timedelta, truncated to whole seconds."""
        return cls(int(delta.total_seconds()))

    @classmethod
    def paged_list(cls) -> "TTL":
        """Inbox page TTL (10 minutes)."""
        return cls(DEFAULT_CACHE_TTL_SECONDS)

    def to_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)

    def __str__(self) -> str:
        return f"{self.seconds}s"
