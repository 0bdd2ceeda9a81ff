"""
Unit tests for cache key derivation and TTL values.
"""

import hashlib
import itertools
import re
from datetime import timedelta

import pytest

from inbox.domain.cache.value_objects import TTL, CacheKey, pagination_digest
from inbox.domain.pagination.value_objects import Pageable

KEY_FORMAT = re.compile(r"^msg-svc-42-list-[0-9a-f]{32}$")


class TestCacheKey:
    """Test CacheKey value object."""

    def test_paged_list_format(self):
        key = CacheKey.paged_list("msg-svc", 42, Pageable.of(0, 20))
        expected_digest = hashlib.md5(b"page=0&size=20").hexdigest()

        assert key.value == f"msg-svc-42-list-{expected_digest}"
        assert str(key) == key.value
        assert KEY_FORMAT.match(key.value)

    def test_digest_is_fixed_length_hex(self):
        for page, size in [(0, 1), (12345, 999), (0, 2147483647)]:
            digest = pagination_digest(Pageable.of(page, size))
            assert re.fullmatch(r"[0-9a-f]{32}", digest)

    def test_deterministic(self):
        first = CacheKey.paged_list("msg-svc", 42, Pageable.of(3, 50))
        second = CacheKey.paged_list("msg-svc", 42, Pageable(3, 50))

        assert first == second

    def test_discriminates_pagination(self):
        pageables = [
            Pageable.of(page, size)
            for page, size in itertools.product(range(0, 30), (1, 5, 10, 20, 50, 100))
        ]
        keys = {CacheKey.paged_list("msg-svc", 42, p).value for p in pageables}

        assert len(keys) == len(pageables)

    def test_page_and_size_not_interchangeable(self):
        a = CacheKey.paged_list("msg-svc", 1, Pageable.of(2, 20))
        b = CacheKey.paged_list("msg-svc", 1, Pageable.of(20, 2))

        assert a != b

    def test_discriminates_subject_and_namespace(self):
        pageable = Pageable.of(0, 20)

        assert CacheKey.paged_list("msg-svc", 1, pageable) != CacheKey.paged_list(
            "msg-svc", 2, pageable
        )
        assert CacheKey.paged_list("msg-svc", 1, pageable) != CacheKey.paged_list(
            "other", 1, pageable
        )

    def test_subject_pattern(self):
        assert CacheKey.subject_pattern("msg-svc", 42) == "msg-svc-42-list-*"

    def test_invalid_namespace(self):
        with pytest.raises(ValueError, match="namespace cannot be empty"):
            CacheKey.paged_list("", 1, Pageable.of(0, 1))
        with pytest.raises(ValueError, match="whitespace"):
            CacheKey.paged_list("msg svc", 1, Pageable.of(0, 1))
        with pytest.raises(ValueError):
            CacheKey.subject_pattern("msg*", 1)

    @pytest.mark.parametrize("namespace", ["msg?svc", "msg[a]", "msg]", "msg\\svc"])
    def test_namespace_rejects_glob_characters(self, namespace):
        with pytest.raises(ValueError, match="glob characters"):
            CacheKey.subject_pattern(namespace, 1)
        with pytest.raises(ValueError, match="glob characters"):
            CacheKey.paged_list(namespace, 1, Pageable.of(0, 1))

    def test_invalid_subject(self):
        with pytest.raises(ValueError, match="Subject ID must be an integer"):
            CacheKey.paged_list("msg-svc", "42", Pageable.of(0, 1))
        with pytest.raises(ValueError):
            CacheKey.subject_pattern("msg-svc", True)

    def test_invalid_key_empty(self):
        with pytest.raises(ValueError, match="Cache key cannot be empty"):
            CacheKey("")

    def test_invalid_key_whitespace(self):
        with pytest.raises(ValueError, match="Cache key cannot contain whitespace"):
            CacheKey("invalid key")

    def test_invalid_key_too_long(self):
        with pytest.raises(ValueError, match="Cache key too long"):
            CacheKey("a" * 251)


class TestTTL:
    """Test TTL value object."""

    def test_paged_list_default(self):
        assert TTL.paged_list().seconds == 600

    def test_factories(self):
        assert TTL.of_seconds(30).seconds == 30
        assert TTL.minutes(10) == TTL(600)
        assert TTL.hours(1).seconds == 3600
        assert TTL.from_timedelta(timedelta(minutes=2)).seconds == 120
        assert TTL(90).to_timedelta() == timedelta(seconds=90)
        assert str(TTL(15)) == "15s"

    def test_invalid(self):
        with pytest.raises(ValueError, match="TTL must be positive"):
            TTL(0)
        with pytest.raises(ValueError, match="TTL too large"):
            TTL(86400 * 366)
