"""
Message Inbox Global Constants

Centralized location for cache key conventions and pagination defaults.
Changing any value in the key section invalidates every deployed cache entry.
"""

# Cache key conventions
CACHE_NAMESPACE = "msg-svc"
CACHE_LIST_MARKER = "list"
CACHE_KEY_SEPARATOR = "-"
CACHE_GLOB_CHARACTERS = "*?[]\\"  # special in SCAN MATCH patterns

# Default TTL for cached inbox pages (10 minutes)
DEFAULT_CACHE_TTL_SECONDS = 600

# Pagination
DEFAULT_PAGE_SIZE = 20
UNPAGED_SIZE = 2147483647  # max signed 32-bit int, kept for key compatibility
