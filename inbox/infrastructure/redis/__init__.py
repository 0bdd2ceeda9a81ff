"""
Redis Infrastructure Module

Shared connection pool, the Redis cache store adapter and the store error
taxonomy.
"""

from .connection_factory import RedisConnectionFactory
from .exceptions import (
    RedisConfigurationException,
    RedisConnectionException,
    RedisException,
    RedisOperationTimeoutException,
)
from .redis_store import RedisCacheStore

__all__ = [
    "RedisConnectionFactory",
    "RedisCacheStore",
    "RedisException",
    "RedisConnectionException",
    "RedisOperationTimeoutException",
    "RedisConfigurationException",
]
