"""
Redis Connection Factory

Connection management for the inbox cache: one shared pool per process,
tested on initialize and closed explicitly by the composition root.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import (
    AuthenticationError as RedisAuthError,
    RedisError,
)

from ...core.config import Settings
from .exceptions import (
    RedisConfigurationException,
    RedisConnectionException,
    RedisException,
)

logger = logging.getLogger(__name__)


class RedisConnectionFactory:
    """
    Factory for the shared Redis connection pool.

    The pool is shared across all requests; no locking or transactions are
    used on top of it.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._initialized = False
        self._lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Create the connection pool and verify the server answers."""
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return

            redis_url = self._settings.REDIS_URL
            parsed_url = urlparse(redis_url)
            host = parsed_url.hostname or "localhost"
            port = parsed_url.port or 6379

            try:
                pool = ConnectionPool.from_url(
                    redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=self._settings.REDIS_CONNECTION_TIMEOUT,
                    socket_timeout=self._settings.REDIS_OPERATION_TIMEOUT,
                    health_check_interval=self._settings.REDIS_HEALTH_CHECK_INTERVAL,
                    max_connections=self._settings.REDIS_MAX_CONNECTIONS,
                )
            except ValueError as e:
                raise RedisConfigurationException(
                    message=f"Invalid Redis URL: {e}",
                    config_key="REDIS_URL",
                    original_error=e,
                ) from e

            client = Redis(connection_pool=pool)
            try:
                await self._test_connection(client, host, port)
            except RedisException:
                await pool.disconnect()
                raise

            self._pool = pool
            self._client = client
            self._initialized = True
            logger.info(
                "Redis connection factory initialized",
                extra={
                    "host": host,
                    "port": port,
                    "max_connections": self._settings.REDIS_MAX_CONNECTIONS,
                },
            )

    async def _test_connection(self, client: Redis, host: str, port: int) -> None:
        """Ping the server once."""
        try:
            await client.ping()
            logger.debug("Redis connection test successful")
        except RedisAuthError as e:
            raise RedisConnectionException(
                message="Redis authentication failed during initialization",
                host=host,
                port=port,
                original_error=e,
            ) from e
        except (RedisError, OSError) as e:
            raise RedisConnectionException(
                message=f"Redis connection test failed: {e}",
                host=host,
                port=port,
                original_error=e,
            ) from e

    def get_client(self) -> Redis:
        """
        Return the pooled client.

        Raises:
            RedisConfigurationException: If initialize() has not completed
        """
        if not self._initialized or self._client is None:
            raise RedisConfigurationException(
                message="Redis connection factory is not initialized"
            )
        return self._client

    async def health_check(self) -> Dict[str, Any]:
        """Ping the server and report latency."""
        try:
            await self.initialize()
            start_time = time.time()
            await self.get_client().ping()
            ping_ms = (time.time() - start_time) * 1000
            return {
                "status": "healthy",
                "timestamp": time.time(),
                "service": "redis",
                "ping_ms": round(ping_ms, 2),
            }
        except (RedisException, RedisError) as e:
            logger.warning(f"Redis health check failed: {e}")
            return {
                "status": "unhealthy",
                "timestamp": time.time(),
                "service": "redis",
                "error": str(e),
            }

    async def close(self) -> None:
        """Close the pool and forget the client."""
        async with self._lock:
            if self._pool is not None:
                await self._pool.disconnect()
            self._pool = None
            self._client = None
            self._initialized = False
            logger.info("Redis connection factory closed")
