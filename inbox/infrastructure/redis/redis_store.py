"""
Redis Cache Store

Thin asynchronous adapter over Redis implementing the ``CacheStore`` port:
GET, SETEX, SCAN MATCH and DEL. Holds no state between calls.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Set, Union

from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    RedisError,
    TimeoutError as RedisTimeoutError,
)

from ...domain.cache.repository_interfaces import CacheStore
from ...domain.cache.value_objects import TTL
from .connection_factory import RedisConnectionFactory
from .exceptions import (
    RedisConnectionException,
    RedisException,
    RedisOperationTimeoutException,
)

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStore):
    """
    Redis implementation of the cache store port.

    Each call is bounded by ``operation_timeout``. Timeouts, connection and
    protocol failures raise ``RedisException`` subclasses; there is no retry
    at this level.
    """

    def __init__(
        self,
        connection_factory: RedisConnectionFactory,
        operation_timeout: float = 2.0,
        scan_count: int = 100,
    ):
        self._connection_factory = connection_factory
        self.operation_timeout = operation_timeout
        self.scan_count = scan_count

    async def get(self, key: str) -> Optional[Union[str, bytes]]:
        return await self._execute("get", lambda client: client.get(key), key=key)

    async def set_with_ttl(self, key: str, value: Union[str, bytes], ttl: TTL) -> bool:
        result = await self._execute(
            "setex", lambda client: client.setex(key, ttl.seconds, value), key=key
        )
        return bool(result)

    async def keys_matching(self, pattern: str) -> Set[str]:
        # SCAN instead of KEYS so large keyspaces don't block the server;
        # the timeout applies to each SCAN round trip, not to the whole walk
        keys: Set[str] = set()
        cursor = 0
        round_trips = 0
        while True:
            cursor, batch = await self._execute(
                "scan",
                lambda client, cursor=cursor: client.scan(
                    cursor=cursor, match=pattern, count=self.scan_count
                ),
                key=pattern,
            )
            round_trips += 1
            for key in batch:
                keys.add(key.decode("utf-8") if isinstance(key, bytes) else key)
            if int(cursor) == 0:
                break

        logger.debug(
            f"Redis SCAN finished - pattern: {pattern}, keys: {len(keys)}",
            extra={"pattern": pattern, "round_trips": round_trips, "keys": len(keys)},
        )
        return keys

    async def delete_many(self, keys: Iterable[str]) -> int:
        key_list = list(keys)
        if not key_list:
            return 0
        deleted = await self._execute(
            "delete", lambda client: client.delete(*key_list), key=key_list[0]
        )
        return int(deleted or 0)

    async def _execute(
        self,
        operation: str,
        func: Callable[[Redis], Awaitable[Any]],
        key: Optional[str] = None,
    ) -> Any:
        """Run one store operation under the timeout and map its errors."""
        await self._connection_factory.initialize()
        client = self._connection_factory.get_client()

        try:
            return await asyncio.wait_for(func(client), timeout=self.operation_timeout)
        except (asyncio.TimeoutError, RedisTimeoutError) as e:
            logger.error(
                f"Redis {operation} timed out",
                extra={"operation": operation, "key": key},
            )
            raise RedisOperationTimeoutException(
                operation=operation,
                timeout_seconds=self.operation_timeout,
                key=key,
                original_error=e,
            ) from e
        except RedisConnectionError as e:
            logger.error(
                f"Redis {operation} failed: connection error: {e}",
                extra={"operation": operation, "key": key},
            )
            raise RedisConnectionException(
                message=f"Redis connection failed during {operation}: {e}",
                original_error=e,
            ) from e
        except RedisError as e:
            logger.error(
                f"Redis {operation} failed: {e}",
                extra={"operation": operation, "key": key},
            )
            raise RedisException(
                message=f"Redis {operation} failed: {e}",
                details={"operation": operation, "key": key},
                original_error=e,
            ) from e
