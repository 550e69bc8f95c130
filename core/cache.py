"""
Typed cache-aside service over Redis.

Every service on the platform memoizes reads through ``CacheService``.
An unreachable or timing-out Redis never fails the caller: reads degrade to
a miss and ``get_or_create`` hands back the freshly computed value without
caching it. Entries that no longer decode as the requested type are treated
as misses and get overwritten on the next write.

Concurrent misses on the same key are not collapsed: each caller runs its
own ``compute`` and the last write wins.
"""

import contextlib
import inspect
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar, Union

import redis
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .codec import Codec, codec_for
from .config import CoreConfig
from .constants import CacheTTL
from .errors import InvalidArgument, SerializationError, StoreUnavailable
from .logging import get_logger
from .metrics import CacheMetrics

T = TypeVar("T")

# Connection refused, socket timeouts and protocol errors all surface as one of these.
STORE_ERRORS = (RedisError, OSError)


def build_redis_clients(config: CoreConfig) -> Tuple[aioredis.Redis, redis.Redis]:
    """Create the process-wide async and blocking Redis clients."""
    options = dict(
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=config.redis_socket_timeout,
        socket_connect_timeout=config.redis_connect_timeout,
        health_check_interval=30,
    )
    return (
        aioredis.from_url(config.redis_url, **options),
        redis.from_url(config.redis_url, **options),
    )


class CacheService:
    """Cache-aside service over a shared Redis client."""

    def __init__(
        self,
        client: aioredis.Redis,
        sync_client: Optional[redis.Redis] = None,
        *,
        metrics: Optional[CacheMetrics] = None,
        default_ttl_minutes: int = int(CacheTTL.DEFAULT),
    ):
        self._require_ttl(default_ttl_minutes)
        self.client = client
        self.sync_client = sync_client
        self.metrics = metrics
        self.default_ttl_minutes = default_ttl_minutes
        self.logger = get_logger("core.cache")

    @classmethod
    def from_config(cls, config: CoreConfig, metrics: Optional[CacheMetrics] = None) -> "CacheService":
        """Build a service with clients and default TTL taken from ``config``."""
        client, sync_client = build_redis_clients(config)
        return cls(
            client,
            sync_client,
            metrics=metrics,
            default_ttl_minutes=config.cache_default_ttl_minutes
        )

    async def get(self, key: str, type_: Type[T] = str) -> Optional[T]:
        """Get a cached value, or ``None`` on miss, store failure or undecodable payload."""
        self._require_key(key)
        codec = codec_for(type_)
        try:
            raw = await self._read(key, "get")
        except StoreUnavailable:
            return None
        return self._decode(key, raw, codec, "get")

    async def get_or_create(
        self,
        key: str,
        compute: Callable[[], Union[T, Awaitable[T]]],
        ttl_minutes: Optional[int] = None,
        type_: Type[T] = str,
    ) -> T:
        """
        Return the cached value for ``key``, computing and caching it on a miss.

        ``compute`` may be a plain or async callable and runs at most once per
        call. Store failures on either leg only mean the result is not cached;
        a result that cannot be encoded raises ``SerializationError``.
        ``ttl_minutes`` defaults to the service's ``default_ttl_minutes``.
        """
        self._require_key(key)
        ttl_minutes = self._resolve_ttl(ttl_minutes)
        codec = codec_for(type_)

        try:
            raw = await self._read(key, "get_or_create")
            cached = self._decode(key, raw, codec, "get_or_create")
        except StoreUnavailable:
            cached = None
        if cached is not None:
            return cached

        value = compute()
        if inspect.isawaitable(value):
            value = await value
        if self.metrics:
            self.metrics.record_compute()

        payload = codec.encode(value)
        with contextlib.suppress(StoreUnavailable):
            await self._write(key, payload, ttl_minutes, "get_or_create")
        return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl_minutes: Optional[int] = None,
        type_: Optional[Type[Any]] = None,
    ) -> bool:
        """
        Cache ``value`` for ``ttl_minutes`` whole minutes, or the service's
        default TTL when omitted.

        A zero or negative TTL removes the key instead of writing it, so the
        value is effectively not cached. Returns ``False`` when the store is
        unavailable.
        """
        self._require_key(key)
        ttl_minutes = self._resolve_ttl(ttl_minutes)
        codec = codec_for(type_ if type_ is not None else type(value))
        payload = codec.encode(value)
        try:
            await self._write(key, payload, ttl_minutes, "set")
        except StoreUnavailable:
            return False
        return True

    async def remove(self, key: str) -> bool:
        """Delete a cached value; removing an absent key is a no-op."""
        self._require_key(key)
        try:
            await self.client.delete(key)
        except STORE_ERRORS as exc:
            self._store_unavailable("remove", key, exc)
            return False
        return True

    def try_get(self, key: str, type_: Type[T] = str) -> Tuple[bool, Optional[T]]:
        """Blocking lookup for call sites that cannot await; returns ``(found, value)``."""
        self._require_key(key)
        if self.sync_client is None:
            self.logger.warning("Blocking cache client not configured", key=key)
            return False, None

        codec = codec_for(type_)
        try:
            raw = self.sync_client.get(key)
        except STORE_ERRORS as exc:
            self._store_unavailable("try_get", key, exc)
            return False, None

        value = self._decode(key, raw, codec, "try_get")
        return value is not None, value

    async def _read(self, key: str, operation: str) -> Optional[Union[str, bytes]]:
        try:
            return await self.client.get(key)
        except STORE_ERRORS as exc:
            raise self._store_unavailable(operation, key, exc) from exc

    async def _write(self, key: str, payload: str, ttl_minutes: int, operation: str) -> None:
        try:
            if ttl_minutes <= 0:
                # Expire immediately; Redis would otherwise keep the key forever.
                await self.client.delete(key)
            else:
                await self.client.set(key, payload, ex=timedelta(minutes=ttl_minutes))
        except STORE_ERRORS as exc:
            raise self._store_unavailable(operation, key, exc) from exc

        self.logger.debug("Cached value", key=key, ttl_minutes=ttl_minutes)

    def _decode(self, key: str, raw: Optional[Union[str, bytes]], codec: Codec, operation: str) -> Optional[Any]:
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            value = codec.decode(raw)
        except (SerializationError, UnicodeDecodeError) as exc:
            self.logger.warning(
                "Discarding undecodable cache entry",
                key=key,
                operation=operation,
                error=str(exc)
            )
            self._record(operation, "decode_error")
            return None

        self._record(operation, "miss" if value is None else "hit")
        return value

    def _store_unavailable(self, operation: str, key: str, exc: Exception) -> StoreUnavailable:
        """Log and count a store failure; returns the wrapped error for callers that re-raise."""
        error = StoreUnavailable(details={"operation": operation, "key": key, "error": str(exc)})
        self.logger.warning(
            "Cache store unavailable",
            operation=operation,
            key=key,
            error=str(exc),
            error_type=type(exc).__name__
        )
        self._record(operation, "unavailable")
        return error

    def _record(self, operation: str, result: str) -> None:
        if self.metrics:
            self.metrics.record_request(operation, result)

    def _resolve_ttl(self, ttl_minutes: Optional[int]) -> int:
        if ttl_minutes is None:
            return self.default_ttl_minutes
        self._require_ttl(ttl_minutes)
        return ttl_minutes

    @staticmethod
    def _require_key(key: str) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidArgument("key")

    @staticmethod
    def _require_ttl(ttl_minutes: int) -> None:
        if isinstance(ttl_minutes, bool) or not isinstance(ttl_minutes, int):
            raise InvalidArgument("ttl_minutes", "ttl_minutes must be a whole number of minutes")
