"""
Test helper doubles and factory methods for the reservation platform core.
"""

import time
from datetime import timedelta
from typing import Dict, Any, List, Optional, Tuple, Union

from redis.exceptions import ConnectionError as RedisConnectionError

from .models import GenericModel


class ReservationStatus(GenericModel):
    """Status entity shape used in cache tests."""

    name: str
    code: str
    sort_order: int = 0


class InMemoryStore:
    """Key/value storage with Redis-like expiry, shared by the async and blocking doubles."""

    def __init__(self):
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self.unavailable = False
        self.set_calls: List[Tuple[str, str, Optional[float]]] = []

    def check_available(self):
        if self.unavailable:
            raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    def read(self, key: str) -> Optional[str]:
        self.check_available()
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._data[key]
            return None
        return value

    def write(self, key: str, value: str, ex: Optional[Union[int, timedelta]] = None):
        self.check_available()
        seconds = ex.total_seconds() if isinstance(ex, timedelta) else ex
        expires_at = time.monotonic() + seconds if seconds is not None else None
        self._data[key] = (value, expires_at)
        self.set_calls.append((key, value, seconds))
        return True

    def remove(self, *keys: str) -> int:
        self.check_available()
        return sum(1 for key in keys if self._data.pop(key, None) is not None)

    def raw(self, key: str) -> Optional[str]:
        """Peek at a stored value without expiry or availability checks."""
        entry = self._data.get(key)
        return entry[0] if entry else None

    def ttl_seconds(self, key: str) -> Optional[float]:
        entry = self._data.get(key)
        if entry is None or entry[1] is None:
            return None
        return entry[1] - time.monotonic()


class InMemoryRedis:
    """Async double for the subset of ``redis.asyncio.Redis`` used by the cache."""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    async def get(self, key: str) -> Optional[str]:
        return self.store.read(key)

    async def set(self, key: str, value: str, ex: Optional[Union[int, timedelta]] = None):
        return self.store.write(key, value, ex=ex)

    async def delete(self, *keys: str) -> int:
        return self.store.remove(*keys)


class SyncInMemoryRedis:
    """Blocking double for the subset of ``redis.Redis`` used by ``try_get``."""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def get(self, key: str) -> Optional[str]:
        return self.store.read(key)


class ReservationDataFactory:
    """Factory for creating test data."""

    @staticmethod
    def create_statuses() -> List[ReservationStatus]:
        """Create reservation statuses."""
        return [
            ReservationStatus(name="Pending", code="PENDING", sort_order=1),
            ReservationStatus(name="Confirmed", code="CONFIRMED", sort_order=2),
            ReservationStatus(name="Cancelled", code="CANCELLED", sort_order=3),
        ]

    @staticmethod
    def create_reservation_payload() -> Dict[str, Any]:
        """Create a reservation summary as a plain dict."""
        return {
            "reservation_id": "res-001",
            "resource_id": "room-12",
            "status": "CONFIRMED",
            "start": "2024-05-01T14:00:00Z",
            "end": "2024-05-03T11:00:00Z",
            "guests": 2,
        }


class MockEnvironment:
    """Mock environment configuration."""

    @staticmethod
    def get_mock_config() -> Dict[str, str]:
        return {
            "CORE_ENV": "test",
            "CORE_SERVICE_NAME": "reservation",
            "CORE_LOG_LEVEL": "debug",
            "CORE_REDIS_URL": "redis://localhost:6379/1",
            "CORE_REDIS_SOCKET_TIMEOUT": "0.5",
            "CORE_CACHE_DEFAULT_TTL_MINUTES": "60",
            "CORE_CORRELATION_HEADER": "X-Request-ID",
        }


reservation_data_factory = ReservationDataFactory()
mock_environment = MockEnvironment()
