"""Key caches used to keep the Cognito JWKS between verifier instances.

Any host application can plug in its own store by implementing the three
methods of ``KeyCache``; ``StoreCache`` covers stores with the common
``get(key)`` / ``set(key, value, timeout)`` shape.
"""
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple


class KeyCache(ABC):
    @abstractmethod
    def put(self, key: str, value: Any, minutes: int) -> None:
        ...

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def has(self, key: str) -> bool:
        ...


class NoCache(KeyCache):
    """Cache that never stores anything; every lookup is a miss."""

    def put(self, key: str, value: Any, minutes: int) -> None:
        return None

    def get(self, key: str) -> Optional[Any]:
        return None

    def has(self, key: str) -> bool:
        return False


class MemoryCache(KeyCache):
    """Process-local cache with per-entry expiry."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: Any, minutes: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + minutes * 60)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def has(self, key: str) -> bool:
        return self.get(key) is not None


class StoreCache(KeyCache):
    """Adapter onto a host application's cache object.

    ``store`` must provide ``get(key)`` and ``set(key, value, timeout)`` where
    ``timeout`` is in seconds (cachelib and Django caches both do).
    """

    def __init__(self, store: Any):
        self._store = store

    def put(self, key: str, value: Any, minutes: int) -> None:
        self._store.set(key, value, timeout=minutes * 60)

    def get(self, key: str) -> Optional[Any]:
        return self._store.get(key)

    def has(self, key: str) -> bool:
        return self._store.get(key) is not None
