"""
File: kvstore/store.py
In-memory key-value store shared by all request workers.
"""
import logging
from typing import Dict, List, Optional, Protocol

from common.rwlock import RWLock
from kvstore.models import Value

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for store failures."""


class StoreNotInitializedError(StoreError):
    """Raised when the store's mapping was never constructed."""


class StoreBackend(Protocol):
    """Operations the request router needs from a store."""

    def list_keys(self) -> List[str]: ...

    def get(self, key: str) -> Optional[Value]: ...

    def set(self, key: str, value: Value) -> None: ...

    def delete(self, key: str) -> None: ...

    def __len__(self) -> int: ...


class Store:
    """
    Concurrency-safe mapping from key to value.

    A single reader/writer lock guards the whole mapping: reads share the lock,
    writes hold it exclusively.
    """

    def __init__(self):
        self.data: Optional[Dict[str, Value]] = {}
        self._lock = RWLock()

        logger.debug("Store inicializado")

    def _rwlock(self) -> RWLock:
        lock = getattr(self, "_lock", None)
        if lock is None:
            raise StoreNotInitializedError("store is not initialized")
        return lock

    def _mapping(self) -> Dict[str, Value]:
        """Return the mapping; must be called with the lock held."""
        data = getattr(self, "data", None)
        if data is None:
            raise StoreNotInitializedError("store is not initialized")
        return data

    def list_keys(self) -> List[str]:
        """
        Return a snapshot of every key currently stored, in no particular order.

        Returns:
            List[str]: Keys present at the time of the call; empty if none
        """
        with self._rwlock().read_lock():
            return list(self._mapping())

    def get(self, key: str) -> Optional[Value]:
        """
        Return the value stored at key.

        Returns:
            Optional[Value]: The value, or None if the key is absent
        """
        with self._rwlock().read_lock():
            return self._mapping().get(key)

    def set(self, key: str, value: Value) -> None:
        """Insert or overwrite the value at key."""
        with self._rwlock().write_lock():
            self._mapping()[key] = value

    def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        with self._rwlock().write_lock():
            self._mapping().pop(key, None)

    def __len__(self) -> int:
        with self._rwlock().read_lock():
            return len(self._mapping())

    def __contains__(self, key: str) -> bool:
        with self._rwlock().read_lock():
            return key in self._mapping()
