import logging
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator

from .errors import BusyError

logger = logging.getLogger(__name__)


class KeyedLocks:
    """
    One re-entrant lock per key, created on first use.

    Acquisition is bounded: a caller that cannot get the lock within
    ``timeout`` seconds gets a BusyError instead of waiting forever.
    """

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout
        self._locks: dict[Hashable, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def __contains__(self, key: Hashable) -> bool:
        with self._registry_lock:
            return key in self._locks

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        if not lock.acquire(timeout=self.timeout):
            logger.warning("Lock for %r not acquired within %.2fs", key, self.timeout)
            raise BusyError(f"Another operation for {key} is in progress, retry shortly")
        try:
            yield
        finally:
            lock.release()
