import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

import redis
from redis.exceptions import LockError, RedisError

from .exceptions import StoreError

logger = logging.getLogger(__name__)


class LocalDateLock:
    """Serializes booking writes per date within a single process."""

    def __init__(self):
        self._guard = threading.Lock()
        # date -> [lock, number of holders and waiters]
        self._locks: Dict[str, list] = {}

    @contextmanager
    def __call__(self, date: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(date, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[date]


class RedisDateLock:
    """Serializes booking writes per date across processes sharing a Redis."""

    def __init__(self, client: redis.Redis, timeout: int = 10, blocking_timeout: int = 5):
        self.client = client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    @contextmanager
    def __call__(self, date: str) -> Iterator[None]:
        lock = self.client.lock(
            f"booking:{date}",
            timeout=self.timeout,
            blocking_timeout=self.blocking_timeout,
        )
        try:
            acquired = lock.acquire()
        except RedisError as e:
            logger.error(f"Booking lock backend error for {date}: {e}")
            raise StoreError("Booking lock unavailable") from e
        if not acquired:
            logger.error(f"Timed out waiting for booking lock on {date}")
            raise StoreError("Booking lock unavailable")

        try:
            yield
        finally:
            try:
                lock.release()
            except LockError:
                # Lock expired before release
                logger.warning(f"Booking lock on {date} expired before release")
