import datetime
from datetime import timedelta
from typing import Callable

from .loggers import app_logger

DEFAULT_STATS_CACHE_TTL = timedelta(minutes=5)


class StatsCache:
    """Single-slot cache for the admin dashboard statistics.

    The slot is shared by every admin, so it must only ever hold values that
    do not depend on which caller asked. Expiry is checked lazily on ``get``.
    Anything that changes admin-visible counts has to call ``invalidate``.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_STATS_CACHE_TTL,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._data: dict | None = None
        self._timestamp: datetime.datetime | None = None

    @property
    def timestamp(self) -> datetime.datetime | None:
        return self._timestamp

    def get(self) -> dict | None:
        if self._data is None or self._timestamp is None:
            return None

        if self._clock() - self._timestamp >= self.ttl:
            return None

        return self._data

    def put(self, stats: dict) -> None:
        self._data = stats
        self._timestamp = self._clock()

    def invalidate(self) -> None:
        if self._data is not None:
            app_logger.debug("Admin dashboard stats cache invalidated")

        self._data = None
        self._timestamp = None
