"""Count packets within fixed windows of time."""

from __future__ import annotations

import math
import threading
import time
from datetime import datetime, timezone
from typing import Callable


class Counter:
    """Counts packets per time bucket.

    ``do`` is called with the start of a bucket and the number of packets
    counted in it once a later bucket is entered (or on :meth:`finalize`).
    ``granularity`` is the length of a bucket in seconds.
    """

    def __init__(
        self,
        do: Callable[[datetime, int], None],
        granularity: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._do = do
        self._granularity = granularity
        self._clock = clock
        self._bucket: float | None = None
        self._count = 0
        self._lock = threading.Lock()

    def _truncate(self, now: float) -> float:
        if self._granularity <= 0:
            return now
        return math.floor(now / self._granularity) * self._granularity

    def _emit(self) -> None:
        if self._bucket is not None:
            start = datetime.fromtimestamp(self._bucket, tz=timezone.utc)
            self._do(start, self._count)

    def add(self, count: int = 1) -> None:
        """Count ``count`` packets at the current time."""
        with self._lock:
            bucket = self._truncate(self._clock())
            if bucket == self._bucket:
                self._count += count
                return
            self._emit()
            self._count = count
            self._bucket = bucket

    def finalize(self) -> None:
        """Report the packets of the current bucket, if any were counted."""
        with self._lock:
            self._emit()