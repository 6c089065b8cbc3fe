"""
Rolling frame-time sampler.

Frame times are kept in a fixed-capacity ring buffer indexed by a write
cursor. Two views are exposed:

* :py:meth:`RollingSampler.snapshot` computes metrics from the window on
  demand.
* :py:attr:`RollingSampler.latest` is the display snapshot, refreshed every
  ``recompute_every`` recorded samples.

Percentiles follow the fps convention used by the result aggregator: ``p1``
is the fps value at ascending-fps rank ``floor(n * 0.01)`` (the worst-leaning
value) and ``p99`` the value at rank ``floor(n * 0.99)``. Frame times sort in
the opposite order to fps, so the lookup into the ascending frame-time array
uses the mirrored index ``n - 1 - rank``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

import numpy as np

DEFAULT_CAPACITY = 120
DEFAULT_RECOMPUTE_EVERY = 10


def _fps_from_ms(frame_ms: float) -> float:
    """Convert a frame time to fps, clamping degenerate values to zero."""

    if not frame_ms > 0.0:
        return 0.0
    fps = 1000.0 / frame_ms
    return fps if math.isfinite(fps) else 0.0


@dataclass(frozen=True)
class MetricsSnapshot:
    """Performance figures derived from the current frame-time window."""

    fps: float = 0.0
    frame_time_ms: float = 0.0
    min: float = 0.0
    max: float = 0.0
    p1: float = 0.0
    p99: float = 0.0

    @classmethod
    def zero(cls) -> "MetricsSnapshot":
        return cls()

    def as_dict(self) -> dict:
        return asdict(self)


class RollingSampler:
    """Bounded window of frame times with throttled snapshot refresh."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, recompute_every: int = DEFAULT_RECOMPUTE_EVERY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be greater than zero")
        if recompute_every <= 0:
            raise ValueError("recompute_every must be greater than zero")
        self._buffer = np.zeros(capacity, dtype=np.float64)
        self._cursor = 0
        self._count = 0
        self._recompute_every = recompute_every
        self._since_refresh = 0
        self._total_recorded = 0
        self._latest = MetricsSnapshot.zero()

    @property
    def capacity(self) -> int:
        return int(self._buffer.shape[0])

    @property
    def total_recorded(self) -> int:
        """Samples recorded since the last reset, including evicted ones."""

        return self._total_recorded

    @property
    def latest(self) -> MetricsSnapshot:
        return self._latest

    def __len__(self) -> int:
        return self._count

    def record(self, delta_ms: float) -> None:
        """Append one frame time, evicting the oldest sample when full."""

        value = float(delta_ms)
        if not math.isfinite(value) or value < 0.0:
            value = 0.0

        self._buffer[self._cursor] = value
        self._cursor = (self._cursor + 1) % self.capacity
        if self._count < self.capacity:
            self._count += 1
        self._total_recorded += 1

        self._since_refresh += 1
        if self._since_refresh >= self._recompute_every:
            self._since_refresh = 0
            self._latest = self.snapshot()

    def window(self) -> np.ndarray:
        """Return the window contents ordered oldest to newest."""

        if self._count < self.capacity:
            return self._buffer[: self._count].copy()
        return np.roll(self._buffer, -self._cursor)

    def snapshot(self) -> MetricsSnapshot:
        """Compute metrics from the current window contents."""

        if self._count == 0:
            return MetricsSnapshot.zero()

        frame_times = np.sort(self.window())
        mean_ms = float(frame_times.mean())
        if not mean_ms > 0.0:
            return MetricsSnapshot.zero()

        # zero-length frames have no fps; extremes and ranks use the rest
        positive = frame_times[frame_times > 0.0]
        n = positive.shape[0]
        p1_rank = math.floor(n * 0.01)
        p99_rank = math.floor(n * 0.99)
        return MetricsSnapshot(
            fps=_fps_from_ms(mean_ms),
            frame_time_ms=mean_ms,
            min=_fps_from_ms(float(positive[-1])),
            max=_fps_from_ms(float(positive[0])),
            p1=_fps_from_ms(float(positive[max(n - 1 - p1_rank, 0)])),
            p99=_fps_from_ms(float(positive[max(n - 1 - p99_rank, 0)])),
        )

    def reset(self) -> None:
        """Drop every sample and derived value."""

        self._buffer.fill(0.0)
        self._cursor = 0
        self._count = 0
        self._since_refresh = 0
        self._total_recorded = 0
        self._latest = MetricsSnapshot.zero()
