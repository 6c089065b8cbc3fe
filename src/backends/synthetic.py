"""
Synthetic render workload.

Stands in for the real render loop: it turns the live settings into a frame
cost, adds seeded jitter and occasional spikes, and delivers one frame tick
per simulated frame into the rolling sampler. Frames are scheduled on the
same timers as the scheduler, so a virtual clock runs whole benchmarks
instantly while asyncio timers run them in real time.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from src.benchmarks.clock import TimerHandle, Timers
from src.common import scenes
from src.common.config import BenchmarkSettings
from src.common.sampler import RollingSampler

BASE_FRAME_MS = 2.0
FILL_MS_AT_FULL_RES = 6.0
MS_PER_INSTANCE = 0.0012
MS_PER_PARTICLE = 0.0004
EFFECT_COST_MS = {"bloom": 1.5, "dof": 2.5, "shaders": 1.0}


def frame_cost_ms(settings: BenchmarkSettings) -> float:
    """Return the noiseless frame time for ``settings``."""

    scene = scenes.get_scene_info(settings.scene)
    geometry = (
        FILL_MS_AT_FULL_RES * settings.resolution**2
        + MS_PER_INSTANCE * settings.instance_count
        + MS_PER_PARTICLE * settings.particle_count
    )
    effects = sum(cost for name, cost in EFFECT_COST_MS.items() if getattr(settings, name))
    return BASE_FRAME_MS + scene.cost_factor * geometry + effects


class SyntheticWorkload:
    """Frame producer whose cost follows the applied settings."""

    def __init__(
        self,
        timers: Timers,
        sampler: RollingSampler,
        settings: Optional[BenchmarkSettings] = None,
        *,
        seed: int = 1234,
        jitter: float = 0.08,
        spike_probability: float = 0.01,
        refresh_hz: Optional[float] = None,
    ) -> None:
        if refresh_hz is not None and refresh_hz <= 0:
            raise ValueError("refresh_hz must be greater than zero")
        self._timers = timers
        self._sampler = sampler
        self._rng = np.random.default_rng(seed)
        self._jitter = jitter
        self._spike_probability = spike_probability
        self._min_frame_ms = 1000.0 / refresh_hz if refresh_hz else 0.0
        self._cost_ms = frame_cost_ms(settings or BenchmarkSettings())
        self._handle: Optional[TimerHandle] = None
        self._last_tick: Optional[float] = None
        self.frames_rendered = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def cost_ms(self) -> float:
        return self._cost_ms

    def apply(self, settings: BenchmarkSettings) -> None:
        """Rebuild the workload for new settings; raises KeyError on unknown scenes."""

        self._cost_ms = frame_cost_ms(settings)

    def start(self) -> None:
        if self._handle is not None:
            return
        self._last_tick = self._timers.now()
        self._schedule_next()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._last_tick = None

    def _next_frame_ms(self) -> float:
        scale = max(0.5, self._rng.normal(1.0, self._jitter))
        if self._rng.random() < self._spike_probability:
            scale *= self._rng.uniform(2.0, 3.0)
        return max(self._cost_ms * scale, self._min_frame_ms)

    def _schedule_next(self) -> None:
        self._handle = self._timers.call_later(self._next_frame_ms() / 1000.0, self._tick)

    def _tick(self) -> None:
        now = self._timers.now()
        if self._last_tick is not None:
            self._sampler.record((now - self._last_tick) * 1000.0)
        self._last_tick = now
        self.frames_rendered += 1
        self._schedule_next()
