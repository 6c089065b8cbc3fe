"""
Phased benchmark scheduler.

A run walks a static plan of phases. Each phase applies its settings patch
through the settings bridge, resets the sampler, then polls the live fps on a
fixed interval until its countdown elapses. Phases of aggregating modes turn
their poll buffer into a :py:class:`~src.common.results.BenchmarkResult`.

Every phase owns a :py:class:`CancellationToken`. Timer callbacks capture the
token of the phase that scheduled them and do nothing once it has been
cancelled, so a callback that was already queued when ``stop()`` ran can never
touch the new state.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from src.benchmarks import plans
from src.benchmarks.bridge import SettingsBridge
from src.benchmarks.clock import TimerHandle, Timers
from src.common import logging_utils
from src.common.config import BenchmarkMode, HarnessConfig
from src.common.results import BenchmarkResult, aggregate_phase


class BenchmarkStateError(RuntimeError):
    """Raised when a run is started while another one is active."""


class SchedulerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


@dataclass(frozen=True)
class RunState:
    """Read-only view of the scheduler's run state."""

    mode: BenchmarkMode
    is_running: bool
    phase_index: int
    progress_percent: float
    current_phase_label: str


class CancellationToken:
    __slots__ = ("cancelled",)

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


StateListener = Callable[[RunState], None]


class BenchmarkScheduler:
    """Sequences benchmark phases against a settings bridge."""

    def __init__(
        self,
        bridge: SettingsBridge,
        timers: Timers,
        config: Optional[HarnessConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._bridge = bridge
        self._timers = timers
        self._config = config or HarnessConfig()
        self._logger = logger or logging_utils.get_logger("scheduler")

        self._status = SchedulerStatus.IDLE
        self._mode = BenchmarkMode.MANUAL
        self._plan: plans.Plan = ()
        self._phase_index = 0
        self._progress = 0.0
        self._phase_label = ""
        self._elapsed_planned_ms = 0.0
        self._total_planned_ms = 0.0

        self._token: Optional[CancellationToken] = None
        self._countdown: Optional[TimerHandle] = None
        self._poll: Optional[TimerHandle] = None
        self._buffer: List[float] = []
        self._phase_started_at = 0.0
        self._phase_settings = bridge.get_current_settings()

        self._results: List[BenchmarkResult] = []
        self._listeners: List[StateListener] = []
        self._disposed = False
        self.last_error: Optional[BaseException] = None

    # ------------------------------------------------------------------ #
    # Read-only state

    @property
    def is_running(self) -> bool:
        return self._status is SchedulerStatus.RUNNING

    @property
    def mode(self) -> BenchmarkMode:
        return self._mode

    @property
    def phase_index(self) -> int:
        return self._phase_index

    @property
    def progress_percent(self) -> float:
        return self._progress

    @property
    def current_phase_label(self) -> str:
        return self._phase_label

    @property
    def results(self) -> Tuple[BenchmarkResult, ...]:
        return tuple(self._results)

    @property
    def sample_buffer(self) -> Tuple[float, ...]:
        """Fps observations collected so far in the active phase."""

        return tuple(self._buffer)

    @property
    def state(self) -> RunState:
        return RunState(
            mode=self._mode,
            is_running=self.is_running,
            phase_index=self._phase_index,
            progress_percent=self._progress,
            current_phase_label=self._phase_label,
        )

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a function that removes it."""

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------ #
    # Run entry points

    def run_fixed_preset(self, preset: str, duration_ms: Optional[float] = None) -> None:
        if duration_ms is None:
            duration_ms = self._config.fixed_preset_duration_ms
        self._start(BenchmarkMode.FIXED_PRESET, plans.fixed_preset_plan(preset, duration_ms))

    def run_stress_test(self) -> None:
        self._start(BenchmarkMode.STRESS_TEST, plans.stress_test_plan(self._config))

    def run_auto_ramp(self) -> None:
        self._start(BenchmarkMode.AUTO_RAMP, plans.auto_ramp_plan())

    def stop_benchmark(self) -> None:
        """Cancel the active run. Safe to call at any time, any number of times."""

        if self._status is not SchedulerStatus.RUNNING:
            return
        self._logger.info("Stopping %s run during '%s'", self._mode.value, self._phase_label)
        self._teardown()

    stop = stop_benchmark

    def dispose(self) -> None:
        """Stop any active run and drop listeners; the scheduler cannot be reused."""

        self.stop_benchmark()
        self._listeners.clear()
        self._disposed = True

    # ------------------------------------------------------------------ #
    # Internals

    def _start(self, mode: BenchmarkMode, plan: plans.Plan) -> None:
        if self._disposed:
            raise BenchmarkStateError("Scheduler has been disposed.")
        if self._status is not SchedulerStatus.IDLE:
            raise BenchmarkStateError(
                f"A {self._mode.value} run is already active; stop it before starting {mode.value}."
            )

        self._mode = mode
        self._plan = plan
        self._phase_index = 0
        self._progress = 0.0
        self._elapsed_planned_ms = 0.0
        self._total_planned_ms = plans.total_duration_ms(plan)
        self._results = []
        self.last_error = None
        self._status = SchedulerStatus.RUNNING

        self._logger.info(
            "Starting %s run: %d phase(s), %.1fs planned",
            mode.value,
            len(plan),
            self._total_planned_ms / 1000.0,
        )
        self._enter_phase(0)

    def _enter_phase(self, index: int) -> None:
        phase = self._plan[index]
        token = CancellationToken()
        self._token = token
        self._phase_index = index
        self._phase_label = phase.name
        self._buffer = []

        try:
            self._bridge.apply_settings(phase.settings_patch)
            self._bridge.reset_metrics()
            self._phase_settings = self._bridge.get_current_settings()
        except Exception as exc:
            self._logger.error("Aborting %s run: phase '%s' could not be applied: %s", self._mode.value, phase.name, exc)
            self.last_error = exc
            self._teardown()
            raise

        self._phase_started_at = self._timers.now()
        self._countdown = self._timers.call_later(phase.duration_ms / 1000.0, lambda: self._on_phase_elapsed(token))
        self._schedule_poll(token)
        self._logger.info("Phase %d/%d '%s' (%.0f ms)", index + 1, len(self._plan), phase.name, phase.duration_ms)
        self._notify()

    def _schedule_poll(self, token: CancellationToken) -> None:
        self._poll = self._timers.call_later(self._config.poll_interval_ms / 1000.0, lambda: self._on_poll(token))

    def _on_poll(self, token: CancellationToken) -> None:
        if token.cancelled:
            return
        fps = self._bridge.get_current_fps()
        # the display snapshot reads 0 until its first refresh after a reset
        if math.isfinite(fps) and fps > 0:
            self._buffer.append(fps)
        self._schedule_poll(token)

    def _on_phase_elapsed(self, token: CancellationToken) -> None:
        if token.cancelled:
            return
        token.cancel()
        self._cancel_timers()

        phase = self._plan[self._phase_index]
        if self._mode.aggregates:
            duration_sec = self._timers.now() - self._phase_started_at
            result = aggregate_phase(phase.preset or phase.name, self._phase_settings, self._buffer, duration_sec)
            self._results.append(result)
            self._logger.info(
                "Phase '%s' done: avg %.1f fps (min %.1f, p1 %.1f, p99 %.1f, max %.1f) from %d samples",
                phase.name,
                result.avg_fps,
                result.min_fps,
                result.p1_fps,
                result.p99_fps,
                result.max_fps,
                len(self._buffer),
            )
        self._buffer = []

        self._elapsed_planned_ms += phase.duration_ms
        if self._total_planned_ms > 0:
            self._progress = min(100.0, self._elapsed_planned_ms / self._total_planned_ms * 100.0)
        self._notify()
        if self._status is not SchedulerStatus.RUNNING:
            # a listener stopped the run
            return

        next_index = self._phase_index + 1
        if next_index < len(self._plan):
            self._enter_phase(next_index)
            return

        self._logger.info("%s run complete with %d result(s)", self._mode.value, len(self._results))
        self._teardown()

    def _cancel_timers(self) -> None:
        for handle in (self._countdown, self._poll):
            if handle is not None:
                handle.cancel()
        self._countdown = None
        self._poll = None

    def _teardown(self) -> None:
        self._status = SchedulerStatus.STOPPING
        if self._token is not None:
            self._token.cancel()
            self._token = None
        self._cancel_timers()
        self._buffer = []
        self._progress = 0.0
        self._phase_label = ""
        self._phase_index = 0
        self._status = SchedulerStatus.IDLE
        self._notify()

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)
