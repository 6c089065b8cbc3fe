"""
Benchmark result data structures and the per-phase aggregator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import numpy as np

from .config import BenchmarkSettings


def _finite_or_zero(value: float) -> float:
    return float(value) if math.isfinite(value) else 0.0


@dataclass(frozen=True)
class BenchmarkResult:
    """Summary statistics for one completed benchmark phase."""

    preset_label: str
    settings_snapshot: BenchmarkSettings
    avg_fps: float
    min_fps: float
    max_fps: float
    p1_fps: float
    p99_fps: float
    avg_frame_time_ms: float
    duration_sec: float

    @property
    def score(self) -> str:
        return score_label(self.avg_fps)

    def serialize(self) -> Dict[str, object]:
        return {
            "presetLabel": self.preset_label,
            "settingsSnapshot": self.settings_snapshot.as_dict(),
            "avgFps": self.avg_fps,
            "minFps": self.min_fps,
            "maxFps": self.max_fps,
            "p1Fps": self.p1_fps,
            "p99Fps": self.p99_fps,
            "avgFrameTimeMs": self.avg_frame_time_ms,
            "durationSec": self.duration_sec,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "BenchmarkResult":
        """Rebuild a result from its serialized form."""

        return cls(
            preset_label=str(data["presetLabel"]),
            settings_snapshot=BenchmarkSettings().merged(data["settingsSnapshot"]),  # type: ignore[arg-type]
            avg_fps=float(data["avgFps"]),  # type: ignore[arg-type]
            min_fps=float(data["minFps"]),  # type: ignore[arg-type]
            max_fps=float(data["maxFps"]),  # type: ignore[arg-type]
            p1_fps=float(data["p1Fps"]),  # type: ignore[arg-type]
            p99_fps=float(data["p99Fps"]),  # type: ignore[arg-type]
            avg_frame_time_ms=float(data["avgFrameTimeMs"]),  # type: ignore[arg-type]
            duration_sec=float(data["durationSec"]),  # type: ignore[arg-type]
        )


def aggregate_phase(
    preset_label: str,
    settings: BenchmarkSettings,
    fps_samples: Iterable[float],
    duration_sec: float,
) -> BenchmarkResult:
    """
    Summarize the fps observations collected during one phase.

    Observations are already fps values, so percentiles index the ascending
    list directly: ``p1 = sorted[floor(n * 0.01)]`` and
    ``p99 = sorted[floor(n * 0.99)]``. Non-finite observations are dropped and
    an empty phase yields zeros.
    """

    values = np.asarray([v for v in fps_samples if math.isfinite(v)], dtype=np.float64)
    duration = _finite_or_zero(duration_sec)

    if values.size == 0:
        return BenchmarkResult(
            preset_label=preset_label,
            settings_snapshot=settings,
            avg_fps=0.0,
            min_fps=0.0,
            max_fps=0.0,
            p1_fps=0.0,
            p99_fps=0.0,
            avg_frame_time_ms=0.0,
            duration_sec=max(duration, 0.0),
        )

    ordered = np.sort(values)
    n = ordered.size
    avg_fps = _finite_or_zero(ordered.mean())
    avg_frame_time = 1000.0 / avg_fps if avg_fps > 0 else 0.0

    return BenchmarkResult(
        preset_label=preset_label,
        settings_snapshot=settings,
        avg_fps=avg_fps,
        min_fps=float(ordered[0]),
        max_fps=float(ordered[-1]),
        p1_fps=float(ordered[math.floor(n * 0.01)]),
        p99_fps=float(ordered[math.floor(n * 0.99)]),
        avg_frame_time_ms=_finite_or_zero(avg_frame_time),
        duration_sec=max(duration, 0.0),
    )


def score_label(avg_fps: float) -> str:
    """Return the coarse rating shown next to a result."""

    if avg_fps >= 55:
        return "Excellent"
    if avg_fps >= 45:
        return "Good"
    if avg_fps >= 30:
        return "Fair"
    return "Poor"


def results_payload(results: Sequence[BenchmarkResult]) -> List[Dict[str, object]]:
    """Return the JSON-ready list written by result exports."""

    return [result.serialize() for result in results]
