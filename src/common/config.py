"""
Configuration objects and enums for the frame benchmark harness.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping

from . import scenes


class BenchmarkMode(str, Enum):
    """Supported benchmark run modes."""

    MANUAL = "manual"
    FIXED_PRESET = "fixed-preset"
    STRESS_TEST = "stress-test"
    AUTO_RAMP = "auto-ramp"

    @property
    def aggregates(self) -> bool:
        """Whether phases of this mode produce a ``BenchmarkResult``."""

        return self in (BenchmarkMode.FIXED_PRESET, BenchmarkMode.STRESS_TEST)


@dataclass(frozen=True)
class BenchmarkSettings:
    """Workload settings pushed into the render collaborator."""

    scene: str = scenes.DEFAULT_SCENE_NAME
    resolution: float = 1.0
    instance_count: int = 5000
    particle_count: int = 10000
    bloom: bool = True
    dof: bool = False
    shaders: bool = True

    def merged(self, patch: Mapping[str, Any]) -> "BenchmarkSettings":
        """Return a copy with ``patch`` applied; unspecified fields are kept."""

        known = {f.name for f in fields(self)}
        unknown = set(patch).difference(known)
        if unknown:
            raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        return replace(self, **dict(patch))

    def as_dict(self) -> dict:
        """Return a JSON-friendly representation of the settings."""

        return asdict(self)

    def effects_label(self) -> str:
        enabled = [name for name, on in (("Bloom", self.bloom), ("DOF", self.dof), ("Shaders", self.shaders)) if on]
        return ", ".join(enabled) or "None"

    def pretty(self) -> str:
        """Return a human readable representation suitable for logging."""

        lines = [
            f"  scene        : {self.scene}",
            f"  resolution   : {self.resolution * 100:.0f}%",
            f"  instances    : {self.instance_count}",
            f"  particles    : {self.particle_count}",
            f"  effects      : {self.effects_label()}",
        ]
        return "\n".join(["BenchmarkSettings("] + lines + [")"])


@dataclass(frozen=True)
class HarnessConfig:
    """Timing and sizing knobs for the sampler and the scheduler."""

    window_capacity: int = 120
    recompute_every: int = 10
    poll_interval_ms: float = 100.0
    fixed_preset_duration_ms: float = 10000.0
    stress_phase_duration_ms: float = 5000.0

    def __post_init__(self) -> None:
        if self.window_capacity <= 0:
            raise ValueError("window_capacity must be greater than zero")
        if self.recompute_every <= 0:
            raise ValueError("recompute_every must be greater than zero")
        if self.poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be greater than zero")

    def as_dict(self) -> dict:
        return asdict(self)

    def with_stress_phase_duration(self, duration_ms: float) -> "HarnessConfig":
        """Return a copy with an updated stress-test phase length."""

        return replace(self, stress_phase_duration_ms=duration_ms)
