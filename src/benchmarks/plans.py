"""
Static phase plans for each benchmark mode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from src.common import presets
from src.common.config import HarnessConfig

Plan = Tuple["Phase", ...]


@dataclass(frozen=True)
class Phase:
    """A timed segment of a run with a fixed settings patch."""

    name: str
    duration_ms: float
    settings_patch: Mapping[str, Any] = field(default_factory=dict)
    preset: Optional[str] = None

    def __post_init__(self) -> None:
        if self.duration_ms <= 0:
            raise ValueError(f"Phase '{self.name}' needs a positive duration, got {self.duration_ms}")
        object.__setattr__(self, "settings_patch", MappingProxyType(dict(self.settings_patch)))


def fixed_preset_plan(preset: str, duration_ms: float) -> Plan:
    patch = presets.get_preset(preset)
    return (Phase(f"Running {preset.upper()} preset", duration_ms, patch, preset=preset),)


def stress_test_plan(cfg: HarnessConfig) -> Plan:
    return tuple(
        Phase(f"Testing {name.upper()}", cfg.stress_phase_duration_ms, presets.get_preset(name), preset=name)
        for name in presets.CANONICAL_ORDER
    )


def auto_ramp_plan() -> Plan:
    return tuple(
        Phase(
            step.name,
            step.duration_ms,
            {"instance_count": step.instance_count, "particle_count": step.particle_count},
        )
        for step in presets.AUTO_RAMP_STEPS
    )


def total_duration_ms(plan: Plan) -> float:
    return sum(phase.duration_ms for phase in plan)
