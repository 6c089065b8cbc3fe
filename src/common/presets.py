"""
Named workload presets and the auto-ramp escalation table.

Presets never carry ``scene`` so applying one keeps whatever scene the
render collaborator is currently showing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Tuple

PRESETS: Dict[str, Mapping[str, Any]] = {
    "low": {
        "resolution": 0.5,
        "instance_count": 1000,
        "particle_count": 2000,
        "bloom": False,
        "dof": False,
        "shaders": False,
    },
    "medium": {
        "resolution": 0.75,
        "instance_count": 3000,
        "particle_count": 5000,
        "bloom": True,
        "dof": False,
        "shaders": True,
    },
    "high": {
        "resolution": 1.0,
        "instance_count": 5000,
        "particle_count": 10000,
        "bloom": True,
        "dof": False,
        "shaders": True,
    },
    "ultra": {
        "resolution": 1.0,
        "instance_count": 8000,
        "particle_count": 15000,
        "bloom": True,
        "dof": True,
        "shaders": True,
    },
}

# Stress tests walk the presets in this order.
CANONICAL_ORDER: Tuple[str, ...] = ("low", "medium", "high", "ultra")


@dataclass(frozen=True)
class RampStep:
    """One step of the auto-ramp escalation."""

    name: str
    duration_ms: float
    instance_count: int
    particle_count: int


AUTO_RAMP_STEPS: Tuple[RampStep, ...] = (
    RampStep("Warmup", 2000.0, 1000, 2000),
    RampStep("Ramp 1", 3000.0, 2500, 5000),
    RampStep("Ramp 2", 3000.0, 5000, 10000),
    RampStep("Ramp 3", 3000.0, 7500, 15000),
    RampStep("Max Load", 4000.0, 10000, 20000),
)


def get_preset(name: str) -> Mapping[str, Any]:
    """Return a copy of the settings patch for the named preset."""

    try:
        return dict(PRESETS[name])
    except KeyError as exc:
        available = ", ".join(CANONICAL_ORDER)
        raise KeyError(f"Unknown preset '{name}'. Available presets: {available}") from exc


def available_preset_names() -> Iterable[str]:
    return CANONICAL_ORDER
