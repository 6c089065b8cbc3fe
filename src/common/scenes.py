"""
Scene registry for the frame benchmark harness.

Each scene associates a name with a short description and a relative cost
factor that the synthetic workload uses to scale its frame times.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable


@dataclass(frozen=True)
class SceneInfo:
    """Metadata describing an available benchmark scene."""

    name: str
    description: str
    cost_factor: float = 1.0


SCENES: Dict[str, SceneInfo] = {
    "trippy": SceneInfo(
        name="trippy",
        description="Full-screen shader tunnel with instanced geometry.",
        cost_factor=1.2,
    ),
    "solar-system": SceneInfo(
        name="solar-system",
        description="Orbiting planets with a particle asteroid belt.",
        cost_factor=0.9,
    ),
    "earth": SceneInfo(
        name="earth",
        description="Textured globe with atmosphere and cloud layers.",
        cost_factor=1.0,
    ),
    "star-wars-credits": SceneInfo(
        name="star-wars-credits",
        description="Perspective text crawl over a star field.",
        cost_factor=0.6,
    ),
    "minecraft": SceneInfo(
        name="minecraft",
        description="Procedural voxel terrain with instanced blocks.",
        cost_factor=1.4,
    ),
}

DEFAULT_SCENE_NAME = "earth"


def get_scene_info(name: str) -> SceneInfo:
    """Return the scene metadata for the given name."""

    try:
        return SCENES[name]
    except KeyError as exc:
        available = ", ".join(sorted(SCENES))
        raise KeyError(f"Unknown scene '{name}'. Available scenes: {available}") from exc


def available_scene_names() -> Iterable[str]:
    return SCENES.keys()


def list_scene_infos() -> Iterable[SceneInfo]:
    return SCENES.values()
