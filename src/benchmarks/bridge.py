"""
Settings bridge between the scheduler and the live render collaborator.

The scheduler only ever sees the :py:class:`SettingsBridge` protocol. The
live implementation owns the current settings value and the rolling sampler
fed by the render loop.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from src.common.config import BenchmarkSettings
from src.common.sampler import RollingSampler


class SettingsBridge(Protocol):
    def get_current_settings(self) -> BenchmarkSettings: ...

    def apply_settings(self, patch: Mapping[str, Any]) -> None: ...

    def get_current_fps(self) -> float: ...

    def reset_metrics(self) -> None: ...


class LiveSettingsBridge:
    """
    Holds the live settings and sampler for one render collaborator.

    ``on_settings_change`` is called with the merged settings after every
    successful ``apply_settings``; exceptions it raises propagate to the
    caller and leave the previous settings in place.
    """

    def __init__(
        self,
        sampler: RollingSampler,
        settings: Optional[BenchmarkSettings] = None,
        on_settings_change: Optional[Callable[[BenchmarkSettings], None]] = None,
    ) -> None:
        self.sampler = sampler
        self._settings = settings or BenchmarkSettings()
        self._on_settings_change = on_settings_change

    def get_current_settings(self) -> BenchmarkSettings:
        return self._settings

    def apply_settings(self, patch: Mapping[str, Any]) -> None:
        updated = self._settings.merged(patch)
        if self._on_settings_change is not None:
            self._on_settings_change(updated)
        self._settings = updated

    def get_current_fps(self) -> float:
        return self.sampler.latest.fps

    def reset_metrics(self) -> None:
        self.sampler.reset()
