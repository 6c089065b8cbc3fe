"""Tests for src.common.results."""
from __future__ import annotations

import json
import math

import pytest

from src.common.config import BenchmarkSettings
from src.common.results import BenchmarkResult, aggregate_phase, results_payload, score_label

SETTINGS = BenchmarkSettings(scene="trippy", instance_count=1000)


# ── aggregate_phase ─────────────────────────────────────────────────────────

def test_empty_phase_yields_zeros():
    result = aggregate_phase("low", SETTINGS, [], 5.0)
    assert result.avg_fps == 0.0
    assert result.min_fps == result.max_fps == 0.0
    assert result.p1_fps == result.p99_fps == 0.0
    assert result.avg_frame_time_ms == 0.0
    assert result.duration_sec == 5.0


def test_basic_statistics():
    result = aggregate_phase("medium", SETTINGS, [90.0, 30.0, 60.0], 2.5)
    assert result.preset_label == "medium"
    assert result.settings_snapshot is SETTINGS
    assert result.avg_fps == pytest.approx(60.0)
    assert result.min_fps == 30.0
    assert result.max_fps == 90.0
    assert result.p1_fps == 30.0
    assert result.p99_fps == 90.0
    assert result.avg_frame_time_ms == pytest.approx(1000.0 / 60.0)


def test_percentile_indices_on_larger_phase():
    samples = [float(v) for v in range(200, 0, -1)]
    result = aggregate_phase("high", SETTINGS, samples, 10.0)
    assert result.p1_fps == 3.0
    assert result.p99_fps == 199.0
    assert result.p1_fps <= result.avg_fps <= result.p99_fps


def test_non_finite_observations_are_dropped():
    result = aggregate_phase("ultra", SETTINGS, [float("nan"), 40.0, float("inf")], 1.0)
    assert result.avg_fps == 40.0
    assert result.max_fps == 40.0


def test_only_non_finite_observations_yield_zeros():
    result = aggregate_phase("ultra", SETTINGS, [float("nan")], float("nan"))
    values = [v for k, v in result.serialize().items() if k not in ("presetLabel", "settingsSnapshot")]
    assert all(math.isfinite(v) and v == 0.0 for v in values)


def test_negative_duration_clamped():
    assert aggregate_phase("low", SETTINGS, [60.0], -1.0).duration_sec == 0.0


# ── Serialization ───────────────────────────────────────────────────────────

def test_serialize_uses_exact_field_names():
    result = aggregate_phase("low", SETTINGS, [60.0], 1.0)
    assert set(result.serialize()) == {
        "presetLabel",
        "settingsSnapshot",
        "avgFps",
        "minFps",
        "maxFps",
        "p1Fps",
        "p99Fps",
        "avgFrameTimeMs",
        "durationSec",
    }


def test_payload_is_json_serializable_and_reloadable():
    results = [aggregate_phase("low", SETTINGS, [55.0, 65.0], 1.0), aggregate_phase("high", SETTINGS, [], 1.0)]
    text = json.dumps(results_payload(results))
    reloaded = [BenchmarkResult.from_dict(entry) for entry in json.loads(text)]
    assert reloaded == results


def test_result_is_immutable():
    result = aggregate_phase("low", SETTINGS, [60.0], 1.0)
    with pytest.raises(AttributeError):
        result.avg_fps = 1.0  # type: ignore[misc]


# ── score_label ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "fps, label",
    [(60.0, "Excellent"), (55.0, "Excellent"), (50.0, "Good"), (30.0, "Fair"), (29.9, "Poor"), (0.0, "Poor")],
)
def test_score_label(fps, label):
    assert score_label(fps) == label
