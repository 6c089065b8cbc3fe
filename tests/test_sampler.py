"""Tests for src.common.sampler."""
from __future__ import annotations

import math

import numpy as np
import pytest

from src.common.sampler import MetricsSnapshot, RollingSampler


def _filled(deltas, **kwargs) -> RollingSampler:
    sampler = RollingSampler(**kwargs)
    for delta in deltas:
        sampler.record(delta)
    return sampler


# ── Window bookkeeping ──────────────────────────────────────────────────────

def test_window_never_exceeds_capacity():
    sampler = RollingSampler()
    for i in range(500):
        sampler.record(10.0 + (i % 7))
        assert len(sampler) <= 120
    assert len(sampler) == 120
    assert sampler.total_recorded == 500


def test_oldest_sample_evicted_first():
    sampler = _filled([1.0, 2.0, 3.0, 4.0, 5.0], capacity=3)
    assert sampler.window().tolist() == [3.0, 4.0, 5.0]


def test_window_order_before_wraparound():
    sampler = _filled([4.0, 2.0], capacity=5)
    assert sampler.window().tolist() == [4.0, 2.0]


def test_negative_and_nan_deltas_clamped_to_zero():
    sampler = _filled([-5.0, float("nan"), float("inf")])
    assert sampler.window().tolist() == [0.0, 0.0, 0.0]


def test_invalid_construction():
    with pytest.raises(ValueError):
        RollingSampler(capacity=0)
    with pytest.raises(ValueError):
        RollingSampler(recompute_every=0)


# ── Snapshot maths ──────────────────────────────────────────────────────────

def test_sixty_hz_frames_read_sixty_fps():
    sampler = _filled([16.667] * 60)
    snap = sampler.snapshot()
    assert snap.fps == pytest.approx(60.0, abs=0.1)
    assert snap.frame_time_ms == pytest.approx(16.667)


def test_fps_is_inverse_of_mean_frame_time():
    rng = np.random.default_rng(7)
    deltas = rng.uniform(5.0, 40.0, size=90)
    snap = _filled(deltas).snapshot()
    assert snap.fps == pytest.approx(1000.0 / deltas.mean())


def test_min_and_max_come_from_slowest_and_fastest_frames():
    snap = _filled([10.0, 20.0, 40.0]).snapshot()
    assert snap.min == pytest.approx(25.0)
    assert snap.max == pytest.approx(100.0)


def test_percentiles_use_worst_leaning_p1():
    deltas = list(range(1, 101))
    np.random.default_rng(3).shuffle(deltas)
    snap = _filled([float(d) for d in deltas]).snapshot()
    # ascending fps rank 1 is the second slowest frame (99 ms)
    assert snap.p1 == pytest.approx(1000.0 / 99.0)
    # ascending fps rank 99 is the fastest frame (1 ms)
    assert snap.p99 == pytest.approx(1000.0)
    assert snap.min <= snap.p1 <= snap.fps <= snap.p99 <= snap.max


def test_p1_never_above_p99():
    rng = np.random.default_rng(11)
    for size in (1, 2, 5, 50, 120):
        snap = _filled(rng.uniform(1.0, 100.0, size=size)).snapshot()
        assert snap.p1 <= snap.p99


def test_single_sample_snapshot():
    snap = _filled([20.0]).snapshot()
    assert snap.fps == pytest.approx(50.0)
    assert snap.p1 == snap.p99 == snap.min == snap.max == pytest.approx(50.0)


# ── Degenerate input ────────────────────────────────────────────────────────

def test_empty_window_is_all_zero():
    assert RollingSampler().snapshot() == MetricsSnapshot.zero()


def test_all_zero_deltas_are_all_zero():
    assert _filled([0.0] * 30).snapshot() == MetricsSnapshot.zero()


def test_zero_frame_mixed_in_ignored_by_extremes():
    snap = _filled([0.0, 20.0]).snapshot()
    assert snap.fps == pytest.approx(100.0)
    assert snap.min == snap.max == pytest.approx(50.0)
    assert all(math.isfinite(v) and v >= 0 for v in snap.as_dict().values())


def test_mixed_zero_frames_keep_percentiles_ordered():
    snap = _filled([0.0, 0.0] + [16.0] * 118).snapshot()
    assert snap.min <= snap.p1 <= snap.p99 <= snap.max
    assert snap.p99 == pytest.approx(62.5)
    assert snap.max == pytest.approx(62.5)


def test_clamped_negative_frames_keep_percentiles_ordered():
    snap = _filled([-3.0] * 5 + [10.0, 20.0, 40.0]).snapshot()
    assert snap.min == pytest.approx(25.0)
    assert snap.max == pytest.approx(100.0)
    assert snap.min <= snap.p1 <= snap.p99 <= snap.max


def test_reset_then_snapshot_is_zero():
    sampler = _filled([16.0] * 40)
    sampler.reset()
    assert len(sampler) == 0
    assert sampler.snapshot() == MetricsSnapshot.zero()
    assert sampler.latest == MetricsSnapshot.zero()
    assert sampler.total_recorded == 0


# ── Throttled display snapshot ──────────────────────────────────────────────

def test_latest_refreshes_every_ten_samples():
    sampler = RollingSampler()
    for _ in range(9):
        sampler.record(20.0)
    assert sampler.latest.fps == 0.0
    sampler.record(20.0)
    assert sampler.latest.fps == pytest.approx(50.0)

    for _ in range(9):
        sampler.record(10.0)
    assert sampler.latest.fps == pytest.approx(50.0)
    sampler.record(10.0)
    assert sampler.latest.fps == pytest.approx(1000.0 / 15.0)


def test_latest_cadence_restarts_after_reset():
    sampler = _filled([20.0] * 5)
    sampler.reset()
    for _ in range(9):
        sampler.record(20.0)
    assert sampler.latest.fps == 0.0
