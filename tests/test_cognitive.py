# ABOUTME: Tests cognitive profiling: memory, speed, attention, load and time-of-day patterns.
# ABOUTME: Uses small synthetic histories that hit each step threshold.

from datetime import datetime, timedelta

import pytest

from src.learner_model.cognitive import (
    analyze_cognitive,
    attention_span,
    cognitive_load,
    optimal_challenge,
    processing_speed,
    working_memory,
)
from src.learner_model.schemas import LearningRecord


def _mk_records(scores, duration=120, difficulty="基础", start=datetime(2024, 3, 1, 10, 0), step=timedelta(days=1)):
    return [
        LearningRecord(start + step * i, "数学", "代数", difficulty, s, duration)
        for i, s in enumerate(scores)
    ]


def test_working_memory_uses_hard_records_only():
    records = _mk_records([80], difficulty="高级") + _mk_records([60], difficulty="挑战") + _mk_records([10])
    assert working_memory(records) == pytest.approx(0.7)
    assert working_memory(_mk_records([90, 95])) == 0.6


@pytest.mark.parametrize("seconds, expected", [(59, 0.9), (60, 0.7), (119, 0.7), (150, 0.5), (180, 0.3)])
def test_processing_speed_steps(seconds, expected):
    assert processing_speed(seconds) == expected


@pytest.mark.parametrize("seconds, expected", [(181, 0.9), (150, 0.7), (90, 0.5), (60, 0.3)])
def test_attention_span_steps(seconds, expected):
    assert attention_span(seconds) == expected


def test_cognitive_load_short_history_is_neutral():
    assert cognitive_load(_mk_records([90])) == 0.5
    assert cognitive_load(_mk_records([90, 40])) == 0.5


def test_cognitive_load_from_score_decline():
    assert cognitive_load(_mk_records([90, 90, 50, 50])) == pytest.approx(0.4)
    assert cognitive_load(_mk_records([50, 50, 90, 90])) == 0.0


def test_cognitive_load_uses_recent_window_only():
    # An early collapse outside the last ten sessions no longer counts.
    records = _mk_records([100, 100, 100, 10, 10] + [70] * 10)
    assert cognitive_load(records) == 0.0


def test_cognitive_load_long_sessions_add_strain():
    records = _mk_records([30] * 10, duration=200 * 60)
    assert cognitive_load(records) == pytest.approx(0.7)


def test_optimal_challenge_tiers():
    assert optimal_challenge(_mk_records([75], difficulty="挑战")) == 0.9
    assert optimal_challenge(_mk_records([80], difficulty="高级")) == 0.8
    assert optimal_challenge(_mk_records([85], difficulty="中级")) == 0.6
    assert optimal_challenge(_mk_records([100])) == 0.4


def test_fatigue_pattern_and_peak_times():
    start = datetime(2024, 3, 1, 8, 0)
    records = [
        LearningRecord(start, "数学", "代数", "基础", 80, 120),
        LearningRecord(start + timedelta(hours=6), "数学", "代数", "基础", 60, 120),
        LearningRecord(start + timedelta(hours=12), "数学", "代数", "基础", 80, 120),
    ]
    profile = analyze_cognitive(records)

    assert [m.time_range for m in profile.fatigue_pattern] == ["早晨", "下午", "晚上"]
    assert [m.value for m in profile.fatigue_pattern] == pytest.approx([0.2, 0.4, 0.2])
    assert profile.peak_times == ["早晨", "晚上"]


def test_fatigue_pattern_skips_empty_buckets():
    records = _mk_records([70, 90], start=datetime(2024, 3, 1, 14, 0))
    profile = analyze_cognitive(records)

    assert [m.time_range for m in profile.fatigue_pattern] == ["下午"]
    assert profile.peak_times == ["下午"]
