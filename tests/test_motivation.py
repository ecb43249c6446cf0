# ABOUTME: Tests motivation scoring from frequency, progress, persistence and difficulty mix.
# ABOUTME: Pins the 24-hour return window and the zero-span guard.

from datetime import datetime, timedelta

import pytest

from src.learner_model.motivation import analyze_motivation, persistence, session_frequency
from src.learner_model.schemas import GoalOrientation, LearningRecord

START = datetime(2024, 3, 1, 10, 0)


def _rec(offset, score, difficulty="基础"):
    return LearningRecord(START + offset, "数学", "代数", difficulty, score, 120)


def test_session_frequency_guards_short_spans():
    same_moment = [_rec(timedelta(0), 80) for _ in range(3)]
    assert session_frequency(same_moment) == 3.0

    daily = [_rec(timedelta(days=i), 80) for i in range(11)]
    assert session_frequency(daily) == pytest.approx(11 / 10)


def test_persistence_counts_return_within_a_day():
    on_time = [_rec(timedelta(0), 40), _rec(timedelta(hours=24), 70)]
    too_late = [_rec(timedelta(0), 40), _rec(timedelta(hours=25), 70)]

    assert persistence(on_time) == 1.0
    assert persistence(too_late) == 0.0


def test_persistence_defaults_without_low_sessions():
    assert persistence([_rec(timedelta(0), 90)]) == 0.7


def test_analyze_motivation_performance_oriented_improver():
    scores = [50, 55, 60, 65, 70, 75, 80, 82, 85, 88]
    records = [_rec(timedelta(days=i), s) for i, s in enumerate(scores)]
    profile = analyze_motivation(records)

    assert profile.intrinsic == pytest.approx((10 / 9) / 7)
    assert profile.extrinsic == 1.0
    assert profile.goal_orientation == GoalOrientation.PERFORMANCE
    assert profile.persistence == 1.0
    assert profile.challenge_preference == 0.0
    assert profile.feedback_sensitivity == pytest.approx((1558 / 10) ** 0.5 / 50)


def test_analyze_motivation_frequent_challenger_is_mastery_oriented():
    records = [_rec(timedelta(hours=2 * i), 80, difficulty="挑战") for i in range(8)]
    profile = analyze_motivation(records)

    assert profile.intrinsic == 1.0
    assert profile.extrinsic == 0.0
    assert profile.goal_orientation == GoalOrientation.MASTERY
    assert profile.challenge_preference == 1.0
    assert profile.feedback_sensitivity == 0.0
