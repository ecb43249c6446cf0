# ABOUTME: Tests record validation, ordering and frame conversion at the input boundary.
# ABOUTME: Ensures malformed rows are counted instead of raising.

from datetime import datetime, timezone

import pandas as pd

from src.learner_model.features import (
    is_valid_record,
    records_frame,
    records_from_frame,
    sanitize_records,
    time_of_day_bucket,
)
from src.learner_model.schemas import LearningRecord


def _rec(day, score=80, duration=60, topic="代数"):
    return LearningRecord(datetime(2024, 3, day, 10, 0), "数学", topic, "基础", score, duration)


def test_is_valid_record_bounds():
    assert is_valid_record(_rec(1, score=0, duration=0))
    assert is_valid_record(_rec(1, score=100))
    assert not is_valid_record(_rec(1, score=100.5))
    assert not is_valid_record(_rec(1, score=True))
    assert not is_valid_record(_rec(1, score=float("inf")))
    assert not is_valid_record(_rec(1, duration=-1))
    assert not is_valid_record(_rec(1, duration=1.5))
    assert not is_valid_record(_rec(1, score="80"))


def test_sanitize_records_sorts_stably_and_counts_skips():
    a, b, c = _rec(3, topic="a"), _rec(1, topic="b"), _rec(3, topic="c")
    records, skipped = sanitize_records([a, b, _rec(2, score=-3), c])

    assert [r.topic for r in records] == ["b", "a", "c"]
    assert skipped == 1


def test_records_frame_empty_has_columns():
    frame = records_frame([])
    assert frame.empty
    assert "score" in frame.columns and "position" in frame.columns


def test_records_from_frame_filters_user_and_passes_bad_values_through():
    frame = pd.DataFrame(
        {
            "user_id": ["u1", "u1", "u2", "u1"],
            "timestamp": ["2024-03-01T10:00:00", "2024-03-02T10:00:00", "2024-03-02T10:00:00", "not a date"],
            "subject": ["数学"] * 4,
            "topic": ["代数"] * 4,
            "difficulty": ["基础"] * 4,
            "score": [80, "oops", 70, 60],
            "duration_seconds": [60, 60, 60, 60],
        }
    )
    records = records_from_frame(frame, user_id="u1")

    assert len(records) == 3
    assert records[0].timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert records[0].score == 80.0
    assert records[1].score == "oops"
    assert records[2].timestamp is None

    valid, skipped = sanitize_records(records)
    assert len(valid) == 1
    assert skipped == 2


def test_time_of_day_bucket():
    assert time_of_day_bucket(datetime(2024, 3, 1, 5, 0)) == "早晨"
    assert time_of_day_bucket(datetime(2024, 3, 1, 12, 0)) == "下午"
    assert time_of_day_bucket(datetime(2024, 3, 1, 18, 0)) == "晚上"
    assert time_of_day_bucket(datetime(2024, 3, 1, 2, 0)) == "晚上"


def test_sanitize_records_orders_mixed_naive_and_aware_timestamps():
    aware = LearningRecord(datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc), "数学", "代数", "基础", 70, 60)
    naive = _rec(1, topic="naive")

    records, skipped = sanitize_records([aware, naive])

    assert skipped == 0
    assert [r.topic for r in records] == ["naive", "代数"]
    assert records[0].timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert naive.timestamp.tzinfo is None


def test_records_from_frame_keeps_local_offset_for_buckets():
    frame = pd.DataFrame(
        {
            "timestamp": ["2024-03-01T08:30:00+08:00"],
            "subject": ["数学"],
            "topic": ["代数"],
            "difficulty": ["基础"],
            "score": [80],
            "duration_seconds": [60],
        }
    )
    (record,) = records_from_frame(frame)

    assert record.timestamp.hour == 8
    assert record.timestamp == datetime(2024, 3, 1, 0, 30, tzinfo=timezone.utc)
    assert time_of_day_bucket(record.timestamp) == "早晨"
