# ABOUTME: Guards the record boundary: validates, orders and tabulates practice history.
# ABOUTME: Converts between LearningRecord rows and pandas frames for grouped features.

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timezone
from numbers import Integral, Real
from typing import Iterable, List, Optional, Tuple

import pandas as pd
from loguru import logger

from .schemas import LearningRecord

RECORD_COLUMNS = ["timestamp", "subject", "topic", "difficulty", "score", "duration_seconds"]

TIME_BUCKETS = ("早晨", "下午", "晚上")


def is_valid_record(record: LearningRecord) -> bool:
    """True when score lies in [0, 100] and duration is a non-negative integer."""

    if not isinstance(record.timestamp, datetime) or pd.isna(record.timestamp):
        return False
    score = record.score
    if isinstance(score, bool) or not isinstance(score, Real):
        return False
    if not math.isfinite(float(score)) or not 0.0 <= float(score) <= 100.0:
        return False
    duration = record.duration_seconds
    if isinstance(duration, bool) or not isinstance(duration, Integral):
        return False
    return int(duration) >= 0


def sanitize_records(history: Iterable[LearningRecord]) -> Tuple[List[LearningRecord], int]:
    """
    Drop malformed records and return the rest in chronological order.

    Ties on timestamp keep their input order. Returns ``(records, skipped)``.
    Passing ``None`` or anything other than LearningRecord rows is a caller bug
    and raises ``TypeError``.
    """

    if history is None:
        raise TypeError("history must be a sequence of LearningRecord, got None.")
    if isinstance(history, (str, bytes)):
        raise TypeError("history must be a sequence of LearningRecord, got a string.")

    valid: List[LearningRecord] = []
    skipped = 0
    for record in history:
        if not isinstance(record, LearningRecord):
            raise TypeError(f"Expected LearningRecord, got {type(record).__name__}.")
        if is_valid_record(record):
            valid.append(record)
        else:
            skipped += 1

    if skipped:
        logger.warning("Skipped {} malformed learning records", skipped)

    # Naive and aware timestamps cannot be compared; naive ones are read as UTC.
    if any(_is_aware(r.timestamp) for r in valid) and not all(_is_aware(r.timestamp) for r in valid):
        valid = [
            r if _is_aware(r.timestamp) else replace(r, timestamp=r.timestamp.replace(tzinfo=timezone.utc))
            for r in valid
        ]

    # sorted() is stable, so duplicates and same-timestamp rows keep input order.
    return sorted(valid, key=lambda r: r.timestamp), skipped


def _is_aware(ts: datetime) -> bool:
    return ts.tzinfo is not None and ts.utcoffset() is not None


def records_frame(records: Iterable[LearningRecord]) -> pd.DataFrame:
    """Tabulate already-sanitized records, keeping a ``position`` column for ordering."""

    rows = [
        {
            "timestamp": r.timestamp,
            "subject": r.subject,
            "topic": r.topic,
            "difficulty": r.difficulty,
            "score": float(r.score),
            "duration_seconds": int(r.duration_seconds),
        }
        for r in records
    ]
    if not rows:
        return pd.DataFrame(columns=RECORD_COLUMNS + ["position"])

    df = pd.DataFrame(rows)
    df["position"] = range(len(df))
    return df


def records_from_frame(frame: pd.DataFrame, user_id: Optional[str] = None) -> List[LearningRecord]:
    """
    Build LearningRecord rows from a table with the canonical columns.

    Values are passed through as-is where they cannot be coerced so that the
    engine's validation step counts them as skipped rather than failing here.
    """

    missing = [c for c in RECORD_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"Records table is missing columns: {', '.join(missing)}")

    df = frame
    if user_id is not None:
        if "user_id" not in df.columns:
            raise ValueError("Records table has no user_id column to filter on.")
        df = df[df["user_id"].astype(str) == str(user_id)]

    records: List[LearningRecord] = []
    for _, row in df.iterrows():
        records.append(
            LearningRecord(
                timestamp=_parse_timestamp(row["timestamp"]),
                subject=str(row["subject"]),
                topic=str(row["topic"]),
                difficulty=str(row["difficulty"]),
                score=_coerce_score(row["score"]),
                duration_seconds=_coerce_duration(row["duration_seconds"]),
            )
        )
    return records


def time_of_day_bucket(ts: datetime) -> str:
    hour = ts.hour
    if 5 <= hour < 12:
        return TIME_BUCKETS[0]
    if 12 <= hour < 18:
        return TIME_BUCKETS[1]
    return TIME_BUCKETS[2]


def _parse_timestamp(value) -> Optional[datetime]:
    """Offsets are kept so time-of-day buckets follow local time; naive values are read as UTC."""

    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.to_pydatetime()


def _coerce_score(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def _coerce_duration(value):
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real) and math.isfinite(float(value)) and float(value).is_integer():
        return int(value)
    return value
