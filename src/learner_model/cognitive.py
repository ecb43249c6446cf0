# ABOUTME: Estimates working memory, speed, attention and current cognitive load.
# ABOUTME: Buckets sessions by time of day to derive fatigue and peak-time patterns.

from __future__ import annotations

from typing import Dict, List, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .features import TIME_BUCKETS, time_of_day_bucket
from .metrics import clamp, mean
from .schemas import CognitiveProfile, Difficulty, LearningRecord, TimeBasedMetric

HARD_DIFFICULTIES = (Difficulty.ADVANCED.value, Difficulty.CHALLENGE.value)
DEFAULT_WORKING_MEMORY = 0.6
SHORT_HISTORY_LOAD = 0.5


def working_memory(records: Sequence[LearningRecord]) -> float:
    hard_scores = [float(r.score) for r in records if r.difficulty in HARD_DIFFICULTIES]
    if not hard_scores:
        return DEFAULT_WORKING_MEMORY
    return clamp(mean(hard_scores) / 100.0)


def processing_speed(avg_seconds: float) -> float:
    if avg_seconds < 60:
        return 0.9
    if avg_seconds < 120:
        return 0.7
    if avg_seconds < 180:
        return 0.5
    return 0.3


def attention_span(avg_seconds: float) -> float:
    if avg_seconds > 180:
        return 0.9
    if avg_seconds > 120:
        return 0.7
    if avg_seconds > 60:
        return 0.5
    return 0.3


def cognitive_load(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> float:
    """
    Load over the most recent window of sessions.

    Two signals, the larger wins:
    - decline: first half of the window outscoring the second half, per 100 points.
    - strain: when the window's sessions run past the long-session limit on
      average, the shortfall of the recent mean score from 100.

    Fewer than three sessions give a neutral 0.5.
    """

    recent = list(records)[-config.recent_window:]
    if len(recent) < 3:
        return SHORT_HISTORY_LOAD

    half = len(recent) // 2
    first = mean([float(r.score) for r in recent[:half]])
    second = mean([float(r.score) for r in recent[-half:]])
    decline = max(0.0, (first - second) / 100.0)

    strain = 0.0
    if mean([float(r.duration_seconds) for r in recent]) > config.long_session_seconds:
        strain = 1.0 - mean([float(r.score) for r in recent]) / 100.0

    return clamp(max(decline, strain))


def optimal_challenge(records: Sequence[LearningRecord]) -> float:
    by_difficulty: Dict[str, List[float]] = {}
    for r in records:
        by_difficulty.setdefault(r.difficulty, []).append(float(r.score))

    def avg(level: Difficulty) -> float:
        return mean(by_difficulty.get(level.value, []))

    if avg(Difficulty.CHALLENGE) > 70:
        return 0.9
    if avg(Difficulty.ADVANCED) > 75:
        return 0.8
    if avg(Difficulty.INTERMEDIATE) > 80:
        return 0.6
    return 0.4


def time_of_day_scores(records: Sequence[LearningRecord]) -> Dict[str, float]:
    """Mean score per time-of-day bucket, in fixed bucket order, skipping empty buckets."""

    grouped: Dict[str, List[float]] = {bucket: [] for bucket in TIME_BUCKETS}
    for r in records:
        grouped[time_of_day_bucket(r.timestamp)].append(float(r.score))
    return {bucket: mean(scores) for bucket, scores in grouped.items() if scores}


def analyze_cognitive(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> CognitiveProfile:
    avg_seconds = mean([float(r.duration_seconds) for r in records])
    bucket_scores = time_of_day_scores(records)

    fatigue_pattern = [
        TimeBasedMetric(time_range=bucket, value=clamp(1.0 - score / 100.0))
        for bucket, score in bucket_scores.items()
    ]
    best = max(bucket_scores.values()) if bucket_scores else None
    peak_times = [bucket for bucket, score in bucket_scores.items() if score == best]

    return CognitiveProfile(
        working_memory=working_memory(records),
        processing_speed=processing_speed(avg_seconds),
        attention_span=attention_span(avg_seconds),
        cognitive_load=cognitive_load(records, config),
        optimal_challenge=optimal_challenge(records),
        fatigue_pattern=fatigue_pattern,
        peak_times=peak_times,
    )
