# ABOUTME: Scores intrinsic and extrinsic motivation from session frequency and progress.
# ABOUTME: Measures persistence as returning within a day after a low-scoring session.

from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .metrics import clamp, mean, std_dev
from .schemas import Difficulty, GoalOrientation, LearningRecord, MotivationProfile

SECONDS_PER_DAY = 86400.0
DEFAULT_PERSISTENCE = 0.7
RETURN_WINDOW = timedelta(hours=24)


def session_frequency(records: Sequence[LearningRecord]) -> float:
    """Sessions per day over the observed span, with spans under a day counted as one."""

    if not records:
        return 0.0
    span = (records[-1].timestamp - records[0].timestamp).total_seconds() / SECONDS_PER_DAY
    return len(records) / max(span, 1.0)


def score_improvement(records: Sequence[LearningRecord]) -> float:
    if len(records) < 2:
        return 0.0
    scores = [float(r.score) for r in records]
    return mean(scores[-5:]) - mean(scores[:5])


def persistence(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> float:
    low_sessions = [r for r in records if float(r.score) < config.low_score]
    if not low_sessions:
        return DEFAULT_PERSISTENCE

    returned = 0
    for low in low_sessions:
        deadline = low.timestamp + RETURN_WINDOW
        if any(low.timestamp < r.timestamp <= deadline for r in records):
            returned += 1
    return returned / len(low_sessions)


def analyze_motivation(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> MotivationProfile:
    scores = [float(r.score) for r in records]
    hard = sum(1 for r in records if r.difficulty in (Difficulty.ADVANCED.value, Difficulty.CHALLENGE.value))

    intrinsic = clamp(session_frequency(records) / 7.0)
    extrinsic = clamp(score_improvement(records) / 20.0)

    return MotivationProfile(
        intrinsic=intrinsic,
        extrinsic=extrinsic,
        goal_orientation=GoalOrientation.MASTERY if intrinsic > extrinsic else GoalOrientation.PERFORMANCE,
        persistence=clamp(persistence(records, config)),
        challenge_preference=clamp(hard / len(records)) if records else 0.0,
        feedback_sensitivity=clamp(std_dev(scores) / 50.0),
    )
