# ABOUTME: Infers a learning-style profile from response-time and score distributions.
# ABOUTME: Applies first-match classification rules and records the evidence used.

from __future__ import annotations

from typing import List, Sequence

from .metrics import clamp, mean, std_dev
from .schemas import (
    LearningPace,
    LearningRecord,
    LearningStyle,
    LearningStyleProfile,
    ProcessingPreference,
    ThinkingStyle,
)

SECONDARY_STYLE = {
    LearningStyle.VISUAL: LearningStyle.READ_WRITE,
    LearningStyle.AUDITORY: LearningStyle.VISUAL,
    LearningStyle.READ_WRITE: LearningStyle.AUDITORY,
    LearningStyle.KINESTHETIC: LearningStyle.VISUAL,
}


def classify_primary_style(
    avg_response_time: float,
    response_variability: float,
    avg_score: float,
    score_consistency: float,
) -> LearningStyle:
    if avg_response_time < 60 and score_consistency > 0.8:
        return LearningStyle.VISUAL
    if avg_response_time > 120 and avg_score > 80:
        return LearningStyle.READ_WRITE
    if response_variability > 30 and avg_score > 75:
        return LearningStyle.KINESTHETIC
    return LearningStyle.AUDITORY


def classify_pace(avg_response_time: float) -> LearningPace:
    if avg_response_time < 60:
        return LearningPace.FAST
    if avg_response_time > 150:
        return LearningPace.REFLECTIVE
    return LearningPace.STEADY


def analyze_learning_style(records: Sequence[LearningRecord]) -> LearningStyleProfile:
    """
    Classify the learner from session durations (seconds) and scores.

    ``records`` must be non-empty and already sanitized; the empty case is
    served by the neutral default profile.
    """

    durations = [float(r.duration_seconds) for r in records]
    scores = [float(r.score) for r in records]

    avg_response_time = mean(durations)
    response_variability = std_dev(durations)
    avg_score = mean(scores)
    score_consistency = 1.0 - std_dev(scores) / 100.0

    primary = classify_primary_style(avg_response_time, response_variability, avg_score, score_consistency)

    evidence: List[str] = [
        f"基于{len(records)}次学习记录",
        f"平均响应时间: {int(avg_response_time)}秒",
        f"平均正确率: {int(avg_score)}%",
        f"表现一致性: {int(score_consistency * 100)}%",
    ]

    return LearningStyleProfile(
        primary_style=primary,
        secondary_style=SECONDARY_STYLE[primary],
        processing_preference=(
            ProcessingPreference.SEQUENTIAL if score_consistency > 0.7 else ProcessingPreference.GLOBAL
        ),
        thinking_style=ThinkingStyle.INTUITIVE if avg_response_time < 90 else ThinkingStyle.ANALYTICAL,
        pace=classify_pace(avg_response_time),
        confidence=clamp(min(score_consistency, avg_score / 100.0)),
        evidence=evidence,
    )
