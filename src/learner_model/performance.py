# ABOUTME: Summarises how a learner performs over time: consistency, growth and retention.
# ABOUTME: Also measures transfer across subjects and recovery after low-scoring sessions.

from __future__ import annotations

from typing import Dict, List, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .metrics import clamp, mean, median, std_dev
from .schemas import LearningRecord, PerformancePattern

DEFAULT_RETENTION = 0.7
DEFAULT_TRANSFER = 0.5
DEFAULT_RECOVERY = 0.8
DEFAULT_SESSION_MINUTES = 120
RECOVERY_GAIN = 10.0


def improvement_rate(scores: Sequence[float]) -> float:
    gains = [b - a for a, b in zip(scores, scores[1:]) if b > a]
    if not gains:
        return 0.0
    return mean(gains) / 100.0


def retention_rate(records: Sequence[LearningRecord]) -> float:
    by_topic: Dict[str, List[float]] = {}
    for r in records:
        by_topic.setdefault(r.topic, []).append(float(r.score))

    ratios = [
        min(1.0, scores[-1] / max(scores[0], 1.0))
        for scores in by_topic.values()
        if len(scores) >= 2
    ]
    if not ratios:
        return DEFAULT_RETENTION
    return mean(ratios)


def transfer_ability(records: Sequence[LearningRecord]) -> float:
    by_subject: Dict[str, List[float]] = {}
    for r in records:
        by_subject.setdefault(r.subject, []).append(float(r.score))
    if len(by_subject) < 2:
        return DEFAULT_TRANSFER
    return clamp(1.0 - std_dev([mean(s) for s in by_subject.values()]) / 100.0)


def error_recovery_rate(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> float:
    """
    Share of low-scoring sessions followed by a session at least ten points better.

    The follow-up is the first record with a strictly later timestamp; a low
    session with no later record counts as not recovered.
    """

    low_indices = [i for i, r in enumerate(records) if float(r.score) < config.low_score]
    if not low_indices:
        return DEFAULT_RECOVERY

    recovered = 0
    for i in low_indices:
        low = records[i]
        follow_up = next((r for r in records[i + 1:] if r.timestamp > low.timestamp), None)
        if follow_up is not None and float(follow_up.score) >= float(low.score) + RECOVERY_GAIN:
            recovered += 1
    return recovered / len(low_indices)


def optimal_session_length(records: Sequence[LearningRecord]) -> int:
    if not records:
        return DEFAULT_SESSION_MINUTES
    return int(round(median([float(r.duration_seconds) for r in records]) / 60.0))


def analyze_performance(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> PerformancePattern:
    scores = [float(r.score) for r in records]
    return PerformancePattern(
        consistency=clamp(1.0 - std_dev(scores) / 100.0),
        improvement_rate=clamp(improvement_rate(scores)),
        retention_rate=clamp(retention_rate(records)),
        transfer_ability=transfer_ability(records),
        error_recovery_rate=clamp(error_recovery_rate(records, config)),
        optimal_session_length_minutes=optimal_session_length(records),
    )
