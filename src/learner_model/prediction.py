# ABOUTME: Projects short-term performance from the recent score trend and learner profile.
# ABOUTME: Also scores prediction confidence and picks the key factors behind it.

from __future__ import annotations

from typing import Dict, List, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .metrics import clamp, mean, std_dev, trend_slope
from .risk import RISK_LABELS
from .schemas import (
    KnowledgeMap,
    LearnerProfile,
    LearningRecord,
    MotivationTrend,
    PerformancePrediction,
    RiskAssessment,
)

EMPTY_WINDOW_SPREAD = 10.0
PROFILE_COMPLETENESS = 0.8
KEY_FACTOR_RISK = 0.6
MAX_KEY_FACTORS = 5


def improvement_probability(slope: float, intrinsic: float, consistency: float) -> float:
    if slope > 1:
        base = 0.8
    elif slope > 0:
        base = 0.6
    elif slope > -1:
        base = 0.4
    else:
        base = 0.2
    return clamp(base + 0.2 * intrinsic + 0.1 * consistency)


def motivation_trend(profile: LearnerProfile) -> MotivationTrend:
    drive = (profile.motivation.intrinsic + profile.motivation.persistence) / 2.0
    rate = profile.performance.improvement_rate
    if drive > 0.7 and rate > 0.1:
        return MotivationTrend.RISING
    if drive < 0.4 or rate < -0.1:
        return MotivationTrend.DECLINING
    return MotivationTrend.STABLE


def optimal_path(knowledge_map: KnowledgeMap, predicted_load: float) -> List[str]:
    """Consolidate strengths first when load is high, then weaknesses, then new targets."""

    path: List[str] = []
    if predicted_load > 0.7:
        path += knowledge_map.strengths[:2]
    path += knowledge_map.weaknesses[:2]
    path += knowledge_map.next_targets[:2]
    return list(dict.fromkeys(path))


def predict_performance(
    profile: LearnerProfile,
    records: Sequence[LearningRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> PerformancePrediction:
    recent = [float(r.score) for r in list(records)[-config.recent_window:]]
    slope = trend_slope(recent)

    expected = clamp(mean(recent) + slope * config.prediction_window_days, 0.0, 100.0)
    spread = std_dev(recent) if recent else EMPTY_WINDOW_SPREAD
    score_range = (clamp(expected - spread, 0.0, 100.0), clamp(expected + spread, 0.0, 100.0))

    performance = profile.performance
    cognitive = profile.cognitive

    mastery_by_subject: Dict[str, float] = {
        subject: clamp(mastery.overall_mastery + performance.improvement_rate * config.prediction_window_days)
        for subject, mastery in profile.knowledge_map.subject_mastery.items()
    }

    efficiency = clamp(((cognitive.processing_speed + cognitive.working_memory) / 2.0 + performance.consistency) / 2.0)
    predicted_load = clamp(
        cognitive.cognitive_load + (100.0 - expected) / 100.0 * 0.2 + (1.0 - efficiency) * 0.1
    )

    return PerformancePrediction(
        expected_score=expected,
        score_range=score_range,
        improvement_probability=improvement_probability(slope, profile.motivation.intrinsic, performance.consistency),
        mastery_by_subject=mastery_by_subject,
        learning_efficiency=efficiency,
        motivation_trend=motivation_trend(profile),
        cognitive_load_prediction=predicted_load,
        optimal_path=optimal_path(profile.knowledge_map, predicted_load),
    )


def prediction_confidence(record_count: int, profile: LearnerProfile, config: EngineConfig = DEFAULT_CONFIG) -> float:
    data_quality = min(1.0, record_count / float(config.confidence_full_history))
    return clamp(data_quality * 0.4 + profile.performance.consistency * 0.3 + PROFILE_COMPLETENESS * 0.3)


def key_factors(profile: LearnerProfile, risk: RiskAssessment) -> List[str]:
    factors = [f"学习风格: {profile.learning_style.primary_style.value}"]
    if profile.cognitive.cognitive_load > 0.7:
        factors.append("认知负荷较高")
    if profile.motivation.intrinsic > 0.7:
        factors.append("内在动机强")
    if profile.performance.consistency > 0.8:
        factors.append("表现稳定")
    for specific in risk.risks:
        if specific.probability > KEY_FACTOR_RISK:
            factors.append(f"{RISK_LABELS[specific.type]}风险")
    return factors[:MAX_KEY_FACTORS]
