# ABOUTME: Scores five named learning risks from a learner profile and recent history.
# ABOUTME: Keeps risks above the inclusion threshold and aggregates an overall level.

from __future__ import annotations

from typing import Dict, List, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .metrics import clamp, mean, trend_slope
from .schemas import (
    Impact,
    LearnerProfile,
    LearningRecord,
    RiskAssessment,
    RiskLevel,
    RiskType,
    SpecificRisk,
)

RISK_LABELS = {
    RiskType.BURNOUT: "学习倦怠",
    RiskType.FORGETTING: "知识遗忘",
    RiskType.MOTIVATION_DECLINE: "动机下降",
    RiskType.COGNITIVE_OVERLOAD: "认知过载",
    RiskType.STAGNATION: "学习停滞",
}

# Early-warning signal and preventive action added for each included risk.
RISK_SIGNALS = {
    RiskType.BURNOUT: ("学习时长过长且效果下降", "安排适当休息，调整学习强度"),
    RiskType.FORGETTING: ("长期未复习重要知识点", "安排系统性复习计划"),
    RiskType.MOTIVATION_DECLINE: ("学习频率和主动性下降", "调整学习目标，增加趣味性"),
    RiskType.COGNITIVE_OVERLOAD: ("学习效率明显下降", "降低学习难度，分解学习任务"),
    RiskType.STAGNATION: ("成绩长期无改善", "调整学习策略，寻找突破点"),
}


class BurnoutThresholds:
    SEVERE_MINUTES = 150
    HIGH_MINUTES = 120
    ELEVATED_MINUTES = 90
    SEVERE_DECLINE = 10
    HIGH_DECLINE = 5


STAGNATION_RATE = 0.05


def assess_burnout(records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> SpecificRisk:
    """
    Long sessions combined with falling scores over the recent window.

    Durations are compared in minutes. Decline is the mean of the first five
    recent scores minus the mean of the last five.
    """

    recent = list(records)[-config.recent_window:]
    scores = [float(r.score) for r in recent]
    avg_minutes = mean([float(r.duration_seconds) for r in recent]) / 60.0
    decline = mean(scores[:5]) - mean(scores[-5:]) if scores else 0.0
    recent_avg = mean(scores)

    if avg_minutes > BurnoutThresholds.SEVERE_MINUTES and (
        decline > BurnoutThresholds.SEVERE_DECLINE or recent_avg < config.struggle_score
    ):
        probability = 0.9
    elif avg_minutes > BurnoutThresholds.HIGH_MINUTES and decline > BurnoutThresholds.HIGH_DECLINE:
        probability = 0.7
    elif avg_minutes > BurnoutThresholds.ELEVATED_MINUTES and decline > 0:
        probability = 0.5
    else:
        probability = 0.2

    return SpecificRisk(
        type=RiskType.BURNOUT,
        probability=probability,
        impact=Impact.HIGH if probability > 0.7 else Impact.MEDIUM,
        timeframe="未来3-5天",
        indicators=["学习时长过长", "成绩下降", "效率降低"],
        strategy="调整学习强度，增加休息时间",
    )


def assess_forgetting(profile: LearnerProfile) -> SpecificRisk:
    return SpecificRisk(
        type=RiskType.FORGETTING,
        probability=clamp(1.0 - profile.performance.retention_rate),
        impact=Impact.MEDIUM,
        timeframe="未来1-2周",
        indicators=["长期未复习", "知识保持率低"],
        strategy="建立系统复习计划",
    )


def assess_motivation_decline(profile: LearnerProfile) -> SpecificRisk:
    motivation = profile.motivation
    return SpecificRisk(
        type=RiskType.MOTIVATION_DECLINE,
        probability=clamp(1.0 - (motivation.intrinsic + motivation.persistence) / 2.0),
        impact=Impact.HIGH,
        timeframe="未来1周",
        indicators=["学习频率下降", "主动性降低"],
        strategy="调整学习目标，增加激励机制",
    )


def assess_cognitive_overload(profile: LearnerProfile) -> SpecificRisk:
    load = profile.cognitive.cognitive_load
    capacity = profile.cognitive.working_memory
    if capacity > 0:
        probability = clamp(load / capacity)
    else:
        probability = 1.0 if load > 0 else 0.0

    return SpecificRisk(
        type=RiskType.COGNITIVE_OVERLOAD,
        probability=probability,
        impact=Impact.HIGH,
        timeframe="当前",
        indicators=["学习效率下降", "理解困难"],
        strategy="降低学习难度，分解学习任务",
    )


def assess_stagnation(profile: LearnerProfile, records: Sequence[LearningRecord], config: EngineConfig = DEFAULT_CONFIG) -> SpecificRisk:
    """A low improvement rate only counts as stagnation when recent scores are not rising."""

    recent_scores = [float(r.score) for r in list(records)[-config.recent_window:]]
    stalled = profile.performance.improvement_rate < STAGNATION_RATE and trend_slope(recent_scores) <= 0

    return SpecificRisk(
        type=RiskType.STAGNATION,
        probability=0.8 if stalled else 0.3,
        impact=Impact.MEDIUM,
        timeframe="未来2-3周",
        indicators=["成绩无改善", "学习方法单一"],
        strategy="调整学习策略，寻找新的突破点",
    )


def overall_risk_level(risks: Sequence[SpecificRisk], config: EngineConfig = DEFAULT_CONFIG) -> RiskLevel:
    if any(r.probability > config.high_risk_level for r in risks):
        return RiskLevel.HIGH
    if any(r.probability > config.medium_risk_level for r in risks):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def assess_risks(
    profile: LearnerProfile,
    records: Sequence[LearningRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> RiskAssessment:
    evaluated = [
        assess_burnout(records, config),
        assess_forgetting(profile),
        assess_motivation_decline(profile),
        assess_cognitive_overload(profile),
        assess_stagnation(profile, records, config),
    ]

    risk_factors: Dict[str, float] = {risk.type.value: risk.probability for risk in evaluated}
    included = [risk for risk in evaluated if risk.probability > config.risk_threshold]

    warnings: List[str] = []
    preventive_actions: List[str] = []
    for risk in included:
        warning, action = RISK_SIGNALS[risk.type]
        warnings.append(warning)
        preventive_actions.append(action)

    critical_points: List[str] = []
    if included:
        critical_points.append("未来3-5天内需要关注")
        if any(risk.probability > config.high_risk_level for risk in included):
            critical_points.append("需要立即干预")

    return RiskAssessment(
        overall_level=overall_risk_level(included, config),
        risks=included,
        warnings=warnings,
        preventive_actions=preventive_actions,
        risk_factors=risk_factors,
        critical_points=critical_points,
    )
