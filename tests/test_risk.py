# ABOUTME: Tests the five risk scorers and the overall risk-level aggregation.
# ABOUTME: Constructs synthetic profiles to hit inclusion and level boundaries.

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.learner_model.engine import basic_profile
from src.learner_model.risk import (
    assess_burnout,
    assess_cognitive_overload,
    assess_risks,
    assess_stagnation,
    overall_risk_level,
)
from src.learner_model.schemas import (
    Impact,
    LearningRecord,
    RiskLevel,
    RiskType,
    SpecificRisk,
    User,
)

USER = User(user_id="u1")


def _mk_records(scores, minutes):
    start = datetime(2024, 3, 1, 10, 0)
    return [
        LearningRecord(start + timedelta(days=i), "数学", "代数", "基础", s, minutes * 60)
        for i, s in enumerate(scores)
    ]


def _risk(probability):
    return SpecificRisk(RiskType.STAGNATION, probability, Impact.MEDIUM, "", [], "")


def _with_load(load, memory=0.6):
    profile = basic_profile(USER)
    return replace(profile, cognitive=replace(profile.cognitive, cognitive_load=load, working_memory=memory))


@pytest.mark.parametrize(
    "scores, minutes, expected",
    [
        ([90] * 5 + [70] * 5, 160, 0.9),
        ([40] * 10, 160, 0.9),
        ([80] * 5 + [72] * 5, 130, 0.7),
        ([80] * 5 + [78] * 5, 100, 0.5),
        ([80] * 10, 100, 0.2),
        ([90] * 5 + [70] * 5, 30, 0.2),
    ],
)
def test_burnout_tiers(scores, minutes, expected):
    risk = assess_burnout(_mk_records(scores, minutes))
    assert risk.probability == expected
    assert risk.impact == (Impact.HIGH if expected > 0.7 else Impact.MEDIUM)
    assert risk.timeframe == "未来3-5天"


def test_cognitive_overload_ratio_and_zero_memory_guard():
    assert assess_cognitive_overload(_with_load(0.3, 0.6)).probability == pytest.approx(0.5)
    assert assess_cognitive_overload(_with_load(0.9, 0.3)).probability == 1.0
    assert assess_cognitive_overload(_with_load(0.4, 0.0)).probability == 1.0
    assert assess_cognitive_overload(_with_load(0.0, 0.0)).probability == 0.0


def test_stagnation_requires_flat_trend():
    profile = basic_profile(USER)
    stalled = replace(profile, performance=replace(profile.performance, improvement_rate=0.01))

    assert assess_stagnation(stalled, _mk_records([70, 70, 70], 30)).probability == 0.8
    assert assess_stagnation(stalled, _mk_records([60, 70, 80], 30)).probability == 0.3
    assert assess_stagnation(profile, _mk_records([70, 70, 70], 30)).probability == 0.3


@pytest.mark.parametrize(
    "probabilities, expected",
    [
        ([], RiskLevel.LOW),
        ([0.75], RiskLevel.MEDIUM),
        ([0.8], RiskLevel.MEDIUM),
        ([0.75, 0.81], RiskLevel.HIGH),
    ],
)
def test_overall_level_aggregation(probabilities, expected):
    assert overall_risk_level([_risk(p) for p in probabilities]) == expected


def test_overall_level_high_iff_included_risk_above_point_eight():
    high = assess_risks(_with_load(0.55), [])
    medium = assess_risks(_with_load(0.45), [])
    low = assess_risks(_with_load(0.2), [])

    assert high.overall_level == RiskLevel.HIGH
    assert any(r.probability > 0.8 for r in high.risks)
    assert medium.overall_level == RiskLevel.MEDIUM
    assert all(r.probability <= 0.8 for r in medium.risks)
    assert low.overall_level == RiskLevel.LOW
    assert low.risks == []


def test_assess_risks_reports_all_factors_and_signals():
    assessment = assess_risks(_with_load(0.55), [])

    assert set(assessment.risk_factors) == {t.value for t in RiskType}
    assert [r.type for r in assessment.risks] == [RiskType.COGNITIVE_OVERLOAD]
    assert assessment.warnings == ["学习效率明显下降"]
    assert assessment.preventive_actions == ["降低学习难度，分解学习任务"]
    assert assessment.critical_points == ["未来3-5天内需要关注", "需要立即干预"]


def test_long_struggling_sessions_raise_burnout_and_overload():
    from src.learner_model.engine import build_learner_profile

    records = _mk_records([30] * 10, 200)
    assessment = assess_risks(build_learner_profile(USER, records), records)
    by_type = {r.type: r for r in assessment.risks}

    assert by_type[RiskType.BURNOUT].probability > 0.7
    assert by_type[RiskType.COGNITIVE_OVERLOAD].probability > 0.7
    assert assessment.overall_level == RiskLevel.HIGH
