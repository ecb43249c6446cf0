# ABOUTME: Tests intervention templating, priority ordering and the in-session trigger.
# ABOUTME: Covers each real-time rule plus malformed and short-history sessions.

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.learner_model.engine import basic_profile, build_learner_profile
from src.learner_model.interventions import check_real_time_intervention, recommend_interventions
from src.learner_model.prediction import predict_performance
from src.learner_model.risk import assess_risks
from src.learner_model.schemas import (
    InterventionType,
    LearningRecord,
    LearningStyle,
    Priority,
    RiskLevel,
    User,
)

START = datetime(2024, 3, 1, 10, 0)


def _rec(i, score, duration=600):
    return LearningRecord(START + timedelta(hours=i), "数学", "代数", "基础", score, duration)


def _plan(records, user=User(user_id="u1")):
    profile = build_learner_profile(user, records)
    performance = predict_performance(profile, records)
    risk = assess_risks(profile, records)
    return profile, performance, risk


def test_low_risk_learner_gets_style_and_maintain_plans():
    records = [_rec(24 * i, s, 90) for i, s in enumerate([50, 55, 60, 65, 70, 75, 80, 82, 85, 88])]
    profile, performance, risk = _plan(records)
    plans = recommend_interventions(profile, performance, risk)

    assert risk.overall_level == RiskLevel.LOW
    assert [p.target_area for p in plans] == ["学习工具", "持续优化"]
    assert plans[0].type == InterventionType.LONG_TERM
    assert plans[1].type == InterventionType.PREVENTIVE


def test_high_risk_plans_sorted_by_priority():
    records = [_rec(24 * i, 30, 200 * 60) for i in range(10)]
    profile, performance, risk = _plan(records)
    plans = recommend_interventions(profile, performance, risk)
    weights = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

    assert plans[0].type == InterventionType.IMMEDIATE
    assert plans[0].target_area == "心理健康"
    assert [weights[p.priority] for p in plans] == sorted((weights[p.priority] for p in plans), reverse=True)
    assert all(p.target_area != "持续优化" for p in plans)


def test_low_improvement_probability_adds_method_plan():
    records = [_rec(24 * i, s, 600) for i, s in enumerate([90, 80, 70, 60, 50])]
    profile, performance, risk = _plan(records)
    plans = recommend_interventions(profile, performance, risk)

    assert performance.improvement_probability < 0.5
    assert "学习方法" in [p.target_area for p in plans]


def test_style_plan_follows_primary_style():
    profile, performance, risk = _plan([_rec(0, 90, 40), _rec(1, 91, 40), _rec(2, 90, 40)])
    assert profile.learning_style.primary_style == LearningStyle.VISUAL
    plans = recommend_interventions(profile, performance, risk)
    style_plan = next(p for p in plans if p.target_area == "学习工具")
    assert "使用思维导图工具" in style_plan.actions


def test_plans_do_not_share_template_lists():
    profile, performance, risk = _plan([_rec(0, 80)])
    first = recommend_interventions(profile, performance, risk)
    first[0].actions.append("mutated")
    second = recommend_interventions(profile, performance, risk)
    assert "mutated" not in second[0].actions


def test_maintain_plan_only_for_low_risk():
    profile = basic_profile(User(user_id="u1", declared_style="reading"))
    _, performance, risk = _plan([_rec(0, 80)])
    low_risk = replace(risk, overall_level=RiskLevel.LOW, risks=[])
    plans = recommend_interventions(profile, performance, low_risk)

    assert [p.target_area for p in plans] == ["学习工具", "持续优化"]
    assert "坚持整理学习笔记" in plans[0].actions


def test_real_time_learning_difficulty():
    history = [_rec(0, 40), _rec(1, 30), _rec(2, 45)]
    rec = check_real_time_intervention(_rec(3, 35), history)

    assert rec is not None
    assert rec.type == InterventionType.IMMEDIATE
    assert rec.priority == Priority.HIGH
    assert rec.target_area == "学习困难"


def test_real_time_fatigue():
    rec = check_real_time_intervention(_rec(3, 80, 7300), [_rec(0, 80)])
    assert rec is not None
    assert rec.target_area == "疲劳管理"
    assert rec.priority == Priority.MEDIUM


def test_real_time_rushing_needs_three_prior_sessions():
    rushed = [_rec(0, 70, 10), _rec(1, 60, 20), _rec(2, 65, 25)]
    rec = check_real_time_intervention(_rec(3, 50, 15), rushed)
    assert rec is not None
    assert rec.target_area == "学习态度"

    assert check_real_time_intervention(_rec(3, 50, 15), rushed[1:]) is None


def test_real_time_first_match_wins():
    history = [_rec(0, 20, 10), _rec(1, 30, 10), _rec(2, 10, 10)]
    rec = check_real_time_intervention(_rec(3, 20, 8000), history)
    assert rec.target_area == "学习困难"


def test_real_time_no_trigger():
    history = [_rec(0, 80), _rec(1, 85), _rec(2, 90)]
    assert check_real_time_intervention(_rec(3, 88), history) is None


def test_real_time_skips_malformed_history_and_session():
    history = [_rec(0, 40), _rec(1, 150), _rec(2, 30), _rec(3, 45)]
    assert check_real_time_intervention(_rec(4, 35), history).target_area == "学习困难"
    assert check_real_time_intervention(_rec(4, 120), history) is None


def test_real_time_requires_session():
    with pytest.raises(TypeError):
        check_real_time_intervention(None, [])
    with pytest.raises(TypeError):
        check_real_time_intervention(_rec(0, 50), None)
