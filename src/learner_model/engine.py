# ABOUTME: Entry points that build learner profiles and short-term learning predictions.
# ABOUTME: Falls back to neutral defaults when a learner has no usable history.

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from loguru import logger

from .cognitive import analyze_cognitive
from .config import DEFAULT_CONFIG, EngineConfig
from .features import sanitize_records
from .interventions import new_learner_intervention, recommend_interventions
from .knowledge_map import build_knowledge_map
from .motivation import analyze_motivation
from .performance import analyze_performance
from .prediction import key_factors, predict_performance, prediction_confidence
from .risk import assess_risks
from .schemas import (
    CognitiveProfile,
    Difficulty,
    GoalOrientation,
    KnowledgeMap,
    LearnerProfile,
    LearningPace,
    LearningPrediction,
    LearningRecord,
    LearningStyle,
    LearningStyleProfile,
    MotivationProfile,
    MotivationTrend,
    PerformancePattern,
    PerformancePrediction,
    PersonalizationStrategy,
    ProcessingPreference,
    RiskAssessment,
    RiskLevel,
    ThinkingStyle,
    User,
    require_user_id,
)
from .strategy import synthesize_strategy
from .style import analyze_learning_style

PREDICTION_PERIOD = "短期"


def basic_profile(user: User, skipped_records: int = 0) -> LearnerProfile:
    """Neutral profile for a learner without usable history, seeded from registration hints."""

    user_id = require_user_id(user)
    return LearnerProfile(
        user_id=user_id,
        learning_style=LearningStyleProfile(
            primary_style=LearningStyle.parse(user.declared_style),
            secondary_style=LearningStyle.VISUAL,
            processing_preference=ProcessingPreference.SEQUENTIAL,
            thinking_style=ThinkingStyle.ANALYTICAL,
            pace=LearningPace.STEADY,
            confidence=0.5,
            evidence=["基于用户注册信息的初始设置"],
        ),
        knowledge_map=KnowledgeMap(
            subject_mastery={},
            concept_connections={},
            learning_sequence=[],
            strengths=[],
            weaknesses=[],
            next_targets=["基础数学", "基础物理", "基础语文"],
        ),
        cognitive=CognitiveProfile(
            working_memory=0.6,
            processing_speed=0.6,
            attention_span=0.6,
            cognitive_load=0.3,
            optimal_challenge=0.5,
            fatigue_pattern=[],
            peak_times=["早晨", "下午"],
        ),
        motivation=MotivationProfile(
            intrinsic=0.6,
            extrinsic=0.5,
            goal_orientation=GoalOrientation.MASTERY,
            persistence=0.6,
            challenge_preference=0.5,
            feedback_sensitivity=0.5,
        ),
        performance=PerformancePattern(
            consistency=0.6,
            improvement_rate=0.1,
            retention_rate=0.7,
            transfer_ability=0.5,
            error_recovery_rate=0.6,
            optimal_session_length_minutes=120,
        ),
        strategy=PersonalizationStrategy(
            recommended_difficulty=Difficulty.BASIC,
            optimal_question_types=["选择题", "填空题"],
            suggested_topics=["基础数学"],
            path_adjustments=["从基础开始，循序渐进"],
            motivational_strategies=["设置小目标，及时鼓励"],
            cognitive_supports=["提供充分指导和解释"],
            next_actions=["开始基础学习，建立信心"],
        ),
        record_count=0,
        skipped_records=skipped_records,
    )


def basic_prediction(
    user: User,
    now: Optional[datetime] = None,
    skipped_records: int = 0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LearningPrediction:
    """Neutral prediction for a learner without usable history; risk factors are scored on the basic profile."""

    user_id = require_user_id(user)
    baseline = assess_risks(basic_profile(user), [], config)
    return LearningPrediction(
        user_id=user_id,
        period=PREDICTION_PERIOD,
        performance=PerformancePrediction(
            expected_score=75.0,
            score_range=(65.0, 85.0),
            improvement_probability=0.6,
            mastery_by_subject={},
            learning_efficiency=0.6,
            motivation_trend=MotivationTrend.STABLE,
            cognitive_load_prediction=0.5,
            optimal_path=["基础数学", "基础物理"],
        ),
        risk=RiskAssessment(
            overall_level=RiskLevel.LOW,
            risks=[],
            warnings=[],
            preventive_actions=["保持当前学习节奏"],
            risk_factors=baseline.risk_factors,
            critical_points=[],
        ),
        interventions=[new_learner_intervention()],
        confidence=0.4,
        key_factors=["新用户", "基础设置"],
        generated_at=now or datetime.now(timezone.utc),
        skipped_records=skipped_records,
    )


def _profile_from_records(
    user: User,
    records: List[LearningRecord],
    skipped: int,
    config: EngineConfig,
) -> LearnerProfile:
    if not records:
        logger.warning("No usable history for user {}; using the basic profile", user.user_id)
        return basic_profile(user, skipped_records=skipped)

    learning_style = analyze_learning_style(records)
    knowledge_map = build_knowledge_map(records)
    cognitive = analyze_cognitive(records, config)
    motivation = analyze_motivation(records, config)

    return LearnerProfile(
        user_id=user.user_id,
        learning_style=learning_style,
        knowledge_map=knowledge_map,
        cognitive=cognitive,
        motivation=motivation,
        performance=analyze_performance(records, config),
        strategy=synthesize_strategy(learning_style, knowledge_map, cognitive, motivation),
        record_count=len(records),
        skipped_records=skipped,
    )


def build_learner_profile(
    user: User,
    history: Sequence[LearningRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> LearnerProfile:
    """
    Build a learner profile from a user's practice history.

    Malformed records are skipped and counted; an empty history yields the
    neutral basic profile. The result depends only on the inputs.
    """

    require_user_id(user)
    records, skipped = sanitize_records(history)
    logger.debug("Building profile for user {} from {} records", user.user_id, len(records))
    return _profile_from_records(user, records, skipped, config)


def predict(
    user: User,
    history: Sequence[LearningRecord],
    profile: Optional[LearnerProfile] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> LearningPrediction:
    """
    Predict short-term performance, risks and interventions for a learner.

    ``profile`` may be passed to reuse one already built from the same
    history. ``now`` pins ``generated_at``; it defaults to the current UTC time.
    """

    require_user_id(user)
    records, skipped = sanitize_records(history)
    logger.debug("Predicting for user {} from {} records", user.user_id, len(records))

    if not records:
        logger.warning("No usable history for user {}; using the basic prediction", user.user_id)
        return basic_prediction(user, now=now, skipped_records=skipped, config=config)

    if profile is None:
        profile = _profile_from_records(user, records, skipped, config)

    performance = predict_performance(profile, records, config)
    risk = assess_risks(profile, records, config)

    return LearningPrediction(
        user_id=user.user_id,
        period=PREDICTION_PERIOD,
        performance=performance,
        risk=risk,
        interventions=recommend_interventions(profile, performance, risk, config),
        confidence=prediction_confidence(len(records), profile, config),
        key_factors=key_factors(profile, risk),
        generated_at=now or datetime.now(timezone.utc),
        skipped_records=skipped,
    )
