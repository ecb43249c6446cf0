# ABOUTME: Defines canonical data structures shared by every learner-model component.
# ABOUTME: Centralizes record, profile, prediction and category label definitions.

from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class LearningStyle(str, Enum):
    VISUAL = "视觉型"
    AUDITORY = "听觉型"
    KINESTHETIC = "动觉型"
    READ_WRITE = "读写型"

    @classmethod
    def parse(cls, value: str) -> "LearningStyle":
        """Accept either the label or an English alias such as ``"visual"``."""
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        for style in cls:
            if style.value == key:
                return style
        alias = STYLE_ALIASES.get(key.lower().replace("-", "_").replace(" ", "_"))
        if alias is None:
            raise ValueError(f"Unknown learning style '{value}'.")
        return alias


STYLE_ALIASES = {
    "visual": LearningStyle.VISUAL,
    "auditory": LearningStyle.AUDITORY,
    "kinesthetic": LearningStyle.KINESTHETIC,
    "read_write": LearningStyle.READ_WRITE,
    "reading": LearningStyle.READ_WRITE,
}


class ProcessingPreference(str, Enum):
    SEQUENTIAL = "顺序型"
    GLOBAL = "全局型"


class ThinkingStyle(str, Enum):
    ANALYTICAL = "分析型"
    INTUITIVE = "直觉型"


class LearningPace(str, Enum):
    FAST = "快速型"
    STEADY = "稳健型"
    REFLECTIVE = "深思型"


class GoalOrientation(str, Enum):
    MASTERY = "掌握导向"
    PERFORMANCE = "表现导向"


class Difficulty(str, Enum):
    INTRO = "入门"
    BASIC = "基础"
    INTERMEDIATE = "中级"
    ADVANCED = "高级"
    CHALLENGE = "挑战"


class MotivationTrend(str, Enum):
    RISING = "上升"
    STABLE = "稳定"
    DECLINING = "下降"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskType(str, Enum):
    BURNOUT = "burnout"
    FORGETTING = "forgetting"
    MOTIVATION_DECLINE = "motivation_decline"
    COGNITIVE_OVERLOAD = "cognitive_overload"
    STAGNATION = "stagnation"


class InterventionType(str, Enum):
    IMMEDIATE = "immediate"
    SHORT_TERM = "short-term"
    LONG_TERM = "long-term"
    PREVENTIVE = "preventive"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_WEIGHTS = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


@dataclass(frozen=True)
class LearningRecord:
    """One completed practice session as stored by the app."""

    timestamp: datetime
    subject: str
    topic: str
    difficulty: str
    score: float
    duration_seconds: int


@dataclass(frozen=True)
class User:
    """User identifier plus the profile hints captured at registration."""

    user_id: str
    declared_style: str = LearningStyle.VISUAL.value
    grade: str = ""


@dataclass(frozen=True)
class TimeBasedMetric:
    time_range: str
    value: float


@dataclass(frozen=True)
class LearningStyleProfile:
    primary_style: LearningStyle
    secondary_style: LearningStyle
    processing_preference: ProcessingPreference
    thinking_style: ThinkingStyle
    pace: LearningPace
    confidence: float
    evidence: List[str]


@dataclass(frozen=True)
class SubjectMastery:
    subject: str
    overall_mastery: float
    topic_mastery: Dict[str, float]
    common_mistakes: List[str]
    strong_concepts: List[str]
    improvement_trend: Dict[str, float]
    skill_progression: Dict[str, float] = field(default_factory=dict)
    difficulty_comfort: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class KnowledgeMap:
    subject_mastery: Dict[str, SubjectMastery]
    concept_connections: Dict[str, List[str]]
    learning_sequence: List[str]
    strengths: List[str]
    weaknesses: List[str]
    next_targets: List[str]


@dataclass(frozen=True)
class CognitiveProfile:
    working_memory: float
    processing_speed: float
    attention_span: float
    cognitive_load: float
    optimal_challenge: float
    fatigue_pattern: List[TimeBasedMetric]
    peak_times: List[str]


@dataclass(frozen=True)
class MotivationProfile:
    intrinsic: float
    extrinsic: float
    goal_orientation: GoalOrientation
    persistence: float
    challenge_preference: float
    feedback_sensitivity: float


@dataclass(frozen=True)
class PerformancePattern:
    consistency: float
    improvement_rate: float
    retention_rate: float
    transfer_ability: float
    error_recovery_rate: float
    optimal_session_length_minutes: int


@dataclass(frozen=True)
class PersonalizationStrategy:
    recommended_difficulty: Difficulty
    optimal_question_types: List[str]
    suggested_topics: List[str]
    path_adjustments: List[str]
    motivational_strategies: List[str]
    cognitive_supports: List[str]
    next_actions: List[str]


@dataclass(frozen=True)
class LearnerProfile:
    """Derived snapshot of a learner; always rebuilt from a record set."""

    user_id: str
    learning_style: LearningStyleProfile
    knowledge_map: KnowledgeMap
    cognitive: CognitiveProfile
    motivation: MotivationProfile
    performance: PerformancePattern
    strategy: PersonalizationStrategy
    record_count: int = 0
    skipped_records: int = 0


@dataclass(frozen=True)
class PerformancePrediction:
    expected_score: float
    score_range: Tuple[float, float]
    improvement_probability: float
    mastery_by_subject: Dict[str, float]
    learning_efficiency: float
    motivation_trend: MotivationTrend
    cognitive_load_prediction: float
    optimal_path: List[str]


@dataclass(frozen=True)
class SpecificRisk:
    type: RiskType
    probability: float
    impact: Impact
    timeframe: str
    indicators: List[str]
    strategy: str


@dataclass(frozen=True)
class RiskAssessment:
    overall_level: RiskLevel
    risks: List[SpecificRisk]
    warnings: List[str]
    preventive_actions: List[str]
    risk_factors: Dict[str, float]
    critical_points: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InterventionRecommendation:
    type: InterventionType
    priority: Priority
    target_area: str
    actions: List[str]
    expected_outcome: str
    steps: List[str]
    success_metrics: List[str]
    timeline: str


@dataclass(frozen=True)
class LearningPrediction:
    user_id: str
    period: str
    performance: PerformancePrediction
    risk: RiskAssessment
    interventions: List[InterventionRecommendation]
    confidence: float
    key_factors: List[str]
    generated_at: datetime
    skipped_records: int = 0


def to_dict(obj: Any) -> Dict[str, Any]:
    """Convert an output dataclass into JSON-ready primitives."""

    if not is_dataclass(obj):
        raise TypeError(f"Expected a dataclass instance, got {type(obj).__name__}.")
    return _jsonable(asdict(obj))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(_jsonable(k)): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def require_user_id(user: Optional[User]) -> str:
    if user is None:
        raise TypeError("user is required; got None.")
    return user.user_id
