# ABOUTME: Makes the learner-model engine importable as one package.
# ABOUTME: Re-exports the entry points, record types and collaborators for convenience.

from .config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from .engine import basic_prediction, basic_profile, build_learner_profile, predict
from .interventions import check_real_time_intervention
from .narrative import LLMNarrativeAssistant, NarrativeAssistant, TemplateNarrativeAssistant, narrative_from_env
from .schemas import LearnerProfile, LearningPrediction, LearningRecord, User, to_dict
from .service import LearnerInsightService
from .store import FrameRecordStore, InMemoryRecordStore, RecordStore

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "FrameRecordStore",
    "InMemoryRecordStore",
    "LLMNarrativeAssistant",
    "LearnerInsightService",
    "LearnerProfile",
    "LearningPrediction",
    "LearningRecord",
    "NarrativeAssistant",
    "RecordStore",
    "TemplateNarrativeAssistant",
    "User",
    "basic_prediction",
    "basic_profile",
    "build_learner_profile",
    "check_real_time_intervention",
    "load_engine_config",
    "narrative_from_env",
    "predict",
    "to_dict",
]
