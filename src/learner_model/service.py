# ABOUTME: Glue that loads a learner's history from a store and runs the engine on it.
# ABOUTME: Keeps record access and narrative text outside the pure scoring core.

from __future__ import annotations

from datetime import datetime
from typing import Optional

from loguru import logger

from .config import DEFAULT_CONFIG, EngineConfig
from .engine import build_learner_profile, predict
from .narrative import NarrativeAssistant, TemplateNarrativeAssistant
from .schemas import LearnerProfile, LearningPrediction, User
from .store import RecordStore


class LearnerInsightService:
    def __init__(
        self,
        store: RecordStore,
        narrative: Optional[NarrativeAssistant] = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ):
        self.store = store
        self.narrative = narrative or TemplateNarrativeAssistant()
        self.config = config

    def profile(self, user: User) -> LearnerProfile:
        history = self.store.get_history(user.user_id)
        logger.info("Profiling user {} ({} stored records)", user.user_id, len(history))
        return build_learner_profile(user, history, self.config)

    def predict(self, user: User, now: Optional[datetime] = None) -> LearningPrediction:
        history = self.store.get_history(user.user_id)
        logger.info("Predicting for user {} ({} stored records)", user.user_id, len(history))
        profile = build_learner_profile(user, history, self.config)
        return predict(user, history, profile=profile, config=self.config, now=now)

    def explain(self, user: User) -> str:
        return self.narrative.explain(self.profile(user))
