# ABOUTME: Aggregates practice records into per-subject and per-topic mastery.
# ABOUTME: Derives strengths, weaknesses, a learning sequence and next targets.

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from .features import records_frame
from .metrics import clamp, mean
from .schemas import KnowledgeMap, LearningRecord, SubjectMastery

MISTAKE_SCORE = 70
MIN_MISTAKE_RECORDS = 2
STRONG_CONCEPT_MASTERY = 0.85
STRENGTH_MASTERY = 0.8
WEAKNESS_MASTERY = 0.6
TARGET_BAND = (0.4, 0.8)
MAX_NEXT_TARGETS = 5
MAX_CONNECTED_TOPICS = 5


def build_subject_mastery(subject: str, subject_df: pd.DataFrame) -> SubjectMastery:
    """
    Summarise one subject's records (already in chronological order).

    Steps:
    - Group by topic in order of first appearance.
    - Topic mastery is the mean score scaled to [0, 1].
    - Trend compares the mean of the last three scores with the first three.
    """

    topic_mastery: Dict[str, float] = {}
    improvement_trend: Dict[str, float] = {}
    skill_progression: Dict[str, float] = {}
    common_mistakes: List[str] = []

    for topic, topic_df in subject_df.groupby("topic", sort=False):
        scores = [float(s) for s in topic_df["score"]]
        topic_mastery[topic] = clamp(mean(scores) / 100.0)

        if sum(1 for s in scores if s < MISTAKE_SCORE) >= MIN_MISTAKE_RECORDS:
            common_mistakes.append(topic)

        if len(scores) >= 3:
            improvement_trend[topic] = (mean(scores[-3:]) - mean(scores[:3])) / 100.0
        else:
            improvement_trend[topic] = 0.0

        if len(scores) >= 2:
            skill_progression[topic] = clamp((scores[-1] - scores[0]) / 100.0)
        else:
            skill_progression[topic] = 0.5

    difficulty_comfort = {
        difficulty: clamp(mean([float(s) for s in group["score"]]) / 100.0)
        for difficulty, group in subject_df.groupby("difficulty", sort=False)
    }

    return SubjectMastery(
        subject=subject,
        overall_mastery=mean(list(topic_mastery.values())),
        topic_mastery=topic_mastery,
        common_mistakes=common_mistakes,
        strong_concepts=[t for t, m in topic_mastery.items() if m > STRONG_CONCEPT_MASTERY],
        improvement_trend=improvement_trend,
        skill_progression=skill_progression,
        difficulty_comfort=difficulty_comfort,
    )


def build_knowledge_map(records: Sequence[LearningRecord]) -> KnowledgeMap:
    df = records_frame(records)

    subject_mastery: Dict[str, SubjectMastery] = {}
    concept_connections: Dict[str, List[str]] = {}
    if not df.empty:
        for subject, subject_df in df.groupby("subject", sort=False):
            subject_mastery[subject] = build_subject_mastery(subject, subject_df)
            concept_connections[subject] = list(dict.fromkeys(subject_df["topic"]))[:MAX_CONNECTED_TOPICS]

    # sorted(reverse=True) stays stable, so equal mastery keeps first-seen order.
    learning_sequence = sorted(
        subject_mastery, key=lambda s: subject_mastery[s].overall_mastery, reverse=True
    )

    lo, hi = TARGET_BAND
    next_targets = [
        topic
        for mastery in subject_mastery.values()
        for topic, value in mastery.topic_mastery.items()
        if lo <= value <= hi
    ][:MAX_NEXT_TARGETS]

    return KnowledgeMap(
        subject_mastery=subject_mastery,
        concept_connections=concept_connections,
        learning_sequence=learning_sequence,
        strengths=[s for s, m in subject_mastery.items() if m.overall_mastery > STRENGTH_MASTERY],
        weaknesses=[s for s, m in subject_mastery.items() if m.overall_mastery < WEAKNESS_MASTERY],
        next_targets=next_targets,
    )
