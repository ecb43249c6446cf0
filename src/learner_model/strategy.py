# ABOUTME: Turns a learner's analysed traits into a personalised study strategy.
# ABOUTME: Every rule is an independent threshold check with fixed, ordered output text.

from __future__ import annotations

from typing import List

from .schemas import (
    CognitiveProfile,
    Difficulty,
    KnowledgeMap,
    LearningStyle,
    LearningStyleProfile,
    MotivationProfile,
    PersonalizationStrategy,
)

QUESTION_TYPES = {
    LearningStyle.VISUAL: ["图表题", "几何题", "选择题"],
    LearningStyle.AUDITORY: ["概念题", "解释题", "讨论题"],
    LearningStyle.READ_WRITE: ["文字题", "分析题", "论述题"],
    LearningStyle.KINESTHETIC: ["实践题", "应用题", "实验题"],
}

STYLE_ACTIONS = {
    LearningStyle.VISUAL: "尝试使用图表和思维导图学习",
    LearningStyle.AUDITORY: "考虑使用音频材料或讨论学习",
    LearningStyle.KINESTHETIC: "寻找实践性强的学习活动",
    LearningStyle.READ_WRITE: "多做笔记和文字总结",
}

HIGH_LOAD = 0.7
LOW_ATTENTION = 0.5
MAX_SUGGESTED_TOPICS = 3
MAX_NEXT_ACTIONS = 5


def recommended_difficulty(optimal_challenge: float) -> Difficulty:
    if optimal_challenge > 0.8:
        return Difficulty.ADVANCED
    if optimal_challenge > 0.6:
        return Difficulty.INTERMEDIATE
    if optimal_challenge > 0.4:
        return Difficulty.BASIC
    return Difficulty.INTRO


def path_adjustments(knowledge_map: KnowledgeMap, cognitive: CognitiveProfile) -> List[str]:
    adjustments: List[str] = []
    if cognitive.cognitive_load > HIGH_LOAD:
        adjustments.append("降低学习强度，增加休息时间")
    if cognitive.attention_span < LOW_ATTENTION:
        adjustments.append("缩短单次学习时间，增加学习频次")
    if knowledge_map.weaknesses:
        adjustments.append("重点关注薄弱科目：" + "、".join(knowledge_map.weaknesses))
    return adjustments


def motivational_strategies(motivation: MotivationProfile) -> List[str]:
    strategies: List[str] = []
    if motivation.intrinsic > 0.6:
        strategies += ["提供更多探索性学习机会", "设置个人兴趣相关的学习目标"]
    if motivation.extrinsic > 0.6:
        strategies += ["设置明确的成就目标和奖励", "提供及时的进度反馈"]
    if motivation.challenge_preference > 0.7:
        strategies += ["逐步提高题目难度", "引入竞争性学习元素"]
    return strategies


def cognitive_supports(cognitive: CognitiveProfile) -> List[str]:
    supports: List[str] = []
    if cognitive.working_memory < 0.5:
        supports += ["提供记忆辅助工具和策略", "分解复杂问题为简单步骤"]
    if cognitive.processing_speed < 0.5:
        supports += ["给予充分的思考时间", "提供解题步骤提示"]
    if cognitive.attention_span < LOW_ATTENTION:
        supports += ["使用多媒体和互动元素", "设置注意力提醒机制"]
    return supports


def next_actions(
    learning_style: LearningStyleProfile,
    knowledge_map: KnowledgeMap,
    cognitive: CognitiveProfile,
) -> List[str]:
    actions: List[str] = []
    if knowledge_map.next_targets:
        actions.append(f"开始学习：{knowledge_map.next_targets[0]}")
    if cognitive.cognitive_load > HIGH_LOAD:
        actions.append("建议休息15分钟后继续学习")
    else:
        actions.append("当前状态良好，可以继续挑战性学习")
    actions.append(STYLE_ACTIONS[learning_style.primary_style])
    return actions[:MAX_NEXT_ACTIONS]


def synthesize_strategy(
    learning_style: LearningStyleProfile,
    knowledge_map: KnowledgeMap,
    cognitive: CognitiveProfile,
    motivation: MotivationProfile,
) -> PersonalizationStrategy:
    return PersonalizationStrategy(
        recommended_difficulty=recommended_difficulty(cognitive.optimal_challenge),
        optimal_question_types=list(QUESTION_TYPES[learning_style.primary_style]),
        suggested_topics=knowledge_map.next_targets[:MAX_SUGGESTED_TOPICS],
        path_adjustments=path_adjustments(knowledge_map, cognitive),
        motivational_strategies=motivational_strategies(motivation),
        cognitive_supports=cognitive_supports(cognitive),
        next_actions=next_actions(learning_style, knowledge_map, cognitive),
    )
