# ABOUTME: Maps assessed risks and the learner's style to concrete intervention plans.
# ABOUTME: Provides the in-session trigger that reacts to a single completed session.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from loguru import logger

from .config import DEFAULT_CONFIG, EngineConfig
from .features import is_valid_record, sanitize_records
from .schemas import (
    PRIORITY_WEIGHTS,
    InterventionRecommendation,
    InterventionType,
    LearnerProfile,
    LearningRecord,
    LearningStyle,
    PerformancePrediction,
    Priority,
    RiskAssessment,
    RiskLevel,
    RiskType,
)

RISK_INTERVENTIONS: Dict[RiskType, InterventionRecommendation] = {
    RiskType.BURNOUT: InterventionRecommendation(
        type=InterventionType.IMMEDIATE,
        priority=Priority.HIGH,
        target_area="心理健康",
        actions=["立即减少50%学习强度", "安排2小时放松活动", "调整学习环境"],
        expected_outcome="恢复学习动力和效率",
        steps=["暂停当前学习任务", "进行身心放松", "重新制定学习计划"],
        success_metrics=["学习效率提升", "压力水平下降"],
        timeline="24小时内实施",
    ),
    RiskType.COGNITIVE_OVERLOAD: InterventionRecommendation(
        type=InterventionType.SHORT_TERM,
        priority=Priority.HIGH,
        target_area="学习策略",
        actions=["将复杂任务分解为小步骤", "使用记忆辅助工具", "延长学习间隔"],
        expected_outcome="提高学习效率和理解深度",
        steps=["重新设计学习任务", "引入辅助工具", "调整学习节奏"],
        success_metrics=["任务完成率提升", "理解准确度提高"],
        timeline="3-5天内调整",
    ),
    RiskType.MOTIVATION_DECLINE: InterventionRecommendation(
        type=InterventionType.SHORT_TERM,
        priority=Priority.MEDIUM,
        target_area="动机激发",
        actions=["设置更具挑战性的目标", "引入游戏化元素", "建立学习伙伴关系"],
        expected_outcome="重新激发学习热情",
        steps=["重新设定学习目标", "设计奖励机制", "寻找学习伙伴"],
        success_metrics=["学习频率增加", "主动性提升"],
        timeline="1-2周内实施",
    ),
    RiskType.FORGETTING: InterventionRecommendation(
        type=InterventionType.SHORT_TERM,
        priority=Priority.MEDIUM,
        target_area="复习巩固",
        actions=["按遗忘曲线安排复习", "重做历史错题", "定期进行知识点小测"],
        expected_outcome="提高知识保持率",
        steps=["整理需要复习的知识点", "制定间隔复习计划", "跟踪复习后的成绩"],
        success_metrics=["重复主题成绩回升", "知识保持率提高"],
        timeline="1-2周内实施",
    ),
    RiskType.STAGNATION: InterventionRecommendation(
        type=InterventionType.LONG_TERM,
        priority=Priority.MEDIUM,
        target_area="突破瓶颈",
        actions=["更换练习题型", "尝试新的学习方法", "引入略高于当前水平的题目"],
        expected_outcome="打破成绩停滞",
        steps=["分析停滞原因", "调整练习内容与难度", "每周评估进展"],
        success_metrics=["成绩重新上升", "新题型正确率提高"],
        timeline="2-3周持续调整",
    ),
}

ADJUST_METHOD = InterventionRecommendation(
    type=InterventionType.LONG_TERM,
    priority=Priority.MEDIUM,
    target_area="学习方法",
    actions=["调整学习策略", "加强薄弱环节训练", "优化学习时间分配"],
    expected_outcome="提升整体学习效果",
    steps=["分析当前学习方法", "制定改进计划", "持续监控效果"],
    success_metrics=["成绩稳步提升", "学习效率改善"],
    timeline="2-4周持续改进",
)

STYLE_INTERVENTIONS: Dict[LearningStyle, InterventionRecommendation] = {
    LearningStyle.VISUAL: InterventionRecommendation(
        type=InterventionType.LONG_TERM,
        priority=Priority.LOW,
        target_area="学习工具",
        actions=["增加图表和可视化材料", "使用思维导图工具", "创建视觉学习笔记"],
        expected_outcome="更好地利用视觉学习优势",
        steps=["准备可视化学习资源", "学习思维导图技巧", "建立视觉笔记系统"],
        success_metrics=["理解速度提升", "记忆效果改善"],
        timeline="逐步实施，持续优化",
    ),
    LearningStyle.AUDITORY: InterventionRecommendation(
        type=InterventionType.LONG_TERM,
        priority=Priority.LOW,
        target_area="学习工具",
        actions=["使用音频讲解材料", "参与小组讨论", "尝试复述讲解知识点"],
        expected_outcome="更好地利用听觉学习优势",
        steps=["收集音频学习资源", "安排固定讨论时间", "录制并回听自己的讲解"],
        success_metrics=["概念理解加深", "记忆效果改善"],
        timeline="逐步实施，持续优化",
    ),
    LearningStyle.KINESTHETIC: InterventionRecommendation(
        type=InterventionType.LONG_TERM,
        priority=Priority.LOW,
        target_area="学习工具",
        actions=["增加动手实践练习", "结合实验和操作学习", "把知识点应用到生活场景"],
        expected_outcome="更好地利用动觉学习优势",
        steps=["设计实践任务", "准备实验或操作材料", "记录实践中的发现"],
        success_metrics=["应用题正确率提升", "学习投入度提高"],
        timeline="逐步实施，持续优化",
    ),
    LearningStyle.READ_WRITE: InterventionRecommendation(
        type=InterventionType.LONG_TERM,
        priority=Priority.LOW,
        target_area="学习工具",
        actions=["坚持整理学习笔记", "撰写知识点总结", "阅读拓展材料"],
        expected_outcome="更好地利用读写学习优势",
        steps=["建立笔记模板", "每周撰写总结", "定期回顾笔记"],
        success_metrics=["分析题正确率提升", "知识体系更完整"],
        timeline="逐步实施，持续优化",
    ),
}

MAINTAIN = InterventionRecommendation(
    type=InterventionType.PREVENTIVE,
    priority=Priority.LOW,
    target_area="持续优化",
    actions=["保持当前学习节奏", "适当增加挑战性", "建立长期学习规划"],
    expected_outcome="维持良好学习状态",
    steps=["定期评估学习状态", "适时调整学习目标", "建立学习反馈机制"],
    success_metrics=["持续稳定进步", "学习满意度高"],
    timeline="持续关注和优化",
)

LEARNING_DIFFICULTY = InterventionRecommendation(
    type=InterventionType.IMMEDIATE,
    priority=Priority.HIGH,
    target_area="学习困难",
    actions=["暂停当前学习", "回顾基础知识", "降低题目难度"],
    expected_outcome="重建学习信心",
    steps=["停止当前练习", "提供基础知识复习", "重新开始简单题目"],
    success_metrics=["答题正确率回升"],
    timeline="立即执行",
)

FATIGUE = InterventionRecommendation(
    type=InterventionType.IMMEDIATE,
    priority=Priority.MEDIUM,
    target_area="疲劳管理",
    actions=["建议休息15分钟", "进行眼部放松", "适当活动身体"],
    expected_outcome="恢复注意力和学习效率",
    steps=["显示休息提醒", "提供放松指导", "设置休息计时器"],
    success_metrics=["后续学习效率提升"],
    timeline="立即建议",
)

RUSHING = InterventionRecommendation(
    type=InterventionType.IMMEDIATE,
    priority=Priority.MEDIUM,
    target_area="学习态度",
    actions=["提醒仔细思考", "强调学习质量", "提供解题指导"],
    expected_outcome="提高学习质量",
    steps=["显示提醒消息", "提供解题提示", "鼓励深入思考"],
    success_metrics=["答题质量提升"],
    timeline="即时提醒",
)

NEW_LEARNER = InterventionRecommendation(
    type=InterventionType.PREVENTIVE,
    priority=Priority.MEDIUM,
    target_area="学习建立",
    actions=["建立规律学习习惯", "设置学习目标"],
    expected_outcome="建立良好学习基础",
    steps=["制定学习计划", "开始基础练习"],
    success_metrics=["学习频率稳定"],
    timeline="持续实施",
)


def _fresh(template: InterventionRecommendation) -> InterventionRecommendation:
    """Copy a template so callers never share list instances with the module tables."""

    return InterventionRecommendation(
        type=template.type,
        priority=template.priority,
        target_area=template.target_area,
        actions=list(template.actions),
        expected_outcome=template.expected_outcome,
        steps=list(template.steps),
        success_metrics=list(template.success_metrics),
        timeline=template.timeline,
    )


def recommend_interventions(
    profile: LearnerProfile,
    performance: PerformancePrediction,
    risk: RiskAssessment,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[InterventionRecommendation]:
    recommendations = [_fresh(RISK_INTERVENTIONS[specific.type]) for specific in risk.risks]

    if performance.improvement_probability < config.improvement_probability_floor:
        recommendations.append(_fresh(ADJUST_METHOD))

    recommendations.append(_fresh(STYLE_INTERVENTIONS[profile.learning_style.primary_style]))

    if risk.overall_level == RiskLevel.LOW:
        recommendations.append(_fresh(MAINTAIN))

    # sorted() is stable, so equal priorities keep insertion order.
    return sorted(recommendations, key=lambda rec: PRIORITY_WEIGHTS[rec.priority], reverse=True)


def new_learner_intervention() -> InterventionRecommendation:
    return _fresh(NEW_LEARNER)


def check_real_time_intervention(
    current_session: LearningRecord,
    recent_history: Sequence[LearningRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> Optional[InterventionRecommendation]:
    """
    React to one completed session, first matching rule wins.

    Rules, in order:
    - the last three history sessions all scored below the struggle score
    - the current session ran past the long-session limit
    - the current session and the last three history sessions were all rushed

    Returns ``None`` when no rule fires or the current session is malformed.
    """

    if current_session is None:
        raise TypeError("current_session is required; got None.")
    if not isinstance(current_session, LearningRecord):
        raise TypeError(f"Expected LearningRecord, got {type(current_session).__name__}.")

    if not is_valid_record(current_session):
        logger.warning("Ignoring malformed session for real-time check")
        return None

    history, _ = sanitize_records(recent_history)
    last_three = history[-3:]
    has_three = len(last_three) == 3

    if has_three and all(float(r.score) < config.struggle_score for r in last_three):
        logger.debug("Real-time trigger: learning difficulty")
        return _fresh(LEARNING_DIFFICULTY)

    if current_session.duration_seconds > config.long_session_seconds:
        logger.debug("Real-time trigger: fatigue")
        return _fresh(FATIGUE)

    if (
        current_session.duration_seconds < config.rushing_seconds
        and has_three
        and all(r.duration_seconds < config.rushing_seconds for r in last_three)
    ):
        logger.debug("Real-time trigger: rushing")
        return _fresh(RUSHING)

    return None
