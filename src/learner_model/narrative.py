# ABOUTME: Renders learner profiles as display text, optionally phrased by an LLM.
# ABOUTME: Narrative output is for display only and never feeds back into scoring.

from __future__ import annotations

import asyncio
import json
import os
import re
from typing import Optional, Protocol

from loguru import logger

from .schemas import LearnerProfile


class NarrativeAssistant(Protocol):
    def explain(self, profile: LearnerProfile) -> str:
        ...


# Characters that would open a prompt section, a code fence or a JSON object.
PROMPT_MARKUP = re.compile(r"[#`{}]")


def sanitize_for_prompt(label, max_length: int = 50) -> str:
    """
    Flatten a learner-supplied label (user id, subject or topic) for the LLM prompt.

    Line breaks, control characters and prompt markup are dropped, whitespace
    runs collapse to one space and the label is cut to ``max_length``.
    """
    text = label if isinstance(label, str) else str(label)
    text = "".join(char if char.isprintable() else " " for char in text)
    text = PROMPT_MARKUP.sub("", text)
    return " ".join(text.split())[:max_length].strip()


def format_profile(profile: LearnerProfile) -> str:
    """Render a profile as a human-readable block."""

    style = profile.learning_style
    knowledge = profile.knowledge_map
    cognitive = profile.cognitive
    strategy = profile.strategy

    lines = [
        "━" * 60,
        f"Learner: {profile.user_id}",
        f"Style: {style.primary_style.value} / {style.secondary_style.value} (confidence: {style.confidence:.2f})",
        f"Records: {profile.record_count} used, {profile.skipped_records} skipped",
        "",
        "KNOWLEDGE:",
        "━" * 60,
    ]
    if knowledge.subject_mastery:
        for subject in knowledge.learning_sequence:
            lines.append(f"  {subject}: {knowledge.subject_mastery[subject].overall_mastery:.0%}")
    else:
        lines.append("  No subject history yet.")

    lines.extend(
        [
            "",
            "STATE:",
            f"  Cognitive load {cognitive.cognitive_load:.2f}, working memory {cognitive.working_memory:.2f}",
            f"  Intrinsic motivation {profile.motivation.intrinsic:.2f}, "
            f"consistency {profile.performance.consistency:.2f}",
            "",
            "NEXT STEPS:",
        ]
    )
    lines.extend(f"  - {action}" for action in strategy.next_actions)
    lines.append("━" * 60)
    return "\n".join(lines)


class TemplateNarrativeAssistant:
    def explain(self, profile: LearnerProfile) -> str:
        return format_profile(profile)


def format_prompt_for_llm(profile: LearnerProfile) -> str:
    """Build the LLM prompt; learner-supplied names are sanitized first."""

    safe_user_id = sanitize_for_prompt(profile.user_id)
    knowledge = profile.knowledge_map
    subjects = [
        f"  - {sanitize_for_prompt(s)}: {knowledge.subject_mastery[s].overall_mastery:.0%}"
        for s in knowledge.learning_sequence
    ]
    targets = ", ".join(sanitize_for_prompt(t) for t in knowledge.next_targets) or "none"
    actions = "\n".join(f"  - {sanitize_for_prompt(a, max_length=100)}" for a in profile.strategy.next_actions)

    return f"""You are a learning coach summarising a student's learning profile.

## Student Context
- Student ID: {safe_user_id}
- Learning style: {profile.learning_style.primary_style.value} (pace: {profile.learning_style.pace.value})
- Records analysed: {profile.record_count}

## Subject Mastery
{chr(10).join(subjects) if subjects else "  (no history yet)"}

## Current State
- Cognitive load: {profile.cognitive.cognitive_load:.2f}
- Intrinsic motivation: {profile.motivation.intrinsic:.2f}
- Performance consistency: {profile.performance.consistency:.2f}
- Next targets: {targets}

## Planned Actions
{actions}

## Your Task
Write a short encouraging summary (2-3 sentences) and one concrete piece of advice.
Do not invent scores or numbers that are not listed above.

Respond with JSON: {{"summary": "...", "advice": "..."}}
"""


def _extract_json(content: str) -> dict:
    if "```json" in content:
        content = content.split("```json")[1].split("```")[0]
    elif "```" in content:
        content = content.split("```")[1].split("```")[0]
    return json.loads(content.strip())


class LLMNarrativeAssistant:
    """
    Narrative via OpenAI or Anthropic, falling back to the template text when
    the provider is unreachable, misconfigured or returns unusable output.
    """

    def __init__(
        self,
        provider: str = "openai",
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        fallback: Optional[NarrativeAssistant] = None,
    ):
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.fallback = fallback or TemplateNarrativeAssistant()

    async def _generate(self, prompt: str) -> dict:
        if self.provider == "anthropic":
            import anthropic

            api_key = self.api_key or os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise ValueError("ANTHROPIC_API_KEY not set")
            client = anthropic.AsyncAnthropic(api_key=api_key)
            response = await client.messages.create(
                model=self.model or "claude-3-haiku-20240307",
                max_tokens=300,
                messages=[{"role": "user", "content": prompt}],
            )
            return _extract_json(response.content[0].text)

        import openai

        api_key = self.api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY not set")
        client = openai.AsyncOpenAI(api_key=api_key)
        response = await client.chat.completions.create(
            model=self.model or "gpt-4o-mini",
            messages=[{"role": "user", "content": prompt}],
            temperature=0.7,
            max_tokens=300,
            response_format={"type": "json_object"},
        )
        return json.loads(response.choices[0].message.content)

    def explain(self, profile: LearnerProfile) -> str:
        prompt = format_prompt_for_llm(profile)
        try:
            result = asyncio.run(self._generate(prompt))
            summary = result["summary"]
            advice = result.get("advice", "")
        except Exception as e:
            logger.warning("LLM narrative failed ({}); using template text", e)
            return self.fallback.explain(profile)
        return f"{summary}\n\n{advice}".strip()


def narrative_from_env() -> NarrativeAssistant:
    """Pick the narrative assistant from USE_LLM_EXPLANATIONS / LLM_PROVIDER / LLM_MODEL."""

    if os.environ.get("USE_LLM_EXPLANATIONS", "false").lower() != "true":
        return TemplateNarrativeAssistant()
    return LLMNarrativeAssistant(
        provider=os.environ.get("LLM_PROVIDER", "openai"),
        model=os.environ.get("LLM_MODEL") or None,
    )
