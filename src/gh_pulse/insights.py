"""Insight generation from aggregated contribution data.

A text generator (any ``async (prompt) -> str`` callable, such as
:class:`GeminiClient`) is asked for a JSON array of insights.  Without a
generator, or when its answer is unusable, a deterministic rule-based
set is returned instead.
"""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Awaitable, Callable
from typing import Any

import google.generativeai as genai
from pydantic import ValidationError

from gh_pulse.config import InsightsConfig
from gh_pulse.exceptions import InsightGenerationError
from gh_pulse.models import ContributionData, ContributionStats, Insight, InsightType

logger = logging.getLogger(__name__)

TextGenerator = Callable[[str], Awaitable[str]]

_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def build_insight_prompt(data: ContributionData, timeline_sample: int = 10) -> str:
    """Describe the profile and ask for insights in a fixed JSON shape."""
    stats = data.stats
    languages = ", ".join(lang.name for lang in stats.top_languages[:5])
    recent = ", ".join(
        f"{entry.type.value}: {entry.count}" for entry in data.timeline[:timeline_sample]
    )
    return f"""
Analyze this GitHub developer profile data and provide 4-6 actionable insights:

Profile: {data.user.name or data.user.login}
Total Commits: {stats.total_commits}
Total Stars: {stats.total_stars}
Total Repositories: {stats.total_repositories}
Top Languages: {languages}
Contribution Streak: {stats.contribution_streak} days
Most Active Day: {stats.most_active_day}
Recent Activity: {recent}

Provide insights in this exact JSON format:
[
  {{
    "type": "skill|trend|opportunity|achievement",
    "title": "Brief insight title",
    "description": "Detailed explanation with specific recommendations",
    "confidence": 0.85,
    "actionable": true
  }}
]

Focus on:
1. Skill development opportunities based on language usage
2. Contribution patterns and trends
3. Areas for improvement or growth
4. Notable achievements or strengths
5. Collaboration opportunities
6. Technical recommendations

Make insights specific, actionable, and encouraging.
""".strip()


def _is_well_formed(raw: Any) -> bool:
    return (
        isinstance(raw, dict)
        and bool(raw.get("type"))
        and bool(raw.get("title"))
        and bool(raw.get("description"))
        and isinstance(raw.get("confidence"), int | float)
        and not isinstance(raw.get("confidence"), bool)
        and isinstance(raw.get("actionable"), bool)
    )


def parse_insights(text: str, max_insights: int = 6) -> list[Insight]:
    """Extract the JSON array of insights from free-form model output.

    Entries missing a field, with the wrong field types, or with an
    unknown insight type are dropped.

    Raises:
        InsightGenerationError: If no JSON array can be decoded.
    """
    match = _JSON_ARRAY_RE.search(text)
    if match is None:
        raise InsightGenerationError("No JSON array found in response")
    try:
        raw_items = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise InsightGenerationError(f"Invalid JSON in response: {exc}") from exc
    if not isinstance(raw_items, list):
        raise InsightGenerationError("Response JSON is not an array")

    insights: list[Insight] = []
    for raw in raw_items:
        if not _is_well_formed(raw):
            continue
        try:
            insights.append(Insight.model_validate(raw))
        except ValidationError:
            logger.debug("Dropping invalid insight: %r", raw)
    return insights[:max_insights]


def generate_fallback_insights(
    stats: ContributionStats, max_insights: int = 5
) -> list[Insight]:
    """Rule-based insights needing no network access."""
    insights: list[Insight] = []

    if len(stats.top_languages) > 3:
        insights.append(Insight(
            type=InsightType.SKILL,
            title="Strong Language Diversity",
            description=(
                f"You're proficient in {len(stats.top_languages)} programming "
                f"languages. Consider deepening your expertise in "
                f"{stats.top_languages[0].name} or exploring emerging technologies."
            ),
            confidence=0.9,
            actionable=True,
        ))

    if stats.contribution_streak > 30:
        insights.append(Insight(
            type=InsightType.ACHIEVEMENT,
            title="Excellent Contribution Consistency",
            description=(
                f"Your {stats.contribution_streak}-day streak shows remarkable "
                "dedication. This consistency is valuable for long-term project success."
            ),
            confidence=0.95,
            actionable=False,
        ))

    if stats.total_stars > 50:
        insights.append(Insight(
            type=InsightType.ACHIEVEMENT,
            title="Strong Community Impact",
            description=(
                f"Your repositories have earned {stats.total_stars} stars, indicating "
                "valuable contributions to the community. Consider creating more "
                "open-source projects."
            ),
            confidence=0.85,
            actionable=True,
        ))

    if stats.total_prs < stats.total_commits * 0.1:
        insights.append(Insight(
            type=InsightType.OPPORTUNITY,
            title="Increase Collaboration",
            description=(
                "Consider contributing more to other projects through pull requests. "
                "This can expand your network and improve your coding skills."
            ),
            confidence=0.8,
            actionable=True,
        ))

    insights.append(Insight(
        type=InsightType.TREND,
        title=f"Peak Activity on {stats.most_active_day}",
        description=(
            f"You're most productive on {stats.most_active_day}s. Consider scheduling "
            "important coding tasks during your peak productivity times."
        ),
        confidence=0.75,
        actionable=True,
    ))

    return insights[:max_insights]


async def generate_insights(
    data: ContributionData,
    generator: TextGenerator | None = None,
    config: InsightsConfig | None = None,
) -> list[Insight]:
    """Insights from *generator*, or the rule-based set if that is not possible.

    Generation failures are logged and never raised.
    """
    config = config or InsightsConfig()
    fallback_limit = config.max_fallback_insights
    if generator is None:
        return generate_fallback_insights(data.stats, fallback_limit)

    prompt = build_insight_prompt(data, config.timeline_sample)
    try:
        text = await generator(prompt)
        insights = parse_insights(text, config.max_insights)
    except Exception as exc:
        logger.warning("Insight generation failed, using fallback: %s", exc)
        return generate_fallback_insights(data.stats, fallback_limit)

    if not insights:
        logger.warning("Insight generation returned no usable insights, using fallback")
        return generate_fallback_insights(data.stats, fallback_limit)
    return insights


class GeminiClient:
    """Async text generator backed by a Gemini model.

    Instances are callable and satisfy :data:`TextGenerator`.
    """

    def __init__(self, api_key: str | None = None, model: str = "gemini-1.5-flash") -> None:
        api_key = api_key if api_key is not None else os.environ.get("GEMINI_API_KEY", "")
        if not api_key:
            raise InsightGenerationError("GEMINI_API_KEY is not configured")
        genai.configure(api_key=api_key)
        self.model = model
        self._model = genai.GenerativeModel(model)

    async def __call__(self, prompt: str) -> str:
        return await self.generate(prompt)

    async def generate(self, prompt: str) -> str:
        """Send *prompt* and return the response text.

        Raises:
            InsightGenerationError: If the request fails or the response
                carries no text.
        """
        try:
            response = await self._model.generate_content_async(prompt)
            # ``text`` raises ValueError when the candidate was blocked or empty.
            text = response.text
        except Exception as exc:
            raise InsightGenerationError(f"Gemini request failed: {exc}") from exc

        if not text:
            raise InsightGenerationError("Gemini response contained no text")
        return text
