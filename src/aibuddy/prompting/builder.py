"""Preference-aware system prompt assembly."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from aibuddy.prompting.transformer import transform_preference_context
from aibuddy.schemas.preferences import UserPreferences

# The first line ends with a space.
FALLBACK_PROMPT = (
    "You are an AI assistant. The user has not set their preferences yet. \n"
    "Please provide a general response to their query, and suggest they set up "
    "their preferences for more personalized assistance.\n"
    "\n"
    "User Query: {query}"
)

INTRO = (
    "You are an AI assistant with access to the user's preferences and context. "
    "Use this information to provide personalized, relevant responses."
)

BUDGET_REQUIREMENTS = (
    "Budget-Aware Solution Requirements:",
    "1. Always consider the budget constraint first",
    "2. Provide cost breakdowns for any recommended solutions",
    "3. Suggest phased implementations if needed to stay within budget",
    "4. Include cost-effective alternatives and trade-offs",
    "5. Highlight any potential cost savings or ROI",
)


def _bullets(items: Iterable[str]) -> list[str]:
    return [f"- {item}" for item in items]


def _budget_banner(budget_range: str) -> str:
    return "\n".join([
        "IMPORTANT BUDGET CONSTRAINT:",
        f"The user has a strict budget of {budget_range}.",
        "All solutions MUST be within this budget range.",
        "Prioritize cost-effective approaches and solutions.",
        "Consider open-source or low-cost alternatives where possible.",
        "Break down costs for any recommended solutions.",
        "",
    ])


def construct_preference_aware_prompt(
    query: str,
    preferences: UserPreferences | None,
    additional_context: Mapping[str, Any] | None = None,
) -> str:
    """Build the system prompt for a solution request.

    Without preferences a short generic prompt is returned. Otherwise the
    transformed context is laid out section by section, ending with the
    literal user query. The result depends only on the arguments.
    """
    if preferences is None:
        return FALLBACK_PROMPT.format(query=query)

    additional_context = additional_context or {}
    context = transform_preference_context(preferences, query)
    budget_range = preferences.ai_readiness.business_impact.budget_range
    technical = context.technical
    business = context.business
    implementation = context.implementation
    strategy = context.prompting_strategy

    lines: list[str] = [
        INTRO,
        "",
        _budget_banner(budget_range) if budget_range else "",
        "",
        "Technical Context:",
        "Capabilities:",
        *_bullets(technical.capabilities),
        "",
        "Limitations:",
        *_bullets(technical.limitations),
        "",
        "Integration Points:",
        *_bullets(technical.integration_points),
        "",
        "Recommended Approaches:",
        *_bullets(technical.recommended_approaches),
        "",
        "Business Context:",
        "Priorities:",
        *_bullets(business.priorities),
        "",
        "Constraints:",
        *_bullets(business.constraints),
        "",
        "Risk Factors:",
        *_bullets(business.risk_factors),
        "",
        "Success Metrics:",
        *_bullets(business.success_metrics),
        "",
        "Implementation Context:",
        f"Feasibility Score: {implementation.feasibility}/10",
        f"Complexity Level: {implementation.complexity}/10",
        f"Estimated Timeline: {implementation.timeline}",
        "",
        "Resource Requirements:",
        *_bullets(implementation.resource_requirements),
        "",
        "Additional Context:",
        "\n".join(f"- {key}: {value}" for key, value in additional_context.items()),
        "",
        "Response Guidelines:",
        strategy.explanation_depth,
        strategy.question_style,
        "",
        *BUDGET_REQUIREMENTS,
        "",
        "Relevant Examples:",
        *_bullets(strategy.examples),
        "",
        "User Query:",
        query,
    ]
    return "\n".join(lines)
