"""Preference context transformer — turns a preference record into prompt context.

Four pure stages run over the same ``UserPreferences``:

- ``extract_technical_context`` — stack capabilities, limitations, integrations
- ``extract_business_context`` — priorities, budget constraints, risks, metrics
- ``assess_implementation_feasibility`` — readiness score, complexity, timeline
- ``determine_prompting_strategy`` — temperature, examples, question style

None of them perform I/O or keep state, so they are safe to call from
concurrent requests. Unknown tags fall through their lookup tables instead
of raising.
"""

from __future__ import annotations

import logging
import math
import re

from aibuddy.schemas.context import (
    BusinessContext,
    ImplementationContext,
    PromptingStrategy,
    TechnicalContext,
    TransformedContext,
)
from aibuddy.schemas.preferences import UserPreferences

logger = logging.getLogger(__name__)

TECH_CAPABILITIES: dict[str, str] = {
    "crm": "Customer data integration and analysis",
    "erp": "Business process automation and optimization",
    "bi": "Advanced analytics and reporting",
    "cms": "Content management and personalization",
    "hrms": "HR process automation and analytics",
    "scm": "Supply chain optimization and forecasting",
}

PRIORITY_LABELS: dict[str, str] = {
    "cost-reduction": "Operational efficiency and cost optimization",
    "revenue-growth": "Revenue generation and market expansion",
    "customer-experience": "Customer satisfaction and engagement",
}

KPI_METRICS: dict[str, str] = {
    "revenue": "Revenue growth rate",
    "profit": "Profit margin improvement",
    "customer": "Customer acquisition cost reduction",
    "retention": "Customer retention rate increase",
}

# Keyed by industry name, but looked up with the organization's growth stage
# (see determine_prompting_strategy).
INDUSTRY_EXAMPLES: dict[str, list[str]] = {
    "technology": [
        "Implementing AI in a cloud-native environment",
        "Scaling machine learning models in production",
        "Integrating with microservices architecture",
    ],
    "finance": [
        "Fraud detection with machine learning",
        "Risk assessment automation",
        "Compliance monitoring with AI",
    ],
    "healthcare": [
        "Patient data analysis with privacy preservation",
        "Medical image processing",
        "Clinical decision support systems",
    ],
    "retail": [
        "Customer behavior prediction",
        "Inventory optimization",
        "Personalized recommendations",
    ],
}

LOW_BUDGET_THRESHOLD = 100  # in thousands, compared against the bucket's lower bound
LOW_READINESS_THRESHOLD = 5

QUESTION_STYLES = (
    "Use simple, direct questions with clear options, emphasizing cost-effective solutions",
    "Use technical questions with explanations, considering budget constraints",
    "Use advanced technical questions with industry context and budget optimization",
)

EXPLANATION_DEPTHS = (
    "Provide step-by-step explanations with basic terminology, focusing on cost-effective approaches",
    "Use technical terminology with moderate detail, considering budget implications",
    "Use advanced concepts with industry-specific context and budget optimization strategies",
)

BUDGET_EXAMPLE_SUFFIX = " (budget-aware implementation)"


def extract_technical_context(preferences: UserPreferences, query: str) -> TechnicalContext:
    """Map the declared technology stack and data landscape to technical context.

    ``query`` is accepted for signature parity with the other stages; it does
    not influence the result.
    """
    systems = preferences.business_systems
    stack = systems.technology_stack

    capabilities = [
        TECH_CAPABILITIES.get(tech, f"{tech} integration capabilities") for tech in stack
    ]

    limitations: list[str] = []
    if systems.primary_data_type == "unstructured":
        limitations.append("Complex data processing requirements")
    if systems.implementation_approach == "on-premise":
        limitations.append("Limited cloud scalability")

    integration_points = [f"Integration with {tech.upper()} system" for tech in stack]

    recommended_approaches: list[str] = []
    if "data-lake" in systems.data_storage_formats:
        recommended_approaches.append("Big data processing pipeline")
    if "bi" in stack:
        recommended_approaches.append("Analytics-driven implementation")

    return TechnicalContext(
        capabilities=capabilities,
        limitations=limitations,
        integration_points=integration_points,
        recommended_approaches=recommended_approaches,
    )


def parse_budget_floor(budget_range: str) -> int | None:
    """Return the leading number of a budget bucket, e.g. ``"50k-100k"`` -> 50.

    Only digits before the first ``-`` count. Returns None when there are none.
    """
    digits = re.sub(r"[^0-9]", "", budget_range.split("-")[0])
    return int(digits) if digits else None


def extract_business_context(preferences: UserPreferences, query: str) -> BusinessContext:
    """Map business priorities, budget and KPIs to business context.

    ``query`` is accepted for signature parity; it does not influence the result.
    """
    operations = preferences.business_context.business_operations
    profile = preferences.business_context.organization_profile
    impact = preferences.ai_readiness.business_impact
    readiness = preferences.ai_readiness.readiness_assessment
    budget_range = impact.budget_range

    priorities = [
        PRIORITY_LABELS.get(tag, tag)
        for tag in [*impact.priority_areas, *operations.business_challenges]
    ]

    constraints = [
        entry
        for entry in (
            budget_range
            and f"STRICT BUDGET CONSTRAINT: {budget_range} - Solutions must be within this budget range",
            impact.roi_timeframe and f"ROI timeframe: {impact.roi_timeframe}",
            profile.growth_stage and f"Growth stage: {profile.growth_stage}",
        )
        if entry
    ]

    risk_factors: list[str] = []
    if budget_range:
        floor = parse_budget_floor(budget_range)
        if floor is not None and floor < LOW_BUDGET_THRESHOLD:
            risk_factors.append("Limited budget requires cost-effective solutions")
            risk_factors.append("Need to prioritize essential features over nice-to-haves")
    if readiness.team_ai_literacy < LOW_READINESS_THRESHOLD:
        risk_factors.append("Limited AI expertise in team")
    if readiness.data_governance_maturity < LOW_READINESS_THRESHOLD:
        risk_factors.append("Data governance challenges")

    success_metrics = [KPI_METRICS.get(kpi, kpi) for kpi in operations.kpis]
    if budget_range:
        success_metrics.append("Cost-effectiveness within budget constraints")
    success_metrics.append("ROI alignment with expected timeframe")

    return BusinessContext(
        priorities=priorities,
        constraints=constraints,
        risk_factors=risk_factors,
        success_metrics=success_metrics,
    )


def estimate_timeline(complexity: int) -> str:
    if complexity > 7:
        return "6-12 months"
    if complexity > 4:
        return "3-6 months"
    return "1-3 months"


def assess_implementation_feasibility(preferences: UserPreferences) -> ImplementationContext:
    """Reduce the readiness scores to a feasibility score, complexity and timeline."""
    readiness = preferences.ai_readiness.readiness_assessment
    complexity = preferences.business_context.business_operations.decision_complexity

    mean = (
        readiness.team_ai_literacy
        + readiness.data_governance_maturity
        + readiness.change_management_capability
    ) / 3
    # Round half up; Python's round() would round half to even.
    feasibility = math.floor(mean + 0.5)

    resource_requirements: list[str] = []
    if readiness.team_ai_literacy < LOW_READINESS_THRESHOLD:
        resource_requirements.append("AI training and upskilling")
    if readiness.data_governance_maturity < LOW_READINESS_THRESHOLD:
        resource_requirements.append("Data governance implementation")
    if readiness.change_management_capability < LOW_READINESS_THRESHOLD:
        resource_requirements.append("Change management support")

    return ImplementationContext(
        feasibility=feasibility,
        complexity=complexity,
        timeline=estimate_timeline(complexity),
        resource_requirements=resource_requirements,
    )


def _literacy_tier(literacy: int) -> int:
    if literacy <= 3:
        return 0
    if literacy <= 7:
        return 1
    return 2


def determine_prompting_strategy(preferences: UserPreferences, query: str) -> PromptingStrategy:
    """Pick generation temperature, examples and response style.

    Temperature is 0.7 for teams with extensive AI experience and 0.5 otherwise;
    an "under X" budget bucket (``"<50k"``) pins it to 0.3.
    """
    readiness = preferences.ai_readiness.readiness_assessment
    budget_range = preferences.ai_readiness.business_impact.budget_range

    temperature = 0.7 if readiness.previous_ai_experience == "extensive" else 0.5
    if budget_range and "<" in budget_range:
        temperature = 0.3

    # NOTE: the table is keyed by industry but the lookup uses growth stage.
    growth_stage = preferences.business_context.organization_profile.growth_stage
    examples = list(INDUSTRY_EXAMPLES.get(growth_stage, []))
    if budget_range:
        examples = [f"{example}{BUDGET_EXAMPLE_SUFFIX}" for example in examples]

    tier = _literacy_tier(readiness.team_ai_literacy)

    return PromptingStrategy(
        temperature=temperature,
        examples=examples,
        question_style=QUESTION_STYLES[tier],
        explanation_depth=EXPLANATION_DEPTHS[tier],
    )


def transform_preference_context(preferences: UserPreferences, query: str) -> TransformedContext:
    """Run all four stages over one preference record."""
    context = TransformedContext(
        technical=extract_technical_context(preferences, query),
        business=extract_business_context(preferences, query),
        implementation=assess_implementation_feasibility(preferences),
        prompting_strategy=determine_prompting_strategy(preferences, query),
    )
    logger.debug(
        "Transformed preferences: feasibility=%d complexity=%d temperature=%.1f",
        context.implementation.feasibility,
        context.implementation.complexity,
        context.prompting_strategy.temperature,
    )
    return context
