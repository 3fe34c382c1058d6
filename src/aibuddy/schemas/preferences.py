"""User preference record — the questionnaire answers that steer prompt construction.

Every leaf is optional. Absent or null values fall back to their defaults so
the context transformer never has to guard against missing keys. Keys may be
given in snake_case or in the web app's camelCase.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

SCALE_MIN = 1
SCALE_MAX = 10
SCALE_DEFAULT = 5

PRIMARY_DATA_TYPES = ("structured", "unstructured", "semi-structured")
IMPLEMENTATION_APPROACHES = ("cloud", "on-premise", "hybrid")
GROWTH_STAGES = ("startup", "early-growth", "growth", "mature", "enterprise")
AI_EXPERIENCE_LEVELS = ("none", "experimental", "limited", "extensive")
BUDGET_RANGES = ("<50k", "50k-100k", "100k-250k", "250k-500k", "500k-1m", "1m+")
ROI_TIMEFRAMES = ("<6m", "6m-1y", "1y-2y", "2y-3y", "3y+")


def clamp_scale(value: Any) -> int:
    """Coerce a 1-10 scale answer, clamping out-of-range values.

    Unparseable values fall back to the questionnaire default.
    """
    if value is None or isinstance(value, bool):
        return SCALE_DEFAULT
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return SCALE_DEFAULT
    return max(SCALE_MIN, min(SCALE_MAX, number))


def _closed_enum(value: Any, allowed: tuple[str, ...]) -> str:
    if isinstance(value, str) and value in allowed:
        return value
    return ""


class _PreferenceModel(BaseModel):
    """Shared behaviour: camelCase aliases and null-means-absent."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("*", mode="before")
    @classmethod
    def normalize_tag_lists(cls, v: Any) -> Any:
        # Empty entries left behind by form widgets are dropped.
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v if item]
        return v


class BusinessSystems(_PreferenceModel):
    """Technology stack and data landscape."""

    technology_stack: list[str] = []
    custom_tools: str = ""
    primary_data_type: str = ""
    data_storage_formats: list[str] = []
    implementation_approach: str = ""
    security_requirements: list[str] = []
    custom_security_requirements: str = ""

    @field_validator("primary_data_type", mode="before")
    @classmethod
    def check_data_type(cls, v: Any) -> str:
        return _closed_enum(v, PRIMARY_DATA_TYPES)

    @field_validator("implementation_approach", mode="before")
    @classmethod
    def check_approach(cls, v: Any) -> str:
        return _closed_enum(v, IMPLEMENTATION_APPROACHES)


class OrganizationProfile(_PreferenceModel):
    company_size: str = ""
    annual_revenue: str = ""
    growth_stage: str = ""

    @field_validator("growth_stage", mode="before")
    @classmethod
    def check_growth_stage(cls, v: Any) -> str:
        return _closed_enum(v, GROWTH_STAGES)


class BusinessOperations(_PreferenceModel):
    decision_complexity: int = SCALE_DEFAULT
    business_challenges: list[str] = []
    kpis: list[str] = []
    custom_kpis: str = ""

    @field_validator("decision_complexity", mode="before")
    @classmethod
    def clamp(cls, v: Any) -> int:
        return clamp_scale(v)


class BusinessContextPreferences(_PreferenceModel):
    organization_profile: OrganizationProfile = OrganizationProfile()
    business_operations: BusinessOperations = BusinessOperations()


class BusinessImpact(_PreferenceModel):
    priority_areas: list[str] = []
    budget_range: str = ""   # bucket, e.g. "<50k", "100k-250k"
    roi_timeframe: str = ""  # bucket, e.g. "6m-1y"

    @field_validator("budget_range", mode="before")
    @classmethod
    def check_budget(cls, v: Any) -> str:
        return _closed_enum(v, BUDGET_RANGES)

    @field_validator("roi_timeframe", mode="before")
    @classmethod
    def check_roi(cls, v: Any) -> str:
        return _closed_enum(v, ROI_TIMEFRAMES)


class ReadinessAssessment(_PreferenceModel):
    team_ai_literacy: int = SCALE_DEFAULT
    previous_ai_experience: str = ""
    data_governance_maturity: int = SCALE_DEFAULT
    change_management_capability: int = SCALE_DEFAULT

    @field_validator(
        "team_ai_literacy",
        "data_governance_maturity",
        "change_management_capability",
        mode="before",
    )
    @classmethod
    def clamp(cls, v: Any) -> int:
        return clamp_scale(v)

    @field_validator("previous_ai_experience", mode="before")
    @classmethod
    def check_experience(cls, v: Any) -> str:
        return _closed_enum(v, AI_EXPERIENCE_LEVELS)


class AIReadiness(_PreferenceModel):
    business_impact: BusinessImpact = BusinessImpact()
    readiness_assessment: ReadinessAssessment = ReadinessAssessment()


class UserPreferences(_PreferenceModel):
    """The full preference record a user maintains for their account."""

    business_systems: BusinessSystems = BusinessSystems()
    business_context: BusinessContextPreferences = BusinessContextPreferences()
    ai_readiness: AIReadiness = AIReadiness()

    # Dashboard toggles stored alongside the questionnaire.
    ai_training: bool = False
    performance_metrics: bool = True
    impact_analysis: bool = True
