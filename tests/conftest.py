"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from aibuddy.schemas.preferences import UserPreferences
from aibuddy.shared.llm_client import LLMClient


def make_preferences(**overrides: Any) -> UserPreferences:
    """Build a preference record from flat keyword overrides.

    Keys are the leaf field names, e.g. ``budget_range="<50k"``.
    """
    sections = {
        "business_systems": (
            "technology_stack", "custom_tools", "primary_data_type", "data_storage_formats",
            "implementation_approach", "security_requirements", "custom_security_requirements",
        ),
        "organization_profile": ("company_size", "annual_revenue", "growth_stage"),
        "business_operations": ("decision_complexity", "business_challenges", "kpis", "custom_kpis"),
        "business_impact": ("priority_areas", "budget_range", "roi_timeframe"),
        "readiness_assessment": (
            "team_ai_literacy", "previous_ai_experience",
            "data_governance_maturity", "change_management_capability",
        ),
    }
    data: dict[str, dict[str, Any]] = {name: {} for name in sections}
    for key, value in overrides.items():
        section = next(name for name, fields in sections.items() if key in fields)
        data[section][key] = value

    return UserPreferences(
        business_systems=data["business_systems"],
        business_context={
            "organization_profile": data["organization_profile"],
            "business_operations": data["business_operations"],
        },
        ai_readiness={
            "business_impact": data["business_impact"],
            "readiness_assessment": data["readiness_assessment"],
        },
    )


def make_openai_response(content: str | None) -> SimpleNamespace:
    """Build a fake OpenAI chat completion with the given text content."""
    message = SimpleNamespace(content=content, tool_calls=None)
    choice = SimpleNamespace(message=message)
    usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5)
    return SimpleNamespace(choices=[choice], usage=usage)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Return an LLMClient with a mocked OpenAI SDK underneath."""
    client = LLMClient.__new__(LLMClient)
    client._client = AsyncMock()
    client.model = "gpt-4o"
    return client


@pytest.fixture
def prefs():
    """Factory fixture: ``prefs(budget_range="<50k", team_ai_literacy=2)``."""
    return make_preferences


@pytest.fixture
def openai_response():
    """Factory fixture for fake OpenAI responses."""
    return make_openai_response


@pytest.fixture
def sample_preferences() -> UserPreferences:
    return make_preferences(
        technology_stack=["crm", "bi"],
        primary_data_type="structured",
        data_storage_formats=["sql"],
        implementation_approach="cloud",
        growth_stage="growth",
        decision_complexity=6,
        business_challenges=["scalability"],
        kpis=["revenue", "market"],
        priority_areas=["cost-reduction"],
        budget_range="100k-250k",
        roi_timeframe="6m-1y",
        team_ai_literacy=2,
        previous_ai_experience="none",
        data_governance_maturity=6,
        change_management_capability=4,
    )


@pytest.fixture
def prefs_file(tmp_path: Path) -> Path:
    """Write a camelCase preferences YAML, as exported by the web app."""
    path = tmp_path / "preferences.yml"
    path.write_text(
        """\
businessSystems:
  technologyStack: [crm, bi]
  primaryDataType: unstructured
  dataStorageFormats: [data-lake]
  implementationApproach: on-premise
businessContext:
  organizationProfile:
    growthStage: startup
  businessOperations:
    decisionComplexity: 8
    kpis: [retention]
aiReadiness:
  businessImpact:
    priorityAreas: [revenue-growth]
    budgetRange: "<50k"
  readinessAssessment:
    teamAiLiteracy: 8
    previousAiExperience: extensive
    dataGovernanceMaturity: 9
    changeManagementCapability: 7
"""
    )
    return path
