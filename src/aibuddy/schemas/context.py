"""Pydantic models for the transformed preference context."""

from pydantic import BaseModel


class TechnicalContext(BaseModel):
    capabilities: list[str] = []
    limitations: list[str] = []
    integration_points: list[str] = []
    recommended_approaches: list[str] = []


class BusinessContext(BaseModel):
    priorities: list[str] = []
    constraints: list[str] = []
    risk_factors: list[str] = []
    success_metrics: list[str] = []


class ImplementationContext(BaseModel):
    feasibility: int = 0          # 0-10
    complexity: int = 1           # 1-10
    timeline: str = ""            # "1-3 months" | "3-6 months" | "6-12 months"
    resource_requirements: list[str] = []


class PromptingStrategy(BaseModel):
    temperature: float = 0.5      # 0.0-1.0
    examples: list[str] = []
    question_style: str = ""
    explanation_depth: str = ""


class TransformedContext(BaseModel):
    """Everything derived from a preference record for one query.

    Recomputed on every call and never persisted.
    """

    technical: TechnicalContext
    business: BusinessContext
    implementation: ImplementationContext
    prompting_strategy: PromptingStrategy
