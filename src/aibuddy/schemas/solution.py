"""Solution request/response models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class SolutionRequest(BaseModel):
    """A fully prepared chat-completion request."""

    messages: list[dict[str, str]]
    temperature: float
    max_tokens: int = 2_000

    @property
    def system_prompt(self) -> str:
        return self.messages[0]["content"]


class SolutionResponse(BaseModel):
    """The model's answer to a solution query."""

    solution: str = ""
    recommendations: list[str] = []
    next_steps: list[str] = Field(
        default=[], validation_alias=AliasChoices("next_steps", "nextSteps"),
    )
    confidence: float = 0.0      # 0.0-1.0
    reasoning: str = ""

    @field_validator("solution", "reasoning", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("recommendations", "next_steps", mode="before")
    @classmethod
    def coerce_items_to_text(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [item if isinstance(item, str) else str(item) for item in v]
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        try:
            value = float(v)
        except (TypeError, ValueError):
            return 0.0
        # Some models answer on a 0-100 scale.
        if value > 1.0:
            value /= 100
        return max(0.0, min(1.0, value))
