"""Chat wizard session state."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# Session fields the wizard tries to fill from the conversation, in prompt order.
INFO_FIELDS = (
    "industry",
    "business_problem",
    "current_process",
    "available_data",
    "success_metrics",
    "stakeholders",
    "timeline",
    "budget",
)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class ExtractedInfo(BaseModel):
    """Session fields recovered from the user's messages."""

    industry: str = ""
    business_problem: str = ""
    current_process: str = ""
    available_data: str = ""
    success_metrics: str = ""
    stakeholders: str = ""
    timeline: str = ""
    budget: str = ""


class ChatSession(BaseModel):
    """A wizard conversation and what has been learned from it so far."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:21])
    title: str = "Untitled Session"
    project: str = ""
    industry: str = ""
    business_problem: str = ""
    current_process: str = ""
    available_data: str = ""
    success_metrics: str = ""
    stakeholders: str = ""
    timeline: str = ""
    budget: str = ""
    is_complete: bool = False
    messages: list[ChatMessage] = []
    created: str = Field(default_factory=lambda: datetime.now().isoformat())

    def filled_fields(self) -> int:
        return sum(1 for name in INFO_FIELDS if getattr(self, name))

    def merge(self, info: ExtractedInfo) -> None:
        """Copy non-empty extracted values onto the session."""
        for name in INFO_FIELDS:
            value = getattr(info, name)
            if value:
                setattr(self, name, value)


class ChatTurn(BaseModel):
    """Result of one assistant turn in the wizard."""

    ai_response: str
    extracted_info: ExtractedInfo | None = None
    generate_outputs: bool = False
