"""Planning document records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    IMPLEMENTATION = "implementation"
    COST = "cost"
    DESIGN = "design"
    BUSINESS = "business"
    AI = "ai"

    @property
    def label(self) -> str:
        return DOCUMENT_LABELS[self]


DOCUMENT_LABELS: dict[DocumentType, str] = {
    DocumentType.IMPLEMENTATION: "Implementation Plan",
    DocumentType.COST: "Cost Estimate",
    DocumentType.DESIGN: "Design Concept",
    DocumentType.BUSINESS: "Business Case",
    DocumentType.AI: "AI Considerations",
}


class OutputDocument(BaseModel):
    """One generated planning document.

    ``content`` keeps the model's JSON as-is; its shape differs per type.
    ``is_fallback`` marks placeholder content returned after a failed call.
    """

    session_id: str
    type: DocumentType
    content: dict[str, Any]
    is_fallback: bool = False
    created: str = Field(default_factory=lambda: datetime.now().isoformat())

    @property
    def title(self) -> str:
        return str(self.content.get("title") or self.type.label)
