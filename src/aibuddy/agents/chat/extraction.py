"""Keyword heuristics that fill session fields from the user's chat messages."""

from __future__ import annotations

from typing import Sequence

from aibuddy.agents.chat.prompts import SUGGESTION_TAGS
from aibuddy.schemas.session import ChatMessage, ChatSession, ExtractedInfo

# Checked in order; the first keyword found wins.
INDUSTRY_KEYWORDS = (
    ("manufacturing", "Manufacturing"),
    ("education", "Education"),
    ("sustainability", "Sustainability"),
    ("retail", "Retail"),
    ("healthcare", "Healthcare"),
    ("finance", "Finance"),
)

# field -> (keywords that must appear somewhere, keywords that select the line)
LINE_RULES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "current_process": (
        ("current process", "currently"),
        ("process", "currently", "manually", "workflow"),
    ),
    "available_data": (
        ("data", "collect"),
        ("data", "collect", "information", "database"),
    ),
    "success_metrics": (
        ("metrics", "success", "measure"),
        ("metrics", "success", "measure", "kpi"),
    ),
    "stakeholders": (
        ("stakeholder", "team", "department"),
        ("stakeholder", "team", "department", "management"),
    ),
    "timeline": (
        ("timeline", "deadline", "when"),
        ("timeline", "deadline", "months", "weeks", "years"),
    ),
    "budget": (
        ("budget", "cost", "spend"),
        ("budget", "cost", "dollar", "$", "spend"),
    ),
}

MIN_REFINEMENT_LENGTH = 10
MIN_FILLED_FIELDS = 2
MIN_MESSAGES = 4


def _first_matching_line(text: str, keywords: tuple[str, ...]) -> str:
    for line in text.split("\n"):
        lowered = line.lower()
        if any(keyword in lowered for keyword in keywords):
            return line
    return ""


def _business_problem(user_messages: list[str]) -> str:
    initial = user_messages[0]
    if initial not in SUGGESTION_TAGS:
        return initial
    # A suggestion tag is only a starting point; a substantial follow-up replaces it.
    if len(user_messages) > 1 and len(user_messages[1].strip()) > MIN_REFINEMENT_LENGTH:
        return user_messages[1]
    return initial


def extract_session_info(messages: Sequence[ChatMessage]) -> ExtractedInfo | None:
    """Recover session fields from the user's side of the conversation.

    Returns None when the user has not said anything yet.
    """
    user_messages = [m.content for m in messages if m.role == "user"]
    if not user_messages:
        return None

    text = "\n".join(user_messages)
    lowered = text.lower()

    industry = next((label for keyword, label in INDUSTRY_KEYWORDS if keyword in lowered), "")

    fields: dict[str, str] = {}
    for field, (triggers, line_keywords) in LINE_RULES.items():
        if any(trigger in lowered for trigger in triggers):
            fields[field] = _first_matching_line(text, line_keywords)
        else:
            fields[field] = ""

    return ExtractedInfo(
        industry=industry,
        business_problem=_business_problem(user_messages),
        **fields,
    )


def should_generate_outputs(messages: Sequence[ChatMessage], session: ChatSession) -> bool:
    """Whether enough has been gathered to generate the planning documents.

    Needs a business problem plus at least one other field, and at least two
    full exchanges.
    """
    return (
        bool(session.business_problem)
        and session.filled_fields() >= MIN_FILLED_FIELDS
        and len(messages) >= MIN_MESSAGES
    )
