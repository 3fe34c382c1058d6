"""Markdown builders — render solutions and planning documents for reading."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from aibuddy.schemas.documents import OutputDocument
from aibuddy.schemas.session import INFO_FIELDS, ChatSession
from aibuddy.schemas.solution import SolutionResponse

# Prose fields rendered as paragraphs right under a document's title.
_LEAD_KEYS = ("overview", "executiveSummary", "problemStatement", "proposedSolution", "recommendation")


def _humanize(key: str) -> str:
    """``"nonFinancialBenefits"`` -> ``"Non Financial Benefits"``."""
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", key).replace("_", " ")
    return words[:1].upper() + words[1:]


def _render_value(value: Any, indent: int = 0) -> list[str]:
    pad = "  " * indent
    lines: list[str] = []
    if isinstance(value, dict):
        # Named records ({"name": ..., "description": ...}) read best as one bullet.
        label = value.get("name") or value.get("title") or value.get("role") or value.get("system")
        if label and indent > 0:
            rest = {k: v for k, v in value.items() if k not in ("name", "title", "role", "system")}
            lines.append(f"{pad}- **{label}**")
            for k, v in rest.items():
                lines.extend(_render_field(k, v, indent + 1))
            return lines
        for k, v in value.items():
            lines.extend(_render_field(k, v, indent))
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, (dict, list)):
                lines.extend(_render_value(item, indent + 1 if indent == 0 else indent))
            else:
                lines.append(f"{pad}- {item}")
    else:
        lines.append(f"{pad}{value}")
    return lines


def _render_field(key: str, value: Any, indent: int) -> list[str]:
    pad = "  " * indent
    if value in ("", None, [], {}):
        return []
    if isinstance(value, (dict, list)):
        return [f"{pad}- *{_humanize(key)}:*", *_render_value(value, indent + 1)]
    return [f"{pad}- *{_humanize(key)}:* {value}"]


def render_solution_markdown(query: str, response: SolutionResponse) -> str:
    """Render a solution response into a Markdown string."""
    sections: list[str] = []
    sections.append("# AI Solution\n")
    sections.append(f"*Generated: {datetime.now().isoformat(timespec='seconds')}*\n")
    sections.append(f"> {query}\n")

    sections.append("## Solution\n")
    sections.append(f"{response.solution or '_No solution returned._'}\n")

    if response.recommendations:
        sections.append("## Recommendations\n")
        for rec in response.recommendations:
            sections.append(f"- {rec}")
        sections.append("")

    if response.next_steps:
        sections.append("## Next Steps\n")
        for i, step in enumerate(response.next_steps, 1):
            sections.append(f"{i}. {step}")
        sections.append("")

    if response.reasoning:
        sections.append("## Reasoning\n")
        sections.append(f"{response.reasoning}\n")

    sections.append(f"**Confidence:** {response.confidence:.0%}")
    return "\n".join(sections) + "\n"


def render_document_markdown(document: OutputDocument) -> str:
    sections: list[str] = [f"## {document.title}\n"]
    if document.is_fallback:
        sections.append("> ⚠️ Generation failed — placeholder content.\n")

    content = document.content
    for key in _LEAD_KEYS:
        if content.get(key):
            sections.append(f"{content[key]}\n")

    for key, value in content.items():
        if key == "title" or key in _LEAD_KEYS or value in ("", None, [], {}):
            continue
        sections.append(f"### {_humanize(key)}\n")
        sections.extend(_render_value(value))
        sections.append("")
    return "\n".join(sections)


def render_documents_markdown(session: ChatSession, documents: list[OutputDocument]) -> str:
    """Render a session summary followed by each planning document."""
    sections: list[str] = []
    sections.append(f"# Planning Documents: {session.title}\n")
    sections.append(f"*Session `{session.id}` — generated {datetime.now().isoformat(timespec='seconds')}*\n")

    sections.append("## Session Summary\n")
    for name in INFO_FIELDS:
        value = getattr(session, name)
        sections.append(f"- **{_humanize(name).title()}:** {value or 'Not specified'}")
    sections.append("")

    for document in documents:
        sections.append(render_document_markdown(document))

    return "\n".join(sections)
