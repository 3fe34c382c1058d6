"""File loaders — preference records (YAML or JSON) and saved wizard sessions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from aibuddy.schemas.preferences import UserPreferences
from aibuddy.schemas.session import ChatSession


def _read_mapping(path: str | Path, kind: str) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{kind} file not found: {path}")

    # JSON is valid YAML, so one loader covers both formats.
    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"{kind} file must be a YAML mapping, got {type(raw).__name__}")
    return raw


def load_preferences(path: str | Path) -> UserPreferences:
    """Load and validate a preference record.

    Accepts either the bare record or one wrapped in a top-level
    ``preferences:`` key. Raises ``FileNotFoundError`` if the path doesn't
    exist and ``pydantic.ValidationError`` if the content is invalid.
    """
    raw = _read_mapping(path, "Preferences")
    if isinstance(raw.get("preferences"), dict):
        raw = raw["preferences"]
    # Lists with only commented-out items load as None; the schema turns
    # None into the field default.
    return UserPreferences.model_validate(raw)


def load_session(path: str | Path) -> ChatSession:
    """Load a wizard session saved by ``save_session``."""
    raw = _read_mapping(path, "Session")
    return ChatSession.model_validate(raw)


def save_session(session: ChatSession, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(session.model_dump_json(indent=2))
    return path
