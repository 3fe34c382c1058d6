"""CLI smoke tests — every command runs offline with --dry-run."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from aibuddy.cli import app, parse_context_pairs
from aibuddy.config import load_session, save_session
from aibuddy.schemas.session import ChatSession

runner = CliRunner()


def test_parse_context_pairs() -> None:
    assert parse_context_pairs(["industry=retail", " size = 12 "]) == {"industry": "retail", "size": "12"}
    assert parse_context_pairs(["note=a=b"]) == {"note": "a=b"}


class TestValidate:
    def test_valid_file(self, prefs_file: Path) -> None:
        result = runner.invoke(app, ["validate", "-p", str(prefs_file)])
        assert result.exit_code == 0
        assert "Preferences are valid!" in result.output
        assert "<50k" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", "-p", str(tmp_path / "missing.yml")])
        assert result.exit_code == 1
        assert "validation failed" in result.output


class TestPrompt:
    def test_prints_prompt(self, prefs_file: Path) -> None:
        result = runner.invoke(
            app, ["prompt", "-q", "How do I automate invoicing?", "-p", str(prefs_file), "-x", "industry=retail"]
        )
        assert result.exit_code == 0
        assert "IMPORTANT BUDGET CONSTRAINT:" in result.output
        assert "- industry: retail" in result.output
        assert "User Query:\nHow do I automate invoicing?" in result.output
        assert "temperature=0.3" in result.output

    def test_without_preferences(self) -> None:
        result = runner.invoke(app, ["prompt", "-q", "Hello?"])
        assert result.exit_code == 0
        assert "User Query: Hello?" in result.output

    def test_bad_context_pair(self) -> None:
        result = runner.invoke(app, ["prompt", "-q", "Hello?", "-x", "no-equals-sign"])
        assert result.exit_code != 0


class TestDryRunCommands:
    def test_solve(self, prefs_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["solve", "-q", "How do I automate invoicing?", "-p", str(prefs_file), "-o", str(out), "--dry-run"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads((out / "solution.json").read_text())
        assert data["solution"]
        assert data["next_steps"]
        assert (out / "solution.md").read_text().startswith("# AI Solution")

    def test_solve_to_stdout(self) -> None:
        result = runner.invoke(app, ["solve", "-q", "Where do I start?", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "## Solution" in result.output

    def test_chat_without_terminal_saves_session(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["chat", "-o", str(tmp_path), "-t", "Quoting", "--dry-run"])
        assert result.exit_code == 0, result.output
        session = load_session(tmp_path / "session.json")
        assert session.title == "Quoting"
        assert session.messages == []

    def test_documents(self, tmp_path: Path) -> None:
        session_path = save_session(
            ChatSession(title="Invoices", business_problem="Invoice entry is slow", industry="Retail"),
            tmp_path / "session.json",
        )
        out = tmp_path / "docs"
        result = runner.invoke(app, ["documents", "-s", str(session_path), "-o", str(out), "--dry-run"])

        assert result.exit_code == 0, result.output
        documents = json.loads((out / "documents.json").read_text())
        assert [d["type"] for d in documents] == ["implementation", "cost", "design", "business", "ai"]
        assert not any(d["is_fallback"] for d in documents)
        assert (out / "planning-documents.md").read_text().startswith("# Planning Documents: Invoices")

    def test_documents_missing_session(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["documents", "-s", str(tmp_path / "nope.json"), "--dry-run"])
        assert result.exit_code == 1
