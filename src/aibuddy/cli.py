"""Typer CLI — ``aibuddy validate``, ``prompt``, ``solve``, ``chat`` and ``documents``."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from aibuddy.config import load_preferences, load_session, save_session

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="aibuddy",
    help="AI Buddy — shape an AI solution idea and generate planning documents.",
    no_args_is_help=True,
)
console = Console()

EXIT_COMMANDS = {"exit", "quit", "done"}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO — noisy and unhelpful for users
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _make_client(dry_run: bool):
    if dry_run:
        from aibuddy.shared.llm_client import DryRunClient
        return DryRunClient()
    from aibuddy.shared.llm_client import LLMClient
    return LLMClient()


def parse_context_pairs(pairs: list[str]) -> dict[str, str]:
    """Turn ``["industry=retail", ...]`` into a dict, keeping the given order."""
    context: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--context")
        context[key.strip()] = value.strip()
    return context


def _load_preferences_or_exit(path: Path | None):
    if path is None:
        return None
    try:
        return load_preferences(path)
    except Exception as exc:
        console.print(f"[red]Preferences validation failed:[/] {exc}")
        raise typer.Exit(code=1)


@app.command()
def validate(
    preferences: Path = typer.Option(..., "--preferences", "-p", help="Path to a preferences YAML/JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a preferences file and summarize how it will steer prompts."""
    _setup_logging(verbose)
    from aibuddy.prompting.transformer import transform_preference_context

    prefs = _load_preferences_or_exit(preferences)
    context = transform_preference_context(prefs, "")
    systems = prefs.business_systems
    impact = prefs.ai_readiness.business_impact

    console.print("[green]Preferences are valid![/]\n")
    console.print(f"  Technology stack: {', '.join(systems.technology_stack) or '(none)'}")
    console.print(f"  Data type:        {systems.primary_data_type or '(not set)'}")
    console.print(f"  Deployment:       {systems.implementation_approach or '(not set)'}")
    console.print(f"  Budget:           {impact.budget_range or '(not set)'}")
    console.print(f"  ROI timeframe:    {impact.roi_timeframe or '(not set)'}")
    console.print(f"  Feasibility:      {context.implementation.feasibility}/10")
    console.print(f"  Complexity:       {context.implementation.complexity}/10 ({context.implementation.timeline})")
    console.print(f"  Temperature:      {context.prompting_strategy.temperature}")


@app.command()
def prompt(
    query: str = typer.Option(..., "--query", "-q", help="The question to build a prompt for"),
    preferences: Optional[Path] = typer.Option(None, "--preferences", "-p", help="Path to a preferences YAML/JSON file"),
    context: list[str] = typer.Option([], "--context", "-x", help="Extra context as key=value (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print the system prompt and temperature a solution request would use."""
    _setup_logging(verbose)
    from aibuddy.agents.solution.agent import build_solution_request

    prefs = _load_preferences_or_exit(preferences)
    request = build_solution_request(query, prefs, parse_context_pairs(context))
    # Plain print: the prompt must come out byte-for-byte, without Rich markup.
    typer.echo(request.system_prompt)
    console.print(f"\n[dim]temperature={request.temperature} max_tokens={request.max_tokens}[/]")


@app.command()
def solve(
    query: str = typer.Option(..., "--query", "-q", help="The question to answer"),
    preferences: Optional[Path] = typer.Option(None, "--preferences", "-p", help="Path to a preferences YAML/JSON file"),
    context: list[str] = typer.Option([], "--context", "-x", help="Extra context as key=value (repeatable)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for solution.json and solution.md"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned responses (no API calls)."),
) -> None:
    """Generate a preference-aware solution for a query."""
    _setup_logging(verbose)
    prefs = _load_preferences_or_exit(preferences)
    extra = parse_context_pairs(context)

    if dry_run:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")

    asyncio.run(_run_solve(query, prefs, extra, output=output, dry_run=dry_run))


async def _run_solve(query, prefs, extra, *, output: Path | None, dry_run: bool) -> None:
    from aibuddy.agents.solution.agent import SolutionAgent
    from aibuddy.output.markdown import render_solution_markdown

    agent = SolutionAgent(_make_client(dry_run))
    with console.status("Generating solution…"):
        response = await agent.generate(query, prefs, extra)

    markdown = render_solution_markdown(query, response)
    if output is None:
        typer.echo(markdown)
        return

    output.mkdir(parents=True, exist_ok=True)
    (output / "solution.json").write_text(response.model_dump_json(indent=2))
    md_path = output / "solution.md"
    md_path.write_text(markdown)
    console.print(f"[green]Solution written to:[/] {md_path}")


@app.command()
def chat(
    output: Path = typer.Option(Path("./output"), "--output", "-o", help="Directory for session.json"),
    title: str = typer.Option("Untitled Session", "--title", "-t"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned responses (no API calls)."),
) -> None:
    """Talk through an AI solution idea with the wizard; saves the session."""
    _setup_logging(verbose)
    asyncio.run(_run_chat(output, title=title, dry_run=dry_run))


async def _run_chat(out_dir: Path, *, title: str, dry_run: bool) -> None:
    from aibuddy.agents.chat.agent import ChatAgent
    from aibuddy.agents.chat.prompts import SUGGESTION_TAGS
    from aibuddy.schemas.session import ChatSession
    from aibuddy.shared.progress import ask_user

    session = ChatSession(title=title)
    agent = ChatAgent(_make_client(dry_run))

    console.print("[bold]Hi, I'm AI Buddy.[/] What would you like to do with AI?")
    for tag in SUGGESTION_TAGS:
        console.print(f"  • {tag}")
    console.print(f"[dim]Type {' / '.join(sorted(EXIT_COMMANDS))} to finish.[/]")

    while True:
        message = await ask_user("You")
        if message is None or message.strip().lower() in EXIT_COMMANDS:
            break
        if not message.strip():
            continue
        with console.status("AI Buddy is thinking…"):
            turn = await agent.respond(session, message)
        console.print(f"\n[bold cyan]AI Buddy:[/] {turn.ai_response}")
        if turn.generate_outputs and not session.is_complete:
            session.is_complete = True
            console.print(
                "[green]Enough information gathered — run "
                "[bold]aibuddy documents[/] on the saved session to generate outputs.[/]"
            )

    path = save_session(session, out_dir / "session.json")
    console.print(f"[green]Session saved to:[/] {path}")


@app.command()
def documents(
    session: Path = typer.Option(..., "--session", "-s", help="Path to a session.json saved by `aibuddy chat`"),
    output: Path = typer.Option(Path("./output"), "--output", "-o", help="Output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned responses (no API calls)."),
) -> None:
    """Generate the five planning documents for a wizard session."""
    _setup_logging(verbose)
    try:
        chat_session = load_session(session)
    except Exception as exc:
        console.print(f"[red]Could not load session:[/] {exc}")
        raise typer.Exit(code=1)

    if not chat_session.business_problem:
        console.print("[yellow]Session has no business problem yet — documents will be generic.[/]")
    if dry_run:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")

    asyncio.run(_run_documents(chat_session, output, dry_run=dry_run))


async def _run_documents(chat_session, out_dir: Path, *, dry_run: bool) -> None:
    from aibuddy.agents.documents.agent import DocumentAgent
    from aibuddy.output.markdown import render_documents_markdown
    from aibuddy.schemas.documents import DocumentType
    from aibuddy.shared.progress import TaskProgress

    agent = DocumentAgent(_make_client(dry_run))

    with TaskProgress() as progress:
        progress.print_phase("Generating planning documents")
        for doc_type in DocumentType:
            progress.start(doc_type.label)

        def _done(doc_type, document) -> None:
            if document.is_fallback:
                progress.fail(doc_type.label, "generation failed, using placeholder")
            else:
                progress.finish(doc_type.label)

        docs = await agent.generate_all(chat_session, on_document=_done)

    out_dir.mkdir(parents=True, exist_ok=True)
    json_path = out_dir / "documents.json"
    json_path.write_text(json.dumps([d.model_dump(mode="json") for d in docs], indent=2))
    md_path = out_dir / "planning-documents.md"
    md_path.write_text(render_documents_markdown(chat_session, docs))
    console.print(f"[green]Documents written to:[/] {json_path}")
    console.print(f"[green]Markdown report written to:[/] {md_path}")
