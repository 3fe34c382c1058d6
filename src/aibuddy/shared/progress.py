"""Rich progress display and user interaction for the CLI."""

from __future__ import annotations

import asyncio
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Prompt

console = Console()


class TaskProgress:
    """Tracks several concurrent generation tasks with one spinner each."""

    def __init__(self) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "TaskProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start(self, name: str) -> None:
        tid = self._progress.add_task(f"[cyan]{name}[/]", total=None)
        self._task_ids[name] = tid

    def finish(self, name: str) -> None:
        if name in self._task_ids:
            self._progress.update(
                self._task_ids[name],
                description=f"[green]✓ {name}[/]",
                completed=True,
            )

    def fail(self, name: str, error: str) -> None:
        if name in self._task_ids:
            self._progress.update(
                self._task_ids[name],
                description=f"[red]✗ {name}: {error}[/]",
                completed=True,
            )

    def print_phase(self, label: str) -> None:
        """Print a phase header outside the progress display."""
        self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))


async def ask_user(question: str) -> str | None:
    """Prompt for a line of input without blocking the event loop.

    Returns None when stdin is closed or not interactive, which ends the
    conversation.
    """
    if not sys.stdin.isatty():
        console.print("[yellow]Non-interactive session, nothing to ask.[/]")
        return None

    # Temporarily raise the root log level so log lines don't interleave with the prompt.
    root_logger = logging.getLogger()
    prev_level = root_logger.level
    root_logger.setLevel(logging.CRITICAL)

    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, lambda: Prompt.ask(f"\n[yellow]{question}[/]"))
    except EOFError:
        return None
    finally:
        root_logger.setLevel(prev_level)
