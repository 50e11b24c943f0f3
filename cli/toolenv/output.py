"""Rich console output utilities for the toolenv CLI.

Status output goes to stderr; stdout is reserved for the shell script that
``toolenv activate`` emits for ``eval``.
"""

import os
import shlex
from typing import Any

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from orchestrator.activator import ActivationResult

console = Console(stderr=True)


class TaskProgress:
    """Progress reporter backed by one rich progress task."""

    def __init__(self, progress: Progress, task_id: TaskID):
        self.progress = progress
        self.task_id = task_id

    def set_total(self, total: float | None) -> None:
        self.progress.update(self.task_id, total=total)

    def advance(self, amount: float = 1) -> None:
        self.progress.advance(self.task_id, amount)


class PipelineDisplay:
    """Live progress display with one row per setup task."""

    def __init__(self) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=False,
        )
        # Current row per extension
        self._current: dict[str, TaskID] = {}

    def reporter(self, extension: str, step: str) -> TaskProgress:
        """Create the reporter for a task; the extension's previous row is marked done."""
        if extension in self._current:
            self._complete(self._current[extension])
        task_id = self.progress.add_task(f"[cyan]{extension}[/cyan] {step}", total=None)
        self._current[extension] = task_id
        return TaskProgress(self.progress, task_id)

    def _complete(self, task_id: TaskID) -> None:
        task = next(t for t in self.progress.tasks if t.id == task_id)
        if task.total is None:
            self.progress.update(task_id, total=1, completed=1)
        else:
            self.progress.update(task_id, completed=task.total)

    def __enter__(self) -> "PipelineDisplay":
        self.progress.__enter__()
        return self

    def __exit__(self, *args):
        self.progress.__exit__(*args)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {message}")


def print_summary(result: ActivationResult) -> None:
    """Print per-extension activation status."""
    for name in result.applied:
        if any(f.extension == name for f in result.failures):
            continue
        if name in result.installed:
            print_success(f"{name} installed")
        else:
            print_success(f"{name} ready")

    for failure in result.failures:
        print_error(str(failure))


def print_extensions(rows: list[dict[str, Any]]) -> None:
    """Print registered extensions as a table."""
    table = Table(title="Toolchains")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Used", justify="center")
    table.add_column("Version")
    table.add_column("Installed", justify="center")

    for row in rows:
        used = row.get("used", False)
        installed = row.get("installed", False)
        table.add_row(
            row["key"],
            row["name"],
            "[green]yes[/green]" if used else "[dim]no[/dim]",
            row.get("version") or "-",
            ("[green]yes[/green]" if installed else "[yellow]no[/yellow]") if used else "-",
        )

    console.print(table)


def render_script(result: ActivationResult, path_var: str = "PATH") -> str:
    """Render merged contributions as a POSIX shell script.

    Args:
        result: Activation result.
        path_var: Search-path variable to prepend to.

    Returns:
        Script text suitable for ``eval``.
    """
    lines: list[str] = []

    for key, value in result.environment.items():
        lines.append(f"export {key}={shlex.quote(value)}")

    if result.paths:
        joined = os.pathsep.join(result.paths)
        lines.append(f'export {path_var}={shlex.quote(joined)}"{os.pathsep}${path_var}"')

    for name, command in result.aliases.items():
        lines.append(f"alias {name}={shlex.quote(command)}")

    return "\n".join(lines)
