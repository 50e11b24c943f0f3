"""toolenv CLI.

Activate a workspace from an interactive shell:

    eval "$(toolenv activate)"
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer

from cli.toolenv.output import (
    PipelineDisplay,
    print_error,
    print_extensions,
    print_info,
    print_summary,
    print_warning,
    render_script,
)
from extensions.config import ConfigDecodeError
from orchestrator.activator import ActivationError, ActivationResult, Activator, build_registry
from settings.config import Config, get_config
from workspace.config import WorkspaceConfig, WorkspaceNotFoundError, load_workspace

app = typer.Typer(
    name="toolenv",
    help="toolenv - per-workspace developer toolchains",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    config = get_config()
    level = "DEBUG" if verbose else config.logging.level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=config.logging.format,
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_workspace(config: Config, workspace: Optional[Path]) -> WorkspaceConfig:
    try:
        return load_workspace(workspace, filename=config.activation.workspace_file)
    except WorkspaceNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _run(
    workspace: Optional[Path],
    parallel: Optional[bool],
    fail_fast: Optional[bool],
    install: bool,
) -> ActivationResult:
    config = get_config()
    overrides = {}
    if parallel is not None:
        overrides["parallel"] = parallel
    if fail_fast is not None:
        overrides["fail_fast"] = fail_fast
    if overrides:
        config = replace(config, activation=replace(config.activation, **overrides))

    ws = _load_workspace(config, workspace)

    with PipelineDisplay() as display:
        activator = Activator.from_config(
            config, install=install, progress_factory=display.reporter
        )
        try:
            result = activator.activate(ws)
        except ActivationError as e:
            for failure in e.failures:
                print_error(str(failure))
            raise typer.Exit(1)

    print_summary(result)
    return result


@app.command()
def activate(
    workspace: Optional[Path] = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace file (default: search upwards for .workspace.yaml)",
    ),
    parallel: Optional[bool] = typer.Option(
        None,
        "--parallel/--sequential",
        help="Install toolchains concurrently",
    ),
    fail_fast: Optional[bool] = typer.Option(
        None,
        "--fail-fast/--keep-going",
        help="Stop at the first failing toolchain",
    ),
) -> None:
    """Install missing toolchains and print the shell activation script.

    Example:
        eval "$(toolenv activate)"
    """
    result = _run(workspace, parallel, fail_fast, install=True)
    typer.echo(render_script(result))
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def install(
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Workspace file"),
    parallel: Optional[bool] = typer.Option(
        None, "--parallel/--sequential", help="Install toolchains concurrently"
    ),
) -> None:
    """Install missing toolchains without printing a script."""
    result = _run(workspace, parallel, None, install=True)
    if not result.ok:
        raise typer.Exit(1)
    if not result.applied:
        print_warning("No toolchains configured for this workspace")


@app.command()
def env(
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Workspace file"),
) -> None:
    """Print the activation script without installing anything."""
    result = _run(workspace, None, None, install=False)
    typer.echo(render_script(result))
    if not result.ok:
        raise typer.Exit(1)


@app.command("list")
def list_toolchains(
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Workspace file"),
) -> None:
    """List available toolchains and their status in this workspace."""
    config = get_config()
    ws = _load_workspace(config, workspace)
    registry = build_registry(config)

    rows = []
    for key in registry.names():
        extension = registry.create(key)
        try:
            used = extension.init(ws)
        except ConfigDecodeError as e:
            print_error(f"{extension}: {e}")
            used = False
        row = {"key": key, "name": str(extension), "used": used}
        if used:
            row["version"] = getattr(extension, "version", None)
            row["installed"] = not extension.setup_tasks()
        rows.append(row)

    print_extensions(rows)
    print_info(f"Workspace: {ws.working_dir}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
