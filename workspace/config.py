"""Workspace configuration.

A workspace is a directory holding a ``.workspace.yaml`` file. The raw file
contents are kept as-is; each extension decodes its own section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_FILE = ".workspace.yaml"


class WorkspaceNotFoundError(Exception):
    """Raised when no workspace file can be located."""

    pass


@dataclass(frozen=True)
class WorkspaceConfig:
    """Raw workspace configuration plus its resolved working directory.

    Attributes:
        src: Raw workspace file contents.
        working_dir: Directory toolchains are installed under.
    """

    src: bytes
    working_dir: Path

    @classmethod
    def from_file(cls, path: Path | str) -> WorkspaceConfig:
        """Read a workspace file; its directory becomes the working dir.

        Raises:
            WorkspaceNotFoundError: If the file does not exist.
        """
        path = Path(path).resolve()
        if not path.is_file():
            raise WorkspaceNotFoundError(f"Workspace file not found: {path}")
        return cls(src=path.read_bytes(), working_dir=path.parent)

    @classmethod
    def from_text(cls, text: str, working_dir: Path | str) -> WorkspaceConfig:
        """Build a config from in-memory YAML text."""
        return cls(src=text.encode("utf-8"), working_dir=Path(working_dir).resolve())


def find_workspace_file(
    start: Path | None = None, filename: str = DEFAULT_WORKSPACE_FILE
) -> Path | None:
    """Find the workspace file in ``start`` or its parent directories.

    Returns:
        Path to the workspace file or None if not found.
    """
    current = (start or Path.cwd()).resolve()

    for directory in [current, *current.parents]:
        candidate = directory / filename
        if candidate.is_file():
            return candidate

    return None


def load_workspace(
    path: Path | str | None = None,
    start: Path | None = None,
    filename: str = DEFAULT_WORKSPACE_FILE,
) -> WorkspaceConfig:
    """Load the workspace configuration for an activation.

    Args:
        path: Explicit workspace file; searched for when omitted.
        start: Directory to start searching from (default: cwd).
        filename: Workspace file name to search for.

    Raises:
        WorkspaceNotFoundError: If no workspace file is found.
    """
    if path is None:
        path = find_workspace_file(start, filename)
        if path is None:
            raise WorkspaceNotFoundError(
                f"No {filename} found in {start or Path.cwd()} or its parents"
            )

    config = WorkspaceConfig.from_file(path)
    logger.debug("Loaded workspace %s", config.working_dir)
    return config
