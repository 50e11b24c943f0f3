"""Workspace configuration loading."""

from workspace.config import (
    DEFAULT_WORKSPACE_FILE,
    WorkspaceConfig,
    WorkspaceNotFoundError,
    find_workspace_file,
    load_workspace,
)

__all__ = [
    "DEFAULT_WORKSPACE_FILE",
    "WorkspaceConfig",
    "WorkspaceNotFoundError",
    "find_workspace_file",
    "load_workspace",
]
