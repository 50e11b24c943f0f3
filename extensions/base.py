"""Base extension interface.

Defines the contract every toolchain extension implements. An extension is
created once per activation, initialized once against the workspace
configuration, then queried for its install steps and its contributions to
the shell environment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from extensions.tasks import SetupTask
    from workspace.config import WorkspaceConfig


class ExtensionNotInitializedError(Exception):
    """Raised when an extension is queried before a successful init()."""

    pass


@runtime_checkable
class ProgressReporter(Protocol):
    """Handle a setup task uses to report its progress."""

    def set_total(self, total: float | None) -> None:
        """Declare the amount of work, or None when unknown."""
        ...

    def advance(self, amount: float = 1) -> None:
        """Record completed work."""
        ...


class NullProgress:
    """Progress reporter that discards everything."""

    def set_total(self, total: float | None) -> None:
        pass

    def advance(self, amount: float = 1) -> None:
        pass


class Extension(ABC):
    """Abstract base class for all toolchain extensions.

    Every method other than ``init`` requires ``init`` to have returned True.
    """

    name: str = "base"

    @abstractmethod
    def init(self, config: WorkspaceConfig) -> bool:
        """Bind the extension to a workspace.

        Args:
            config: Workspace configuration for this activation.

        Returns:
            True if the workspace uses this toolchain, False otherwise.

        Raises:
            ConfigDecodeError: If the configuration is malformed.
        """
        ...

    @abstractmethod
    def setup_tasks(self) -> list[SetupTask]:
        """Return the install steps still required (empty when installed)."""
        ...

    @abstractmethod
    def environment(self) -> dict[str, str]:
        """Return environment variables to export."""
        ...

    @abstractmethod
    def aliases(self) -> dict[str, str]:
        """Return shell aliases to define."""
        ...

    @abstractmethod
    def paths(self) -> list[str]:
        """Return directories to prepend to the executable search path."""
        ...

    def lock_path(self) -> Path | None:
        """Path of the lock file guarding installation, if any."""
        return None

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
