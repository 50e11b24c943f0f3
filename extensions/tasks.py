"""Setup task pipeline.

A pipeline is an ordered list of named procedures. Procedures run strictly
in order and the first failure aborts the rest. Nothing is retried or
rolled back here; retries belong to the procedures themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from extensions.base import NullProgress, ProgressReporter

logger = logging.getLogger(__name__)

Action = Callable[[ProgressReporter], None]
ProgressFactory = Callable[[str], ProgressReporter]


class SetupTaskError(Exception):
    """Raised when a setup task fails.

    Attributes:
        extension: Display name of the extension that owns the task.
        step: Display name of the failing task.
        error: The original exception.
    """

    def __init__(self, extension: str, step: str, error: BaseException):
        self.extension = extension
        self.step = step
        self.error = error
        super().__init__(f"{extension}: {step} failed: {error}")


@dataclass(frozen=True)
class SetupTask:
    """A named unit of install work."""

    name: str
    action: Action

    def run(self, progress: ProgressReporter | None = None) -> None:
        self.action(progress or NullProgress())


def procedure(name: str, action: Action) -> SetupTask:
    """Create a setup task from a label and a callable."""
    return SetupTask(name=name, action=action)


def _null_factory(name: str) -> ProgressReporter:
    return NullProgress()


def run_setup_tasks(
    tasks: list[SetupTask],
    *,
    extension: str = "",
    progress_factory: ProgressFactory | None = None,
) -> list[str]:
    """Run a pipeline to completion.

    Args:
        tasks: Tasks in execution order.
        extension: Display name used in logs and errors.
        progress_factory: Creates a progress reporter per task name.

    Returns:
        Names of the tasks that ran.

    Raises:
        SetupTaskError: On the first failing task.
    """
    factory = progress_factory or _null_factory
    completed: list[str] = []

    for task in tasks:
        logger.debug("%s: %s", extension, task.name)
        try:
            task.run(factory(task.name))
        except Exception as e:
            logger.error("%s: %s failed: %s", extension, task.name, e)
            raise SetupTaskError(extension, task.name, e) from e
        completed.append(task.name)

    return completed
