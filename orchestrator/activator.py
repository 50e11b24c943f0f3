"""Workspace activation.

Runs every registered extension against a workspace and merges their
contributions into one shell environment:

1. init() each extension in registration order; skip the inapplicable ones
2. run each applicable extension's setup tasks (sequentially or on threads)
3. query environment/aliases/paths and merge them in registration order

Merging is last-write-wins for environment variables and aliases, so when
two extensions export the same name the later-registered one wins. Search
paths are concatenated extension by extension.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Callable

from extensions.base import Extension, NullProgress, ProgressReporter
from extensions.config import ConfigDecodeError
from extensions.envcomposer import EnvComposer, compose_paths
from extensions.installer import InstallError, install_lock
from extensions.registry import ExtensionRegistry
from extensions.tasks import SetupTaskError, run_setup_tasks
from settings.config import Config
from workspace.config import WorkspaceConfig

logger = logging.getLogger(__name__)

# (extension display name, task name) -> reporter
ProgressFactory = Callable[[str, str], ProgressReporter]


class ActivationError(Exception):
    """Raised when activation is aborted by a failing extension."""

    def __init__(self, failures: list[ExtensionFailure]):
        self.failures = failures
        super().__init__("; ".join(str(f) for f in failures))


@dataclass
class ExtensionFailure:
    """An extension that could not be activated."""

    extension: str
    step: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.extension}: {self.step} failed: {self.error}"


@dataclass
class ActivationResult:
    """Merged contributions of all activated extensions."""

    environment: dict[str, str] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    paths: list[str] = field(default_factory=list)
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    installed: list[str] = field(default_factory=list)
    failures: list[ExtensionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def build_registry(config: Config) -> ExtensionRegistry:
    """Create a registry of the built-in toolchains configured from settings."""
    from toolchains import register_builtin

    return register_builtin(
        ExtensionRegistry(),
        base_urls=config.base_urls(),
        timeout=config.download.timeout,
    )


def _null_progress(extension: str, step: str) -> ProgressReporter:
    return NullProgress()


class Activator:
    """Activates a workspace with a fixed, ordered set of extensions.

    Example:
        >>> activator = Activator.from_config(get_config())
        >>> result = activator.activate(load_workspace())
        >>> result.environment
        {'GO111MODULE': 'auto'}
    """

    def __init__(
        self,
        extensions: list[Extension],
        *,
        parallel: bool = False,
        max_workers: int = 4,
        fail_fast: bool = False,
        dedupe_paths: bool = False,
        lock: bool = True,
        install: bool = True,
        progress_factory: ProgressFactory | None = None,
    ) -> None:
        """Initialize the activator.

        Args:
            extensions: Fresh extension instances in registration order.
            parallel: Run install pipelines on worker threads.
            max_workers: Thread pool size when parallel.
            fail_fast: Raise ActivationError on the first failure.
            dedupe_paths: Drop repeated search-path entries.
            lock: Hold an advisory lock around each check-then-install.
            install: Run setup tasks (False only queries contributions).
            progress_factory: Creates a progress reporter per task.
        """
        self.extensions = extensions
        self.parallel = parallel
        self.max_workers = max_workers
        self.fail_fast = fail_fast
        self.dedupe_paths = dedupe_paths
        self.lock = lock
        self.install = install
        self.progress_factory = progress_factory or _null_progress

    @classmethod
    def from_config(
        cls,
        config: Config,
        registry: ExtensionRegistry | None = None,
        install: bool = True,
        progress_factory: ProgressFactory | None = None,
    ) -> Activator:
        """Create an activator from settings."""
        registry = registry or build_registry(config)
        only = config.activation.enabled_toolchains or None
        return cls(
            registry.create_all(only),
            parallel=config.activation.parallel,
            max_workers=config.activation.max_workers,
            fail_fast=config.activation.fail_fast,
            dedupe_paths=config.activation.dedupe_paths,
            lock=config.activation.lock,
            install=install,
            progress_factory=progress_factory,
        )

    def activate(self, workspace: WorkspaceConfig) -> ActivationResult:
        """Activate the workspace.

        Returns:
            Merged environment, aliases and paths plus per-extension status.

        Raises:
            ActivationError: If fail_fast is set and an extension fails.
        """
        result = ActivationResult()
        applicable = self._load(workspace, result)

        if self.install:
            if self.parallel and len(applicable) > 1:
                self._install_parallel(applicable, result)
            else:
                self._install_sequential(applicable, result)

        failed = {f.extension for f in result.failures}
        self._aggregate([e for e in applicable if str(e) not in failed], result)

        for failure in result.failures:
            logger.error("%s", failure)
        return result

    def setup(self, extension: Extension) -> list[str]:
        """Run the install pipeline of one initialized extension.

        Returns:
            Names of the tasks that ran (empty when already installed).

        Raises:
            SetupTaskError: If the install lock cannot be taken or a task fails.
        """
        name = str(extension)
        lock_path = extension.lock_path() if self.lock else None
        with ExitStack() as stack:
            if lock_path:
                try:
                    stack.enter_context(install_lock(lock_path))
                except InstallError as e:
                    raise SetupTaskError(name, "locking", e) from e

            tasks = extension.setup_tasks()
            if not tasks:
                logger.info("%s: already installed", name)
                return []

            logger.info("%s: installing (%s)", name, ", ".join(t.name for t in tasks))
            return run_setup_tasks(
                tasks,
                extension=name,
                progress_factory=lambda step: self.progress_factory(name, step),
            )

    def _load(self, workspace: WorkspaceConfig, result: ActivationResult) -> list[Extension]:
        applicable: list[Extension] = []

        for extension in self.extensions:
            try:
                ok = extension.init(workspace)
            except ConfigDecodeError as e:
                self._fail(result, ExtensionFailure(str(extension), "init", e))
                continue

            if ok:
                applicable.append(extension)
                result.applied.append(str(extension))
            else:
                logger.debug("%s: not used by this workspace", extension)
                result.skipped.append(str(extension))

        return applicable

    def _install_sequential(self, extensions: list[Extension], result: ActivationResult) -> None:
        for extension in extensions:
            try:
                if self.setup(extension):
                    result.installed.append(str(extension))
            except SetupTaskError as e:
                self._fail(result, ExtensionFailure(e.extension, e.step, e.error))

    def _install_parallel(self, extensions: list[Extension], result: ActivationResult) -> None:
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [(e, pool.submit(self.setup, e)) for e in extensions]

        # Results are collected in registration order once every pipeline is done
        failures: list[ExtensionFailure] = []
        for extension, future in futures:
            try:
                if future.result():
                    result.installed.append(str(extension))
            except SetupTaskError as e:
                failures.append(ExtensionFailure(e.extension, e.step, e.error))

        result.failures.extend(failures)
        if failures and self.fail_fast:
            raise ActivationError(failures)

    def _aggregate(self, extensions: list[Extension], result: ActivationResult) -> None:
        environment = EnvComposer()
        aliases = EnvComposer()
        path_lists: list[list[str]] = []

        for extension in extensions:
            environment.update(extension.environment())
            aliases.update(extension.aliases())
            path_lists.append(extension.paths())

        result.environment = environment.as_dict()
        result.aliases = aliases.as_dict()
        result.paths = compose_paths(path_lists, dedupe=self.dedupe_paths)

    def _fail(self, result: ActivationResult, failure: ExtensionFailure) -> None:
        result.failures.append(failure)
        if self.fail_fast:
            raise ActivationError([failure])
