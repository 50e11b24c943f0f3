"""Shared implementation for toolchains shipped as release archives.

A toolchain of this kind is installed by downloading one archive for the
host platform and unpacking it under the workspace:

    <workspace>/.<key>/release/<archive>           # staging
    <workspace>/.<key>/<version>/<key>/bin/<binary>

The binary's presence is the only signal that the version is installed.
"""

from __future__ import annotations

import logging
import platform
import shutil
from abc import abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

import httpx

from extensions.base import Extension, ExtensionNotInitializedError, ProgressReporter
from extensions.config import ToolchainConfig, decode_section
from extensions.installer import (
    DEFAULT_TIMEOUT,
    ExtractionError,
    download_archive,
    make_dirs,
    unpack_archive,
)
from extensions.tasks import SetupTask, procedure
from workspace.config import WorkspaceConfig

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=ToolchainConfig)


def host_os() -> str:
    """Lowercase OS name (linux, darwin, windows)."""
    return platform.system().lower()


def host_arch(names: dict[str, str]) -> str:
    """Host CPU architecture translated with a vendor naming table."""
    machine = platform.machine().lower()
    return names.get(machine, machine)


class ArchiveToolchain(Extension, Generic[C]):
    """Extension that installs a toolchain from a versioned archive.

    Subclasses set ``key``, ``binary`` and ``config_class`` and implement
    ``archive_name``.
    """

    key: str = ""
    binary: str = ""
    config_class: type[ToolchainConfig] = ToolchainConfig
    DEFAULT_BASE_URL: str = ""
    ARCH_NAMES: dict[str, str] = {}

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        os_name: str | None = None,
        arch: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the toolchain.

        Args:
            base_url: Release download host (default: the vendor's).
            timeout: Download timeout in seconds.
            os_name: Target OS (default: host).
            arch: Target architecture in vendor naming (default: host).
            transport: httpx transport for downloads (tests stub the network).
        """
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.os_name = os_name or host_os()
        self.arch = arch or host_arch(self.ARCH_NAMES)
        self.transport = transport

        self._workspace: WorkspaceConfig | None = None
        self._config: C | None = None

    def init(self, config: WorkspaceConfig) -> bool:
        section = decode_section(config.src, self.key)
        if section is None:
            return False

        toolchain_config = self.config_class.from_dict(section)
        if toolchain_config is None:
            logger.debug("%s: no version configured", self)
            return False

        self._workspace = config
        self._config = toolchain_config  # type: ignore[assignment]
        return True

    @property
    def config(self) -> C:
        if self._config is None:
            raise ExtensionNotInitializedError(f"{self} has not been initialized")
        return self._config

    @property
    def workspace(self) -> WorkspaceConfig:
        if self._workspace is None:
            raise ExtensionNotInitializedError(f"{self} has not been initialized")
        return self._workspace

    @property
    def version(self) -> str:
        return self.config.version

    @property
    def release(self) -> str:
        """Version as used in install paths and release file names."""
        return self.version

    # Install layout

    def toolchain_dir(self) -> Path:
        return self.workspace.working_dir / f".{self.key}"

    def install_root(self) -> Path:
        return self.toolchain_dir() / self.release

    def staging_dir(self) -> Path:
        return self.toolchain_dir() / "release"

    def home_dir(self) -> Path:
        return self.install_root() / self.key

    def bin_dir(self) -> Path:
        return self.home_dir() / "bin"

    def binary_path(self) -> Path:
        suffix = ".exe" if self.os_name in ("windows", "win") else ""
        return self.bin_dir() / f"{self.binary}{suffix}"

    def lock_path(self) -> Path:
        return self.toolchain_dir() / f"{self.release}.lock"

    @abstractmethod
    def archive_name(self) -> str:
        """File name of the release archive for the target platform."""
        ...

    def archive_url(self) -> str:
        return f"{self.base_url}/{self.archive_name()}"

    def is_installed(self) -> bool:
        return self.binary_path().exists()

    def setup_tasks(self) -> list[SetupTask]:
        if self.is_installed():
            logger.debug("%s %s already installed", self, self.version)
            return []

        archive = self.staging_dir() / self.archive_name()
        url = self.archive_url()

        def initializing(progress: ProgressReporter) -> None:
            make_dirs(self.install_root(), self.staging_dir())

        def downloading(progress: ProgressReporter) -> None:
            download_archive(
                url,
                archive,
                timeout=self.timeout,
                progress=progress,
                transport=self.transport,
            )

        def unpacking(progress: ProgressReporter) -> None:
            home = unpack_archive(
                archive, self.home_dir(), staging_dir=self.staging_dir(), progress=progress
            )
            if not self.binary_path().exists():
                shutil.rmtree(home, ignore_errors=True)
                raise ExtractionError(
                    f"{archive.name} does not contain {self.binary_path().relative_to(home)}"
                )
            archive.unlink(missing_ok=True)

        return [
            procedure("initializing", initializing),
            procedure("downloading", downloading),
            procedure("unpacking", unpacking),
        ]

    def environment(self) -> dict[str, str]:
        return {}

    def aliases(self) -> dict[str, str]:
        return dict(self.config.aliases)

    def paths(self) -> list[str]:
        return [str(self.bin_dir())]
