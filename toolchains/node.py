"""Node.js toolchain extension.

Example of .workspace.yaml:

    workspace:
      with:
        node:
          version: 20.11.1
          npm_prefix: .npm-global
          node_env: development
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from extensions.config import ToolchainConfig
from extensions.envcomposer import EnvComposer
from toolchains.base import ArchiveToolchain


@dataclass(frozen=True)
class NodeConfig(ToolchainConfig):
    """Node section of the workspace file."""

    npm_prefix: str = ""
    node_env: str = ""


class NodeToolchain(ArchiveToolchain[NodeConfig]):
    """Installs the official Node.js binary distribution into the workspace."""

    name = "Node.js"
    key = "node"
    binary = "node"
    config_class = NodeConfig
    DEFAULT_BASE_URL = "https://nodejs.org/dist"
    ARCH_NAMES = {
        "x86_64": "x64",
        "amd64": "x64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "armv7l",
        "ppc64le": "ppc64le",
        "s390x": "s390x",
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Node names Windows builds "win"
        if self.os_name == "windows":
            self.os_name = "win"

    @property
    def release(self) -> str:
        """Version without the leading ``v``, shared by paths and file names."""
        return self.version.lstrip("v")

    def archive_name(self) -> str:
        ext = "zip" if self.os_name == "win" else "tar.gz"
        return f"node-v{self.release}-{self.os_name}-{self.arch}.{ext}"

    def archive_url(self) -> str:
        return f"{self.base_url}/v{self.release}/{self.archive_name()}"

    def bin_dir(self) -> Path:
        # Windows archives keep node.exe at the top level
        if self.os_name == "win":
            return self.home_dir()
        return self.home_dir() / "bin"

    def npm_prefix(self) -> Path | None:
        if not self.config.npm_prefix:
            return None
        return self.workspace.working_dir / self.config.npm_prefix

    def environment(self) -> dict[str, str]:
        composer = EnvComposer()
        prefix = self.npm_prefix()
        if prefix is not None:
            composer.set("NPM_CONFIG_PREFIX", str(prefix))
        if self.config.node_env:
            composer.set("NODE_ENV", self.config.node_env)
        return composer.as_dict()

    def paths(self) -> list[str]:
        paths = [str(self.bin_dir())]
        prefix = self.npm_prefix()
        if prefix is not None:
            paths.append(str(prefix / "bin"))
        return paths
