"""Go toolchain extension.

Example of .workspace.yaml:

    workspace:
      with:
        go:
          version: 1.11.2
          go_path: false
          go_111_module: auto
"""

from __future__ import annotations

from dataclasses import dataclass

from extensions.config import ToolchainConfig
from extensions.envcomposer import EnvComposer
from toolchains.base import ArchiveToolchain

# YAML spellings of boolean false; any of them disables GOPATH
FALSE_VALUES = frozenset({"false", "False", "FALSE", "no", "No", "NO", "off", "Off", "OFF"})


@dataclass(frozen=True)
class GoConfig(ToolchainConfig):
    """Go section of the workspace file."""

    go_path: str = ""
    go_111_module: str = ""


class GoToolchain(ArchiveToolchain[GoConfig]):
    """Installs the official Go distribution into the workspace."""

    name = "Go"
    key = "go"
    binary = "go"
    config_class = GoConfig
    DEFAULT_BASE_URL = "https://dl.google.com/go"
    ARCH_NAMES = {
        "x86_64": "amd64",
        "amd64": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "i386": "386",
        "i686": "386",
        "armv6l": "armv6l",
        "armv7l": "armv6l",
    }

    def archive_name(self) -> str:
        ext = "zip" if self.os_name == "windows" else "tar.gz"
        return f"go{self.release}.{self.os_name}-{self.arch}.{ext}"

    def environment(self) -> dict[str, str]:
        composer = EnvComposer()
        go_path = self.config.go_path
        if go_path and go_path not in FALSE_VALUES:
            composer.set("GOPATH", go_path)
        if self.config.go_111_module:
            composer.set("GO111MODULE", self.config.go_111_module)
        return composer.as_dict()
