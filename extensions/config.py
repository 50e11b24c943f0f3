"""Per-extension configuration schema.

Decodes a toolchain's section out of the raw workspace file. The layout
follows the workspace file format:

    workspace:
      shell:
        program: /bin/zsh
      with:
        go:
          version: 1.11.2
          go_path: false
          go_111_module: auto

Scalars are decoded as plain strings so that versions such as ``1.20`` are
not turned into floats and flags such as ``false`` keep their literal text.
YAML null (``~``, ``null``, an empty value) still decodes to None and is
treated as absent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, TypeVar

import yaml


class ConfigDecodeError(Exception):
    """Raised when the workspace configuration cannot be decoded."""

    pass


class _WorkspaceLoader(yaml.BaseLoader):
    """String-only loader that still resolves YAML null."""


_WorkspaceLoader.add_implicit_resolver(
    "tag:yaml.org,2002:null",
    re.compile(r"^(?:~|null|Null|NULL|)$"),
    ["~", "n", "N", ""],
)
_WorkspaceLoader.add_constructor("tag:yaml.org,2002:null", lambda loader, node: None)

# Alias names are written unquoted into shell scripts
ALIAS_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")


C = TypeVar("C", bound="ToolchainConfig")


@dataclass(frozen=True)
class ToolchainConfig:
    """Settings shared by every toolchain section.

    Attributes:
        version: Toolchain version to install (required for applicability).
        aliases: Shell aliases contributed by the toolchain.
    """

    version: str
    aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls: type[C], data: dict[str, Any]) -> C | None:
        """Build the config from a decoded section.

        Unknown keys are ignored. Optional fields that are absent keep
        their defaults.

        Returns:
            The config, or None when ``version`` is missing or empty.

        Raises:
            ConfigDecodeError: If a field has the wrong shape.
        """
        version = _scalar(data.get("version"), "version")
        if not version:
            return None

        kwargs: dict[str, Any] = {"version": version}
        for f in fields(cls):
            if f.name == "version" or f.name not in data:
                continue
            if f.name == "aliases":
                kwargs["aliases"] = _aliases(data["aliases"])
            else:
                kwargs[f.name] = _scalar(data[f.name], f.name)

        return cls(**kwargs)


def decode_section(src: bytes | str, name: str) -> dict[str, Any] | None:
    """Extract ``workspace.with.<name>`` from a raw workspace file.

    Args:
        src: Raw YAML text.
        name: Toolchain key under ``workspace.with``.

    Returns:
        The section mapping, or None if any level is absent.

    Raises:
        ConfigDecodeError: If the YAML is malformed or a level is not a mapping.
    """
    try:
        data = yaml.load(src, Loader=_WorkspaceLoader)
    except yaml.YAMLError as e:
        raise ConfigDecodeError(f"Invalid workspace YAML: {e}") from e

    node: Any = data
    for key in ("workspace", "with", name):
        if node is None or node == "":
            return None
        if not isinstance(node, dict):
            raise ConfigDecodeError(
                f"Expected a mapping above '{key}', got {type(node).__name__}"
            )
        node = node.get(key)

    if node is None or node == "":
        return None
    if not isinstance(node, dict):
        raise ConfigDecodeError(
            f"Section '{name}' must be a mapping, got {type(node).__name__}"
        )
    return node


def _scalar(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigDecodeError(f"Field '{key}' must be a scalar value")
    return str(value)


def _string_map(value: Any, key: str) -> dict[str, str]:
    if value is None or value == "":
        return {}
    if not isinstance(value, dict):
        raise ConfigDecodeError(f"Field '{key}' must be a mapping")
    return {str(k): _scalar(v, f"{key}.{k}") for k, v in value.items()}


def _aliases(value: Any) -> dict[str, str]:
    aliases = _string_map(value, "aliases")
    for name in aliases:
        if not ALIAS_NAME.match(name):
            raise ConfigDecodeError(f"Invalid alias name '{name}'")
    return aliases
