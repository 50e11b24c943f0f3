"""Built-in toolchain extensions.

Usage:
    from extensions import ExtensionRegistry
    from toolchains import register_builtin

    registry = ExtensionRegistry()
    register_builtin(registry, base_urls={"go": "https://mirror.example/go"})
"""

from __future__ import annotations

from extensions.installer import DEFAULT_TIMEOUT
from extensions.registry import ExtensionRegistry
from toolchains.base import ArchiveToolchain
from toolchains.go import GoConfig, GoToolchain
from toolchains.node import NodeConfig, NodeToolchain

__all__ = [
    "ArchiveToolchain",
    "BUILTIN_TOOLCHAINS",
    "GoConfig",
    "GoToolchain",
    "NodeConfig",
    "NodeToolchain",
    "register_builtin",
]

# Registration order decides collisions: later entries win
BUILTIN_TOOLCHAINS: list[type[ArchiveToolchain]] = [GoToolchain, NodeToolchain]


def register_builtin(
    registry: ExtensionRegistry,
    base_urls: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ExtensionRegistry:
    """Register the built-in toolchains.

    Args:
        registry: Registry to populate.
        base_urls: Per-toolchain download host overrides keyed by toolchain key.
        timeout: Download timeout for every toolchain.

    Returns:
        The same registry.
    """
    base_urls = base_urls or {}
    for toolchain in BUILTIN_TOOLCHAINS:
        url = base_urls.get(toolchain.key)
        registry.register(
            toolchain.key,
            lambda cls=toolchain, url=url: cls(base_url=url, timeout=timeout),
        )
    return registry
