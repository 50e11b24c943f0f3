"""Orchestrator module for toolenv.

Workspace activation with:
- Ordered extension initialization
- Locked, idempotent toolchain installs
- Deterministic merging of environment, aliases and search paths
"""

from .activator import (
    ActivationError,
    ActivationResult,
    Activator,
    ExtensionFailure,
    build_registry,
)

__all__ = [
    "ActivationError",
    "ActivationResult",
    "Activator",
    "ExtensionFailure",
    "build_registry",
]
