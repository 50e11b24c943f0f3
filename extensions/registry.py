"""Extension registry.

Maps toolchain names to factories. Registration order is significant: the
orchestrator processes extensions in that order, so a later registration
wins when two extensions export the same environment variable or alias.
"""

import logging
from typing import Callable

from extensions.base import Extension

logger = logging.getLogger(__name__)

ExtensionFactory = Callable[[], Extension]


class ExtensionRegistry:
    """Registry of known extension variants, in registration order."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._factories: dict[str, ExtensionFactory] = {}

    def register(self, name: str, factory: ExtensionFactory) -> None:
        """Register an extension factory.

        Args:
            name: Toolchain identifier
            factory: Callable returning a fresh extension instance

        Raises:
            ValueError: If an extension with the same name is already registered
        """
        if name in self._factories:
            raise ValueError(f"Extension '{name}' is already registered")

        self._factories[name] = factory
        logger.debug("Registered extension: %s", name)

    def unregister(self, name: str) -> bool:
        """Unregister an extension by name.

        Returns:
            True if the extension was removed, False if not found
        """
        if name not in self._factories:
            return False

        del self._factories[name]
        logger.debug("Unregistered extension: %s", name)
        return True

    def create(self, name: str) -> Extension:
        """Instantiate a registered extension.

        Raises:
            KeyError: If no extension is registered under ``name``
        """
        return self._factories[name]()

    def create_all(self, only: list[str] | None = None) -> list[Extension]:
        """Instantiate extensions in registration order.

        Args:
            only: Optional whitelist of names; order still follows registration

        Returns:
            Fresh extension instances
        """
        return [
            factory()
            for name, factory in self._factories.items()
            if only is None or name in only
        ]

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._factories)

    def __len__(self) -> int:
        """Number of registered extensions."""
        return len(self._factories)

    def __contains__(self, name: str) -> bool:
        """Check if an extension is registered."""
        return name in self._factories
