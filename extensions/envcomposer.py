"""Environment composition helpers."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping


class EnvComposer:
    """Ordered name to value mapping where the last write wins.

    Keys keep the position of their first insertion; overwriting a key
    replaces its value only.

    Example:
        >>> composer = EnvComposer()
        >>> composer.set("GO111MODULE", "auto")
        >>> composer.set("GO111MODULE", "on")
        >>> composer.as_dict()
        {'GO111MODULE': 'on'}
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = {}
        if initial:
            self.update(initial)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def update(self, values: Mapping[str, str] | None) -> None:
        """Set every pair of ``values`` in iteration order."""
        if not values:
            return
        for key, value in values.items():
            self.set(key, value)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def as_dict(self) -> dict[str, str]:
        """Materialize as a plain dictionary."""
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EnvComposer({self._values!r})"


def compose_paths(path_lists: Iterable[Iterable[str]], dedupe: bool = False) -> list[str]:
    """Concatenate search-path contributions in order.

    Args:
        path_lists: One sequence of directories per extension.
        dedupe: Drop repeated entries, keeping the first occurrence.

    Returns:
        Flat list of directories.
    """
    result: list[str] = []
    seen: set[str] = set()

    for paths in path_lists:
        for path in paths:
            if dedupe:
                if path in seen:
                    continue
                seen.add(path)
            result.append(path)

    return result
