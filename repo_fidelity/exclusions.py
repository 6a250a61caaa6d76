"""Exclusion rules shared by the local and remote enumerations."""

from __future__ import annotations

from typing import Iterable

from .config import DEFAULT_EXCLUDED_NAMES, DEFAULT_EXCLUDED_PATHS
from .keys import normalize_relative_path


def _normalized(entries: Iterable[str]) -> frozenset:
    return frozenset(normalize_relative_path([entry]) for entry in entries if entry)


class ExclusionSet:
    """
    Literal paths and names that are never part of repository content.

    ``paths`` match one relative path exactly, so ``ocfl_1.1.md`` excludes
    only the copy at the repository root. ``names`` match the final segment
    at any depth, so ``.gitkeep`` is ignored in every directory.
    """

    def __init__(self, paths: Iterable[str] = (), names: Iterable[str] = ()):
        self.paths = _normalized(paths)
        self.names = _normalized(names)

    @classmethod
    def default(cls) -> "ExclusionSet":
        """Return the exclusions for files bundled with repository fixtures."""
        return cls(DEFAULT_EXCLUDED_PATHS, DEFAULT_EXCLUDED_NAMES)

    def extended(self, paths: Iterable[str] = (), names: Iterable[str] = ()) -> "ExclusionSet":
        """Return a new set containing these entries plus the given ones."""
        return ExclusionSet(self.paths.union(paths), self.names.union(names))

    def is_excluded(self, relative_path: str) -> bool:
        """Return True when the relative path must be ignored."""
        if relative_path in self.paths:
            return True
        return relative_path.rsplit("/", 1)[-1] in self.names

    def filter(self, relative_paths: Iterable[str]) -> Iterable[str]:
        """Yield only the paths that are not excluded."""
        for relative_path in relative_paths:
            if not self.is_excluded(relative_path):
                yield relative_path

    def __contains__(self, relative_path: object) -> bool:
        return isinstance(relative_path, str) and self.is_excluded(relative_path)

    def __len__(self) -> int:
        return len(self.paths) + len(self.names)

    def __repr__(self) -> str:
        return f"ExclusionSet(paths={sorted(self.paths)!r}, names={sorted(self.names)!r})"


__all__ = ["ExclusionSet"]
