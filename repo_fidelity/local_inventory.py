"""Local inventory: relative paths of every regular file under a repository root."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import ConfigurationError, VerificationCancelledError
from .exclusions import ExclusionSet
from .keys import relative_path_of


def _raise_walk_error(exc: OSError) -> None:
    raise ConfigurationError(f"Cannot read local directory {exc.filename}: {exc.strerror}") from exc


def _check_root(root: Path) -> None:
    if not root.exists():
        raise ConfigurationError(f"Local path does not exist: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"Local path is not a directory: {root}")


def iter_local_files(
    root: Path,
    exclusions: Optional[ExclusionSet] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Iterator[str]:
    """
    Yield the relative path of every regular file below ``root``.

    Symlinked directories are not descended into and non-regular entries
    (devices, sockets, broken links) are skipped. Paths always use ``/``.

    Raises:
        ConfigurationError: If the root, or any directory under it, cannot be read
        VerificationCancelledError: If the cancel event is set between directories
    """
    root = Path(root)
    _check_root(root)
    exclusions = exclusions if exclusions is not None else ExclusionSet.default()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        if cancel_event is not None and cancel_event.is_set():
            raise VerificationCancelledError(0)
        dirnames.sort()
        for name in sorted(filenames):
            file_path = Path(dirpath) / name
            if not file_path.is_file():
                logging.debug("Skipping non-regular entry %s", file_path)
                continue
            relative_path = relative_path_of(file_path, root)
            if exclusions.is_excluded(relative_path):
                continue
            yield relative_path


def list_local_files(
    root: Path,
    exclusions: Optional[ExclusionSet] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[str]:
    """Return the sorted relative paths of all regular files below ``root``."""
    paths = sorted(iter_local_files(root, exclusions, cancel_event))
    logging.info("Found %s local file(s) under %s", f"{len(paths):,}", root)
    return paths


class PathEnumerator:  # pylint: disable=too-few-public-methods
    """Enumerates the expected file set of a local repository copy."""

    def __init__(
        self,
        exclusions: Optional[ExclusionSet] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.exclusions = exclusions if exclusions is not None else ExclusionSet.default()
        self.cancel_event = cancel_event

    def list_relative_paths(self, root: Path) -> List[str]:
        """Return sorted relative paths below ``root`` with exclusions applied."""
        return list_local_files(Path(root), self.exclusions, self.cancel_event)


__all__ = ["PathEnumerator", "iter_local_files", "list_local_files"]
