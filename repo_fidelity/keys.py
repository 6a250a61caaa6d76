"""Conversion between remote object keys and relative repository paths."""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import Iterable, Tuple

from .errors import KeyPrefixError

KEY_SEPARATOR = "/"

# Separators of the local filesystem; a backslash is a legal file name character on POSIX
HOST_SEPARATORS: Tuple[str, ...] = tuple(sep for sep in (os.sep, os.altsep) if sep)


def normalize_prefix(prefix: str) -> str:
    """Drop leading and trailing separators so ``repo/`` and ``/repo`` mean ``repo``."""
    return prefix.replace("\\", KEY_SEPARATOR).strip(KEY_SEPARATOR)


def normalize_relative_path(parts: Iterable[str], separators: Iterable[str] = HOST_SEPARATORS) -> str:
    """
    Join path segments with the canonical separator.

    Only ``separators`` are treated as segment boundaries inside a part;
    empty and ``.`` segments are skipped.
    """
    separators = tuple(separators)
    segments = []
    for part in parts:
        for sep in separators:
            if sep != KEY_SEPARATOR:
                part = part.replace(sep, KEY_SEPARATOR)
        for piece in part.split(KEY_SEPARATOR):
            if piece in ("", "."):
                continue
            segments.append(piece)
    return KEY_SEPARATOR.join(segments)


def relative_path_of(path: PurePath, root: PurePath) -> str:
    """Return the canonical relative path of ``path`` below ``root``.

    The path flavour decides which characters separate segments, so a
    backslash inside a POSIX file name survives unchanged.
    """
    return path.relative_to(root).as_posix()


def strip_key_prefix(key: str, prefix: str) -> str:
    """
    Remove ``prefix + "/"`` from the front of a remote key.

    Args:
        key: Full object key as returned by the listing
        prefix: Normalized key prefix (empty for the bucket root)

    Returns:
        The relative path below the prefix

    Raises:
        KeyPrefixError: If the key is not below the prefix on a separator
            boundary, or nothing remains after stripping
    """
    if not prefix:
        remainder = key
    else:
        boundary = prefix + KEY_SEPARATOR
        if not key.startswith(boundary):
            raise KeyPrefixError(key, prefix)
        remainder = key[len(boundary):]
    if not remainder:
        raise KeyPrefixError(key, prefix)
    return remainder


def join_key(prefix: str, relative_path: str) -> str:
    """Build the full object key for a relative path under a prefix."""
    if not prefix:
        return relative_path
    return f"{prefix}{KEY_SEPARATOR}{relative_path}"


__all__ = [
    "KEY_SEPARATOR",
    "HOST_SEPARATORS",
    "join_key",
    "normalize_prefix",
    "normalize_relative_path",
    "relative_path_of",
    "strip_key_prefix",
]
