"""Content digests for local files and fetched remote bytes."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError

# Both sides must hash with the same algorithm, so it is fixed here rather than passed per call.
DIGEST_ALGORITHM = "md5"
CHUNK_SIZE = 8 * 1024 * 1024


def _new_hash():
    return hashlib.new(DIGEST_ALGORITHM, usedforsecurity=False)


def update_digest_from_file(hash_obj, file_path: Path, chunk_size: int = CHUNK_SIZE) -> int:
    """Feed a file into ``hash_obj`` one block at a time and return the bytes read."""
    total = 0
    with open(file_path, "rb") as stream:
        while True:
            block = stream.read(chunk_size)
            if not block:
                return total
            hash_obj.update(block)
            total += len(block)


def compute_bytes_digest(data: bytes) -> str:
    """Return the hex digest of in-memory bytes."""
    hash_obj = _new_hash()
    hash_obj.update(data)
    return hash_obj.hexdigest()


def compute_file_digest(file_path: Path) -> str:
    """Return the hex digest of a local file's content."""
    hash_obj = _new_hash()
    try:
        update_digest_from_file(hash_obj, file_path)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read local file {file_path}: {exc}") from exc
    return hash_obj.hexdigest()


@dataclass(frozen=True)
class DigestPair:
    """Expected (local) and actual (remote) digests for one relative path."""

    relative_path: str
    expected: str
    actual: str

    @property
    def matches(self) -> bool:
        """True when both sides hold identical content."""
        return self.expected == self.actual


def compare_digests(relative_path: str, local_file: Path, remote_bytes: bytes) -> DigestPair:
    """Digest both sides of one relative path."""
    return DigestPair(
        relative_path=relative_path,
        expected=compute_file_digest(local_file),
        actual=compute_bytes_digest(remote_bytes),
    )


__all__ = [
    "CHUNK_SIZE",
    "DIGEST_ALGORITHM",
    "DigestPair",
    "compare_digests",
    "compute_bytes_digest",
    "compute_file_digest",
    "update_digest_from_file",
]
