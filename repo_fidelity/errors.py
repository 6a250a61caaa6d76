"""Error taxonomy for repository verification."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .reporting import VerificationReport


class RepositoryVerificationError(Exception):
    """Base class for every error raised while verifying a repository copy."""


class ConfigurationError(RepositoryVerificationError):
    """Raised when inputs make the comparison impossible (bad root, bucket, prefix)."""


class KeyPrefixError(ConfigurationError):
    """Raised when a remote key does not sit under the expected prefix boundary."""

    def __init__(self, key: str, prefix: str) -> None:
        super().__init__(f"Key {key!r} is not under prefix {prefix!r} followed by '/'")
        self.key = key
        self.prefix = prefix


class TransportError(RepositoryVerificationError):
    """Raised when a listing or fetch against the object store fails."""

    def __init__(self, operation: str, bucket: str, key: str | None, cause: Exception) -> None:
        location = f"s3://{bucket}/{key}" if key else f"s3://{bucket}"
        super().__init__(f"{operation} failed for {location}: {cause}")
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.cause = cause


class ObjectNotFoundError(TransportError):
    """Raised when the requested object key does not exist."""


class VerificationCancelledError(RepositoryVerificationError):
    """Raised when a verification run is cancelled before it completes."""

    def __init__(self, pending: int) -> None:
        super().__init__(f"Verification cancelled with {pending} comparison(s) outstanding")
        self.pending = pending


class VerificationFailedError(ValueError):
    """Raised when the remote copy differs from the local copy."""

    def __init__(self, report: "VerificationReport") -> None:
        super().__init__(
            f"Verification failed: {len(report.missing_remote)} missing, "
            f"{len(report.unexpected_remote)} unexpected, "
            f"{len(report.content_mismatches)} content mismatch(es)"
        )
        self.report = report


def client_error_code(exc: Exception) -> str:
    """Return the service error code carried by a botocore ClientError, or an empty string."""
    response = getattr(exc, "response", None) or {}
    return str(response.get("Error", {}).get("Code", ""))


__all__ = [
    "client_error_code",
    "ConfigurationError",
    "KeyPrefixError",
    "ObjectNotFoundError",
    "RepositoryVerificationError",
    "TransportError",
    "VerificationCancelledError",
    "VerificationFailedError",
]
