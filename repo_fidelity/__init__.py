"""Verify that an object-store copy of a repository matches a known-good local copy."""

from .digests import DIGEST_ALGORITHM, DigestPair, compare_digests, compute_bytes_digest, compute_file_digest
from .errors import (
    ConfigurationError,
    KeyPrefixError,
    ObjectNotFoundError,
    RepositoryVerificationError,
    TransportError,
    VerificationCancelledError,
    VerificationFailedError,
)
from .exclusions import ExclusionSet
from .keys import join_key, normalize_prefix, strip_key_prefix
from .local_inventory import PathEnumerator, iter_local_files, list_local_files
from .reporting import ContentMismatch, VerificationReport
from .s3_fetch import ContentFetcher
from .s3_inventory import ObjectLister, list_all_objects
from .verifier import RepositoryVerifier, VerifierState, verify_repository

__all__ = [
    "ConfigurationError",
    "ContentFetcher",
    "ContentMismatch",
    "DIGEST_ALGORITHM",
    "DigestPair",
    "ExclusionSet",
    "KeyPrefixError",
    "ObjectLister",
    "ObjectNotFoundError",
    "PathEnumerator",
    "RepositoryVerificationError",
    "RepositoryVerifier",
    "TransportError",
    "VerificationCancelledError",
    "VerificationFailedError",
    "VerificationReport",
    "VerifierState",
    "compare_digests",
    "compute_bytes_digest",
    "compute_file_digest",
    "iter_local_files",
    "join_key",
    "list_all_objects",
    "list_local_files",
    "normalize_prefix",
    "strip_key_prefix",
    "verify_repository",
]
