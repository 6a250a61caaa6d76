"""Repository-level verification orchestration.

A run moves through ENUMERATING, SET_COMPARING and CONTENT_COMPARING and ends
in DONE or FAILED. Structural and content mismatches are accumulated into a
single report; configuration and transport errors abort the run.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import DEFAULT_MAX_WORKERS, PREVIEW_BYTES
from .digests import compare_digests, compute_file_digest
from .errors import ObjectNotFoundError, VerificationCancelledError
from .exclusions import ExclusionSet
from .keys import KEY_SEPARATOR, normalize_prefix
from .local_inventory import PathEnumerator
from .progress import ComparisonProgress
from .reporting import ContentMismatch, VerificationReport, raise_for_report
from .s3_fetch import ContentFetcher
from .s3_inventory import ObjectLister

# (mismatch or None, bytes fetched); None when the comparison was skipped after cancellation
ComparisonOutcome = Optional[Tuple[Optional[ContentMismatch], int]]


class VerifierState(Enum):
    """Phases of a verification run"""

    IDLE = "idle"
    ENUMERATING = "enumerating"
    SET_COMPARING = "set_comparing"
    CONTENT_COMPARING = "content_comparing"
    DONE = "done"
    FAILED = "failed"


class RepositoryVerifier:  # pylint: disable=too-many-instance-attributes
    """Proves a remote prefix holds exactly the files of a local repository copy."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        s3,
        exclusions: Optional[ExclusionSet] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        cancel_event: Optional[threading.Event] = None,
        show_progress: bool = False,
        preview_bytes: int = PREVIEW_BYTES,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.exclusions = exclusions if exclusions is not None else ExclusionSet.default()
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self.path_enumerator = PathEnumerator(self.exclusions, self.cancel_event)
        self.object_lister = ObjectLister(s3, self.exclusions, self.cancel_event)
        self.fetcher = ContentFetcher(s3)
        self.max_workers = max_workers
        self.show_progress = show_progress
        self.preview_bytes = preview_bytes
        self.state = VerifierState.IDLE

    def cancel(self) -> None:
        """Request cancellation; pending comparisons are dropped."""
        self.cancel_event.set()

    def _enter(self, state: VerifierState) -> None:
        logging.debug("Verifier state %s -> %s", self.state.value, state.value)
        self.state = state

    def _check_cancelled(self, pending: int) -> None:
        if self.cancel_event.is_set():
            raise VerificationCancelledError(pending)

    def verify(self, local_root: Path, bucket: str, prefix: str) -> VerificationReport:
        """
        Compare the local repository at ``local_root`` with ``bucket``/``prefix``.

        Returns:
            VerificationReport listing every structural and content mismatch

        Raises:
            ConfigurationError: If the local root, bucket or prefix is unusable
            TransportError: If listing or fetching fails
            VerificationCancelledError: If the run was cancelled
        """
        local_root = Path(local_root)
        prefix = normalize_prefix(prefix)
        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                report = self._run(executor, local_root, bucket, prefix)
        except BaseException:
            self._enter(VerifierState.FAILED)
            raise
        self._enter(VerifierState.DONE if report.passed else VerifierState.FAILED)
        if report.passed:
            logging.info("Verified %s file(s) in s3://%s/%s", f"{report.verified_count:,}", bucket, prefix)
        else:
            logging.warning(
                "s3://%s/%s differs from %s: %d missing, %d unexpected, %d content mismatch(es)",
                bucket,
                prefix,
                local_root,
                len(report.missing_remote),
                len(report.unexpected_remote),
                len(report.content_mismatches),
            )
        return report

    def _run(
        self, executor: ThreadPoolExecutor, local_root: Path, bucket: str, prefix: str
    ) -> VerificationReport:
        self._check_cancelled(0)
        self._enter(VerifierState.ENUMERATING)
        expected_paths, actual_paths = self._enumerate(executor, local_root, bucket, prefix)
        self._check_cancelled(len(expected_paths))

        self._enter(VerifierState.SET_COMPARING)
        expected_set = set(expected_paths)
        actual_set = set(actual_paths)
        missing_remote = sorted(expected_set - actual_set)
        unexpected_remote = sorted(actual_set - expected_set)
        shared = sorted(expected_set & actual_set)
        for path in missing_remote:
            logging.debug("Missing remotely: %s", path)
        for path in unexpected_remote:
            logging.debug("Present only remotely: %s", path)

        self._enter(VerifierState.CONTENT_COMPARING)
        mismatches, verified_count, bytes_verified = self._compare_contents(
            executor, local_root, bucket, prefix, shared
        )
        return VerificationReport(
            local_root=str(local_root),
            bucket=bucket,
            prefix=prefix,
            expected_count=len(expected_set),
            actual_count=len(actual_set),
            missing_remote=missing_remote,
            unexpected_remote=unexpected_remote,
            content_mismatches=sorted(mismatches, key=lambda m: m.relative_path),
            verified_count=verified_count,
            bytes_verified=bytes_verified,
        )

    def _enumerate(
        self, executor: ThreadPoolExecutor, local_root: Path, bucket: str, prefix: str
    ) -> Tuple[List[str], List[str]]:
        local_future = executor.submit(self.path_enumerator.list_relative_paths, local_root)
        remote_future = executor.submit(self.object_lister.list_relative_paths, bucket, prefix)
        # Both enumerations stop at the next page or directory once cancel_event is set
        wait([local_future, remote_future])
        return local_future.result(), remote_future.result()

    def _compare_one(
        self, local_root: Path, bucket: str, prefix: str, relative_path: str, abort: threading.Event
    ) -> ComparisonOutcome:
        if abort.is_set() or self.cancel_event.is_set():
            return None
        local_file = local_root.joinpath(*relative_path.split(KEY_SEPARATOR))
        try:
            remote_bytes = self.fetcher.fetch(bucket, prefix, relative_path)
        except ObjectNotFoundError:
            return (
                ContentMismatch(
                    relative_path=relative_path,
                    expected_digest=compute_file_digest(local_file),
                    actual_digest=None,
                    reason="object not found when fetched",
                ),
                0,
            )
        pair = compare_digests(relative_path, local_file, remote_bytes)
        if pair.matches:
            return None, len(remote_bytes)
        return (
            ContentMismatch(
                relative_path=relative_path,
                expected_digest=pair.expected,
                actual_digest=pair.actual,
                actual_preview=remote_bytes[: self.preview_bytes],
            ),
            len(remote_bytes),
        )

    def _compare_contents(  # pylint: disable=too-many-arguments
        self,
        executor: ThreadPoolExecutor,
        local_root: Path,
        bucket: str,
        prefix: str,
        shared: List[str],
    ) -> Tuple[List[ContentMismatch], int, int]:
        abort = threading.Event()
        futures: Dict[Future, str] = {
            executor.submit(self._compare_one, local_root, bucket, prefix, path, abort): path
            for path in shared
        }
        progress = ComparisonProgress(len(shared), enabled=self.show_progress)
        mismatches: List[ContentMismatch] = []
        compared = 0
        verified_count = 0
        bytes_verified = 0
        try:
            for future in as_completed(futures):
                outcome = future.result()
                if outcome is None:
                    continue
                mismatch, size = outcome
                compared += 1
                bytes_verified += size
                if mismatch is None:
                    verified_count += 1
                else:
                    logging.debug("Content mismatch: %s", mismatch.describe())
                    mismatches.append(mismatch)
                progress.update(compared, bytes_verified)
                if self.cancel_event.is_set():
                    break
        except BaseException:
            abort.set()
            for future in futures:
                future.cancel()
            raise
        finally:
            progress.finish()

        if self.cancel_event.is_set():
            for future in futures:
                future.cancel()
            raise VerificationCancelledError(len(shared) - compared)
        return mismatches, verified_count, bytes_verified


def verify_repository(  # pylint: disable=too-many-arguments
    s3,
    local_root: Path,
    bucket: str,
    prefix: str,
    exclusions: Optional[ExclusionSet] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    cancel_event: Optional[threading.Event] = None,
    show_progress: bool = False,
) -> VerificationReport:
    """Verify a remote copy and raise VerificationFailedError on any mismatch."""
    verifier = RepositoryVerifier(
        s3,
        exclusions=exclusions,
        max_workers=max_workers,
        cancel_event=cancel_event,
        show_progress=show_progress,
    )
    report = verifier.verify(local_root, bucket, prefix)
    return raise_for_report(report)


__all__ = ["RepositoryVerifier", "VerifierState", "verify_repository"]
