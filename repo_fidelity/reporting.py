"""Verification report model and console rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import MAX_ERROR_DISPLAY
from .errors import VerificationFailedError


@dataclass(frozen=True)
class ContentMismatch:
    """A path present on both sides whose content differs."""

    relative_path: str
    expected_digest: str
    actual_digest: Optional[str]
    actual_preview: bytes = b""
    reason: str = "digest mismatch"

    def describe(self) -> str:
        """One-line description suitable for the failure report."""
        actual = self.actual_digest or "<none>"
        return f"{self.relative_path}: {self.reason} (expected {self.expected_digest}, got {actual})"

    def preview_text(self) -> str:
        """Remote content prefix decoded for humans; undecodable bytes are replaced."""
        return self.actual_preview.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class VerificationReport:  # pylint: disable=too-many-instance-attributes
    """Outcome of comparing a local repository with its remote copy."""

    local_root: str
    bucket: str
    prefix: str
    expected_count: int
    actual_count: int
    missing_remote: List[str] = field(default_factory=list)
    unexpected_remote: List[str] = field(default_factory=list)
    content_mismatches: List[ContentMismatch] = field(default_factory=list)
    verified_count: int = 0
    bytes_verified: int = 0

    @property
    def structurally_equal(self) -> bool:
        """True when both sides hold exactly the same relative paths."""
        return not self.missing_remote and not self.unexpected_remote

    @property
    def passed(self) -> bool:
        """True when paths and every shared file's content agree."""
        return self.structurally_equal and not self.content_mismatches

    def error_lines(self) -> List[str]:
        """Every mismatch as a single line, structural ones first."""
        lines = [f"Missing remotely: {path}" for path in self.missing_remote]
        lines.extend(f"Not in local copy: {path}" for path in self.unexpected_remote)
        lines.extend(mismatch.describe() for mismatch in self.content_mismatches)
        return lines


SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_size(num_bytes: float) -> str:
    """Render a byte count in the largest unit that keeps the value below 1024."""
    value = float(num_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {SIZE_UNITS[unit_index]}"


def _print_section(title: str, entries: Sequence[str]) -> None:
    if not entries:
        return
    print(f"  ✗ {title} ({len(entries):,}):")
    for entry in list(entries)[:MAX_ERROR_DISPLAY]:
        print(f"    - {entry}")
    remaining = len(entries) - MAX_ERROR_DISPLAY
    if remaining > 0:
        print(f"    ... and {remaining} more")


def print_report(report: VerificationReport) -> None:
    """Print a summary of the report, listing mismatches section by section."""
    location = f"s3://{report.bucket}/{report.prefix}"
    print(f"  Local copy:   {report.local_root} ({report.expected_count:,} files)")
    print(f"  Remote copy:  {location} ({report.actual_count:,} objects)")
    print(f"  Verified:     {report.verified_count:,} files, {format_size(report.bytes_verified)}")
    print()
    if report.passed:
        print("  ✓ All files present on both sides")
        print("  ✓ All file digests match")
        print()
        return

    _print_section("Missing from remote copy", report.missing_remote)
    _print_section("Present only in remote copy", report.unexpected_remote)
    _print_section("Content mismatches", [m.describe() for m in report.content_mismatches])
    for mismatch in report.content_mismatches[:MAX_ERROR_DISPLAY]:
        if mismatch.actual_preview:
            print()
            print(f"  Remote content of {mismatch.relative_path}:")
            print(f"    {mismatch.preview_text()!r}")
    print()


def raise_for_report(report: VerificationReport) -> VerificationReport:
    """Print summarized mismatches and raise when verification failed."""
    if report.passed:
        return report
    print("  ✗ VERIFICATION FAILED:")
    print_report(report)
    raise VerificationFailedError(report)


__all__ = [
    "ContentMismatch",
    "VerificationReport",
    "format_size",
    "print_report",
    "raise_for_report",
]
