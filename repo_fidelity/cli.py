#!/usr/bin/env python3
"""CLI tool to verify that an S3 prefix holds an exact copy of a local repository."""
# ruff: noqa: TRY003 - CLI emits user-focused errors with contextual messages

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .client_factory import create_mock_s3_client, create_s3_client
from .config import DEFAULT_EXCLUDED_NAMES, DEFAULT_EXCLUDED_PATHS, VerifierSettings, load_settings
from .errors import RepositoryVerificationError, VerificationFailedError
from .exclusions import ExclusionSet
from .reporting import print_report
from .verifier import verify_repository

EXIT_PASSED = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid worker count: {value}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError("Worker count must be at least 1")
    return parsed


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for a verification run."""
    parser = argparse.ArgumentParser(
        description=(
            "Compare a local repository directory with its copy under an S3 bucket prefix. "
            "Reports files missing on either side and files whose MD5 digests differ."
        )
    )
    parser.add_argument("local_root", help="Local repository directory holding the known-good copy")
    parser.add_argument("bucket", help="Bucket holding the remote copy")
    parser.add_argument("prefix", help="Key prefix of the remote copy (empty string for bucket root)")
    parser.add_argument(
        "--exclude",
        action="append",
        dest="excludes",
        default=[],
        help="Additional relative path to ignore. Repeat for multiple entries.",
    )
    parser.add_argument(
        "--exclude-name",
        action="append",
        dest="exclude_names",
        default=[],
        help="Additional file name to ignore in every directory. Repeat for multiple entries.",
    )
    parser.add_argument(
        "--no-default-excludes",
        action="store_true",
        help=(
            "Do not ignore the bundled fixture files "
            f"({', '.join(DEFAULT_EXCLUDED_PATHS + DEFAULT_EXCLUDED_NAMES)})."
        ),
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Concurrent fetch-and-compare workers (default: REPO_FIDELITY_MAX_WORKERS or 8).",
    )
    parser.add_argument("--endpoint", default=None, help="S3-compatible endpoint URL (e.g. a local mock)")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Treat --endpoint as a mock server: placeholder credentials, no TLS verification.",
    )
    parser.add_argument("--region", default=None, help="AWS region (default: AWS_DEFAULT_REGION or us-east-2)")
    parser.add_argument("--env-file", default=None, help="Path to .env file with AWS credentials")
    parser.add_argument("--no-progress", action="store_true", help="Do not print comparison progress.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def _build_exclusions(args: argparse.Namespace, settings: VerifierSettings) -> ExclusionSet:
    paths = settings.excluded_paths
    names = settings.excluded_names
    if args.no_default_excludes:
        paths = [path for path in paths if path not in DEFAULT_EXCLUDED_PATHS]
        names = [name for name in names if name not in DEFAULT_EXCLUDED_NAMES]
    return ExclusionSet(paths, names).extended(args.excludes, args.exclude_names)


def _build_client(args: argparse.Namespace, endpoint_url: str | None, region: str):
    if args.mock:
        if not endpoint_url:
            raise SystemExit("--mock requires --endpoint or REPO_FIDELITY_ENDPOINT")
        return create_mock_s3_client(endpoint_url, region=region)
    return create_s3_client(region=region, endpoint_url=endpoint_url, env_path=args.env_file)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the repository verification CLI."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    try:
        settings = load_settings(args.env_file)
        exclusions = _build_exclusions(args, settings)
        endpoint_url = args.endpoint or settings.endpoint_url
        s3 = _build_client(args, endpoint_url, args.region or settings.region)
        print(f"Verifying s3://{args.bucket}/{args.prefix} against {args.local_root}")
        print()
        report = verify_repository(
            s3,
            Path(args.local_root).expanduser(),
            args.bucket,
            args.prefix,
            exclusions=exclusions,
            max_workers=args.workers or settings.max_workers,
            show_progress=not args.no_progress,
        )
    except VerificationFailedError as exc:
        logging.error("%s", exc)
        return EXIT_MISMATCH
    except RepositoryVerificationError as exc:
        logging.error("Verification aborted: %s", exc)
        return EXIT_ERROR

    print_report(report)
    print("  ✓ Remote copy is identical to the local repository")
    return EXIT_PASSED


if __name__ == "__main__":  # pragma: no cover - script entry point
    raise SystemExit(main())
