"""
Configuration for repository verification.

Defaults live here as module constants. Environment variables (optionally
loaded from a .env file) override them at runtime through load_settings().
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

# Files bundled at the root of repository fixtures that are not repository content
DEFAULT_EXCLUDED_PATHS: tuple[str, ...] = (
    "ocfl_1.0.txt",  # OCFL 1.0 specification text
    "ocfl_1.1.md",  # OCFL 1.1 specification text
)
# File names ignored in every directory
DEFAULT_EXCLUDED_NAMES: tuple[str, ...] = (".gitkeep",)  # keeps empty fixture directories in git

DEFAULT_MAX_WORKERS: int = 8  # Concurrent fetch-and-compare tasks
DEFAULT_MAX_POOL_CONNECTIONS: int = 100
DEFAULT_CONNECT_TIMEOUT: int = 60  # seconds
DEFAULT_READ_TIMEOUT: int = 60  # seconds
DEFAULT_MAX_ATTEMPTS: int = 3
DEFAULT_REGION: str = "us-east-2"

MAX_ERROR_DISPLAY: int = 10  # Maximum mismatches printed per section before truncating
PREVIEW_BYTES: int = 512  # Remote bytes kept per content mismatch for diagnosis

ENV_FILE_VARIABLE = "REPO_FIDELITY_ENV_FILE"
MAX_WORKERS_VARIABLE = "REPO_FIDELITY_MAX_WORKERS"
EXCLUDE_VARIABLE = "REPO_FIDELITY_EXCLUDE"
EXCLUDE_NAMES_VARIABLE = "REPO_FIDELITY_EXCLUDE_NAMES"
ENDPOINT_VARIABLE = "REPO_FIDELITY_ENDPOINT"
REGION_VARIABLE = "AWS_DEFAULT_REGION"


@dataclass(frozen=True)
class VerifierSettings:
    """Resolved runtime settings for a verification run."""

    excluded_paths: tuple[str, ...]
    excluded_names: tuple[str, ...]
    max_workers: int
    endpoint_url: Optional[str]
    region: str


def resolve_env_path(env_path: Optional[str] = None) -> str:
    """
    Determine which .env file should be loaded.

    Priority order:
      1. Explicit parameter
      2. REPO_FIDELITY_ENV_FILE environment variable
      3. ~/.env
    """
    if env_path:
        return env_path
    configured = os.environ.get(ENV_FILE_VARIABLE)
    if configured:
        return configured
    return str(Path.home() / ".env")


def _positive_int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}")
    return value


def split_names(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma separated list of names, dropping blanks."""
    if not raw:
        return ()
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def load_settings(env_path: Optional[str] = None) -> VerifierSettings:
    """Load settings from the environment after applying the .env file, if any."""
    resolved_path = resolve_env_path(env_path)
    if load_dotenv(resolved_path):
        logging.debug("Loaded environment overrides from %s", resolved_path)

    excluded_paths = DEFAULT_EXCLUDED_PATHS + split_names(os.getenv(EXCLUDE_VARIABLE))
    excluded_names = DEFAULT_EXCLUDED_NAMES + split_names(os.getenv(EXCLUDE_NAMES_VARIABLE))
    return VerifierSettings(
        excluded_paths=tuple(dict.fromkeys(excluded_paths)),
        excluded_names=tuple(dict.fromkeys(excluded_names)),
        max_workers=_positive_int_from_env(MAX_WORKERS_VARIABLE, DEFAULT_MAX_WORKERS),
        endpoint_url=os.getenv(ENDPOINT_VARIABLE) or None,
        region=os.getenv(REGION_VARIABLE) or DEFAULT_REGION,
    )


__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_EXCLUDED_NAMES",
    "DEFAULT_EXCLUDED_PATHS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_POOL_CONNECTIONS",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_REGION",
    "MAX_ERROR_DISPLAY",
    "PREVIEW_BYTES",
    "VerifierSettings",
    "load_settings",
    "resolve_env_path",
    "split_names",
]
