"""Pytest configuration and shared fixtures for the repository verifier."""

# pylint: disable=wrong-import-position

import sys
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

_ISOLATED_VARIABLES = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_DEFAULT_REGION",
    "REPO_FIDELITY_ENV_FILE",
    "REPO_FIDELITY_MAX_WORKERS",
    "REPO_FIDELITY_EXCLUDE",
    "REPO_FIDELITY_EXCLUDE_NAMES",
    "REPO_FIDELITY_ENDPOINT",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Auto-use fixture that hides the developer's AWS settings and ~/.env from tests.

    Each variable is set before being deleted so monkeypatch restores the original
    state even when a test loads a .env file that defines it.
    """
    for name in _ISOLATED_VARIABLES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    empty_env = tmp_path / "empty.env"
    empty_env.write_text("")
    monkeypatch.setenv("REPO_FIDELITY_ENV_FILE", str(empty_env))
    yield str(empty_env)


@pytest.fixture(name="mock_print")
def fixture_mock_print(monkeypatch):
    """Patch builtins.print and return the mock for assertions."""
    patched = mock.Mock()
    monkeypatch.setattr("builtins.print", patched)
    return patched
