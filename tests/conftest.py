"""Pytest configuration and fixtures.

Provides environment isolation and logging configuration. All fixtures here
are autouse unless noted.
"""

from __future__ import annotations

import logging
import os

import pytest

from verdict.config import reset_config_cache

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from discovering project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr("verdict.config.find_dotenv", lambda *_args, **_kwargs: "")


@pytest.fixture(autouse=True)
def isolate_verdict_env(monkeypatch, tmp_path):
    """Ensure every test resolves configuration from a clean slate.

    Clears VERDICT_* env vars, points the pyproject lookup at an empty
    directory and drops cached schema defaults before and after.
    """
    for key in list(os.environ.keys()):
        if key.startswith("VERDICT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("VERDICT_PYPROJECT_PATH", str(tmp_path / "pyproject.toml"))
    reset_config_cache()
    yield
    reset_config_cache()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hypothesis").setLevel(logging.WARNING)


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def write_pyproject(tmp_path):
    """Return a writer that stores TOML text where VERDICT_PYPROJECT_PATH points."""

    def _write(text: str):
        path = tmp_path / "pyproject.toml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
