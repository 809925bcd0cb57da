"""Library exceptions for verdict.

``VerdictError`` is the root of everything this package raises on its own
behalf. Normalized application errors (``ResultError`` and its HTTP family)
derive from it too, so a single ``except VerdictError`` covers both.
"""

from __future__ import annotations


class VerdictError(Exception):
    """Base exception for all library-specific errors."""

    def __init__(self, message: str | None, hint: str | None = None):
        """Initialize with an optional actionable hint."""
        self.hint = hint
        # Store just the message in the base Exception for clean programmatic access
        msg_str = str(message) if message is not None else "None"
        super().__init__(msg_str)

    def __str__(self) -> str:
        """Return the full error message including the hint."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


# --- Actionable Hints ---

HINTS = {
    "invalid_config": (
        "Check VERDICT_* environment variables and [tool.verdict] in pyproject.toml."
    ),
    "invalid_pyproject": (
        "Fix the TOML syntax or point VERDICT_PYPROJECT_PATH at a valid file."
    ),
}


class ConfigurationError(VerdictError):
    """Raised for invalid configuration values or unreadable config files."""
