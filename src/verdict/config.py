"""Configuration: pydantic schema wall, frozen runtime payload, ambient scope.

Resolution follows a fixed precedence (last wins):

    defaults < [tool.verdict] in pyproject.toml < .env < VERDICT_* env < overrides

The resolved ``FrozenConfig`` is what ``inspect`` and ``ResultError`` read.
Callers either pass one explicitly or rely on ``current_config()``, which
returns the value installed by ``config_scope`` or the built-in defaults.
Only explicit resolution (``resolve_config`` or ``config_scope``) reads the
environment, so rendering never depends on ambient process state and never
modifies it.
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from functools import cache
import logging
import os
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field, ValidationError

from verdict.exceptions import HINTS, ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "VERDICT_"
PYPROJECT_PATH_VAR = "VERDICT_PYPROJECT_PATH"
CONFIG_TOOL_NAME = "verdict"

# Largest integer a double-precision JSON reader can hold exactly.
MAX_SAFE_INTEGER = 2**53 - 1

# Meta/control variables that steer resolution but aren't config fields
_META_ENV_FIELDS = {"pyproject_path"}


# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema for configuration validation and defaults."""

    #: Integers with a larger magnitude are rendered as decimal strings.
    max_safe_integer: int = Field(default=MAX_SAFE_INTEGER, ge=0)
    #: Sort set elements so renderings do not depend on hash order.
    sort_sets: bool = Field(default=True)
    #: Truncate normalized error messages past this many characters.
    max_message_length: int | None = Field(default=None, ge=1)

    model_config = {"extra": "forbid"}


@cache
def _default_settings() -> dict[str, Any]:
    return Settings().model_dump()


# --- Immutable runtime payload ---


@dataclass(frozen=True, slots=True)
class FrozenConfig:
    """Immutable configuration payload read by inspection and normalization."""

    max_safe_integer: int = MAX_SAFE_INTEGER
    sort_sets: bool = True
    max_message_length: int | None = None


# --- Loaders ---


def _coerce_env_value(field_name: str, raw: str) -> Any:
    info = Settings.model_fields.get(field_name)
    annotation = info.annotation if info is not None else None
    value = raw.strip()
    if annotation is bool:
        return value.lower() in {"1", "true", "yes", "on"}
    if field_name == "max_message_length" and value.lower() in {"", "none"}:
        return None
    # Leave everything else to pydantic's lax-mode coercion.
    return value


def _prefixed_fields(variables: Mapping[str, str | None]) -> dict[str, Any]:
    config: dict[str, Any] = {}
    for key, raw in variables.items():
        if raw is None or not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in _META_ENV_FIELDS:
            continue
        config[field_name] = _coerce_env_value(field_name, raw)
    return config


def load_env() -> dict[str, Any]:
    """Load ``VERDICT_*`` variables, skipping meta/control variables."""
    return _prefixed_fields(os.environ)


def get_pyproject_path() -> Path:
    """Return the pyproject.toml to read, honoring ``VERDICT_PYPROJECT_PATH``."""
    if override := os.environ.get(PYPROJECT_PATH_VAR):
        return Path(override)
    return Path.cwd() / "pyproject.toml"


def load_pyproject(path: Path | None = None) -> dict[str, Any]:
    """Load the ``[tool.verdict]`` table; a missing file or table yields ``{}``."""
    path = path if path is not None else get_pyproject_path()
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(
            f"Could not read {path}: {e}", hint=HINTS["invalid_pyproject"]
        ) from e
    section = data.get("tool", {}).get(CONFIG_TOOL_NAME, {})
    return dict(section) if isinstance(section, dict) else {}


def load_dotenv_file(path: Path | None = None) -> dict[str, Any]:
    """Read ``VERDICT_*`` entries from a .env file without touching os.environ.

    The file is looked up from the working directory upward unless ``path``
    is given. A missing or unreadable file yields ``{}``.
    """
    dotenv_path = str(path) if path is not None else find_dotenv(usecwd=True)
    if not dotenv_path:
        return {}
    try:
        values = dotenv_values(dotenv_path)
    except (OSError, UnicodeDecodeError):
        log.debug("Skipping unreadable .env file %s", dotenv_path, exc_info=True)
        return {}
    return _prefixed_fields(values)


# --- Public resolution API ---


def resolve_config(overrides: Mapping[str, Any] | None = None) -> FrozenConfig:
    """Resolve configuration from all layers into a FrozenConfig.

    Args:
        overrides: Programmatic configuration overrides (highest precedence).

    Returns:
        The validated, immutable configuration.

    Raises:
        ConfigurationError: If a value fails validation or pyproject.toml
            cannot be parsed.
    """
    merged: dict[str, Any] = dict(_default_settings())
    layers = (load_pyproject(), load_dotenv_file(), load_env(), dict(overrides or {}))
    for layer in layers:
        merged.update(layer)

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        raise ConfigurationError(
            f"Configuration validation failed for {loc!r}: {msg}",
            hint=HINTS["invalid_config"],
        ) from e

    return FrozenConfig(**settings.model_dump())


# --- Ambient scope (guarded) ---

_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "verdict_ambient_config", default=None
)


DEFAULT_CONFIG = FrozenConfig()


def current_config() -> FrozenConfig:
    """Return the scoped configuration, or the built-in defaults.

    No files or environment variables are read here; install a resolved
    configuration with ``config_scope()`` to apply them.
    """
    cfg = _AMBIENT.get()
    return cfg if cfg is not None else DEFAULT_CONFIG


def reset_config_cache() -> None:
    """Forget cached schema defaults so the next resolution recomputes them."""
    _default_settings.cache_clear()


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: Any,
) -> Generator[FrozenConfig]:
    """Install a configuration for the duration of a ``with`` block.

    Thread- and task-safe: the value lives in a ``ContextVar``.

    Without a ``FrozenConfig`` the layers are resolved first, so a bare
    ``config_scope()`` applies pyproject.toml, .env and ``VERDICT_*`` values.

    Example:
        with config_scope(sort_sets=False):
            inspect({1, 2, 3})
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        cfg = resolve_config({**(cfg_or_overrides or {}), **overrides})

    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)
