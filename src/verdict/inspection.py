"""Render arbitrary runtime values as stable, human-readable debug strings.

``inspect`` is total: whatever it is handed, it returns a string and never
raises. It is one-way (there is no reader) and exists to turn unknown raised
values into error messages and log lines.

Values are first classified into one of two renderings:

- **Opaque**: a literal string with no nested structure (timestamps,
  patterns, URLs, futures, iterators, weak containers).
- **Serializable**: an optional ``[TypeName]:`` prefix followed by compact
  JSON of the value's structure (dicts, sequences, mappings, sets, bytes,
  exceptions, class instances).

The serializable branch runs a two-pass encoder. The first pass only tracks
the current ancestor path, the way ``json`` does with ``check_circular``, and
fails exactly when the payload contains a real cycle. The retry tracks every
container visited anywhere in the graph and replaces each repeat with
``[Circular]``, so shared (diamond) references are also collapsed there.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Iterator, Mapping, Sequence
from collections.abc import Set as AbstractSet
import concurrent.futures
from contextlib import suppress
from dataclasses import dataclass, fields, is_dataclass
import datetime as dt
from enum import Enum
import functools
import inspect as pyinspect
import json
import logging
import math
import numbers
import re
from typing import TYPE_CHECKING, Any, Final
from urllib.parse import DefragResult, ParseResult, SplitResult
import weakref

import httpx
from pydantic import AnyUrl, BaseModel

from verdict.config import current_config

if TYPE_CHECKING:
    from verdict.config import FrozenConfig

__all__ = [
    "CIRCULAR",
    "INVALID_DATE",
    "NON_SERIALIZABLE_PREFIX",
    "REFERENTIAL_PREFIX",
    "Classification",
    "Opaque",
    "Serializable",
    "ValueKind",
    "classify",
    "describe_runtime_type",
    "inspect",
]

log = logging.getLogger(__name__)

CIRCULAR: Final[str] = "[Circular]"
REFERENTIAL_PREFIX: Final[str] = "[Referential Structure]:"
NON_SERIALIZABLE_PREFIX: Final[str] = "[Non-Serializable]:"
INVALID_DATE: Final[str] = "Invalid Date"

_PLAIN_TYPES: Final = (dict, list, tuple)
_BYTE_TYPES: Final = (bytes, bytearray, memoryview)
_URL_TYPES: Final = (httpx.URL, AnyUrl, SplitResult, ParseResult, DefragResult)
# Values that cannot be enumerated without side effects, or have no value yet.
_OPAQUE_HANDLE_TYPES: Final = (
    asyncio.Future,
    concurrent.futures.Future,
    weakref.WeakKeyDictionary,
    weakref.WeakValueDictionary,
    weakref.WeakSet,
    weakref.ref,
    Awaitable,
    Iterator,
    AsyncIterator,
)
_PATTERN_FLAGS: Final = (
    (re.ASCII, "a"),
    (re.IGNORECASE, "i"),
    (re.LOCALE, "L"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)
_CHUNK_DIGITS: Final = 1000
_DIGIT_CHUNK: Final = 10**_CHUNK_DIGITS


class ValueKind(Enum):
    """Closed set of value shapes the inspector knows how to render."""

    PLAIN_DATA = "plain_data"
    ORDERED_PAIRS = "ordered_pairs"
    ORDERED_ELEMENTS = "ordered_elements"
    BYTE_BUFFER = "byte_buffer"
    QUERY_PARAMS = "query_params"
    TIMESTAMP_LIKE = "timestamp_like"
    PATTERN_LIKE = "pattern_like"
    URL_LIKE = "url_like"
    ERROR_LIKE = "error_like"
    OPAQUE_HANDLE = "opaque_handle"
    NAMED_INSTANCE = "named_instance"


@dataclass(frozen=True, slots=True)
class Opaque:
    """Rendered literally; no JSON machinery runs."""

    kind: ValueKind
    output: str


@dataclass(frozen=True, slots=True)
class Serializable:
    """Rendered as ``prefix`` followed by the JSON encoding of ``payload``."""

    kind: ValueKind
    prefix: str
    payload: Any


Classification = Opaque | Serializable


class _CircularReferenceError(ValueError):
    """A container was reached again while still being encoded."""


# --- Public API ---


def inspect(value: Any, *, config: FrozenConfig | None = None) -> str:
    """Return a debug string for any value. Never raises.

    Args:
        value: Anything at all, typically a caught exception or raised value.
        config: Rendering settings; defaults to ``current_config()``.

    Returns:
        A literal rendering for scalars and opaque values, otherwise an
        optional ``[TypeName]:`` prefix followed by compact JSON.

    Example:
        >>> inspect({"id": 7, "tags": {"b", "a"}})
        '{"id":7,"tags":["a","b"]}'
    """
    cfg = config if config is not None else current_config()
    try:
        return _inspect(value, cfg)
    except Exception:
        log.debug(
            "Value of type %s is not serializable", _type_tag(value), exc_info=True
        )
        return f"{NON_SERIALIZABLE_PREFIX}{_type_tag(value)}"


def classify(value: Any, *, config: FrozenConfig | None = None) -> Classification:
    """Decide how a non-scalar value is rendered (first match wins)."""
    cfg = config if config is not None else current_config()
    name = type(value).__name__

    if isinstance(value, (dt.date, dt.time)):
        return Opaque(ValueKind.TIMESTAMP_LIKE, _timestamp_text(value))
    if isinstance(value, re.Pattern):
        return Opaque(ValueKind.PATTERN_LIKE, _pattern_text(value))
    if isinstance(value, _URL_TYPES):
        return Opaque(ValueKind.URL_LIKE, _url_text(value))
    if isinstance(value, _BYTE_TYPES):
        return Serializable(ValueKind.BYTE_BUFFER, f"[{name}]:", list(bytes(value)))
    if isinstance(value, httpx.QueryParams):
        return Serializable(ValueKind.QUERY_PARAMS, f"[{name}]:", str(value))
    # Weak containers are also mappings/sets, so handles go first.
    if isinstance(value, _OPAQUE_HANDLE_TYPES):
        return Opaque(ValueKind.OPAQUE_HANDLE, f"[{name}]")
    if isinstance(value, Mapping) and (
        type(value) is not dict or _has_colliding_keys(value, cfg)
    ):
        pairs = [[key, item] for key, item in value.items()]
        return Serializable(ValueKind.ORDERED_PAIRS, f"[{name}]:", pairs)
    if isinstance(value, AbstractSet):
        return Serializable(
            ValueKind.ORDERED_ELEMENTS, f"[{name}]:", _set_elements(value, cfg)
        )
    if isinstance(value, BaseException):
        record = _error_record(value)
        return Serializable(ValueKind.ERROR_LIKE, f"[{record['name']}]:", record)
    if type(value) not in _PLAIN_TYPES:
        return Serializable(ValueKind.NAMED_INSTANCE, f"[{name}]:", value)
    return Serializable(ValueKind.PLAIN_DATA, "", value)


def describe_runtime_type(value: Any, *, config: FrozenConfig | None = None) -> str:
    """Return the short type tag used in normalized error names.

    Scalars use JSON-flavored tags (``"string"``, ``"number"``, ``"boolean"``,
    ``"null"``), integers past the safe range are ``"bigint"``, callables are
    ``"function"``; everything else reports its type name.
    """
    if value is None:
        return "null"
    if _is_function(value):
        return "function"
    if type(value) is bool:
        return "boolean"
    if type(value) is str:
        return "string"
    if type(value) is int:
        cfg = config if config is not None else current_config()
        return "bigint" if abs(value) > cfg.max_safe_integer else "number"
    if type(value) is float:
        return "number"
    return type(value).__name__


# --- Dispatch ---


def _inspect(value: Any, cfg: FrozenConfig) -> str:
    if _is_negative_zero(value):
        return "-0"
    if _is_function(value):
        return f"[Function]:{_function_name(value)}"
    scalar = _scalar_text(value)
    if scalar is not None:
        return scalar

    classification = classify(value, config=cfg)
    if isinstance(classification, Opaque):
        return classification.output

    try:
        encoded = _Encoder(cfg, track_all=False).encode(
            classification.payload, root=value
        )
    except _CircularReferenceError:
        log.debug("Cycle in %s; re-encoding with reference tracking", _type_tag(value))
        encoded = _Encoder(cfg, track_all=True).encode(
            classification.payload, root=value
        )
        return f"{REFERENTIAL_PREFIX}{encoded}"
    return f"{classification.prefix}{encoded}"


def _is_negative_zero(value: Any) -> bool:
    return isinstance(value, float) and value == 0.0 and math.copysign(1.0, value) < 0


def _is_function(value: Any) -> bool:
    return (
        pyinspect.isroutine(value)
        or pyinspect.isclass(value)
        or isinstance(value, functools.partial)
    )


def _function_name(value: Any) -> str:
    name = getattr(value, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        return "anonymous"
    return name


def _scalar_text(value: Any) -> str | None:
    """Render scalars as text, or return None for anything structured."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}" if value.name else str(value)
    if isinstance(value, float):
        return _float_text(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, int):
        return _int_text(value)
    if isinstance(value, numbers.Number):
        return str(value)
    return None


def _int_text(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        # Past sys.get_int_max_str_digits(); emit the digits chunk by chunk.
        remaining = abs(value)
        chunks: list[int] = []
        while remaining:
            remaining, low = divmod(remaining, _DIGIT_CHUNK)
            chunks.append(low)
        head, *rest = reversed(chunks)
        digits = str(head) + "".join(f"{chunk:0{_CHUNK_DIGITS}d}" for chunk in rest)
        return f"-{digits}" if value < 0 else digits


def _float_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def _timestamp_text(value: dt.date | dt.time) -> str:
    try:
        return value.isoformat()
    except (ValueError, TypeError, OverflowError):
        # e.g. a tzinfo whose utcoffset() is out of range
        return INVALID_DATE


def _pattern_text(pattern: re.Pattern[Any]) -> str:
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    flags = "".join(letter for flag, letter in _PATTERN_FLAGS if pattern.flags & flag)
    return f"/{source}/{flags}"


def _url_text(value: Any) -> str:
    if isinstance(value, (SplitResult, ParseResult, DefragResult)):
        return value.geturl()
    return str(value)


def _set_elements(value: AbstractSet[Any], cfg: FrozenConfig) -> list[Any]:
    items = list(value)
    if cfg.sort_sets:
        with suppress(TypeError):
            return sorted(items)
    return items


def _key_text(key: Any, cfg: FrozenConfig) -> str:
    """Return the member name a dict key gets in the encoded object."""
    if isinstance(key, str):
        return key
    if isinstance(key, Enum) and isinstance(key, (int, float)):
        key = key.value
    if key is None or isinstance(key, bool):
        return json.dumps(key)
    if isinstance(key, int):
        return _int_text(key)
    if isinstance(key, float):
        return _float_text(key)
    return inspect(key, config=cfg)


def _has_colliding_keys(value: Mapping[Any, Any], cfg: FrozenConfig) -> bool:
    names = [_key_text(key, cfg) for key in value]
    return len(set(names)) != len(names)


def _type_tag(value: Any) -> str:
    t = type(value)
    if t.__module__ == "builtins":
        return t.__qualname__
    return f"{t.__module__}.{t.__qualname__}"


# --- Structure extraction ---


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


def _public_attributes(obj: Any) -> dict[str, Any]:
    """Return public instance attributes (``__dict__`` entries and set slots)."""
    try:
        attrs = vars(obj)
    except TypeError:
        attrs = {}
    record = {key: item for key, item in attrs.items() if not key.startswith("_")}
    for slot in _slot_names(type(obj)):
        if slot.startswith("_") or slot in record:
            continue
        try:
            record[slot] = getattr(obj, slot)
        except AttributeError:
            continue  # unset slot
    return record


def _structure(obj: Any) -> dict[str, Any]:
    if isinstance(obj, BaseModel):
        return dict(obj)
    if is_dataclass(obj):
        return {f.name: getattr(obj, f.name) for f in fields(obj)}
    return _public_attributes(obj)


def _error_record(error: BaseException) -> dict[str, Any]:
    """Public fields of an exception plus explicit ``message`` and ``name``."""
    from verdict.errors import exception_message, exception_name

    record = _public_attributes(error)
    record["message"] = exception_message(error)
    record["name"] = exception_name(error)
    return record


# --- Encoder ---


class _Encoder:
    """Convert a payload into JSON-safe data and encode it compactly.

    With ``track_all`` off, only containers on the current path are tracked and
    meeting one again raises ``_CircularReferenceError``. With it on, every
    container is remembered for the whole call and repeats become
    ``[Circular]``.
    """

    def __init__(self, cfg: FrozenConfig, *, track_all: bool) -> None:
        self._cfg = cfg
        self._track_all = track_all
        # id -> object; holding the object keeps its id from being reused.
        self._active: dict[int, Any] = {}

    def encode(self, payload: Any, *, root: Any) -> str:
        if payload is not root:
            self._active[id(root)] = root
        data = self._convert(payload)
        return json.dumps(
            data,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            check_circular=False,
        )

    def _convert(self, value: Any) -> Any:
        if value is None or isinstance(value, (bool, str)):
            return value
        if isinstance(value, Enum):
            return self._convert(value.value)
        if isinstance(value, int):
            if abs(value) > self._cfg.max_safe_integer:
                return _int_text(value)
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else _float_text(value)
        if isinstance(value, numbers.Number):
            return str(value)
        if _is_function(value):
            return f"[Function]:{_function_name(value)}"
        if isinstance(value, (dt.date, dt.time)):
            return _timestamp_text(value)
        if isinstance(value, re.Pattern):
            return _pattern_text(value)
        if isinstance(value, _URL_TYPES):
            return _url_text(value)
        if isinstance(value, httpx.QueryParams):
            return str(value)
        if isinstance(value, _BYTE_TYPES):
            return list(bytes(value))
        if isinstance(value, _OPAQUE_HANDLE_TYPES):
            return f"[{type(value).__name__}]"
        return self._convert_container(value)

    def _convert_container(self, value: Any) -> Any:
        key = id(value)
        if key in self._active:
            if self._track_all:
                return CIRCULAR
            raise _CircularReferenceError(f"cycle through {_type_tag(value)}")
        self._active[key] = value
        try:
            return self._convert_children(value)
        finally:
            if not self._track_all:
                del self._active[key]

    def _convert_children(self, value: Any) -> Any:
        if type(value) is dict:
            keys = [self._key(k) for k in value]
            if len(set(keys)) == len(keys):
                return {k: self._convert(v) for k, v in zip(keys, value.values())}
            # Distinct keys that read the same as text stay apart as pairs.
            return [[self._convert(k), self._convert(v)] for k, v in value.items()]
        if isinstance(value, Mapping):
            return [[self._convert(k), self._convert(v)] for k, v in value.items()]
        if isinstance(value, AbstractSet):
            return [self._convert(v) for v in _set_elements(value, self._cfg)]
        if isinstance(value, Sequence):
            return [self._convert(v) for v in value]
        if isinstance(value, BaseException):
            record = _error_record(value)
        else:
            record = _structure(value)
        return {self._key(k): self._convert(v) for k, v in record.items()}

    def _key(self, key: Any) -> str:
        return _key_text(key, self._cfg)
