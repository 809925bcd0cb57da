"""Canonical error type and normalization of arbitrary raised values.

``ResultError.from_cause`` is the terminal point for anything a caller
catches: exceptions are adapted, already-normalized errors pass through
untouched, and every other value is rendered with ``inspect`` so the message
still says what was raised.
"""

from __future__ import annotations

import logging
import traceback
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Self, TypedDict, TypeGuard, cast

from verdict._http import DEFAULT_ERROR, HTTP_ERRORS, HTTPErrorDescriptor
from verdict.config import current_config
from verdict.exceptions import VerdictError
from verdict.inspection import CIRCULAR, describe_runtime_type, inspect
from verdict.result import Failure

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

log = logging.getLogger(__name__)

_TRUNCATION_SUFFIX = "... [TRUNCATED]"


class StructuredError(TypedDict):
    """Export shape of a ``ResultError`` (``to_structured``)."""

    name: str
    message: str
    code: str
    cause: Any


class StructuredException(TypedDict):
    """Export shape of a plain exception found in a cause chain."""

    name: str
    message: str
    traceback: str | None
    cause: Any


class ResultError(VerdictError):
    """Canonical error: message, name, code, status and the original cause.

    Instances are immutable apart from ``hint``. Subclasses bind a fixed
    ``HTTPErrorDescriptor`` with ``class X(ResultError, descriptor=...)``;
    the descriptor's code becomes the class ``kind`` tag.

    Example:
        try:
            load_user(user_id)
        except Exception as exc:
            err = ResultError.from_cause(exc)
            log.warning("%s: %s", err.name, err.message)
    """

    descriptor: ClassVar[HTTPErrorDescriptor] = DEFAULT_ERROR
    kind: ClassVar[str | None] = None

    def __init_subclass__(
        cls, *, descriptor: HTTPErrorDescriptor | None = None, **kwargs: Any
    ) -> None:
        super().__init_subclass__(**kwargs)
        if descriptor is not None:
            cls.descriptor = descriptor
            cls.kind = descriptor.code

    def __init__(
        self,
        message: str | None = None,
        cause: Any = None,
        *,
        code: str | None = None,
        status: int | None = None,
        name: str | None = None,
        hint: str | None = None,
        **details: Any,
    ) -> None:
        """Create an error; unset fields fall back to the class descriptor.

        Args:
            message: Human-readable description; defaults to the descriptor's.
            cause: The original raised value, kept as-is.
            code: Override for the descriptor code.
            status: Override for the descriptor HTTP status.
            name: Override for the derived ``ResultError(<kind>)`` name.
            hint: Optional actionable hint appended by ``str()``.
            **details: Extra read-only fields exposed through ``details``.
        """
        text = message if message is not None else self.descriptor.message
        super().__init__(text, hint=hint)
        self._message = str(text)
        self._cause = cause
        self._code = code if code is not None else self.descriptor.code
        self._status = status if status is not None else self.descriptor.status
        self._name = name if name is not None else self._default_name(cause)
        self._details: Mapping[str, Any] = MappingProxyType(dict(details))
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    @classmethod
    def _default_name(cls, cause: Any) -> str:
        if cls.kind is not None:
            return cls.descriptor.name
        if isinstance(cause, BaseException):
            return f"ResultError({exception_name(cause)})"
        return f"ResultError({describe_runtime_type(cause)})"

    # --- Read-only fields ---

    @property
    def message(self) -> str:
        return self._message

    @property
    def name(self) -> str:
        return self._name

    @property
    def code(self) -> str:
        return self._code

    @property
    def status(self) -> int:
        return self._status

    @property
    def cause(self) -> Any:
        return self._cause

    @property
    def details(self) -> Mapping[str, Any]:
        return self._details

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, message={self._message!r}, "
            f"code={self._code!r}, status={self._status})"
        )

    # --- Normalization ---

    @classmethod
    def from_cause(
        cls,
        cause: Any,
        *,
        code: str | None = None,
        status: int | None = None,
        name: str | None = None,
    ) -> Self:
        """Normalize any caught value into this error type. Never raises.

        Already-normalized errors of this type are returned as-is (same
        instance). Exceptions keep their message and become the ``cause``;
        any other value is rendered with ``inspect`` for the message and kept
        verbatim as the ``cause``.
        """
        if isinstance(cause, cls):
            return cause
        if isinstance(cause, BaseException):
            message = exception_message(cause)
        else:
            message = inspect(cause)
        err = cls(
            _limit_length(message), cause, code=code, status=status, name=name
        )
        log.debug("Normalized %s into %s", type(cause).__name__, err.name)
        return err

    @classmethod
    def result(
        cls,
        cause: Any = None,
        *,
        code: str | None = None,
        status: int | None = None,
        name: str | None = None,
    ) -> Failure[Self]:
        """Normalize ``cause`` and wrap it in a ``Failure``."""
        return Failure(cls.from_cause(cause, code=code, status=status, name=name))

    # --- Export ---

    def to_structured(self) -> StructuredError:
        """Return a plain-data view suitable for logs and API payloads.

        Nested ``ResultError`` causes export the same way; other exceptions
        export their name, message, traceback and cause; anything else is
        passed through unchanged.
        """
        return self._to_structured({id(self)})

    def _to_structured(self, seen: set[int]) -> StructuredError:
        return {
            "name": self._name,
            "message": self._message,
            "code": self._code,
            "cause": _structure_cause(self._cause, seen),
        }


def _structure_cause(cause: Any, seen: set[int]) -> Any:
    if not isinstance(cause, BaseException):
        return cause
    if id(cause) in seen:
        return CIRCULAR
    seen.add(id(cause))
    if isinstance(cause, ResultError):
        return cause._to_structured(seen)
    structured: StructuredException = {
        "name": exception_name(cause),
        "message": exception_message(cause),
        "traceback": _format_traceback(cause),
        "cause": _structure_cause(cause.__cause__, seen),
    }
    return structured


def _format_traceback(exc: BaseException) -> str | None:
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_tb(exc.__traceback__))


def _limit_length(message: str) -> str:
    limit = current_config().max_message_length
    if limit is None or len(message) <= limit:
        return message
    return message[:limit] + _TRUNCATION_SUFFIX


# --- Exception helpers ---


def exception_name(exc: BaseException) -> str:
    """Display name of an exception; normalized errors report their own name."""
    if isinstance(exc, ResultError):
        return exc.name
    return type(exc).__name__


def walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` and every exception reachable through cause or context.

    Explicit causes are visited before implicit context; each exception is
    yielded once even when the chain loops.
    """
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__context__, current.__cause__):
            if isinstance(linked, BaseException):
                pending.append(linked)


def exception_message(exc: BaseException) -> str:
    """Message text of an exception, without raising on a broken ``__str__``."""
    if isinstance(exc, ResultError):
        return exc.message
    try:
        return str(exc)
    except Exception:
        log.debug("str() failed for %s", type(exc).__name__, exc_info=True)
        return inspect(list(exc.args))


# --- Lookup helpers ---


def find_http_error_from_code(code: str) -> HTTPErrorDescriptor | None:
    """Return the descriptor registered for ``code``, if any."""
    return HTTP_ERRORS.get(code)


def get_http_error_message_from_code(
    code: str, fallback: str = "An unexpected error occurred"
) -> str:
    """Return the default message for ``code``, or ``fallback``."""
    descriptor = find_http_error_from_code(code)
    return descriptor.message if descriptor is not None else fallback


def is_result_error(value: object) -> TypeGuard[ResultError]:
    """Return True if ``value`` is a normalized error."""
    return isinstance(value, ResultError)


def is_result_error_code(value: object, code: str) -> bool:
    """Return True if ``value`` is a normalized error with this ``code``."""
    return is_result_error(value) and cast("ResultError", value).code == code


def is_result_error_status(value: object, status: int) -> bool:
    """Return True if ``value`` is a normalized error with this ``status``."""
    return is_result_error(value) and cast("ResultError", value).status == status
