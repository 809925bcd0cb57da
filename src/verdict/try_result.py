"""Adapters that turn raising code into ``Success``/``Failure`` values.

Only ``Exception`` is caught; ``KeyboardInterrupt``, ``SystemExit`` and
``asyncio.CancelledError`` propagate unchanged.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar, overload

from verdict.errors import ResultError
from verdict.result import Failure, Success

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from verdict.result import Result

    ErrorMapper = Callable[[Any], ResultError]

T = TypeVar("T")

log = logging.getLogger(__name__)


def _failure(exc: Exception, error_mapper: ErrorMapper) -> Failure[ResultError]:
    error = error_mapper(exc)
    log.debug("Adapted %s into %s", type(exc).__name__, error.name, exc_info=exc)
    return Failure(error)


def _wrap(value: Any) -> Result[Any, ResultError]:
    if isinstance(value, ResultError):
        return Failure(value)
    return Success(value)


def try_result(
    operation: Callable[[], T],
    error_mapper: ErrorMapper = ResultError.from_cause,
) -> Result[T, ResultError]:
    """Call ``operation`` and capture its outcome.

    Example:
        value, error = try_result(lambda: int(raw))
    """
    try:
        value = operation()
    except Exception as exc:
        return _failure(exc, error_mapper)
    return Success(value)


async def try_result_async(
    operation: Awaitable[T] | Callable[[], Awaitable[T]],
    error_mapper: ErrorMapper = ResultError.from_cause,
) -> Result[T, ResultError]:
    """Await ``operation`` (an awaitable or a zero-arg async callable)."""
    try:
        if inspect.isawaitable(operation):
            value = await operation
        else:
            value = await operation()
    except Exception as exc:
        return _failure(exc, error_mapper)
    return Success(value)


@overload
def as_result(
    func: Callable[..., Any], /
) -> Callable[..., Result[Any, ResultError]]: ...


@overload
def as_result(
    *, error_mapper: ErrorMapper = ...
) -> Callable[[Callable[..., Any]], Callable[..., Result[Any, ResultError]]]: ...


def as_result(
    func: Callable[..., Any] | None = None,
    /,
    *,
    error_mapper: ErrorMapper = ResultError.from_cause,
) -> Any:
    """Decorate a function so it returns a ``Result`` instead of raising.

    Usable bare (``@as_result``) or configured
    (``@as_result(error_mapper=...)``). A returned ``ResultError`` is treated
    as a failure.
    """

    def decorate(fn: Callable[..., Any]) -> Callable[..., Result[Any, ResultError]]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Result[Any, ResultError]:
            try:
                value = fn(*args, **kwargs)
            except Exception as exc:
                return _failure(exc, error_mapper)
            return _wrap(value)

        return wrapper

    return decorate(func) if func is not None else decorate


@overload
def as_result_async(
    func: Callable[..., Awaitable[Any]], /
) -> Callable[..., Awaitable[Result[Any, ResultError]]]: ...


@overload
def as_result_async(
    *, error_mapper: ErrorMapper = ...
) -> Callable[
    [Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Result[Any, ResultError]]]
]: ...


def as_result_async(
    func: Callable[..., Awaitable[Any]] | None = None,
    /,
    *,
    error_mapper: ErrorMapper = ResultError.from_cause,
) -> Any:
    """Async counterpart of ``as_result`` for coroutine functions."""

    def decorate(
        fn: Callable[..., Awaitable[Any]],
    ) -> Callable[..., Awaitable[Result[Any, ResultError]]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Result[Any, ResultError]:
            try:
                value = await fn(*args, **kwargs)
            except Exception as exc:
                return _failure(exc, error_mapper)
            return _wrap(value)

        return wrapper

    return decorate(func) if func is not None else decorate
