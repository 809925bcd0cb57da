"""Result adapter tests: try_result helpers and as_result decorators."""

from __future__ import annotations

import asyncio
import logging

import pytest

from verdict.errors import ResultError
from verdict.http_errors import NotFoundError
from verdict.result import Failure, Success
from verdict.try_result import (
    as_result,
    as_result_async,
    try_result,
    try_result_async,
)

pytestmark = pytest.mark.unit


def _fail(message: str) -> int:
    raise ValueError(message)


async def _double(value: int) -> int:
    await asyncio.sleep(0)
    return value * 2


async def _fail_async(message: str) -> int:
    await asyncio.sleep(0)
    raise ValueError(message)


# =============================================================================
# try_result / try_result_async
# =============================================================================


def test_try_result_captures_return_value() -> None:
    assert try_result(lambda: 5) == Success(5)


def test_try_result_captures_exceptions() -> None:
    value, error = try_result(lambda: _fail("boom"))
    assert value is None
    assert isinstance(error, ResultError)
    assert error.message == "boom"
    assert error.name == "ResultError(ValueError)"


def test_try_result_uses_custom_error_mapper() -> None:
    outcome = try_result(lambda: _fail("boom"), NotFoundError.from_cause)
    assert isinstance(outcome.error, NotFoundError)


def test_try_result_lets_base_exceptions_propagate() -> None:
    def interrupt() -> None:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        try_result(interrupt)


def test_adapted_failures_are_logged_at_debug(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG, logger="verdict.try_result"):
        try_result(lambda: _fail("boom"))
    assert any("Adapted ValueError" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_try_result_async_accepts_awaitables_and_callables() -> None:
    assert await try_result_async(_double(2)) == Success(4)
    assert await try_result_async(lambda: _double(3)) == Success(6)


@pytest.mark.asyncio
async def test_try_result_async_captures_exceptions() -> None:
    outcome = await try_result_async(_fail_async("late"))
    assert isinstance(outcome, Failure)
    assert outcome.error.message == "late"


@pytest.mark.asyncio
async def test_try_result_async_lets_cancellation_propagate() -> None:
    async def cancelled() -> None:
        raise asyncio.CancelledError

    with pytest.raises(asyncio.CancelledError):
        await try_result_async(cancelled)


# =============================================================================
# Decorators
# =============================================================================


class MathService:
    @as_result
    def divide(self, a: int, b: int) -> float:
        if b == 0:
            raise ZeroDivisionError("Division by zero")
        return a / b

    @as_result(error_mapper=lambda exc: ResultError("Failed to divide", exc))
    def divide_safe(self, a: int, b: int) -> float:
        return a / b

    @as_result
    def rejected(self) -> ResultError:
        return ResultError("rejected")


class UserService:
    @as_result_async
    async def get_user(self, user_id: str) -> dict[str, str]:
        if not user_id:
            raise ValueError("ID required")
        return {"id": user_id, "name": "User"}

    @as_result_async(error_mapper=NotFoundError.from_cause)
    async def get_user_strict(self, user_id: str) -> dict[str, str]:
        raise LookupError(user_id)


def test_as_result_wraps_sync_methods() -> None:
    service = MathService()
    assert service.divide(10, 2) == Success(5.0)

    failed = service.divide(10, 0)
    assert failed.ok is False
    assert failed.error.message == "Division by zero"


def test_as_result_applies_error_mapper() -> None:
    failed = MathService().divide_safe(1, 0)
    assert failed.error.message == "Failed to divide"
    assert isinstance(failed.error.cause, ZeroDivisionError)


def test_as_result_treats_returned_errors_as_failures() -> None:
    outcome = MathService().rejected()
    assert isinstance(outcome, Failure)
    assert outcome.error.message == "rejected"


def test_as_result_preserves_function_metadata() -> None:
    assert MathService.divide.__name__ == "divide"


@pytest.mark.asyncio
async def test_as_result_async_wraps_coroutine_methods() -> None:
    service = UserService()
    assert await service.get_user("1") == Success({"id": "1", "name": "User"})

    failed = await service.get_user("")
    assert failed.ok is False
    assert failed.error.message == "ID required"


@pytest.mark.asyncio
async def test_as_result_async_applies_error_mapper() -> None:
    failed = await UserService().get_user_strict("42")
    assert isinstance(failed.error, NotFoundError)
    assert failed.error.message == "42"
