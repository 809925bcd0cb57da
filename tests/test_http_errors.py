"""HTTP error family tests: descriptor binding, re-wrapping and httpx mapping."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import pytest

from verdict._http import HTTP_ERRORS
from verdict.errors import ResultError
from verdict.http_errors import (
    HTTP_ERROR_TYPES,
    BadGatewayError,
    ForbiddenError,
    HTTPResultError,
    NotFoundError,
    RequestTimeoutError,
    TooManyRequestsError,
    UnprocessableEntityError,
    extract_status_code,
    from_http_status_error,
    http_error_for_code,
    http_error_for_status,
)
from verdict.result import Failure

pytestmark = pytest.mark.unit


class SdkError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def _status_error(status: int, method: str = "GET") -> httpx.HTTPStatusError:
    request = httpx.Request(method, "https://api.example.com/users/1")
    response = httpx.Response(status, request=request)
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        return exc
    raise AssertionError(f"status {status} did not raise")


# =============================================================================
# Table and subtype binding
# =============================================================================


def test_every_table_entry_has_a_matching_subtype() -> None:
    assert len(HTTP_ERRORS) == 21
    assert set(HTTP_ERROR_TYPES) == set(HTTP_ERRORS)
    for code, cls in HTTP_ERROR_TYPES.items():
        assert cls.kind == code
        assert cls.__name__ == HTTP_ERRORS[code].name
        assert issubclass(cls, HTTPResultError)


def test_subtype_defaults_come_from_its_descriptor() -> None:
    err = NotFoundError()
    assert (err.message, err.name, err.code, err.status) == (
        "Not Found",
        "NotFoundError",
        "NOT_FOUND",
        404,
    )
    assert ResultError.kind is None


def test_subtypes_are_catchable_by_class_and_base() -> None:
    with pytest.raises(ResultError) as excinfo:
        raise ForbiddenError("Nope")
    assert isinstance(excinfo.value, ForbiddenError)
    assert excinfo.value.status == 403


# =============================================================================
# Subtype from_cause / result
# =============================================================================


def test_subtype_passes_its_own_kind_through() -> None:
    err = NotFoundError("missing")
    assert NotFoundError.from_cause(err) is err


@dataclass
class Event:
    kind: str


class TaggedError(ValueError):
    kind = "NOT_FOUND"


@pytest.mark.parametrize("cause", [Event("NOT_FOUND"), TaggedError("tagged")])
def test_subtype_wraps_non_result_errors_carrying_its_kind(cause: object) -> None:
    err = NotFoundError.from_cause(cause)
    assert isinstance(err, NotFoundError)
    assert err is not cause
    assert isinstance(err.cause, ResultError)
    assert err.cause.cause is cause


def test_subtype_wraps_plain_values_in_a_normalized_cause() -> None:
    err = NotFoundError.from_cause("missing")
    assert isinstance(err, NotFoundError)
    assert err.message == "missing"
    assert isinstance(err.cause, ResultError)
    assert err.cause.name == "ResultError(string)"
    assert err.__cause__ is err.cause


def test_subtype_rewraps_other_subtypes_keeping_the_message() -> None:
    forbidden = ForbiddenError("No access")
    err = NotFoundError.from_cause(forbidden)
    assert isinstance(err, NotFoundError)
    assert err.cause is forbidden
    assert err.message == "No access"
    assert err.code == "NOT_FOUND"


def test_subtype_wraps_exceptions_through_the_base_normalizer() -> None:
    original = ValueError("boom")
    err = BadGatewayError.from_cause(original)
    assert err.message == "boom"
    assert err.cause.cause is original
    assert err.cause.name == "ResultError(ValueError)"


def test_subtype_result_builds_directly() -> None:
    outcome = NotFoundError.result("User not found", user_id=1)
    assert isinstance(outcome, Failure)
    assert isinstance(outcome.error, NotFoundError)
    assert outcome.error.message == "User not found"
    assert outcome.error.details == {"user_id": 1}
    assert NotFoundError.result().error.message == "Not Found"


# =============================================================================
# Lookups and httpx mapping
# =============================================================================


def test_lookup_by_code_and_status() -> None:
    assert http_error_for_code("TIMEOUT") is RequestTimeoutError
    assert http_error_for_code("TEAPOT") is None
    assert http_error_for_status(422) is UnprocessableEntityError
    assert http_error_for_status(418) is None


def test_httpx_status_errors_map_to_their_subtype() -> None:
    exc = _status_error(404, method="DELETE")
    err = from_http_status_error(exc)

    assert isinstance(err, NotFoundError)
    assert err.cause is exc
    assert "404" in err.message
    assert err.details == {
        "method": "DELETE",
        "url": "https://api.example.com/users/1",
    }


def test_unmapped_statuses_fall_back_to_result_error() -> None:
    err = from_http_status_error(_status_error(418))
    assert type(err) is ResultError
    assert err.status == 418
    assert err.name == "ResultError(HTTPStatusError)"


def test_status_is_found_along_the_cause_chain() -> None:
    try:
        try:
            raise SdkError("slow down", status_code=429)
        except SdkError as inner:
            raise RuntimeError("request failed") from inner
    except RuntimeError as outer:
        assert extract_status_code(outer) == 429
        err = from_http_status_error(outer)

    assert isinstance(err, TooManyRequestsError)
    assert err.message == "request failed"


def test_extract_status_code_ignores_values_outside_http_range() -> None:
    assert extract_status_code(SdkError("x", status_code=42)) is None
    assert extract_status_code(ValueError("x")) is None
