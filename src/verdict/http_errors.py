"""HTTP-flavored ``ResultError`` subtypes, one per entry of ``HTTP_ERRORS``.

Each subtype is a thin named class bound to its descriptor, so callers can
write ``except NotFoundError`` or match on ``err.kind``. Everything else is
inherited from ``ResultError``.
"""

from __future__ import annotations

import logging
from typing import Any, Self, cast

import httpx

from verdict._http import HTTP_ERRORS
from verdict.errors import ResultError, walk_exception_chain
from verdict.result import Failure

log = logging.getLogger(__name__)


class HTTPResultError(ResultError):
    """Shared behavior of the descriptor-bound subtypes."""

    @classmethod
    def from_cause(
        cls,
        cause: Any,
        *,
        code: str | None = None,
        status: int | None = None,
        name: str | None = None,
    ) -> Self:
        """Adapt ``cause`` into this subtype.

        A ``ResultError`` already tagged with this subtype's ``kind`` is
        returned unchanged. Anything else is normalized by
        ``ResultError.from_cause`` first and becomes the ``cause`` of a new
        instance carrying the same message.
        """
        if (
            cls.kind is not None
            and isinstance(cause, ResultError)
            and cause.kind == cls.kind
        ):
            return cast("Self", cause)
        base = ResultError.from_cause(cause)
        return cls(base.message, base, code=code, status=status, name=name)

    @classmethod
    def result(  # type: ignore[override]
        cls,
        message: str | None = None,
        cause: Any = None,
        *,
        hint: str | None = None,
        **details: Any,
    ) -> Failure[Self]:
        """Build an instance directly and wrap it in a ``Failure``."""
        return Failure(cls(message, cause, hint=hint, **details))


class BadRequestError(HTTPResultError, descriptor=HTTP_ERRORS["BAD_REQUEST"]):
    pass


class UnauthorizedError(HTTPResultError, descriptor=HTTP_ERRORS["UNAUTHORIZED"]):
    pass


class PaymentRequiredError(
    HTTPResultError, descriptor=HTTP_ERRORS["PAYMENT_REQUIRED"]
):
    pass


class ForbiddenError(HTTPResultError, descriptor=HTTP_ERRORS["FORBIDDEN"]):
    pass


class NotFoundError(HTTPResultError, descriptor=HTTP_ERRORS["NOT_FOUND"]):
    pass


class MethodNotAllowedError(
    HTTPResultError, descriptor=HTTP_ERRORS["METHOD_NOT_ALLOWED"]
):
    pass


class NotAcceptableError(HTTPResultError, descriptor=HTTP_ERRORS["NOT_ACCEPTABLE"]):
    pass


class RequestTimeoutError(HTTPResultError, descriptor=HTTP_ERRORS["TIMEOUT"]):
    pass


class ConflictError(HTTPResultError, descriptor=HTTP_ERRORS["CONFLICT"]):
    pass


class PreconditionFailedError(
    HTTPResultError, descriptor=HTTP_ERRORS["PRECONDITION_FAILED"]
):
    pass


class PayloadTooLargeError(
    HTTPResultError, descriptor=HTTP_ERRORS["PAYLOAD_TOO_LARGE"]
):
    pass


class UnsupportedMediaTypeError(
    HTTPResultError, descriptor=HTTP_ERRORS["UNSUPPORTED_MEDIA_TYPE"]
):
    pass


class UnprocessableEntityError(
    HTTPResultError, descriptor=HTTP_ERRORS["UNPROCESSABLE_ENTITY"]
):
    pass


class UnprocessableContentError(
    HTTPResultError, descriptor=HTTP_ERRORS["UNPROCESSABLE_CONTENT"]
):
    pass


class TooManyRequestsError(
    HTTPResultError, descriptor=HTTP_ERRORS["TOO_MANY_REQUESTS"]
):
    pass


class ClientClosedRequestError(
    HTTPResultError, descriptor=HTTP_ERRORS["CLIENT_CLOSED_REQUEST"]
):
    pass


class InternalServerError(
    HTTPResultError, descriptor=HTTP_ERRORS["INTERNAL_SERVER_ERROR"]
):
    pass


class NotImplementedServerError(
    HTTPResultError, descriptor=HTTP_ERRORS["NOT_IMPLEMENTED"]
):
    pass


class BadGatewayError(HTTPResultError, descriptor=HTTP_ERRORS["BAD_GATEWAY"]):
    pass


class ServiceUnavailableError(
    HTTPResultError, descriptor=HTTP_ERRORS["SERVICE_UNAVAILABLE"]
):
    pass


class GatewayTimeoutError(
    HTTPResultError, descriptor=HTTP_ERRORS["GATEWAY_TIMEOUT"]
):
    pass


HTTP_ERROR_TYPES: dict[str, type[HTTPResultError]] = {
    cls.descriptor.code: cls
    for cls in (
        BadRequestError,
        UnauthorizedError,
        PaymentRequiredError,
        ForbiddenError,
        NotFoundError,
        MethodNotAllowedError,
        NotAcceptableError,
        RequestTimeoutError,
        ConflictError,
        PreconditionFailedError,
        PayloadTooLargeError,
        UnsupportedMediaTypeError,
        UnprocessableEntityError,
        UnprocessableContentError,
        TooManyRequestsError,
        ClientClosedRequestError,
        InternalServerError,
        NotImplementedServerError,
        BadGatewayError,
        ServiceUnavailableError,
        GatewayTimeoutError,
    )
}


def http_error_for_code(code: str) -> type[HTTPResultError] | None:
    """Return the subtype registered for ``code`` (e.g. ``"NOT_FOUND"``)."""
    return HTTP_ERROR_TYPES.get(code)


def http_error_for_status(status: int) -> type[HTTPResultError] | None:
    """Return the first subtype whose descriptor has this HTTP status."""
    for cls in HTTP_ERROR_TYPES.values():
        if cls.descriptor.status == status:
            return cls
    return None


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in walk_exception_chain(exc):
        if isinstance(e, ResultError):
            continue
        for value in (
            getattr(e, "status_code", None),
            getattr(e, "status", None),
            getattr(getattr(e, "response", None), "status_code", None),
        ):
            if isinstance(value, int) and 100 <= value <= 599:
                return value
    return None


def from_http_status_error(exc: BaseException) -> ResultError:
    """Normalize a failed HTTP call into the subtype matching its status.

    ``httpx.HTTPStatusError`` carries the status on its response; other
    exceptions are searched along their cause chain. The request method and
    URL are recorded in ``details`` when available. Statuses without a
    subtype fall back to ``ResultError`` with the observed status.
    """
    status = extract_status_code(exc)
    details: dict[str, Any] = {}
    if isinstance(exc, httpx.HTTPStatusError):
        details = {"method": exc.request.method, "url": str(exc.request.url)}
    cls = http_error_for_status(status) if status is not None else None
    if cls is None:
        log.debug("No HTTP error type for status %s", status)
        return ResultError.from_cause(exc, status=status)
    base = ResultError.from_cause(exc)
    return cls(base.message, exc, **details)
