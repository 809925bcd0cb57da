"""Static HTTP error table shared by the ``ResultError`` family.

Imports nothing from the rest of the package.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class HTTPErrorDescriptor:
    """Fixed ``(code, status, name, message)`` record for one error kind."""

    code: str
    status: int
    name: str
    message: str


def _table(*rows: tuple[str, int, str, str]) -> Mapping[str, HTTPErrorDescriptor]:
    return MappingProxyType({row[0]: HTTPErrorDescriptor(*row) for row in rows})


HTTP_ERRORS: Mapping[str, HTTPErrorDescriptor] = _table(
    ("BAD_REQUEST", 400, "BadRequestError", "Bad Request"),
    ("UNAUTHORIZED", 401, "UnauthorizedError", "Unauthorized"),
    ("PAYMENT_REQUIRED", 402, "PaymentRequiredError", "Payment Required"),
    ("FORBIDDEN", 403, "ForbiddenError", "Forbidden"),
    ("NOT_FOUND", 404, "NotFoundError", "Not Found"),
    ("METHOD_NOT_ALLOWED", 405, "MethodNotAllowedError", "Method Not Allowed"),
    ("NOT_ACCEPTABLE", 406, "NotAcceptableError", "Not Acceptable"),
    ("TIMEOUT", 408, "RequestTimeoutError", "Request Timeout"),
    ("CONFLICT", 409, "ConflictError", "Conflict"),
    ("PRECONDITION_FAILED", 412, "PreconditionFailedError", "Precondition Failed"),
    ("PAYLOAD_TOO_LARGE", 413, "PayloadTooLargeError", "Payload Too Large"),
    (
        "UNSUPPORTED_MEDIA_TYPE",
        415,
        "UnsupportedMediaTypeError",
        "Unsupported Media Type",
    ),
    (
        "UNPROCESSABLE_ENTITY",
        422,
        "UnprocessableEntityError",
        "Unprocessable Entity",
    ),
    (
        "UNPROCESSABLE_CONTENT",
        422,
        "UnprocessableContentError",
        "Unprocessable Content",
    ),
    ("TOO_MANY_REQUESTS", 429, "TooManyRequestsError", "Too Many Requests"),
    (
        "CLIENT_CLOSED_REQUEST",
        499,
        "ClientClosedRequestError",
        "Client Closed Request",
    ),
    (
        "INTERNAL_SERVER_ERROR",
        500,
        "InternalServerError",
        "Internal Server Error",
    ),
    ("NOT_IMPLEMENTED", 501, "NotImplementedServerError", "Not Implemented"),
    ("BAD_GATEWAY", 502, "BadGatewayError", "Bad Gateway"),
    ("SERVICE_UNAVAILABLE", 503, "ServiceUnavailableError", "Service Unavailable"),
    ("GATEWAY_TIMEOUT", 504, "GatewayTimeoutError", "Gateway Timeout"),
)

# Fallback descriptor for errors created without an explicit kind.
DEFAULT_ERROR: HTTPErrorDescriptor = HTTP_ERRORS["INTERNAL_SERVER_ERROR"]
