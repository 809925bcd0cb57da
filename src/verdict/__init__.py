"""Verdict: turn anything that was raised into a predictable error value.

Public API:
    - inspect(): Total, human-readable rendering of any runtime value
    - ResultError: Canonical error with ``from_cause`` normalization
    - HTTP subtypes (NotFoundError, ...): descriptor-bound ResultErrors
    - Success / Failure: Result container, plus try_result adapters
    - config_scope(): Scoped rendering and normalization settings
"""

from __future__ import annotations

import logging

from verdict._http import HTTP_ERRORS, HTTPErrorDescriptor
from verdict.config import FrozenConfig, config_scope, current_config, resolve_config
from verdict.errors import (
    ResultError,
    StructuredError,
    find_http_error_from_code,
    get_http_error_message_from_code,
    is_result_error,
    is_result_error_code,
    is_result_error_status,
)
from verdict.exceptions import ConfigurationError, VerdictError
from verdict.http_errors import (
    BadGatewayError,
    BadRequestError,
    ClientClosedRequestError,
    ConflictError,
    ForbiddenError,
    GatewayTimeoutError,
    HTTPResultError,
    InternalServerError,
    MethodNotAllowedError,
    NotAcceptableError,
    NotFoundError,
    NotImplementedServerError,
    PayloadTooLargeError,
    PaymentRequiredError,
    PreconditionFailedError,
    RequestTimeoutError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnauthorizedError,
    UnprocessableContentError,
    UnprocessableEntityError,
    UnsupportedMediaTypeError,
    from_http_status_error,
    http_error_for_code,
    http_error_for_status,
)
from verdict.inspection import describe_runtime_type, inspect
from verdict.result import Failure, Result, Success, is_result, void
from verdict.try_result import as_result, as_result_async, try_result, try_result_async

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("verdict")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("verdict").addHandler(logging.NullHandler())

__all__ = [
    "HTTP_ERRORS",
    "BadGatewayError",
    "BadRequestError",
    "ClientClosedRequestError",
    "ConfigurationError",
    "ConflictError",
    "Failure",
    "ForbiddenError",
    "FrozenConfig",
    "GatewayTimeoutError",
    "HTTPErrorDescriptor",
    "HTTPResultError",
    "InternalServerError",
    "MethodNotAllowedError",
    "NotAcceptableError",
    "NotFoundError",
    "NotImplementedServerError",
    "PayloadTooLargeError",
    "PaymentRequiredError",
    "PreconditionFailedError",
    "RequestTimeoutError",
    "Result",
    "ResultError",
    "ServiceUnavailableError",
    "StructuredError",
    "Success",
    "TooManyRequestsError",
    "UnauthorizedError",
    "UnprocessableContentError",
    "UnprocessableEntityError",
    "UnsupportedMediaTypeError",
    "VerdictError",
    "as_result",
    "as_result_async",
    "config_scope",
    "current_config",
    "describe_runtime_type",
    "find_http_error_from_code",
    "from_http_status_error",
    "get_http_error_message_from_code",
    "http_error_for_code",
    "http_error_for_status",
    "inspect",
    "is_result",
    "is_result_error",
    "is_result_error_code",
    "is_result_error_status",
    "resolve_config",
    "try_result",
    "try_result_async",
    "void",
]
