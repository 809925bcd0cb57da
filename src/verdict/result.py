"""Result container for explicit error handling.

Operations that can fail return ``Success(value)`` or ``Failure(error)``
instead of raising, so failures are a predictable part of the data flow.
Both unpack as ``(value, error)`` pairs:

    value, error = load_user(user_id)
    if error is not None:
        ...
"""

from __future__ import annotations

import dataclasses
import typing

if typing.TYPE_CHECKING:
    from collections.abc import Iterator

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome carrying its value."""

    value: TSuccess

    @property
    def ok(self) -> typing.Literal[True]:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> TSuccess:
        return self.value

    def __iter__(self) -> Iterator[typing.Any]:
        yield self.value
        yield None


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure: Exception]:
    """A failed outcome carrying the error."""

    error: TFailure

    @property
    def ok(self) -> typing.Literal[False]:
        return False

    @property
    def value(self) -> None:
        return None

    def unwrap(self) -> typing.NoReturn:
        """Raise the carried error."""
        raise self.error

    def __iter__(self) -> Iterator[typing.Any]:
        yield None
        yield self.error


Result = Success[TSuccess] | Failure[TFailure]


def void() -> Success[None]:
    """Return the empty success."""
    return Success(None)


def is_result(
    value: object,
) -> typing.TypeGuard[Success[typing.Any] | Failure[typing.Any]]:
    """Return True if ``value`` is a ``Success`` or ``Failure``."""
    return isinstance(value, Success | Failure)
