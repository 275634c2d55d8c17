"""Serving error codes, the serving exception and enforcement helpers."""

from __future__ import annotations

import enum
import operator
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class ErrorCode(enum.Enum):
    """Error codes carried by :class:`ServingError`."""

    OK = enum.auto()
    UNEXPECTED_ERROR = enum.auto()
    INVALID_ARGUMENT = enum.auto()
    LOGIC_ERROR = enum.auto()
    IO_ERROR = enum.auto()
    NOT_FOUND = enum.auto()
    NETWORK_ERROR = enum.auto()
    SERIALIZE_FAILED = enum.auto()
    DESERIALIZE_FAILED = enum.auto()
    FS_INVALID_ARGUMENT = enum.auto()
    FS_DEADLINE_EXCEEDED = enum.auto()
    FS_NOT_FOUND = enum.auto()
    FS_INTERNAL_ERROR = enum.auto()
    FS_UNAUTHENTICATED = enum.auto()


class ServingError(Exception):
    """An error raised by the serving runtime, tagged with an :class:`ErrorCode`."""

    def __init__(self, code: ErrorCode, message: str, detail: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return self.message


def enforce(condition: Any, code: ErrorCode, message: str = "") -> None:
    """Raise :class:`ServingError` with ``code`` unless ``condition`` is truthy."""
    if not condition:
        text = f"Enforce fail. {message}" if message else "Enforce fail."
        raise ServingError(code, text, message)


def _enforce_compare(
    compare: Callable[[Any, Any], bool], symbol: str, x: Any, y: Any, message: str
) -> None:
    if compare(x, y):
        return
    text = f"{x} vs {y}"
    if message:
        text = f"{text}.{message}"
    raise ServingError(ErrorCode.LOGIC_ERROR, f"Enforce fail at x {symbol} y. {text}")


def enforce_eq(x: Any, y: Any, message: str = "") -> None:
    """Require ``x == y``."""
    _enforce_compare(operator.eq, "==", x, y, message)


def enforce_ne(x: Any, y: Any, message: str = "") -> None:
    """Require ``x != y``."""
    _enforce_compare(operator.ne, "!=", x, y, message)


def enforce_lt(x: Any, y: Any, message: str = "") -> None:
    """Require ``x < y``."""
    _enforce_compare(operator.lt, "<", x, y, message)


def enforce_le(x: Any, y: Any, message: str = "") -> None:
    """Require ``x <= y``."""
    _enforce_compare(operator.le, "<=", x, y, message)


def enforce_gt(x: Any, y: Any, message: str = "") -> None:
    """Require ``x > y``."""
    _enforce_compare(operator.gt, ">", x, y, message)


def enforce_ge(x: Any, y: Any, message: str = "") -> None:
    """Require ``x >= y``."""
    _enforce_compare(operator.ge, ">=", x, y, message)


def check_not_null(value: T | None) -> T:
    """Return ``value``, raising a logic error if it is ``None``."""
    enforce(value is not None, ErrorCode.LOGIC_ERROR)
    return value  # type: ignore[return-value]