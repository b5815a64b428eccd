"""Status codes and the exception raised when an engine call fails."""

from __future__ import annotations

from enum import IntEnum
from typing import TypeVar

MSG_BUFF_SIZE = 256

T = TypeVar("T")


class StatusCode(IntEnum):
    """Outcome classes for engine operations."""

    OK = 0
    ALLOC_FAIL = 1
    CORE_FAIL = 2
    FAIL_UNDEFINED = 3


class AmphoraError(Exception):
    """An engine failure carrying a status code and a bounded message."""

    def __init__(self, code: StatusCode, message: str) -> None:
        self.code = StatusCode(code)
        self.message = message[: MSG_BUFF_SIZE - 1]
        super().__init__(self.message)


def require_not_none(value: T | None, name: str) -> T:
    """Return ``value``, raising ``AmphoraError`` if it is ``None``."""
    if value is None:
        raise AmphoraError(
            StatusCode.FAIL_UNDEFINED, f"{name} is None but shouldn't be!"
        )
    return value