"""Operation results — every manager operation returns Ok or Err."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(enum.StrEnum):
    """Why an operation failed."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    EXTERNAL_COMMAND_FAILED = "external_command_failed"
    CAPTURE_FAILED = "capture_failed"
    TIMEOUT = "timeout"
    PENDING_CONFIRMATION = "pending_confirmation"  # Agent is blocked on a built-in prompt


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful operation, with an optional payload."""

    value: T | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed operation."""

    kind: ErrorKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.detail

    def __bool__(self) -> bool:
        return False


Result = Union[Ok[Any], Err]
