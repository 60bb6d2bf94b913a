"""Exception types raised by the file utilities."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .command_runner import CommandResult


class ErrorKind(str, Enum):
    COMMAND_FAILED = "command_failed"
    POSTCONDITION_FAILED = "postcondition_failed"
    INVALID_ARGUMENT = "invalid_argument"


def _join_lines(text: str) -> str:
    return "; ".join(text.splitlines())


class FileKitError(RuntimeError):
    """Base class for every failure surfaced by :mod:`filekit`."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CommandError(FileKitError):
    """Raised when an external command exits with a non-zero status."""

    kind = ErrorKind.COMMAND_FAILED

    def __init__(self, result: "CommandResult", *, command_text: str | None = None):
        self.result = result
        self.command_text = command_text or " ".join(result.command)
        message = (
            f"Command failed to execute: [{self.command_text}] "
            f"caused by <STDERR = {_join_lines(result.stderr or '')}>"
        )
        if result.stdout:
            message = f"{message} STDOUT = {_join_lines(result.stdout)}"
        super().__init__(message)

    @property
    def returncode(self) -> int:
        return self.result.returncode

    @property
    def stdout(self) -> str:
        return self.result.stdout

    @property
    def stderr(self) -> str:
        return self.result.stderr


class PostconditionError(FileKitError):
    """Raised when a command succeeded but its expected artifact is missing."""

    kind = ErrorKind.POSTCONDITION_FAILED

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message)
        self.path = path


class InvalidArgumentError(FileKitError, TypeError):
    """Raised when an operation receives an argument of the wrong type."""

    kind = ErrorKind.INVALID_ARGUMENT


__all__ = [
    "CommandError",
    "ErrorKind",
    "FileKitError",
    "InvalidArgumentError",
    "PostconditionError",
]
