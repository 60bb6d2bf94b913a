"""Utilities for executing external commands with optional dry-run support."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple
import os
import shlex
import subprocess

from .errors import CommandError


Command = Sequence[str] | str

REDACTED = "***"
SECRET_OPTIONS: Tuple[str, ...] = ("--passphrase",)
"""Options whose following argument never appears in logs or messages."""


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    cwd: str | None = None


def normalize_command(command: Command) -> List[str]:
    """Return ``command`` as an argument vector."""

    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]


def redact_command(command: Command, secret_options: Iterable[str] = SECRET_OPTIONS) -> List[str]:
    """Return ``command`` with the value given to each secret option masked.

    Both ``--opt value`` and ``--opt=value`` forms are masked. Other arguments
    are kept even when they happen to equal a secret value.
    """

    options = set(secret_options)
    redacted: List[str] = []
    hide_next = False
    for part in normalize_command(command):
        if hide_next:
            redacted.append(REDACTED)
            hide_next = False
            continue
        option, sep, _ = part.partition("=")
        if sep and option in options:
            redacted.append(f"{option}={REDACTED}")
            continue
        redacted.append(part)
        hide_next = part in options
    return redacted


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Command,
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, command: Command) -> str:
        return " ".join(shlex.quote(part) for part in normalize_command(command))


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`."""

    @staticmethod
    def _merge_environment(env: Mapping[str, str] | None) -> Dict[str, str] | None:
        if env is None:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    def _finalize(self, result: CommandResult, *, check: bool) -> CommandResult:
        if check and result.returncode != 0:
            raise CommandError(result, command_text=self.format_command(result.command))
        return result

    def run(
        self,
        command: Command,
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
    ) -> CommandResult:
        argv = normalize_command(command)
        workdir = str(cwd) if cwd else None
        try:
            process = subprocess.run(
                argv,
                cwd=workdir,
                env=self._merge_environment(env),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            # Missing executable or unusable cwd: report it the way a shell would.
            return self._finalize(
                CommandResult(command=argv, returncode=127, stdout="", stderr=str(exc), cwd=workdir),
                check=check,
            )

        return self._finalize(
            CommandResult(
                command=argv,
                returncode=process.returncode,
                stdout=process.stdout,
                stderr=process.stderr,
                cwd=workdir,
            ),
            check=check,
        )


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    env: Dict[str, str]
    note: str | None


class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them."""

    def __init__(self) -> None:
        self.commands: List[RecordedCommand] = []

    def run(
        self,
        command: Command,
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        note: str | None = None,
    ) -> CommandResult:
        argv = normalize_command(command)
        self.commands.append(
            RecordedCommand(
                command=argv,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else {},
                note=note,
            )
        )
        return CommandResult(command=argv, returncode=0, stdout="", stderr="", cwd=str(cwd) if cwd else None)

    def iter_commands(self) -> Iterable[RecordedCommand]:
        return iter(self.commands)


__all__ = [
    "Command",
    "CommandResult",
    "CommandRunner",
    "RecordedCommand",
    "RecordingCommandRunner",
    "REDACTED",
    "SECRET_OPTIONS",
    "SubprocessCommandRunner",
    "redact_command",
    "normalize_command",
]
