"""File utilities for transferring filesystem objects, decrypting a file,
unpacking a tar.gz archive and creating tar archives.

Every operation wraps a single external tool, runs it exactly once and then
checks that the expected artifact exists. Failures surface as
:class:`~filekit.errors.CommandError` (the tool exited non-zero) or
:class:`~filekit.errors.PostconditionError` (the tool reported success but
its output is missing).
"""
from __future__ import annotations

from pathlib import Path
from typing import List
import os

from .command_runner import Command, CommandRunner, SubprocessCommandRunner, redact_command
from .config import ToolConfig
from .console import Console, ConsoleProtocol
from .errors import CommandError, PostconditionError


class FileUtilities:
    """Facade over the external tools used to move and package objects."""

    def __init__(
        self,
        console: ConsoleProtocol | None = None,
        runner: CommandRunner | None = None,
        tools: ToolConfig | None = None,
    ) -> None:
        self._console = console or Console()
        self._runner = runner or SubprocessCommandRunner()
        self._tools = tools or ToolConfig()

    @property
    def tools(self) -> ToolConfig:
        return self._tools

    @property
    def dry_run(self) -> bool:
        return bool(getattr(self._console, "dry_run", False))

    def _describe(self, command: Command) -> str:
        return self._runner.format_command(redact_command(command))

    def execute(self, command: Command, *, cwd: Path | str | None = None) -> str:
        """Execute ``command`` in a subprocess and return its stdout.

        A non-zero exit raises :class:`CommandError` whose message holds the
        command, its stderr and, when present, its stdout. ``cwd`` sets the
        child's working directory; the calling process's own working directory
        is left alone. Values of secret options such as ``--passphrase`` are
        masked in log lines and error messages.
        """

        described = self._describe(command)
        location = f" (cwd={cwd})" if cwd else ""
        if self.dry_run:
            self._console.dry(f"Would run{location}: {described}")
        else:
            self._console.debug(f"Executing{location}: {described}")
        try:
            return self._runner.run(command, cwd=cwd, check=True).stdout
        except CommandError as exc:
            if exc.command_text == described:
                raise
            raise CommandError(exc.result, command_text=described) from None

    def transfer_object(self, filename: str, source_dir: str, dest_dir: str) -> bool:
        """Transfer a file or directory with ``rsync`` in archive mode over ssh.

        Either directory may be prefixed with ``user@hostname:`` to address a
        remote server; that requires public key authentication to be set up
        beforehand. The existence check afterwards only looks at the local
        filesystem, so a remote ``dest_dir`` cannot be verified.
        """

        source_path = os.path.join(source_dir, filename)
        self.execute([self._tools.rsync, "-a", "-e", self._tools.ssh, source_path, dest_dir])
        if not self.dry_run and not os.path.exists(os.path.join(dest_dir, filename)):
            raise PostconditionError(
                f"{filename} is not found in {dest_dir}",
                path=os.path.join(dest_dir, filename),
            )
        self._console.info(f"Transferred {source_path} to {dest_dir}")
        return True

    def gpg_decrypt(self, workspace_dir: str, encrypted: str, decrypted: str, passphrase: str) -> bool:
        """Decrypt ``encrypted`` into ``decrypted`` inside ``workspace_dir`` with gpg.

        The passphrase is handed to gpg on its command line, where other users
        of the host can see it in the process list.
        """

        output_path = os.path.join(workspace_dir, decrypted)
        input_path = os.path.join(workspace_dir, encrypted)
        self._console.debug(f"Decrypting {input_path}")
        command: List[str] = [
            self._tools.gpg,
            "--passphrase",
            passphrase,
            *self._tools.gpg_options,
            "--output",
            output_path,
            "--decrypt",
            input_path,
        ]
        self.execute(command)
        if not self.dry_run and not os.path.exists(output_path):
            raise PostconditionError(f"{decrypted} was not created in {workspace_dir}", path=output_path)
        self._console.info(f"Decrypted {input_path} to {output_path}")
        return True

    def unpack(self, original_dir: str, targz: str, destination_dir: str) -> bool:
        """Unpack a gzip-compressed tar archive into ``destination_dir``.

        The destination is created when missing and used as the working
        directory of ``tar`` only. Afterwards it must hold at least one entry.
        """

        archive_path = os.path.join(original_dir, targz)
        self._console.debug(f"Unpacking {archive_path}")
        if self.dry_run:
            self._console.dry(f"Would create {destination_dir}")
        else:
            os.makedirs(destination_dir, exist_ok=True)
        self.execute([self._tools.tar, "-xzf", os.path.abspath(archive_path)], cwd=destination_dir)
        if not self.dry_run and not os.listdir(destination_dir):
            raise PostconditionError(f"{destination_dir} is empty", path=destination_dir)
        self._console.info(f"Unpacked {archive_path} into {destination_dir}")
        return True

    def tar_object(self, source_path: str, dest_path: str | None = None) -> bool:
        """Tar a file or directory hierarchy.

        ``dest_path`` defaults to ``<source_path>.tar`` beside the source.
        ``tar`` runs from the source's parent directory with ``--force-local``
        so archive names containing colons are not taken for remote hosts, and
        symlinks are followed (``-h``). An explicit relative ``dest_path`` is
        therefore resolved against that parent directory.
        """

        source_path = _strip_trailing_separator(source_path)
        parent_path = os.path.dirname(source_path) or os.curdir
        object_name = os.path.basename(source_path)
        if dest_path is None:
            dest_path = tar_destination(source_path)
            archive_arg = os.path.abspath(dest_path)
        else:
            archive_arg = dest_path
        self.execute(
            [self._tools.tar, "--force-local", "-chf", archive_arg, object_name],
            cwd=parent_path,
        )
        written = os.path.join(parent_path, archive_arg)
        if not self.dry_run and not os.path.exists(written):
            raise PostconditionError(f"{dest_path} was not created", path=written)
        self._console.info(f"Archived {source_path} to {dest_path}")
        return True


def _strip_trailing_separator(path: str) -> str:
    stripped = path.rstrip(os.sep)
    if os.altsep:
        stripped = stripped.rstrip(os.altsep)
    return stripped or path


def tar_destination(source_path: str, dest_path: str | None = None) -> str:
    """Return the archive path :meth:`FileUtilities.tar_object` writes."""

    if dest_path is not None:
        return dest_path
    return _strip_trailing_separator(source_path) + ".tar"


_default = FileUtilities()


def execute(command: Command, *, cwd: Path | str | None = None) -> str:
    return _default.execute(command, cwd=cwd)


def transfer_object(filename: str, source_dir: str, dest_dir: str) -> bool:
    return _default.transfer_object(filename, source_dir, dest_dir)


def gpg_decrypt(workspace_dir: str, encrypted: str, decrypted: str, passphrase: str) -> bool:
    return _default.gpg_decrypt(workspace_dir, encrypted, decrypted, passphrase)


def unpack(original_dir: str, targz: str, destination_dir: str) -> bool:
    return _default.unpack(original_dir, targz, destination_dir)


def tar_object(source_path: str, dest_path: str | None = None) -> bool:
    return _default.tar_object(source_path, dest_path)


__all__ = [
    "FileUtilities",
    "execute",
    "gpg_decrypt",
    "tar_destination",
    "tar_object",
    "transfer_object",
    "unpack",
]
