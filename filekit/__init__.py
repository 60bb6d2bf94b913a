"""Helpers for moving filesystem objects between hosts and handling archives."""

from .command_runner import (
    CommandResult,
    CommandRunner,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)
from .config import ToolConfig, load_tool_config
from .console import Console, ConsoleProtocol
from .errors import (
    CommandError,
    ErrorKind,
    FileKitError,
    InvalidArgumentError,
    PostconditionError,
)
from .file_utilities import (
    FileUtilities,
    execute,
    gpg_decrypt,
    tar_destination,
    tar_object,
    transfer_object,
    unpack,
)
from .pair_tree import pair_tree_from_barcode, pair_tree_path

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "Console",
    "ConsoleProtocol",
    "ErrorKind",
    "FileKitError",
    "FileUtilities",
    "InvalidArgumentError",
    "PostconditionError",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "ToolConfig",
    "execute",
    "gpg_decrypt",
    "load_tool_config",
    "pair_tree_from_barcode",
    "pair_tree_path",
    "tar_destination",
    "tar_object",
    "transfer_object",
    "unpack",
]
