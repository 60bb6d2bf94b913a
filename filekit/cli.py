"""Command line entry point for filekit."""
from __future__ import annotations

import argparse
import getpass
import os
from pathlib import Path
from typing import Sequence

from .command_runner import CommandRunner, RecordingCommandRunner, SubprocessCommandRunner
from .config import load_tool_config
from .console import Console
from .errors import FileKitError
from .file_utilities import FileUtilities
from .pair_tree import pair_tree_from_barcode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filekit",
        description="Transfer, decrypt, unpack and archive filesystem objects")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to a configuration file or directory (default: $FILEKIT_CONFIG)")
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show the commands that would run without running them")
    parser.add_argument(
        "--log",
        "-l",
        choices=["none", "error", "info", "debug"],
        default="error",
        help="Set log level (default: error)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_pair = subparsers.add_parser(
        "pair-tree", help="Print the pair tree dirname for a barcode")
    p_pair.add_argument("barcode")
    p_pair.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Storage root to prepend to the pair tree")

    p_transfer = subparsers.add_parser(
        "transfer", help="Copy a file or directory with rsync over ssh")
    p_transfer.add_argument("filename")
    p_transfer.add_argument("source_dir", help="Source dirname, optionally user@host:")
    p_transfer.add_argument("dest_dir", help="Destination dirname, optionally user@host:")

    p_decrypt = subparsers.add_parser(
        "decrypt", help="Decrypt a gpg encrypted file in a workspace")
    p_decrypt.add_argument("workspace_dir")
    p_decrypt.add_argument("encrypted")
    p_decrypt.add_argument("decrypted")
    p_decrypt.add_argument(
        "--passphrase-env",
        metavar="VAR",
        default=None,
        help="Read the passphrase from this environment variable instead of prompting")

    p_unpack = subparsers.add_parser(
        "unpack", help="Unpack a tar.gz archive into a directory")
    p_unpack.add_argument("original_dir")
    p_unpack.add_argument("targz")
    p_unpack.add_argument("destination_dir")

    p_tar = subparsers.add_parser("tar", help="Tar a file or directory")
    p_tar.add_argument("source_path")
    p_tar.add_argument(
        "--dest",
        default=None,
        help="Archive to write (default: SOURCE_PATH.tar)")

    return parser


def _read_passphrase(env_var: str | None) -> str:
    if env_var:
        value = os.environ.get(env_var)
        if value is None:
            raise ValueError(f"Environment variable {env_var} is not set")
        return value
    return getpass.getpass("Passphrase: ")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console(level=args.log, dry_run=args.dry_run)

    if args.command == "pair-tree":
        tree = pair_tree_from_barcode(args.barcode)
        print(args.root / tree if args.root else tree)
        return 0

    try:
        tools = load_tool_config(args.config)
    except (OSError, TypeError, ValueError) as exc:
        console.error(f"Failed to load config: {exc}")
        return 1

    runner: CommandRunner
    if args.dry_run:
        runner = RecordingCommandRunner()
    else:
        runner = SubprocessCommandRunner()
    utilities = FileUtilities(console=console, runner=runner, tools=tools)

    try:
        if args.command == "transfer":
            utilities.transfer_object(args.filename, args.source_dir, args.dest_dir)
        elif args.command == "decrypt":
            passphrase = _read_passphrase(args.passphrase_env)
            utilities.gpg_decrypt(args.workspace_dir, args.encrypted, args.decrypted, passphrase)
        elif args.command == "unpack":
            utilities.unpack(args.original_dir, args.targz, args.destination_dir)
        elif args.command == "tar":
            utilities.tar_object(args.source_path, args.dest)
    except (FileKitError, OSError, ValueError) as exc:
        console.error(str(exc))
        return 1

    return 0


__all__ = ["build_parser", "main"]
