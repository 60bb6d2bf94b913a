"""Tool configuration for the file utilities."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Tuple
import os

from .config_loader import FILE_LOADERS, load_config_file, load_config_files, normalize_string_list

CONFIG_ENV_VAR = "FILEKIT_CONFIG"

DEFAULT_GPG_OPTIONS: Tuple[str, ...] = (
    "--batch",
    "--no-mdc-warning",
    "--no-secmem-warning",
)


@dataclass(frozen=True)
class ToolConfig:
    """Names or paths of the external tools invoked by :class:`FileUtilities`."""

    rsync: str = "rsync"
    ssh: str = "ssh"
    gpg: str = "/usr/bin/gpg"
    tar: str = "tar"
    gpg_options: Tuple[str, ...] = field(default=DEFAULT_GPG_OPTIONS)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ToolConfig":
        """Build a config from the ``[tools]`` table of ``data``."""

        tools = data.get("tools", {})
        if not isinstance(tools, Mapping):
            raise TypeError("'tools' must be a mapping")

        config = cls()
        overrides: dict[str, Any] = {}
        for name in ("rsync", "ssh", "gpg", "tar"):
            value = tools.get(name)
            if value is None:
                continue
            if not isinstance(value, str) or not value.strip():
                raise TypeError(f"tools.{name} must be a non-empty string")
            overrides[name] = value.strip()

        if "gpg_options" in tools:
            overrides["gpg_options"] = tuple(
                normalize_string_list(tools["gpg_options"], field_name="tools.gpg_options")
            )

        return replace(config, **overrides)


def resolve_config_path(explicit: Path | None = None) -> Path | None:
    """Pick the config file: explicit path first, then ``FILEKIT_CONFIG``."""

    if explicit is not None:
        return explicit
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def load_tool_config(path: Path | None = None) -> ToolConfig:
    """Load the tool config from a file, or from every config file in a directory.

    Directory entries are merged in name order. Without any config the
    built-in defaults are returned.
    """

    resolved = resolve_config_path(path)
    if resolved is None:
        return ToolConfig()
    if not resolved.exists():
        raise FileNotFoundError(f"Configuration path not found: {resolved}")
    if resolved.is_dir():
        files = sorted(
            candidate for candidate in resolved.iterdir()
            if candidate.is_file() and candidate.suffix.lower() in FILE_LOADERS
        )
        return ToolConfig.from_mapping(load_config_files(files))
    return ToolConfig.from_mapping(load_config_file(resolved))


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_GPG_OPTIONS",
    "ToolConfig",
    "load_tool_config",
    "resolve_config_path",
]
