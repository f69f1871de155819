# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execution settings and their loading from ``pyproject.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .models import StdioMode
from .platform import (
    DEFAULT_COMMAND_SHELL,
    DEFAULT_PATHEXT,
    DEFAULT_SHELL_SWITCHES,
    PATHEXT_DELIMITER,
    SHELL_SCRIPT_EXTENSIONS,
)

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "pyexec"


class ExecutionSettings(BaseModel):
    """Tunable defaults for resolution and Windows shell dispatch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_pathext: tuple[str, ...] = Field(default=DEFAULT_PATHEXT)
    shell_script_extensions: tuple[str, ...] = Field(default=SHELL_SCRIPT_EXTENSIONS)
    command_shell: str = DEFAULT_COMMAND_SHELL
    shell_switches: tuple[str, ...] = Field(default=DEFAULT_SHELL_SWITCHES)
    inherit_environment: bool = True
    stdio: StdioMode = StdioMode.BUFFER

    @field_validator("default_pathext", "shell_script_extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(value.split(PATHEXT_DELIMITER))
        return value

    @field_validator("default_pathext", "shell_script_extensions")
    @classmethod
    def _normalise_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalised: list[str] = []
        for entry in value:
            trimmed = entry.strip()
            if not trimmed:
                continue
            if not trimmed.startswith("."):
                raise ValueError(f"extension {trimmed!r} must start with '.'")
            normalised.append(trimmed.upper())
        if not normalised:
            raise ValueError("at least one extension is required")
        return tuple(dict.fromkeys(normalised))

    @field_validator("command_shell")
    @classmethod
    def _require_shell(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command_shell must not be blank")
        return value.strip()


def _read_pyproject_section(path: Path) -> Mapping[str, Any]:
    """Return the ``[tool.pyexec]`` table from ``path`` or an empty mapping.

    Raises:
        ConfigError: If the document is not valid TOML or the section is not a table.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    tool_section = document.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    # TOML keys conventionally use dashes.
    return {str(key).replace("-", "_"): value for key, value in section.items()}


def load_settings(root: Path | None = None, *, overrides: Mapping[str, Any] | None = None) -> ExecutionSettings:
    """Load execution settings for the project rooted at ``root``.

    Args:
        root: Directory containing ``pyproject.toml``. ``None`` skips file loading.
        overrides: Values applied on top of the file-based configuration.

    Returns:
        ExecutionSettings: Validated settings.

    Raises:
        ConfigError: When the configuration file or overrides are invalid.
    """

    data: dict[str, Any] = {}
    if root is not None:
        data.update(_read_pyproject_section(root / PYPROJECT_FILENAME))
    data.update(overrides or {})
    try:
        return ExecutionSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid pyexec configuration: {exc}") from exc


__all__ = ["ExecutionSettings", "load_settings"]
