# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models describing resolution inputs, invocation requests and results."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Final, Literal

from .environment import EnvironmentMapping, build_environment
from .errors import CapturedProcessError, LaunchError
from .platform import (
    PATH_ENV,
    PATHEXT_DELIMITER,
    PATHEXT_ENV,
    SHELL_SCRIPT_EXTENSIONS,
    DispatchStyle,
    PlatformStyle,
)

if TYPE_CHECKING:
    from .config import ExecutionSettings

LOGGER = logging.getLogger(__name__)


class StdioMode(StrEnum):
    """How the child's standard streams are wired."""

    DISCARD = "discard"
    BUFFER = "buffer"
    INHERIT = "inherit"


def _normalise_extension(extension: str) -> str | None:
    trimmed = extension.strip()
    if not trimmed:
        return None
    if not trimmed.startswith("."):
        LOGGER.debug("ignoring executable extension without leading dot: %r", trimmed)
        return None
    return trimmed.upper()


@dataclass(slots=True, frozen=True)
class SearchSpec:
    """Ordered search roots and extension rules used to resolve a command name."""

    directories: tuple[Path, ...]
    extensions: tuple[str, ...]
    cwd: Path
    style: PlatformStyle
    shell_script_extensions: tuple[str, ...] = SHELL_SCRIPT_EXTENSIONS

    @classmethod
    def from_environment(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        cwd: Path | None = None,
        style: PlatformStyle | None = None,
        settings: ExecutionSettings | None = None,
    ) -> SearchSpec:
        """Build a search specification from ``PATH``/``PATHEXT`` style variables.

        Relative ``PATH`` entries are resolved against ``cwd`` and duplicates are
        dropped while keeping the first occurrence. On Windows a missing or blank
        ``PATHEXT`` falls back to the configured default extension list.

        Args:
            env: Environment to read. Defaults to :data:`os.environ`.
            cwd: Working directory for relative names. Defaults to the process cwd.
            style: Platform conventions. Defaults to the running platform.
            settings: Execution settings providing extension defaults.

        Returns:
            SearchSpec: Immutable search specification.
        """

        from .config import ExecutionSettings

        resolved_style = style or PlatformStyle.current()
        resolved_settings = settings or ExecutionSettings()
        working_dir = Path(cwd) if cwd is not None else Path.cwd()
        environment = (
            env
            if isinstance(env, EnvironmentMapping)
            else build_environment(env if env is not None else os.environ, base={}, style=resolved_style)
        )

        directories: list[Path] = []
        seen: set[str] = set()
        for entry in environment.get(PATH_ENV, "").split(resolved_style.path_delimiter):
            trimmed = entry.strip()
            if not trimmed:
                continue
            resolved = Path(os.path.normpath(working_dir / trimmed))
            key = str(resolved)
            if key in seen:
                continue
            seen.add(key)
            directories.append(resolved)

        extensions: tuple[str, ...] = ()
        if resolved_style is PlatformStyle.WINDOWS:
            raw = environment.get(PATHEXT_ENV, "")
            parsed = [ext for ext in map(_normalise_extension, raw.split(PATHEXT_DELIMITER)) if ext]
            extensions = tuple(dict.fromkeys(parsed)) or resolved_settings.default_pathext

        return cls(
            directories=tuple(directories),
            extensions=extensions,
            cwd=working_dir,
            style=resolved_style,
            shell_script_extensions=resolved_settings.shell_script_extensions,
        )

    def has_listed_extension(self, name: str) -> bool:
        """Return ``True`` when ``name`` ends with one of :attr:`extensions`."""

        suffix = os.path.splitext(name)[1].upper()
        return bool(suffix) and suffix in self.extensions


@dataclass(slots=True, frozen=True)
class ResolvedExecutable:
    """Absolute path of a resolved program and how it must be launched."""

    path: Path
    dispatch: DispatchStyle

    @property
    def is_shell_script(self) -> bool:
        """Return ``True`` when the program is interpreted by the command shell."""

        return self.dispatch is DispatchStyle.SHELL_COMMAND_LINE

    def __str__(self) -> str:
        return str(self.path)


CommandOverrideValue = Path | Mapping[str, str | None] | StdioMode | PlatformStyle | bool | None
CommandOptionKey = Literal["cwd", "env", "inherit_environment", "stdio", "check", "style"]
CommandOverrideMapping = Mapping[CommandOptionKey, CommandOverrideValue]

_COMMAND_KEYS: Final[frozenset[str]] = frozenset({"cwd", "env", "inherit_environment", "stdio", "check", "style"})


@dataclass(slots=True, frozen=True)
class InvocationOptions:
    """Immutable options shared by every invocation helper."""

    cwd: Path | None = None
    env: Mapping[str, str | None] | None = None
    inherit_environment: bool = True
    stdio: StdioMode = StdioMode.BUFFER
    check: bool = False
    style: PlatformStyle | None = None

    def with_overrides(self, overrides: CommandOverrideMapping) -> InvocationOptions:
        """Return a new options instance with ``overrides`` applied.

        Args:
            overrides: Mapping of option names to replacement values.

        Returns:
            InvocationOptions: Updated options instance.

        Raises:
            TypeError: If ``overrides`` includes an unknown option name or a value
                with an incompatible type.
        """

        unknown = [key for key in overrides if key not in _COMMAND_KEYS]
        if unknown:
            raise TypeError(f"Unknown command option(s): {', '.join(sorted(unknown))}")
        values = {
            "cwd": self.cwd,
            "env": self.env,
            "inherit_environment": self.inherit_environment,
            "stdio": self.stdio,
            "check": self.check,
            "style": self.style,
        }
        for key, value in overrides.items():
            values[key] = _coerce_override(key, value)
        return InvocationOptions(**values)  # type: ignore[arg-type]

    def resolved_style(self) -> PlatformStyle:
        """Return the configured style or the running platform's style."""

        return self.style or PlatformStyle.current()

    def resolved_cwd(self) -> Path:
        """Return the configured working directory or the process cwd."""

        return self.cwd if self.cwd is not None else Path.cwd()

    def build_environment(self) -> EnvironmentMapping:
        """Return the environment snapshot for one invocation."""

        return build_environment(self.env, inherit=self.inherit_environment, style=self.resolved_style())


def _coerce_override(key: str, value: CommandOverrideValue) -> CommandOverrideValue:
    if key == "cwd":
        if value is None or isinstance(value, Path):
            return value
        raise TypeError("cwd override must be a pathlib.Path or None")
    if key == "env":
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise TypeError("env override must be a mapping of strings to strings")
        validated: dict[str, str | None] = {}
        for name, entry in value.items():
            if not isinstance(name, str) or not (entry is None or isinstance(entry, str)):
                raise TypeError("env override must map strings to strings")
            validated[name] = entry
        return validated
    if key == "stdio":
        if isinstance(value, StdioMode):
            return value
        if isinstance(value, str):
            return StdioMode(value)
        raise TypeError("stdio override must be a StdioMode value")
    if key == "style":
        if value is None or isinstance(value, PlatformStyle):
            return value
        raise TypeError("style override must be a PlatformStyle or None")
    if isinstance(value, bool):
        return value
    raise TypeError(f"{key} override must be a boolean value")


@dataclass(slots=True, frozen=True)
class InvocationRequest:
    """A single command invocation, consumed once by the invoker."""

    command: str
    args: tuple[str, ...] = ()
    options: InvocationOptions = field(default_factory=InvocationOptions)

    @classmethod
    def from_sequence(cls, argv: Sequence[str], *, options: InvocationOptions | None = None) -> InvocationRequest:
        """Build a request from ``[command, *args]``.

        Raises:
            ValueError: If ``argv`` is empty.
        """

        if not argv:
            raise ValueError("subprocess command requires at least one argument")
        head, *rest = argv
        return cls(command=str(head), args=tuple(str(arg) for arg in rest), options=options or InvocationOptions())


def _ensure_text(value: bytes | None) -> str:
    if not value:
        return ""
    return value.decode(errors="replace")


@dataclass(slots=True, frozen=True)
class InvocationResult:
    """Outcome of a synchronous invocation, created once the child has exited."""

    args: tuple[str, ...]
    executable: ResolvedExecutable | None
    stdout: bytes = b""
    stderr: bytes = b""
    returncode: int | None = None
    signal: int | None = None
    error: LaunchError | None = None

    @property
    def launched(self) -> bool:
        """Return ``True`` when the child process was actually created."""

        return self.error is None

    @property
    def succeeded(self) -> bool:
        """Return ``True`` when the child ran and exited with status zero."""

        return self.launched and self.returncode == 0

    @property
    def stdout_text(self) -> str:
        return _ensure_text(self.stdout)

    @property
    def stderr_text(self) -> str:
        return _ensure_text(self.stderr)

    def check_returncode(self) -> InvocationResult:
        """Raise when the invocation did not launch or did not exit cleanly.

        Returns:
            InvocationResult: ``self`` to allow chaining.

        Raises:
            LaunchError: The recorded launch failure, when the child never ran.
            CapturedProcessError: When the child exited non-zero or via a signal.
        """

        if self.error is not None:
            raise self.error
        if self.returncode != 0:
            raise CapturedProcessError(
                self.args,
                self.returncode,
                self.stdout_text,
                self.stderr_text,
                signal=self.signal,
            )
        return self


__all__ = [
    "CommandOptionKey",
    "CommandOverrideMapping",
    "CommandOverrideValue",
    "InvocationOptions",
    "InvocationRequest",
    "InvocationResult",
    "ResolvedExecutable",
    "SearchSpec",
    "StdioMode",
]
