# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform flavours and constants shared by resolution and invocation."""

from __future__ import annotations

import os
from enum import StrEnum
from typing import Final

WINDOWS_OS_NAME: Final[str] = "nt"


class PlatformStyle(StrEnum):
    """Process-creation conventions of the target operating system."""

    WINDOWS = "windows"
    POSIX = "posix"

    @classmethod
    def current(cls) -> PlatformStyle:
        """Return the style matching the running interpreter.

        Returns:
            PlatformStyle: ``WINDOWS`` on ``nt`` hosts, ``POSIX`` otherwise.
        """

        return cls.WINDOWS if os.name == WINDOWS_OS_NAME else cls.POSIX

    @property
    def path_delimiter(self) -> str:
        """Return the separator used between ``PATH`` entries."""

        return ";" if self is PlatformStyle.WINDOWS else ":"

    @property
    def path_separators(self) -> tuple[str, ...]:
        """Return the characters that mark a command name as a path."""

        return ("/", "\\") if self is PlatformStyle.WINDOWS else ("/",)

    @property
    def case_insensitive_environment(self) -> bool:
        """Return ``True`` when environment variable names ignore case."""

        return self is PlatformStyle.WINDOWS


class DispatchStyle(StrEnum):
    """How arguments travel from the invoker to the child process."""

    NATIVE_ARGV = "native_argv"
    SHELL_COMMAND_LINE = "shell_command_line"


PATH_ENV: Final[str] = "PATH"
PATHEXT_ENV: Final[str] = "PATHEXT"
COMSPEC_ENV: Final[str] = "COMSPEC"
PATHEXT_DELIMITER: Final[str] = ";"

DEFAULT_PATHEXT: Final[tuple[str, ...]] = (".COM", ".EXE", ".BAT", ".CMD")
SHELL_SCRIPT_EXTENSIONS: Final[tuple[str, ...]] = (".CMD", ".BAT")
DEFAULT_COMMAND_SHELL: Final[str] = "cmd.exe"
# /d skips AutoRun, /s strips the outer quotes, /c runs the string and exits.
DEFAULT_SHELL_SWITCHES: Final[tuple[str, ...]] = ("/d", "/s", "/c")

# cmd.exe interprets these even inside double quotes.
RESERVED_SHELL_CHARACTERS: Final[frozenset[str]] = frozenset({"%", "^", "&", "|", "<", ">", "\r", "\n"})
QUOTE_TRIGGER_CHARACTERS: Final[frozenset[str]] = frozenset({" ", "\t"})
NUL_CHARACTER: Final[str] = "\x00"


__all__ = [
    "COMSPEC_ENV",
    "DEFAULT_COMMAND_SHELL",
    "DEFAULT_PATHEXT",
    "DEFAULT_SHELL_SWITCHES",
    "DispatchStyle",
    "NUL_CHARACTER",
    "PATHEXT_DELIMITER",
    "PATHEXT_ENV",
    "PATH_ENV",
    "PlatformStyle",
    "QUOTE_TRIGGER_CHARACTERS",
    "RESERVED_SHELL_CHARACTERS",
    "SHELL_SCRIPT_EXTENSIONS",
    "WINDOWS_OS_NAME",
]
