# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy for executable resolution and invocation."""

from __future__ import annotations

import json
from collections.abc import Sequence


class ExecutableError(RuntimeError):
    """Base class for every error raised by :mod:`pyexec`."""


class ConfigError(ExecutableError):
    """Raised when configuration input is invalid."""


class LaunchError(ExecutableError):
    """Raised or recorded when a child process could not be started at all."""


class ExecutableNotFoundError(LaunchError):
    """Raised when a command name does not resolve to an executable file."""

    def __init__(self, name: str) -> None:
        """Initialise the error for the unresolved command ``name``.

        Args:
            name: Command name or path supplied by the caller.
        """

        super().__init__(f"The executable file was not found: {json.dumps(name, ensure_ascii=False)}")
        self.name = name


class UnescapableArgumentError(LaunchError):
    """Raised when an argument cannot be represented safely for the target shell."""

    def __init__(self, character: str, argument: str) -> None:
        """Initialise the error with the offending character and argument.

        Args:
            character: First character that cannot be escaped.
            argument: Full original argument text.
        """

        super().__init__(
            f"The command line argument {json.dumps(argument, ensure_ascii=False)} contains a special character "
            f"{json.dumps(character, ensure_ascii=False)} that cannot be escaped for the Windows shell",
        )
        self.character = character
        self.argument = argument


class SpawnError(LaunchError):
    """Recorded when the operating system refuses to create the child process."""

    def __init__(self, executable: str, cause: OSError | ValueError) -> None:
        """Initialise the error with the program and the underlying OS failure.

        Args:
            executable: Program that was being launched.
            cause: Exception raised by process creation.
        """

        detail = cause.strerror if isinstance(cause, OSError) and cause.strerror else cause
        super().__init__(f"Failed to launch {executable}: {detail}")
        self.executable = executable
        self.cause = cause
        self.errno = cause.errno if isinstance(cause, OSError) else None


class CapturedProcessError(ExecutableError):
    """Raised by ``check`` helpers when a child ran but did not exit cleanly."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None,
        stdout: str | None,
        stderr: str | None,
        *,
        signal: int | None = None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
            signal: Signal number that terminated the child, when applicable.
        """

        status = f"was terminated by signal {signal}" if signal is not None else f"exited with status {returncode}"
        super().__init__(f"Command '{command[0]}' {status}. stderr: {stderr or '<none>'}")
        self.command = tuple(command)
        self.returncode = returncode
        self.signal = signal
        self.stdout = stdout
        self.stderr = stderr


__all__ = [
    "CapturedProcessError",
    "ConfigError",
    "ExecutableError",
    "ExecutableNotFoundError",
    "LaunchError",
    "SpawnError",
    "UnescapableArgumentError",
]
