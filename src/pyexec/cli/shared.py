# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Final

import typer

from ..config import ExecutionSettings
from ..console import fail as core_fail
from ..console import warn as core_warn

EXIT_NOT_FOUND: Final[int] = 127
EXIT_SPAWN_FAILED: Final[int] = 126
EXIT_UNESCAPABLE: Final[int] = 2
EXIT_CONFIG: Final[int] = 3

PACKAGE_LOGGER: Final[str] = "pyexec"
_VERBOSE_MARKER: Final[str] = "_pyexec_verbose_configured"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLIState:
    """Per-invocation state stored on the Typer context."""

    settings: ExecutionSettings
    use_emoji: bool = True
    use_color: bool | None = None

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)


def get_state(ctx: typer.Context) -> CLIState:
    """Return the state installed by the application callback."""

    state = ctx.obj
    if isinstance(state, CLIState):
        return state
    return CLIState(settings=ExecutionSettings())


def ensure_verbose_logging() -> None:
    """Stream ``pyexec`` debug messages to stderr."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    if getattr(logger, _VERBOSE_MARKER, False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    setattr(logger, _VERBOSE_MARKER, True)


def parse_env_assignments(assignments: list[str] | None) -> dict[str, str]:
    """Return ``KEY=VALUE`` assignments as a mapping.

    Raises:
        CLIError: If an assignment lacks ``=`` or a name.
    """

    parsed: dict[str, str] = {}
    for assignment in assignments or []:
        name, separator, value = assignment.partition("=")
        if not separator or not name:
            raise CLIError(f"Invalid environment assignment {assignment!r}; expected KEY=VALUE", exit_code=2)
        parsed[name] = value
    return parsed


__all__ = [
    "CLIError",
    "CLIState",
    "EXIT_CONFIG",
    "EXIT_NOT_FOUND",
    "EXIT_SPAWN_FAILED",
    "EXIT_UNESCAPABLE",
    "ensure_verbose_logging",
    "get_state",
    "parse_env_assignments",
]
