# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Encode arguments into a command line consumed by ``cmd.exe`` and the C runtime.

Batch scripts receive their arguments as raw text that ``cmd.exe`` expands and
the eventual program re-parses with the Microsoft C runtime rules. The helpers
here produce text that survives that round trip unchanged and refuse arguments
containing characters that ``cmd.exe`` interprets even inside double quotes.
"""

from __future__ import annotations

from collections.abc import Iterable

import mslex

from .errors import UnescapableArgumentError
from .platform import NUL_CHARACTER, QUOTE_TRIGGER_CHARACTERS, RESERVED_SHELL_CHARACTERS

QUOTE = '"'
BACKSLASH = "\\"


def find_reserved_character(argument: str) -> str | None:
    """Return the first character of ``argument`` that cannot be escaped, if any."""

    for character in argument:
        if character in RESERVED_SHELL_CHARACTERS or character == NUL_CHARACTER:
            return character
    return None


def needs_quoting(argument: str) -> bool:
    """Return ``True`` when ``argument`` must be wrapped in double quotes."""

    return not argument or any(character in QUOTE_TRIGGER_CHARACTERS for character in argument)


def escape_argument(argument: str) -> str:
    """Return ``argument`` encoded for a ``cmd.exe`` command line.

    A run of N backslashes followed by a double quote becomes 2N+1 backslashes
    and the quote. Backslashes elsewhere are copied unchanged, except a trailing
    run inside a quoted argument, which precedes the closing quote and is doubled.

    Args:
        argument: Literal argument text.

    Returns:
        str: Fragment safe to splice into the command line.

    Raises:
        UnescapableArgumentError: If ``argument`` contains ``% ^ & | < >``, a
            newline or carriage return, or a NUL character.
    """

    reserved = find_reserved_character(argument)
    if reserved is not None:
        raise UnescapableArgumentError(reserved, argument)

    quoted = needs_quoting(argument)
    parts: list[str] = []
    pending = 0
    for character in argument:
        if character == BACKSLASH:
            pending += 1
            continue
        if character == QUOTE:
            parts.append(BACKSLASH * (2 * pending + 1))
            parts.append(QUOTE)
        else:
            parts.append(BACKSLASH * pending)
            parts.append(character)
        pending = 0
    parts.append(BACKSLASH * (2 * pending if quoted else pending))

    fragment = "".join(parts)
    return f"{QUOTE}{fragment}{QUOTE}" if quoted else fragment


def join_command_line(arguments: Iterable[str]) -> str:
    """Escape each argument and join the fragments with single spaces."""

    return " ".join(escape_argument(argument) for argument in arguments)


def quote_executable_path(path: str) -> str:
    """Quote ``path`` only when it contains whitespace."""

    if any(character in QUOTE_TRIGGER_CHARACTERS for character in path):
        return f"{QUOTE}{path}{QUOTE}"
    return path


def split_command_line(line: str) -> list[str]:
    """Split ``line`` into arguments the way the Microsoft C runtime does.

    This is the parsing a program launched from a batch script applies to the
    text ``cmd.exe`` hands it, so it shows what the child will receive.
    """

    return mslex.split(line, like_cmd=False)


__all__ = [
    "escape_argument",
    "find_reserved_character",
    "join_command_line",
    "needs_quoting",
    "quote_executable_path",
    "split_command_line",
]
