# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve command names to executable files the way the platform shell does."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path

from .config import ExecutionSettings
from .errors import ExecutableNotFoundError
from .models import ResolvedExecutable, SearchSpec
from .platform import DispatchStyle, PlatformStyle

LOGGER = logging.getLogger(__name__)


def _is_path_like(name: str, spec: SearchSpec) -> bool:
    return any(separator in name for separator in spec.style.path_separators)


def _candidates(base: Path, spec: SearchSpec) -> Iterator[Path]:
    """Yield the file names tried for ``base`` within a single location."""

    if not spec.extensions:
        yield base
        return
    if spec.has_listed_extension(base.name):
        yield base
    for extension in spec.extensions:
        yield base.with_name(base.name + extension)


def _can_execute(path: Path, spec: SearchSpec) -> bool:
    """Return ``True`` when ``path`` is a regular file the platform would run."""

    try:
        if not path.is_file():
            return False
        if spec.style is PlatformStyle.WINDOWS:
            return spec.has_listed_extension(path.name)
        return os.access(path, os.X_OK)
    except OSError as exc:
        LOGGER.debug("skipping unreadable candidate %s: %s", path, exc)
        return False


def _is_directory(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _classify(path: Path, spec: SearchSpec) -> ResolvedExecutable:
    suffix = os.path.splitext(path.name)[1].upper()
    if spec.style is PlatformStyle.WINDOWS and suffix in spec.shell_script_extensions:
        return ResolvedExecutable(path=path, dispatch=DispatchStyle.SHELL_COMMAND_LINE)
    return ResolvedExecutable(path=path, dispatch=DispatchStyle.NATIVE_ARGV)


def _match_in(base: Path, spec: SearchSpec) -> ResolvedExecutable | None:
    for candidate in _candidates(base, spec):
        if _can_execute(candidate, spec):
            return _classify(candidate, spec)
    return None


def try_resolve(name: str, spec: SearchSpec) -> ResolvedExecutable | None:
    """Return the executable ``name`` refers to, or ``None`` when there is none.

    A name containing a path separator is resolved against the working
    directory of ``spec`` without consulting the search directories. Bare names
    are looked up in each search directory in order and the first directory
    holding an executable candidate wins. On Windows a candidate is only
    executable when its extension appears in the extension list.

    Args:
        name: Command name or path.
        spec: Search directories, extensions and working directory.

    Returns:
        ResolvedExecutable | None: Match and its dispatch style, or ``None``.
    """

    if not name:
        return None
    if _is_path_like(name, spec):
        base = Path(os.path.normpath(spec.cwd / name))
        resolved = _match_in(base, spec)
        LOGGER.debug("resolved path-like command %r to %s", name, resolved)
        return resolved

    for directory in spec.directories:
        if not _is_directory(directory):
            continue
        resolved = _match_in(directory / name, spec)
        if resolved is not None:
            LOGGER.debug("resolved %r to %s (%s)", name, resolved.path, resolved.dispatch)
            return resolved
    LOGGER.debug("no executable named %r in %d search directories", name, len(spec.directories))
    return None


def resolve(name: str, spec: SearchSpec) -> ResolvedExecutable:
    """Return the executable ``name`` refers to.

    Raises:
        ExecutableNotFoundError: When no search location holds a match.
    """

    resolved = try_resolve(name, spec)
    if resolved is None:
        raise ExecutableNotFoundError(name)
    return resolved


def which(
    name: str,
    *,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    style: PlatformStyle | None = None,
    settings: ExecutionSettings | None = None,
) -> Path | None:
    """Return the path of ``name`` using ``PATH``/``PATHEXT`` from ``env``."""

    spec = SearchSpec.from_environment(env, cwd=cwd, style=style, settings=settings)
    resolved = try_resolve(name, spec)
    return resolved.path if resolved is not None else None


__all__ = ["resolve", "try_resolve", "which"]
