# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Synchronous, shell-free invocation of resolved executables."""

from __future__ import annotations

import logging

# Bandit: subprocess usage is intentional. Arguments are passed as a vector,
# or as a command line whose every fragment went through escape_argument.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .config import ExecutionSettings
from .environment import EnvironmentMapping
from .errors import SpawnError, UnescapableArgumentError
from .escaping import escape_argument, quote_executable_path
from .models import (
    CommandOverrideMapping,
    InvocationOptions,
    InvocationRequest,
    InvocationResult,
    ResolvedExecutable,
    SearchSpec,
    StdioMode,
)
from .platform import COMSPEC_ENV, NUL_CHARACTER, DispatchStyle
from .resolver import resolve

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LaunchPlan:
    """What is handed to process creation for one invocation.

    ``args`` is an argument vector for native dispatch, or a single command line
    passed verbatim to ``CreateProcess`` for shell dispatch.
    """

    executable: ResolvedExecutable
    args: list[str] | str

    @property
    def command_line(self) -> str | None:
        """Return the verbatim command line for shell dispatch, else ``None``."""

        return self.args if isinstance(self.args, str) else None


def _reject_nul(arguments: Sequence[str]) -> None:
    for argument in arguments:
        if NUL_CHARACTER in argument:
            raise UnescapableArgumentError(NUL_CHARACTER, argument)


def build_launch_plan(
    executable: ResolvedExecutable,
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    settings: ExecutionSettings | None = None,
) -> LaunchPlan:
    """Return how ``executable`` must be started with ``args``.

    Native dispatch passes the vector through untouched. Shell dispatch builds
    ``<shell> /d /s /c "<path> <args>"`` where the path and each argument are
    escaped for ``cmd.exe``; the shell is taken from ``COMSPEC`` in ``env``.

    Args:
        executable: Resolved program and its dispatch style.
        args: Literal arguments, excluding the program itself.
        env: Environment the child will receive.
        settings: Execution settings supplying the shell and its switches.

    Returns:
        LaunchPlan: Argument vector or command line ready for spawning.

    Raises:
        UnescapableArgumentError: If an argument cannot be represented.
    """

    arguments = [str(arg) for arg in args]
    _reject_nul(arguments)
    if executable.dispatch is DispatchStyle.NATIVE_ARGV:
        return LaunchPlan(executable=executable, args=[str(executable.path), *arguments])

    resolved_settings = settings or ExecutionSettings()
    shell = (env or {}).get(COMSPEC_ENV) or resolved_settings.command_shell
    fragments = [escape_argument(str(executable.path)), *(escape_argument(arg) for arg in arguments)]
    command_line = " ".join(
        [quote_executable_path(shell), *resolved_settings.shell_switches, f'"{" ".join(fragments)}"'],
    )
    return LaunchPlan(executable=executable, args=command_line)


def _stdio_kwargs(mode: StdioMode) -> dict[str, Any]:
    if mode is StdioMode.BUFFER:
        return {"stdin": subprocess.DEVNULL, "stdout": subprocess.PIPE, "stderr": subprocess.PIPE}
    if mode is StdioMode.DISCARD:
        return {"stdin": subprocess.DEVNULL, "stdout": subprocess.DEVNULL, "stderr": subprocess.DEVNULL}
    return {"stdin": None, "stdout": None, "stderr": None}


def _split_status(returncode: int) -> tuple[int | None, int | None]:
    """Return ``(returncode, signal)`` from a :mod:`subprocess` status."""

    if returncode < 0:
        return None, -returncode
    return returncode, None


def spawn_sync(
    executable: ResolvedExecutable,
    args: Sequence[str],
    *,
    options: InvocationOptions | None = None,
    env: EnvironmentMapping | None = None,
    settings: ExecutionSettings | None = None,
) -> InvocationResult:
    """Run ``executable`` with ``args`` and wait for it to exit.

    Escaping is validated before anything is spawned. Failures of process
    creation itself are recorded on the result rather than raised, so callers
    can tell "never ran" apart from a non-zero exit.

    Args:
        executable: Resolved program and its dispatch style.
        args: Literal arguments, excluding the program itself.
        options: Working directory, environment, stdio and check settings.
        env: Pre-built environment snapshot; built from ``options`` when omitted.
        settings: Execution settings supplying the Windows shell.

    Returns:
        InvocationResult: Fully populated result of the finished child.

    Raises:
        UnescapableArgumentError: If an argument cannot be represented.
        LaunchError: When ``options.check`` is set and the launch failed.
        CapturedProcessError: When ``options.check`` is set and the child failed.
    """

    resolved_options = options or InvocationOptions()
    environment = env if env is not None else resolved_options.build_environment()
    plan = build_launch_plan(executable, args, env=environment, settings=settings)
    recorded_args = (str(executable.path), *(str(arg) for arg in args))
    LOGGER.debug("launching %s via %s: %r", executable.path, executable.dispatch, plan.args)

    try:
        # Bandit: shell=False; see build_launch_plan for the shell dispatch encoding.
        completed = subprocess.run(  # nosec B603
            plan.args,
            cwd=str(resolved_options.resolved_cwd()),
            env=environment.to_dict(),
            check=False,
            shell=False,
            **_stdio_kwargs(resolved_options.stdio),
        )
    except (OSError, ValueError) as exc:
        # ValueError covers NUL bytes in the environment or working directory.
        LOGGER.debug("spawning %s failed: %s", executable.path, exc)
        result = InvocationResult(
            args=recorded_args,
            executable=executable,
            error=SpawnError(str(executable.path), exc),
        )
    else:
        returncode, signal = _split_status(completed.returncode)
        result = InvocationResult(
            args=recorded_args,
            executable=executable,
            stdout=completed.stdout or b"",
            stderr=completed.stderr or b"",
            returncode=returncode,
            signal=signal,
        )

    if resolved_options.check:
        result.check_returncode()
    return result


def spawn(request: InvocationRequest, *, settings: ExecutionSettings | None = None) -> InvocationResult:
    """Resolve ``request.command`` and run it synchronously.

    Raises:
        ExecutableNotFoundError: When the command does not resolve.
        UnescapableArgumentError: If an argument cannot be represented.
    """

    options = request.options
    environment = options.build_environment()
    spec = SearchSpec.from_environment(
        environment,
        cwd=options.resolved_cwd(),
        style=options.resolved_style(),
        settings=settings,
    )
    executable = resolve(request.command, spec)
    return spawn_sync(executable, request.args, options=options, env=environment, settings=settings)


def run_command(
    args: Sequence[str],
    *,
    options: InvocationOptions | None = None,
    overrides: CommandOverrideMapping | None = None,
    settings: ExecutionSettings | None = None,
) -> InvocationResult:
    """Execute ``[command, *arguments]`` after resolving the command.

    Args:
        args: Command and argument sequence to execute.
        options: Base options configuring execution semantics.
        overrides: Keyword overrides applied to a cloned ``options`` instance.
        settings: Execution settings supplying the Windows shell.

    Returns:
        InvocationResult: Result of the finished child.

    Raises:
        ValueError: If ``args`` is empty.
        TypeError: If an unknown override key is supplied.
        ExecutableNotFoundError: When the command does not resolve.
        UnescapableArgumentError: If an argument cannot be represented.
    """

    resolved_options = (options or InvocationOptions()).with_overrides(dict(overrides or {}))
    request = InvocationRequest.from_sequence(args, options=resolved_options)
    return spawn(request, settings=settings)


__all__ = [
    "LaunchPlan",
    "build_launch_plan",
    "run_command",
    "spawn",
    "spawn_sync",
]
