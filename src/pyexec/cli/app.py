# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing resolution, escaping and invocation."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import load_settings
from ..errors import ConfigError, ExecutableNotFoundError, UnescapableArgumentError
from ..escaping import join_command_line
from ..models import InvocationOptions, InvocationRequest, SearchSpec, StdioMode
from ..platform import PlatformStyle
from ..process import spawn
from ..resolver import try_resolve
from .shared import (
    EXIT_CONFIG,
    EXIT_NOT_FOUND,
    EXIT_SPAWN_FAILED,
    EXIT_UNESCAPABLE,
    CLIError,
    CLIState,
    ensure_verbose_logging,
    get_state,
    parse_env_assignments,
)

app = typer.Typer(
    name="pyexec",
    help="Resolve executables like the platform shell and run them without one.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_root: Annotated[
        Path | None,
        typer.Option("--config-root", help="Directory whose pyproject.toml holds [tool.pyexec]."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution and launch details.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
) -> None:
    """Configure logging and load settings shared by every command."""

    if verbose:
        ensure_verbose_logging()
    try:
        settings = load_settings(config_root)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc
    ctx.obj = CLIState(settings=settings, use_emoji=not no_emoji, use_color=False if no_color else None)


@app.command("which")
def which_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Command name or path to resolve.")],
    cwd: Annotated[Path | None, typer.Option("--cwd", help="Working directory for relative names.")] = None,
    style: Annotated[
        PlatformStyle | None,
        typer.Option("--style", help="Platform conventions to apply (defaults to the host)."),
    ] = None,
) -> None:
    """Print the executable NAME resolves to and how it would be launched."""

    state = get_state(ctx)
    spec = SearchSpec.from_environment(cwd=cwd, style=style, settings=state.settings)
    resolved = try_resolve(name, spec)
    if resolved is None:
        state.fail(f"{name}: not found")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    typer.echo(f"{resolved.path}\t{resolved.dispatch}")


@app.command("escape")
def escape_command(
    ctx: typer.Context,
    args: Annotated[list[str], typer.Argument(help="Arguments to encode for cmd.exe.")],
) -> None:
    """Print ARGS encoded as a cmd.exe command-line fragment."""

    state = get_state(ctx)
    try:
        typer.echo(join_command_line(args))
    except UnescapableArgumentError as exc:
        state.fail(str(exc))
        raise typer.Exit(code=EXIT_UNESCAPABLE) from exc


@app.command(
    "run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def run_command_cli(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Command to resolve and run.")],
    args: Annotated[list[str] | None, typer.Argument(help="Arguments passed to the command.")] = None,
    cwd: Annotated[Path | None, typer.Option("--cwd", help="Working directory for the child.")] = None,
    env: Annotated[
        list[str] | None,
        typer.Option("--env", "-e", help="KEY=VALUE added to the child environment (repeatable)."),
    ] = None,
    stdio: Annotated[StdioMode | None, typer.Option("--stdio", help="How child streams are wired.")] = None,
    clean_env: Annotated[bool, typer.Option("--clean-env", help="Do not inherit the current environment.")] = False,
) -> None:
    """Run NAME synchronously and exit with its status."""

    state = get_state(ctx)
    try:
        overrides = parse_env_assignments(env)
    except CLIError as exc:
        state.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    options = InvocationOptions(
        cwd=cwd,
        env=overrides,
        inherit_environment=state.settings.inherit_environment and not clean_env,
        stdio=stdio or state.settings.stdio,
    )
    request = InvocationRequest(command=name, args=tuple(args or ()), options=options)
    try:
        result = spawn(request, settings=state.settings)
    except ExecutableNotFoundError as exc:
        state.fail(str(exc))
        raise typer.Exit(code=EXIT_NOT_FOUND) from exc
    except UnescapableArgumentError as exc:
        state.fail(str(exc))
        raise typer.Exit(code=EXIT_UNESCAPABLE) from exc

    if result.error is not None:
        state.fail(str(result.error))
        raise typer.Exit(code=EXIT_SPAWN_FAILED)
    if result.stdout:
        typer.echo(result.stdout_text, nl=False)
    if result.stderr:
        typer.echo(result.stderr_text, nl=False, err=True)
    if result.signal is not None:
        state.warn(f"{name} was terminated by signal {result.signal}")
        raise typer.Exit(code=128 + result.signal)
    raise typer.Exit(code=result.returncode or 0)


__all__ = ["app"]
