# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve executables like the platform shell and invoke them without a shell."""

from __future__ import annotations

from .config import ExecutionSettings, load_settings
from .environment import EnvironmentMapping, build_environment
from .errors import (
    CapturedProcessError,
    ConfigError,
    ExecutableError,
    ExecutableNotFoundError,
    LaunchError,
    SpawnError,
    UnescapableArgumentError,
)
from .escaping import escape_argument, join_command_line, split_command_line
from .models import (
    InvocationOptions,
    InvocationRequest,
    InvocationResult,
    ResolvedExecutable,
    SearchSpec,
    StdioMode,
)
from .platform import DispatchStyle, PlatformStyle
from .process import LaunchPlan, build_launch_plan, run_command, spawn, spawn_sync
from .resolver import resolve, try_resolve, which

__version__ = "0.1.0"

__all__ = [
    "CapturedProcessError",
    "ConfigError",
    "DispatchStyle",
    "EnvironmentMapping",
    "ExecutableError",
    "ExecutableNotFoundError",
    "ExecutionSettings",
    "InvocationOptions",
    "InvocationRequest",
    "InvocationResult",
    "LaunchError",
    "LaunchPlan",
    "PlatformStyle",
    "ResolvedExecutable",
    "SearchSpec",
    "SpawnError",
    "StdioMode",
    "UnescapableArgumentError",
    "__version__",
    "build_environment",
    "build_launch_plan",
    "escape_argument",
    "join_command_line",
    "load_settings",
    "resolve",
    "run_command",
    "spawn",
    "spawn_sync",
    "split_command_line",
    "try_resolve",
    "which",
]
