# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for invocation options, requests and results."""

from __future__ import annotations

from pathlib import Path

import pytest

from pyexec import (
    CapturedProcessError,
    InvocationOptions,
    InvocationRequest,
    InvocationResult,
    ResolvedExecutable,
    StdioMode,
)
from pyexec.platform import DispatchStyle, PlatformStyle


def test_with_overrides_returns_new_instance(tmp_path: Path) -> None:
    base = InvocationOptions()

    updated = base.with_overrides({"cwd": tmp_path, "stdio": "inherit", "check": True, "env": {"A": "1", "B": None}})

    assert base.cwd is None
    assert updated.cwd == tmp_path
    assert updated.stdio is StdioMode.INHERIT
    assert updated.check is True
    assert updated.env == {"A": "1", "B": None}


@pytest.mark.parametrize(
    "overrides",
    [
        {"cwd": "relative"},
        {"env": {"A": 1}},
        {"env": ["A=1"]},
        {"check": "yes"},
        {"style": "windows"},
    ],
)
def test_with_overrides_validates_types(overrides: dict[str, object]) -> None:
    with pytest.raises(TypeError):
        InvocationOptions().with_overrides(overrides)  # type: ignore[arg-type]


def test_with_overrides_rejects_unknown_keys() -> None:
    with pytest.raises(TypeError, match="shell, timeout"):
        InvocationOptions().with_overrides({"timeout": 1, "shell": True})  # type: ignore[dict-item]


def test_options_build_environment_uses_style() -> None:
    options = InvocationOptions(env={"Path": "x"}, inherit_environment=False, style=PlatformStyle.WINDOWS)

    env = options.build_environment()

    assert env.case_insensitive
    assert env["PATH"] == "x"


def test_request_from_sequence() -> None:
    request = InvocationRequest.from_sequence(["tool", "a", "b"])

    assert request.command == "tool"
    assert request.args == ("a", "b")

    with pytest.raises(ValueError):
        InvocationRequest.from_sequence([])


def test_resolved_executable_shell_flag() -> None:
    script = ResolvedExecutable(path=Path("wrapper.cmd"), dispatch=DispatchStyle.SHELL_COMMAND_LINE)
    binary = ResolvedExecutable(path=Path("tool.exe"), dispatch=DispatchStyle.NATIVE_ARGV)

    assert script.is_shell_script
    assert not binary.is_shell_script
    assert str(binary) == "tool.exe"


def test_result_text_and_check() -> None:
    result = InvocationResult(
        args=("tool", "x"),
        executable=None,
        stdout=b"out\xff",
        stderr=b"err",
        returncode=1,
    )

    assert result.launched
    assert not result.succeeded
    assert result.stdout_text == "out�"
    with pytest.raises(CapturedProcessError) as excinfo:
        result.check_returncode()
    assert excinfo.value.stderr == "err"
    assert excinfo.value.command == ("tool", "x")


def test_successful_result_check_returns_self() -> None:
    result = InvocationResult(args=("tool",), executable=None, returncode=0)

    assert result.check_returncode() is result
