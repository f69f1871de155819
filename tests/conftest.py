# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests.helpers.executables import PRINT_ARGS_SOURCE, ExecutableTree, make_executable


@pytest.fixture
def executable_tree(tmp_path: Path) -> ExecutableTree:
    """Return ``skipped``/``fail``/``success`` directories mirroring a PATH search."""

    skipped = tmp_path / "skipped"
    non_executable = tmp_path / "fail"
    success = tmp_path / "success"
    for directory in (skipped, non_executable, success):
        directory.mkdir()

    # Present in an earlier directory but never runnable.
    (non_executable / "print-args").write_text(PRINT_ARGS_SOURCE, encoding="utf-8")
    (non_executable / "print-args.PS1").write_text("Write-Output $args\n", encoding="utf-8")
    (non_executable / "non-executable-extension.ps1").write_text("Write-Output $args\n", encoding="utf-8")

    make_executable(success / "print-args", f"#!{sys.executable}\n{PRINT_ARGS_SOURCE}")
    (success / "print-args.CMD").write_text("@echo off\r\nnode print-args.js %*\r\n", encoding="utf-8")
    (success / "native-tool.EXE").write_bytes(b"MZ")
    return ExecutableTree(root=tmp_path, skipped=skipped, non_executable=non_executable, success=success)
