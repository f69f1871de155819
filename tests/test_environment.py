# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for per-invocation environment snapshots and search specifications."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pyexec import EnvironmentMapping, ExecutionSettings, SearchSpec, build_environment
from pyexec.platform import DEFAULT_PATHEXT, PlatformStyle


def test_windows_environment_is_case_insensitive() -> None:
    env = build_environment({"path": "C:\\override"}, base={"Path": "C:\\base", "Foo": "1"}, style=PlatformStyle.WINDOWS)

    assert env["PATH"] == "C:\\override"
    assert "FOO" in env
    assert env.to_dict() == {"Path": "C:\\override", "Foo": "1"}


def test_posix_environment_is_case_sensitive() -> None:
    env = build_environment({"path": "/override"}, base={"PATH": "/base"}, style=PlatformStyle.POSIX)

    assert env["PATH"] == "/base"
    assert env["path"] == "/override"
    assert len(env) == 2


def test_none_override_removes_variable() -> None:
    env = build_environment({"SECRET": None}, base={"secret": "x", "KEEP": "1"}, style=PlatformStyle.WINDOWS)

    assert "SECRET" not in env
    assert dict(env) == {"KEEP": "1"}


def test_inherit_false_starts_empty() -> None:
    env = build_environment({"ONLY": "1"}, base={"OTHER": "2"}, inherit=False, style=PlatformStyle.POSIX)

    assert env.to_dict() == {"ONLY": "1"}


def test_environment_mapping_is_read_only() -> None:
    env = EnvironmentMapping({"A": "1"})

    with pytest.raises(TypeError):
        env["B"] = "2"  # type: ignore[index]


def test_build_environment_inherits_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYEXEC_INHERITED", "yes")

    env = build_environment(style=PlatformStyle.POSIX)

    assert env["PYEXEC_INHERITED"] == "yes"


def test_search_spec_deduplicates_and_resolves_relative_entries(tmp_path: Path) -> None:
    env = {"PATH": f" bin ;{tmp_path / 'bin'};;other;bin"}

    spec = SearchSpec.from_environment(env, cwd=tmp_path, style=PlatformStyle.WINDOWS)

    assert spec.directories == (tmp_path / "bin", tmp_path / "other")
    assert spec.cwd == tmp_path


def test_search_spec_parses_pathext(tmp_path: Path) -> None:
    env = {"PATH": "", "pathext": " .com; .Exe ;PS1;;.cmd;.EXE"}

    spec = SearchSpec.from_environment(env, cwd=tmp_path, style=PlatformStyle.WINDOWS)

    assert spec.extensions == (".COM", ".EXE", ".CMD")


def test_search_spec_falls_back_to_default_pathext(tmp_path: Path) -> None:
    spec = SearchSpec.from_environment({"PATH": "", "PATHEXT": " "}, cwd=tmp_path, style=PlatformStyle.WINDOWS)

    assert spec.extensions == DEFAULT_PATHEXT


def test_search_spec_uses_configured_defaults(tmp_path: Path) -> None:
    settings = ExecutionSettings(default_pathext=(".exe", ".ps1"), shell_script_extensions=(".cmd",))

    spec = SearchSpec.from_environment({}, cwd=tmp_path, style=PlatformStyle.WINDOWS, settings=settings)

    assert spec.extensions == (".EXE", ".PS1")
    assert spec.shell_script_extensions == (".CMD",)


@pytest.mark.skipif(os.name == "nt", reason="POSIX absolute paths")
def test_posix_search_spec_has_no_extensions(tmp_path: Path) -> None:
    spec = SearchSpec.from_environment({"PATH": "/usr/bin:/bin", "PATHEXT": ".EXE"}, cwd=tmp_path, style=PlatformStyle.POSIX)

    assert spec.extensions == ()
    assert spec.directories == (Path("/usr/bin"), Path("/bin"))


@pytest.mark.skipif(os.name == "nt", reason="POSIX absolute paths")
def test_absolute_path_entries_are_kept_and_deduplicated(tmp_path: Path) -> None:
    spec = SearchSpec.from_environment({"PATH": "/a:/b:/a"}, cwd=tmp_path, style=PlatformStyle.POSIX)

    assert spec.directories == (Path("/a"), Path("/b"))


def test_absolute_windows_path_entries_are_kept(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    env = {"PATH": f"{first};{second};{first}"}

    spec = SearchSpec.from_environment(env, cwd=tmp_path, style=PlatformStyle.WINDOWS)

    assert spec.directories == (first, second)
