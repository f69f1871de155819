# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Immutable per-invocation environment mappings."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping

from .platform import PlatformStyle


class EnvironmentMapping(Mapping[str, str]):
    """Read-only environment snapshot handed to a single child process.

    When ``case_insensitive`` is true, lookups ignore the case of variable
    names while the first spelling seen for a name is the one passed on to
    the child.
    """

    __slots__ = ("_case_insensitive", "_entries")

    def __init__(self, entries: Mapping[str, str] | None = None, *, case_insensitive: bool = False) -> None:
        self._case_insensitive = case_insensitive
        self._entries: dict[str, tuple[str, str]] = {}
        for key, value in (entries or {}).items():
            folded = self._fold(key)
            original = self._entries[folded][0] if folded in self._entries else key
            self._entries[folded] = (original, value)

    @property
    def case_insensitive(self) -> bool:
        """Return ``True`` when variable names are compared without case."""

        return self._case_insensitive

    def _fold(self, key: str) -> str:
        return key.upper() if self._case_insensitive else key

    def __getitem__(self, key: str) -> str:
        return self._entries[self._fold(key)][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._fold(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} variables, case_insensitive={self._case_insensitive})"

    def to_dict(self) -> dict[str, str]:
        """Return a plain dictionary suitable for :mod:`subprocess`."""

        return dict(self._entries.values())


def build_environment(
    overrides: Mapping[str, str | None] | None = None,
    *,
    base: Mapping[str, str] | None = None,
    inherit: bool = True,
    style: PlatformStyle | None = None,
) -> EnvironmentMapping:
    """Return the environment a child process should receive.

    Args:
        overrides: Variables to add or replace; a ``None`` value removes the
            variable from the inherited set.
        base: Environment to inherit from. Defaults to :data:`os.environ`.
        inherit: When ``False`` the child starts from an empty environment.
        style: Platform conventions deciding whether names ignore case.

    Returns:
        EnvironmentMapping: Snapshot built once for a single invocation.
    """

    resolved_style = style or PlatformStyle.current()
    case_insensitive = resolved_style.case_insensitive_environment
    merged: dict[str, str] = {}
    folded_names: dict[str, str] = {}

    def _fold(key: str) -> str:
        return key.upper() if case_insensitive else key

    def _assign(key: str, value: str | None) -> None:
        folded = _fold(key)
        existing = folded_names.get(folded)
        if value is None:
            if existing is not None:
                del merged[existing]
                del folded_names[folded]
            return
        if existing is not None:
            merged[existing] = value
            return
        folded_names[folded] = key
        merged[key] = value

    if inherit:
        for key, value in (os.environ if base is None else base).items():
            _assign(key, value)
    for key, value in (overrides or {}).items():
        _assign(key, value)
    return EnvironmentMapping(merged, case_insensitive=case_insensitive)


__all__ = ["EnvironmentMapping", "build_environment"]
