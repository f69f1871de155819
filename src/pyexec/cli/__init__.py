# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line interface for resolving and running executables."""

from __future__ import annotations

from .app import app


def main() -> None:
    """Run the ``pyexec`` command-line application."""

    app()


__all__ = ["app", "main"]
