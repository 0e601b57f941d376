# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for status line helpers and the CLI logger."""

from __future__ import annotations

import io

from rich.console import Console

from lintlens.cli.shared import CLILogger
from lintlens.logging import emit


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, force_terminal=True, color_system="standard", width=200), buffer


def test_emit_prefixes_emoji_and_styles_when_enabled() -> None:
    console, buffer = _console()

    emit(console, "fail", "2 warning(s)", use_emoji=True, use_color=True)

    output = buffer.getvalue()
    assert "❌ 2 warning(s)" in output
    assert "\x1b[" in output


def test_emit_plain_output() -> None:
    console, buffer = _console()

    emit(console, "ok", "clean", use_emoji=False, use_color=False)

    assert buffer.getvalue() == "clean\n"


def test_cli_logger_routes_levels_to_its_console() -> None:
    console, buffer = _console()
    logger = CLILogger(console=console, use_emoji=False, use_color=False)

    logger.warn("No linters apply to notes.txt")
    logger.ok("No warnings in 1 file(s)")
    logger.debug("hidden")

    assert buffer.getvalue().splitlines() == ["No linters apply to notes.txt", "No warnings in 1 file(s)"]


def test_cli_logger_debug_when_enabled() -> None:
    buffer = io.StringIO()
    logger = CLILogger(console=Console(file=buffer, no_color=True, width=200), use_emoji=False, debug_enabled=True)

    logger.debug("scheduled refresh document=3 revision=1")

    assert buffer.getvalue() == "[debug] scheduled refresh document=3 revision=1\n"
