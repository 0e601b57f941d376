# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from helpers.linters import PATTERN, RecordingLogger, python_command
from lintlens.models import LinterSpec

LinterFactory = Callable[..., LinterSpec]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def fixed_output_linter(tmp_path: Path) -> LinterFactory:
    """Return a factory for linters printing canned output.

    Each invocation appends the linted path to ``<name>.calls`` in ``tmp_path``.
    """

    def factory(
        name: str,
        output: str,
        *,
        exit_code: int = 0,
        delay: float = 0.0,
        file_patterns: tuple[str, ...] = (r"\.py$",),
        pattern: str = PATTERN,
    ) -> LinterSpec:
        script = tmp_path / f"{name}_linter.py"
        calls = tmp_path / f"{name}.calls"
        script.write_text(
            dedent(
                f"""
                import sys
                import time

                with open({str(calls)!r}, "a", encoding="utf-8") as handle:
                    handle.write(sys.argv[1] + "\\n")
                time.sleep({delay!r})
                sys.stdout.write({output!r})
                sys.exit({exit_code!r})
                """,
            ),
            encoding="utf-8",
        )
        return LinterSpec(
            name=name,
            command=python_command(script, "$FILENAME"),
            warning_pattern=pattern,
            file_patterns=file_patterns,
        )

    return factory


@pytest.fixture
def content_linter(tmp_path: Path) -> LinterSpec:
    """Linter flagging every line of the file on disk that contains ``bad``."""

    script = tmp_path / "content_linter.py"
    script.write_text(
        dedent(
            """
            import sys

            with open(sys.argv[1], encoding="utf-8") as handle:
                for number, text in enumerate(handle, 1):
                    column = text.find("bad")
                    if column >= 0:
                        print(f"{number}:{column + 1}: found bad")
            """,
        ),
        encoding="utf-8",
    )
    return LinterSpec(
        name="content",
        command=python_command(script, "$FILENAME"),
        warning_pattern=PATTERN,
        file_patterns=(r"\.py$",),
    )

