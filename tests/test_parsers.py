# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests covering linter execution and output parsing."""

from __future__ import annotations

import asyncio
import shlex
from pathlib import Path

import pytest

from helpers.linters import PATTERN
from lintlens import parsers as parsers_module
from lintlens.models import LintWarning, LinterSpec, WarningSetBuilder
from lintlens.parsers import WarningParser


def _spec(command: str = "demo $FILENAME", *, shell: bool = False) -> LinterSpec:
    return LinterSpec(name="demo", command=command, warning_pattern=PATTERN, file_patterns=(r"\.py$",), shell=shell)


def test_build_command_substitutes_every_placeholder() -> None:
    parser = WarningParser()
    spec = _spec("tool --stdin-filename=$FILENAME $FILENAME")

    command = parser.build_command("/src/my app.py", spec)

    assert command == ["tool", "--stdin-filename=/src/my app.py", "/src/my app.py"]


def test_build_command_quotes_path_for_shell_templates() -> None:
    parser = WarningParser(placeholder="%file%")
    spec = _spec("tool %file% 2>&1 | cat", shell=True)

    command = parser.build_command("/src/my app.py", spec)

    assert command == f"tool {shlex.quote('/src/my app.py')} 2>&1 | cat"


@pytest.mark.asyncio
async def test_parse_round_trip() -> None:
    parser = WarningParser()
    builder = WarningSetBuilder()

    added = await parser.parse("3:5: unused variable 'x'\n10:1: missing semicolon\n", _spec(), builder)
    warnings = builder.build()

    assert added == 2
    assert warnings[3] == (LintWarning(line=3, col=5, message="unused variable 'x'", linter="demo"),)
    assert warnings[10] == (LintWarning(line=10, col=1, message="missing semicolon", linter="demo"),)
    assert sorted(warnings) == [3, 10]


@pytest.mark.asyncio
async def test_parse_skips_non_numeric_positions(recording_logger) -> None:
    parser = WarningParser(logger=recording_logger)
    builder = WarningSetBuilder()
    raw = "abc:2: bad line number\n4:x: bad column\n7:2: kept\n"

    added = await parser.parse(raw, _spec(), builder)
    warnings = builder.build()

    assert added == 1
    assert list(warnings) == [7]
    assert warnings[7][0].message == "kept"
    assert any("skipped" in message for message in recording_logger.debugs)


@pytest.mark.asyncio
async def test_parse_appends_to_existing_lines() -> None:
    parser = WarningParser()
    builder = WarningSetBuilder()
    builder.add(LintWarning(line=1, col=1, message="earlier"))

    await parser.parse("1:4: later", _spec(), builder)

    assert [warning.message for warning in builder.build()[1]] == ["earlier", "later"]


def test_iter_warnings_maps_missing_column_to_zero() -> None:
    parser = WarningParser()
    spec = LinterSpec(
        name="named",
        command="named $FILENAME",
        warning_pattern=r"^L(?P<line>\d+)(?::(?P<col>\d+))? (?P<message>.*)$",
    )

    warnings = list(parser.iter_warnings("L2 whole line\nL3:7 column\r\n", spec))

    assert [(warning.line, warning.col, warning.message) for warning in warnings] == [
        (2, 0, "whole line"),
        (3, 7, "column"),
    ]


def test_iter_warnings_without_matches_is_empty() -> None:
    assert list(WarningParser().iter_warnings("all good", _spec())) == []


@pytest.mark.asyncio
async def test_parse_yields_after_each_batch(monkeypatch: pytest.MonkeyPatch) -> None:
    yields: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay: float) -> None:
        yields.append(delay)
        await real_sleep(0)

    monkeypatch.setattr(parsers_module.asyncio, "sleep", fake_sleep)
    parser = WarningParser(batch_size=20)
    raw = "\n".join(f"{line}:1: warning {line}" for line in range(1, 46))

    added = await parser.parse(raw, _spec(), WarningSetBuilder())

    assert added == 45
    assert yields == [0, 0]


def test_parser_rejects_non_positive_batch_size() -> None:
    with pytest.raises(ValueError):
        WarningParser(batch_size=0)


@pytest.mark.asyncio
async def test_run_trims_single_trailing_newline(fixed_output_linter, tmp_path: Path) -> None:
    spec = fixed_output_linter("trim", "1:1: one\n\n")

    output, success = await WarningParser().run(str(tmp_path / "app.py"), spec)

    assert success is True
    assert output == "1:1: one\n"


@pytest.mark.asyncio
async def test_run_reports_failure_but_keeps_output(fixed_output_linter, tmp_path: Path) -> None:
    spec = fixed_output_linter("failing", "2:3: still parsed\n", exit_code=1)
    parser = WarningParser()

    output, success = await parser.run(str(tmp_path / "app.py"), spec)
    builder = WarningSetBuilder()
    await parser.parse(output, spec, builder)

    assert success is False
    assert builder.build()[2][0].message == "still parsed"


@pytest.mark.asyncio
async def test_run_missing_tool_is_not_raised(recording_logger) -> None:
    parser = WarningParser(logger=recording_logger)

    output, success = await parser.run("/tmp/app.py", _spec("lintlens-definitely-missing-tool $FILENAME"))

    assert (output, success) == ("", False)
    assert recording_logger.warnings


@pytest.mark.asyncio
async def test_run_merges_stderr_for_shell_templates(tmp_path: Path) -> None:
    spec = _spec("echo 5:2: from stderr $FILENAME 1>&2", shell=True)

    output, success = await WarningParser().run(str(tmp_path / "app.py"), spec)

    assert success is True
    assert output.startswith("5:2: from stderr")


@pytest.mark.asyncio
async def test_run_times_out(fixed_output_linter, recording_logger, tmp_path: Path) -> None:
    spec = fixed_output_linter("slow", "1:1: late\n", delay=5.0)

    output, success = await WarningParser(timeout=0.3, logger=recording_logger).run(str(tmp_path / "app.py"), spec)

    assert success is False
    assert output == ""
    assert any("timed out" in message for message in recording_logger.warnings)


@pytest.mark.asyncio
async def test_timeout_kills_children_of_shell_templates(tmp_path: Path) -> None:
    spec = _spec("echo 2:1: before the hang; sleep 5; echo 3:1: late $FILENAME", shell=True)
    parser = WarningParser(timeout=0.5)
    loop = asyncio.get_running_loop()

    started = loop.time()
    output, success = await parser.run(str(tmp_path / "app.py"), spec)
    elapsed = loop.time() - started

    assert elapsed < 2.0
    assert success is False
    builder = WarningSetBuilder()
    await parser.parse(output, spec, builder)
    assert [warning.message for warning in builder.build().iter_warnings()] == ["before the hang"]


@pytest.mark.asyncio
async def test_parse_yields_for_skipped_matches(monkeypatch: pytest.MonkeyPatch) -> None:
    yields: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay: float) -> None:
        yields.append(delay)
        await real_sleep(0)

    monkeypatch.setattr(parsers_module.asyncio, "sleep", fake_sleep)
    raw = "\n".join(f"line{index}:1: not a number" for index in range(1000))

    added = await WarningParser(batch_size=20).parse(raw, _spec(), WarningSetBuilder())

    assert added == 0
    assert len(yields) == 50
