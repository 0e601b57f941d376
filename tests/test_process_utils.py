# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the asynchronous subprocess wrappers."""

from __future__ import annotations

import asyncio
import sys

import pytest

from lintlens.process_utils import TIMEOUT_RETURNCODE, SubprocessExecutionError, run_command, run_shell_command


@pytest.mark.asyncio
async def test_run_command_merges_stderr() -> None:
    script = "import sys; print('out'); print('err', file=sys.stderr)"

    completed = await run_command([sys.executable, "-c", script], check=False)

    assert completed.returncode == 0
    assert "out" in completed.stdout
    assert "err" in completed.stdout


@pytest.mark.asyncio
async def test_run_command_check_raises() -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        await run_command([sys.executable, "-c", "import sys; print('nope'); sys.exit(3)"])

    assert excinfo.value.returncode == 3
    assert "nope" in (excinfo.value.stdout or "")


@pytest.mark.asyncio
async def test_run_command_requires_known_executable() -> None:
    with pytest.raises(ValueError):
        await run_command([])
    with pytest.raises(FileNotFoundError):
        await run_command(["lintlens-no-such-binary"])


@pytest.mark.asyncio
async def test_run_shell_command_times_out() -> None:
    completed = await run_shell_command("sleep 5", timeout=0.2)

    assert completed.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in completed.stderr
    assert completed.stdout == ""


@pytest.mark.asyncio
async def test_timeout_keeps_partial_output_and_kills_children() -> None:
    loop = asyncio.get_running_loop()

    started = loop.time()
    completed = await run_shell_command("echo early; sleep 5 | cat; echo late", timeout=0.5)

    assert loop.time() - started < 2.0
    assert completed.returncode == TIMEOUT_RETURNCODE
    assert completed.stdout == "early\n"


@pytest.mark.asyncio
async def test_invalid_utf8_is_replaced_not_dropped() -> None:
    script = "import sys; sys.stdout.buffer.write(b'3:5: caf\\xe9 here')"

    completed = await run_command([sys.executable, "-c", script], check=False)

    assert completed.stdout == "3:5: caf� here"
