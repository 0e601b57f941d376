# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe asynchronous wrappers around subprocess execution."""

from __future__ import annotations

import asyncio
import os
import shutil
import signal

# Bandit: subprocess usage is intentional, we provide a controlled wrapper around
# external linter execution with merged output and a closed stdin.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    # Bandit: type-only import of subprocess metadata is part of the safe wrapper.
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404

TIMEOUT_RETURNCODE: Final[int] = 124
_READ_CHUNK: Final[int] = 65536
_TAIL_TIMEOUT: Final[float] = 1.0


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. output: {stdout or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _ensure_text(value: bytes | None) -> str:
    if value is None:
        return ""
    return value.decode(errors="replace")


def _kill_group(process: asyncio.subprocess.Process) -> None:
    """Kill ``process`` and every child sharing its session."""

    try:
        if hasattr(os, "killpg"):
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass


async def _drain(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
    if stream is None:
        return
    while chunk := await stream.read(_READ_CHUNK):
        chunks.append(chunk)


async def _communicate(
    process: asyncio.subprocess.Process,
    args: Sequence[str],
    timeout: float | None,
) -> _CompletedProcess[str]:
    """Collect merged output from ``process`` honouring ``timeout``.

    On timeout the whole process group is killed and the output read so far
    is returned with status ``124``; ``stderr`` then carries a description of
    the timeout instead of the merged stream.
    """

    chunks: list[bytes] = []

    async def collect() -> int:
        await _drain(process.stdout, chunks)
        return await process.wait()

    try:
        returncode = await asyncio.wait_for(collect(), timeout=timeout)
    except asyncio.TimeoutError:
        _kill_group(process)
        await process.wait()
        # The group is gone, so the pipe reaches EOF after the buffered tail
        # unless a descendant left the session.
        try:
            await asyncio.wait_for(_drain(process.stdout, chunks), timeout=_TAIL_TIMEOUT)
        except asyncio.TimeoutError:
            pass
        return subprocess.CompletedProcess(
            args=list(args),
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(b"".join(chunks)),
            stderr=f"Command timed out after {timeout:.1f}s",
        )
    return subprocess.CompletedProcess(args=list(args), returncode=returncode, stdout=_ensure_text(b"".join(chunks)))


async def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Standard error is merged into standard output and stdin is closed. A timed
    out process is killed together with its children and reported with status
    ``124``.

    Args:
        args: Command and arguments, without shell interpretation.
        cwd: Optional working directory.
        env: Optional environment replacing the inherited one.
        check: Raise :class:`SubprocessExecutionError` on non-zero exit.
        timeout: Seconds to wait before killing the process, ``None`` waits forever.

    Returns:
        CompletedProcess[str]: Exit status and merged text output.

    Raises:
        FileNotFoundError: If the executable cannot be located.
        SubprocessExecutionError: If ``check`` is true and the command fails.
    """

    normalized = _normalize_args(args)
    process = await asyncio.create_subprocess_exec(
        *normalized,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        start_new_session=True,
    )
    completed = await _communicate(process, normalized, timeout)
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(normalized, completed.returncode, completed.stdout)
    return completed


async def run_shell_command(
    command: str,
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute ``command`` through the system shell with merged output.

    Callers are responsible for quoting any interpolated values.
    """

    # Bandit: shell templates come from linter configuration, substituted paths are quoted.
    process = await asyncio.create_subprocess_shell(  # nosec B602
        command,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        start_new_session=True,
    )
    return await _communicate(process, [command], timeout)


__all__ = ["TIMEOUT_RETURNCODE", "SubprocessExecutionError", "run_command", "run_shell_command"]
