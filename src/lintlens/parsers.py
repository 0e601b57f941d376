# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run linters and convert their output into :class:`LintWarning` instances."""

from __future__ import annotations

import asyncio
import re
import shlex
from collections.abc import Iterator
from typing import Final

from .interfaces import NullLogger, RefreshLogger
from .models import LintWarning, LinterSpec, WarningSetBuilder
from .process_utils import TIMEOUT_RETURNCODE, run_command, run_shell_command

DEFAULT_PLACEHOLDER: Final[str] = "$FILENAME"
DEFAULT_BATCH_SIZE: Final[int] = 20
DEFAULT_TIMEOUT: Final[float] = 30.0


def _coerce_position(value: str | None) -> int | None:
    """Return ``value`` as an integer, ``None`` when it is not a plain number."""

    if value is None:
        return None
    stripped = value.strip()
    if not stripped.isdecimal():
        return None
    return int(stripped)


def _trim_trailing_newline(text: str) -> str:
    if text.endswith("\n"):
        return text[:-1]
    return text


class WarningParser:
    """Execute a linter against a file and parse the output it prints.

    Execution never raises: missing tools, non-zero exits and timeouts are
    reported through the ``success`` flag so callers can still attempt a
    best-effort parse of whatever text came back.
    """

    def __init__(
        self,
        *,
        placeholder: str = DEFAULT_PLACEHOLDER,
        timeout: float | None = DEFAULT_TIMEOUT,
        batch_size: int = DEFAULT_BATCH_SIZE,
        logger: RefreshLogger | None = None,
    ) -> None:
        """Initialise the parser.

        Args:
            placeholder: Token replaced by the file path in command templates.
            timeout: Seconds before a linter process is killed, ``None`` disables.
            batch_size: Matches parsed between cooperative yields.
            logger: Optional sink for execution and parse diagnostics.
        """

        if batch_size < 1:
            raise ValueError("batch_size must be a positive integer")
        self.placeholder = placeholder
        self.timeout = timeout
        self.batch_size = batch_size
        self._logger = logger or NullLogger()

    def build_command(self, path: str, spec: LinterSpec) -> str | list[str]:
        """Substitute ``path`` into every placeholder of ``spec.command``.

        Args:
            path: Absolute path of the file being linted.
            spec: Linter definition providing the template.

        Returns:
            str | list[str]: Shell string when ``spec.shell`` is set, otherwise
            an argument vector.
        """

        if spec.shell:
            return spec.command.replace(self.placeholder, shlex.quote(path))
        return [token.replace(self.placeholder, path) for token in shlex.split(spec.command)]

    async def run(self, path: str, spec: LinterSpec) -> tuple[str, bool]:
        """Run ``spec`` against ``path`` returning merged output and success.

        Args:
            path: Absolute path of the file being linted.
            spec: Linter definition to execute.

        Returns:
            tuple[str, bool]: Output with one trailing newline trimmed, and
            ``True`` when the process exited with status zero.
        """

        command = self.build_command(path, spec)
        self._logger.debug(f"running linter={spec.name} command={command!r}")
        try:
            if isinstance(command, str):
                completed = await run_shell_command(command, timeout=self.timeout)
            else:
                completed = await run_command(command, check=False, timeout=self.timeout)
        except (OSError, ValueError) as exc:
            self._logger.warn(f"Linter '{spec.name}' could not be executed: {exc}")
            return "", False
        output = _trim_trailing_newline(completed.stdout or "")
        success = completed.returncode == 0
        if completed.returncode == TIMEOUT_RETURNCODE and completed.stderr:
            self._logger.warn(f"Linter '{spec.name}' stopped: {completed.stderr}")
        elif not success:
            self._logger.debug(f"linter={spec.name} returncode={completed.returncode}")
        return output, success

    def _convert(self, match: re.Match[str], spec: LinterSpec) -> LintWarning | None:
        """Return the warning described by ``match``, ``None`` when it is malformed."""

        raw_line, raw_col, message = spec.captures(match)
        line = _coerce_position(raw_line)
        col = 0 if raw_col is None else _coerce_position(raw_col)
        if line is None or col is None:
            self._logger.debug(f"skipped linter={spec.name} match={match.group(0)!r}")
            return None
        return LintWarning(line=line, col=col, message=(message or "").rstrip("\r"), linter=spec.name)

    def iter_warnings(self, raw_output: str, spec: LinterSpec) -> Iterator[LintWarning]:
        """Yield warnings matched by ``spec.pattern`` within ``raw_output``.

        Matches whose line or column capture is not numeric are skipped. A
        column group that did not participate in the match maps to ``0``.
        """

        for match in spec.pattern.finditer(raw_output):
            warning = self._convert(match, spec)
            if warning is not None:
                yield warning

    async def parse(self, raw_output: str, spec: LinterSpec, into: WarningSetBuilder) -> int:
        """Append warnings parsed from ``raw_output`` to ``into``.

        Control is handed back to the event loop after every ``batch_size``
        pattern matches, skipped ones included, so large outputs do not starve
        other tasks.

        Args:
            raw_output: Complete text printed by the linter.
            spec: Linter definition providing the warning pattern.
            into: Builder accumulating the refresh's warnings.

        Returns:
            int: Number of warnings appended.
        """

        added = 0
        for seen, match in enumerate(spec.pattern.finditer(raw_output), 1):
            warning = self._convert(match, spec)
            if warning is not None:
                into.add(warning)
                added += 1
            if seen % self.batch_size == 0:
                await asyncio.sleep(0)
        return added


__all__ = ["DEFAULT_BATCH_SIZE", "DEFAULT_PLACEHOLDER", "DEFAULT_TIMEOUT", "WarningParser"]
