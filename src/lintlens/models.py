# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the lintlens package."""

from __future__ import annotations

import re
import shlex
import time
from collections.abc import Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from re import Pattern
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

if TYPE_CHECKING:
    from .interfaces import Document

_REQUIRED_GROUPS: Final[int] = 3


class LinterSpec(BaseModel):
    """Describe how to run one external linter and read its output.

    Attributes:
        name: Human readable identifier used in logs and listings.
        command: Command template containing the filename placeholder.
        warning_pattern: Regex with line, column and message captures. Named
            groups ``line``/``col``/``message`` take precedence over the first
            three positional groups. ``^``/``$`` anchor at line boundaries.
        file_patterns: Regex-style patterns searched against the filename.
        shell: ``True`` when the template needs a shell (pipes, redirects).
    """

    model_config = ConfigDict(frozen=True)

    name: str = "linter"
    command: str
    warning_pattern: str
    file_patterns: tuple[str, ...] = Field(default_factory=tuple)
    shell: bool = False
    _pattern: Pattern[str] = PrivateAttr()
    _file_patterns: tuple[Pattern[str], ...] = PrivateAttr(default_factory=tuple)

    @field_validator("warning_pattern")
    @classmethod
    def _validate_warning_pattern(cls, value: str) -> str:
        try:
            compiled = re.compile(value, re.MULTILINE)
        except re.error as exc:
            raise ValueError(f"invalid warning pattern {value!r}: {exc}") from exc
        named = {"line", "message"} <= set(compiled.groupindex)
        if not named and compiled.groups < _REQUIRED_GROUPS:
            raise ValueError(
                f"warning pattern {value!r} must capture line, column and message",
            )
        return value

    @field_validator("file_patterns", mode="before")
    @classmethod
    def _coerce_file_patterns(cls, value: object) -> object:
        if isinstance(value, str):
            return (value,)
        return value

    @model_validator(mode="after")
    def _compile_patterns(self) -> LinterSpec:
        """Compile regexes once and check that the command can be split."""

        self._pattern = re.compile(self.warning_pattern, re.MULTILINE)
        compiled: list[Pattern[str]] = []
        for pattern in self.file_patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as exc:
                raise ValueError(f"invalid file pattern {pattern!r}: {exc}") from exc
        self._file_patterns = tuple(compiled)
        if not self.shell:
            try:
                shlex.split(self.command)
            except ValueError as exc:
                raise ValueError(f"cannot split command {self.command!r}: {exc}") from exc
        return self

    @property
    def pattern(self) -> Pattern[str]:
        """Return the compiled warning pattern."""

        return self._pattern

    def matches(self, filename: str) -> bool:
        """Return ``True`` when any file pattern is found within ``filename``.

        Args:
            filename: Document filename (relative or absolute).

        Returns:
            bool: ``True`` when at least one pattern matches.
        """

        return any(pattern.search(filename) for pattern in self._file_patterns)

    def captures(self, match: re.Match[str]) -> tuple[str | None, str | None, str | None]:
        """Return the raw ``(line, col, message)`` strings captured by ``match``."""

        index = self._pattern.groupindex
        if "line" in index and "message" in index:
            col = match.group("col") if "col" in index else None
            return match.group("line"), col, match.group("message")
        return match.group(1), match.group(2), match.group(3)


class LintWarning(BaseModel):
    """Single diagnostic extracted from a linter's output."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    col: int = Field(default=0, ge=0)
    message: str
    linter: str | None = None


class WarningSet(Mapping[int, tuple[LintWarning, ...]]):
    """Immutable mapping of line number to the warnings reported on it.

    Warnings on one line keep the order in which linters emitted them. Sets are
    built once through :class:`WarningSetBuilder` and replaced wholesale.
    """

    __slots__ = ("_lines",)

    def __init__(self, lines: Mapping[int, Iterable[LintWarning]] | None = None) -> None:
        self._lines: dict[int, tuple[LintWarning, ...]] = {
            line: tuple(warnings) for line, warnings in (lines or {}).items()
        }

    def __getitem__(self, line: int) -> tuple[LintWarning, ...]:
        return self._lines[line]

    def __iter__(self) -> Iterator[int]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"WarningSet(lines={sorted(self._lines)}, count={self.count})"

    def for_line(self, line: int) -> tuple[LintWarning, ...]:
        """Return warnings for ``line`` or an empty tuple."""

        return self._lines.get(line, ())

    @property
    def count(self) -> int:
        """Return the total number of warnings across all lines."""

        return sum(len(warnings) for warnings in self._lines.values())

    def iter_warnings(self) -> Iterator[LintWarning]:
        """Yield warnings ordered by line, preserving per-line order."""

        for line in sorted(self._lines):
            yield from self._lines[line]


EMPTY_WARNINGS: Final[WarningSet] = WarningSet()


class WarningSetBuilder:
    """Append-only accumulator producing a :class:`WarningSet`."""

    def __init__(self) -> None:
        self._lines: dict[int, list[LintWarning]] = {}

    def add(self, warning: LintWarning) -> None:
        """Append ``warning`` to the sequence for its line."""

        self._lines.setdefault(warning.line, []).append(warning)

    def __len__(self) -> int:
        return sum(len(warnings) for warnings in self._lines.values())

    def build(self) -> WarningSet:
        """Return an immutable snapshot of the accumulated warnings."""

        return WarningSet(self._lines)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Warnings computed for one document at a specific revision.

    Attributes:
        document_id: Stable identity of the linted document.
        filename: Filename observed when the refresh started.
        path: Absolute path handed to the linters.
        revision_id: Document revision the warnings were computed against.
        warnings: Complete warning set for that revision.
        created_at: Monotonic timestamp recorded when the entry was built.
    """

    document_id: Hashable
    filename: str | None
    path: str
    revision_id: Hashable
    warnings: WarningSet
    created_at: float = field(default_factory=time.monotonic)

    def is_current(self, document: Document) -> bool:
        """Return ``True`` when ``document`` still has the captured revision."""

        return self.revision_id == document.revision_id


__all__ = [
    "EMPTY_WARNINGS",
    "CacheEntry",
    "LintWarning",
    "LinterSpec",
    "WarningSet",
    "WarningSetBuilder",
]
