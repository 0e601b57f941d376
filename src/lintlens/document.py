# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""In-memory text buffer implementing the :class:`Document` interface."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Final

_DOCUMENT_IDS: Final = itertools.count(1)


class TextDocument:
    """Line-indexed text buffer with a monotonic revision counter.

    Every content-modifying operation bumps ``revision_id``; loading the
    initial text and saving do not.
    """

    def __init__(self, text: str = "", *, filename: str | None = None) -> None:
        self._document_id = next(_DOCUMENT_IDS)
        self._filename = filename
        self._lines: list[str] = text.split("\n")
        self._revision = 0

    @classmethod
    def open(cls, path: Path | str) -> TextDocument:
        """Return a document holding the contents of ``path``.

        Args:
            path: File to read using UTF-8.

        Returns:
            TextDocument: Document named after ``path`` at revision ``0``.
        """

        source = Path(path)
        return cls(source.read_text(encoding="utf-8"), filename=str(source))

    def __repr__(self) -> str:
        return f"TextDocument(id={self._document_id}, filename={self._filename!r}, revision={self._revision})"

    @property
    def document_id(self) -> int:
        return self._document_id

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def revision_id(self) -> int:
        return self._revision

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def get_line(self, line: int) -> str:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return ""

    def set_text(self, text: str) -> None:
        """Replace the whole buffer."""

        self._lines = text.split("\n")
        self._touch()

    def insert(self, line: int, col: int, text: str) -> None:
        """Insert ``text`` before 1-based ``col`` of 1-based ``line``.

        Positions beyond the buffer are clamped to its end.
        """

        line = min(max(line, 1), len(self._lines))
        current = self._lines[line - 1]
        offset = min(max(col, 1), len(current) + 1) - 1
        merged = current[:offset] + text + current[offset:]
        self._lines[line - 1 : line] = merged.split("\n")
        self._touch()

    def replace_line(self, line: int, text: str) -> None:
        """Replace the content of 1-based ``line``."""

        if not 1 <= line <= len(self._lines):
            raise IndexError(f"line {line} out of range")
        self._lines[line - 1 : line] = text.split("\n")
        self._touch()

    def save(self, path: Path | str | None = None) -> Path:
        """Write the buffer to ``path`` (or the current filename) without changing the revision.

        Raises:
            ValueError: If neither ``path`` nor a filename is available.
        """

        target = path if path is not None else self._filename
        if target is None:
            raise ValueError("cannot save a document without a filename")
        destination = Path(target)
        destination.write_text(self.text, encoding="utf-8")
        self._filename = str(destination)
        return destination

    def _touch(self) -> None:
        self._revision += 1


__all__ = ["TextDocument"]
