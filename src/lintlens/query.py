# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only warning lookups for presentation layers."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from .cache import ResultCache
from .interfaces import Document
from .models import EMPTY_WARNINGS, LintWarning, WarningSet
from .text import wrap

_WORD_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_]*")
HOVER_SEPARATOR: Final[str] = "\n\n"


def word_span(line_text: str, col: int) -> tuple[int, int]:
    """Return the 1-based inclusive column range a warning underlines.

    The span starts at ``col`` (``0`` meaning the start of the line) and runs to
    the end of the identifier beginning there; it always covers at least one
    column.

    Args:
        line_text: Text of the line the warning refers to.
        col: Column reported by the linter.

    Returns:
        tuple[int, int]: ``(start, end)`` columns.
    """

    start = max(col, 1)
    match = _WORD_RE.match(line_text, start - 1)
    length = len(match.group(0)) if match else 0
    return start, max(start, start + length - 1)


class QueryAPI:
    """Look up cached warnings without ever blocking the caller.

    Lookups go through :meth:`ResultCache.get`, so querying a stale document
    schedules a background refresh while returning the previous results.
    """

    def __init__(self, cache: ResultCache, *, max_width: int = 80) -> None:
        self._cache = cache
        self.max_width = max_width

    def all_warnings(self, document: Document) -> WarningSet:
        """Return the full warning set currently cached for ``document``."""

        entry = self._cache.get(document)
        if entry is None:
            return EMPTY_WARNINGS
        return entry.warnings

    def warnings_for_line(self, document: Document, line: int) -> tuple[LintWarning, ...]:
        """Return warnings reported on ``line`` in emission order."""

        return self.all_warnings(document).for_line(line)

    def warnings_at(self, document: Document, line: int, col: int) -> tuple[LintWarning, ...]:
        """Return warnings on ``line`` whose underlined span covers ``col``.

        Args:
            document: Document being inspected.
            line: 1-based line number.
            col: 1-based column under the pointer.

        Returns:
            tuple[LintWarning, ...]: Hit warnings in emission order.
        """

        warnings = self.warnings_for_line(document, line)
        if not warnings:
            return ()
        text = document.get_line(line)
        hits: list[LintWarning] = []
        for warning in warnings:
            start, end = word_span(text, warning.col)
            if start <= col <= end:
                hits.append(warning)
        return tuple(hits)

    def hover_text(self, warnings: Iterable[LintWarning], max_width: int | None = None) -> list[str]:
        """Compose wrapped tooltip lines for ``warnings``.

        Messages are separated by a blank line and wrapped to ``max_width``
        (defaulting to the configured width).
        """

        full_text = HOVER_SEPARATOR.join(warning.message for warning in warnings)
        return wrap(full_text, max_width if max_width is not None else self.max_width)


__all__ = ["HOVER_SEPARATOR", "QueryAPI", "word_span"]
