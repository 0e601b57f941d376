# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Word wrapping for warning messages shown in hover boxes."""

from __future__ import annotations

import re
from typing import Final

_WORD_RE: Final[re.Pattern[str]] = re.compile(r"(\S+)(\s*)")


def wrap(text: str, max_width: int = 80) -> list[str]:
    """Split ``text`` into display lines no wider than ``max_width`` where possible.

    Newlines always break. A word that would push the current line past
    ``max_width`` starts a new line; words are never split, so a word longer
    than ``max_width`` occupies a line of its own. Whitespace runs between words
    are kept verbatim, trailing whitespace at a break is dropped and no empty
    final line is emitted.

    Args:
        text: Message text, possibly containing newlines.
        max_width: Maximum number of characters per line.

    Returns:
        list[str]: Wrapped lines, empty for blank input.
    """

    lines: list[str] = []
    current = ""
    for match in _WORD_RE.finditer(text):
        word, separators = match.groups()
        if current.strip() and len(current) + len(word) > max_width:
            lines.append(current.rstrip())
            current = ""
        current += word
        for separator in separators:
            if separator == "\n":
                lines.append(current.rstrip())
                current = ""
            else:
                current += separator
    if current.strip():
        lines.append(current.rstrip())
    return lines


__all__ = ["wrap"]
