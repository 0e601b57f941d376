# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status lines with optional colour and emoji support."""

from __future__ import annotations

from typing import Final, Literal

from rich.console import Console
from rich.text import Text

Level = Literal["ok", "warn", "fail"]

# level -> (emoji prefix, rich style)
_LEVELS: Final[dict[str, tuple[str, str]]] = {
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def emit(console: Console, level: Level, msg: str, *, use_emoji: bool, use_color: bool) -> None:
    """Print ``msg`` on ``console`` with the prefix and style registered for ``level``.

    Args:
        console: Destination console.
        level: One of ``ok``, ``warn`` or ``fail``.
        msg: Message text to display.
        use_emoji: Prefix the message with the level's emoji.
        use_color: Apply the level's style.
    """

    symbol, style = _LEVELS[level]
    text = Text(f"{emoji(symbol, use_emoji)}{msg}")
    if use_color:
        text.stylize(style)
    console.print(text)


__all__ = ["Level", "emit", "emoji"]
