# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in linter definitions for tools with ``file:line:col: message`` output."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Final

from .models import LinterSpec

_PYTHON: Final[tuple[str, ...]] = (r"\.pyi?$",)

BUILTIN_PRESETS: Final[Mapping[str, LinterSpec]] = MappingProxyType(
    {
        "flake8": LinterSpec(
            name="flake8",
            command="flake8 --format=default $FILENAME",
            warning_pattern=r"^[^\n]*?:(\d+):(\d+): (.*)$",
            file_patterns=_PYTHON,
        ),
        "ruff": LinterSpec(
            name="ruff",
            command="ruff check --output-format=concise --no-cache $FILENAME",
            warning_pattern=r"^[^\n]*?:(\d+):(\d+): (.*)$",
            file_patterns=_PYTHON,
        ),
        "mypy": LinterSpec(
            name="mypy",
            command="mypy --show-column-numbers --no-error-summary $FILENAME",
            warning_pattern=r"^[^\n]*?:(?P<line>\d+):(?:(?P<col>\d+):)? (?P<message>(?:error|warning|note): .*)$",
            file_patterns=_PYTHON,
        ),
        "luacheck": LinterSpec(
            name="luacheck",
            command="luacheck --formatter=plain --codes --no-color $FILENAME",
            warning_pattern=r"^[^\n]*?:(\d+):(\d+): (.*)$",
            file_patterns=(r"\.lua$",),
        ),
        "shellcheck": LinterSpec(
            name="shellcheck",
            command="shellcheck --format=gcc $FILENAME",
            warning_pattern=r"^[^\n]*?:(\d+):(\d+): (.*)$",
            file_patterns=(r"\.sh$", r"\.bash$"),
        ),
    },
)


def preset_names() -> tuple[str, ...]:
    """Return the names of the built-in presets in definition order."""

    return tuple(BUILTIN_PRESETS)


def resolve_presets(names: Iterable[str]) -> list[LinterSpec]:
    """Return the presets named in ``names`` preserving their order.

    ``"all"`` expands to every built-in preset.

    Raises:
        KeyError: If a name does not refer to a built-in preset.
    """

    resolved: list[LinterSpec] = []
    for name in names:
        if name == "all":
            resolved.extend(BUILTIN_PRESETS.values())
            continue
        try:
            resolved.append(BUILTIN_PRESETS[name])
        except KeyError:
            available = ", ".join(preset_names())
            raise KeyError(f"Unknown preset '{name}' (available: {available})") from None
    return resolved


__all__ = ["BUILTIN_PRESETS", "preset_names", "resolve_presets"]
