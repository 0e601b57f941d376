# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Linter registry answering which linters apply to a filename."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .models import LinterSpec


class LinterRegistry:
    """Ordered collection of linter definitions.

    Registration order is significant: it decides the order in which linters
    run for a document and therefore the order of warnings sharing a line.
    Names are not required to be unique and overlapping file patterns are
    allowed, so several linters may apply to the same file.
    """

    def __init__(self, specs: Iterable[LinterSpec] = ()) -> None:
        """Initialise the registry with optional ``specs``.

        Args:
            specs: Linter definitions registered in iteration order.
        """

        self._specs: list[LinterSpec] = []
        self.extend(specs)

    def register(self, spec: LinterSpec) -> None:
        """Append ``spec`` to the registry.

        Args:
            spec: Linter definition to register.
        """

        self._specs.append(spec)

    def extend(self, specs: Iterable[LinterSpec]) -> None:
        """Register every spec in ``specs`` preserving their order."""

        for spec in specs:
            self.register(spec)

    def reset(self) -> None:
        """Remove all linters from the registry."""
        self._specs.clear()

    def matching(self, filename: str | None) -> tuple[LinterSpec, ...]:
        """Return linters whose file patterns match ``filename``.

        Args:
            filename: Document filename, ``None`` for unsaved buffers.

        Returns:
            tuple[LinterSpec, ...]: Matching linters in registration order,
            empty when ``filename`` is missing or nothing matches.
        """

        if not filename:
            return ()
        return tuple(spec for spec in self._specs if spec.matches(filename))

    def __len__(self) -> int:
        """Return the number of registered linters."""

        return len(self._specs)

    def __iter__(self) -> Iterator[LinterSpec]:
        """Iterate over linters in registration order."""

        return iter(tuple(self._specs))


__all__ = ["LinterRegistry"]
