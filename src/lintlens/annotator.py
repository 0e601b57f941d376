# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Facade wiring registry, parser, scheduler, cache and queries together."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from .cache import ResultCache
from .config import AnnotatorConfig, ConfigError
from .interfaces import Document, NullLogger, RefreshLogger
from .models import EMPTY_WARNINGS, CacheEntry, LintWarning, LinterSpec, WarningSet
from .parsers import WarningParser
from .presets import resolve_presets
from .query import QueryAPI
from .registry import LinterRegistry
from .scheduler import RefreshScheduler

_LINT_ATTEMPTS: Final[int] = 3


class LintAnnotator:
    """Background lint annotations for a set of open documents.

    The annotator is constructed once at startup; its registry is shared by
    reference with the scheduler so linters registered later apply to every
    subsequent refresh.
    """

    def __init__(self, config: AnnotatorConfig | None = None, *, logger: RefreshLogger | None = None) -> None:
        """Build the annotator components from ``config``.

        Args:
            config: Annotator settings, defaults when omitted.
            logger: Optional sink for refresh diagnostics.

        Raises:
            ConfigError: If ``config`` names an unknown preset.
        """

        self.config = config or AnnotatorConfig()
        self._logger = logger or NullLogger()
        try:
            presets = resolve_presets(self.config.presets)
        except KeyError as exc:
            raise ConfigError(exc.args[0]) from exc
        self.registry = LinterRegistry([*presets, *self.config.linters])
        self.parser = WarningParser(
            placeholder=self.config.placeholder,
            timeout=self.config.subprocess_timeout,
            batch_size=self.config.batch_size,
            logger=self._logger,
        )
        self.scheduler = RefreshScheduler(
            self.registry,
            self.parser,
            parallel=self.config.parallel_linters,
            logger=self._logger,
        )
        self.cache = ResultCache(self.scheduler, logger=self._logger)
        self.query = QueryAPI(self.cache, max_width=self.config.max_box_chars)

    def register(self, spec: LinterSpec) -> None:
        """Add a linter definition to the shared registry."""

        self.registry.register(spec)

    def linters_for(self, document: Document) -> tuple[LinterSpec, ...]:
        return self.registry.matching(document.filename)

    def get(self, document: Document) -> CacheEntry | None:
        return self.cache.get(document)

    def all_warnings(self, document: Document) -> WarningSet:
        return self.query.all_warnings(document)

    def warnings_for_line(self, document: Document, line: int) -> tuple[LintWarning, ...]:
        return self.query.warnings_for_line(document, line)

    def warnings_at(self, document: Document, line: int, col: int) -> tuple[LintWarning, ...]:
        return self.query.warnings_at(document, line, col)

    def hover_text(self, warnings: Iterable[LintWarning]) -> list[str]:
        return self.query.hover_text(warnings)

    def close(self, document: Document) -> None:
        """Release cached results for ``document``."""

        self.cache.evict(document)

    async def wait_idle(self) -> None:
        await self.scheduler.wait_idle()

    async def lint(self, document: Document) -> WarningSet:
        """Refresh ``document`` if needed and return its up-to-date warnings.

        Documents without a filename yield an empty set.
        """

        if not document.filename:
            return EMPTY_WARNINGS
        # A refresh already running for an older revision needs a second pass.
        for _ in range(_LINT_ATTEMPTS):
            entry = self.cache.get(document)
            if entry is not None and entry.is_current(document):
                return entry.warnings
            await self.scheduler.wait_idle()
        entry = self.cache.peek(document)
        return entry.warnings if entry is not None else EMPTY_WARNINGS


__all__ = ["LintAnnotator"]
