# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous refresh tasks recomputing a document's warnings."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from .interfaces import Document, NullLogger, RefreshLogger
from .models import CacheEntry, LinterSpec, WarningSetBuilder
from .parsers import WarningParser
from .registry import LinterRegistry

if TYPE_CHECKING:
    from .cache import RefreshClaim, ResultCache


def absolute_path(filename: str | None) -> str:
    """Return the absolute form of ``filename`` (empty for unsaved buffers)."""

    if not filename:
        return ""
    return str(Path(filename).expanduser().resolve())


class RefreshScheduler:
    """Run one refresh task per stale document on the running event loop.

    A refresh snapshots the document's filename, path and revision when it
    starts, runs every applicable linter, builds a fresh warning set and
    publishes it to the cache in a single swap. Linters run one after another in
    registration order unless ``parallel`` is enabled, in which case their
    processes run concurrently but outputs are still parsed in registration
    order.
    """

    def __init__(
        self,
        registry: LinterRegistry,
        parser: WarningParser,
        *,
        parallel: bool = False,
        logger: RefreshLogger | None = None,
    ) -> None:
        """Initialise the scheduler.

        Args:
            registry: Source of linter definitions.
            parser: Executes linters and parses their output.
            parallel: Run a document's linters concurrently.
            logger: Optional sink for refresh diagnostics.
        """

        self._registry = registry
        self._parser = parser
        self._parallel = parallel
        self._logger = logger or NullLogger()
        self._tasks: set[asyncio.Task[None]] = set()
        self.scheduled = 0

    @property
    def in_flight(self) -> int:
        """Return the number of refresh tasks that have not finished."""

        return len(self._tasks)

    def schedule(self, document: Document, cache: ResultCache, claim: RefreshClaim) -> asyncio.Task[None]:
        """Start a background refresh of ``document`` publishing into ``cache``.

        Args:
            document: Document to lint.
            cache: Cache receiving the finished entry.
            claim: Refresh claim released once the task finishes.

        Returns:
            asyncio.Task[None]: The scheduled task.

        Raises:
            RuntimeError: If no event loop is running.
        """

        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._run(document, cache, claim),
            name=f"lintlens-refresh-{document.document_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.scheduled += 1
        self._logger.debug(f"scheduled refresh document={document.document_id} revision={document.revision_id}")
        return task

    async def wait_idle(self) -> None:
        """Wait until every scheduled refresh has finished."""

        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)

    async def refresh(self, document: Document) -> CacheEntry:
        """Compute a complete :class:`CacheEntry` for ``document``.

        A failing linter does not abort the batch; its output is still parsed
        on a best-effort basis and the remaining linters run.

        Args:
            document: Document to lint.

        Returns:
            CacheEntry: Entry tagged with the revision observed at start.
        """

        filename = document.filename
        path = absolute_path(filename)
        revision_id = document.revision_id
        linters = self._registry.matching(filename)
        builder = WarningSetBuilder()
        if self._parallel and len(linters) > 1:
            outputs = await asyncio.gather(*(self._parser.run(path, spec) for spec in linters))
            for spec, (raw_output, _success) in zip(linters, outputs):
                await self._parser.parse(raw_output, spec, builder)
        else:
            for spec in linters:
                await self._run_linter(path, spec, builder)
        warnings = builder.build()
        self._logger.debug(
            f"refreshed document={document.document_id} revision={revision_id} "
            f"linters={len(linters)} warnings={warnings.count}",
        )
        return CacheEntry(
            document_id=document.document_id,
            filename=filename,
            path=path,
            revision_id=revision_id,
            warnings=warnings,
        )

    async def _run_linter(self, path: str, spec: LinterSpec, builder: WarningSetBuilder) -> None:
        raw_output, _success = await self._parser.run(path, spec)
        await self._parser.parse(raw_output, spec, builder)

    async def _run(self, document: Document, cache: ResultCache, claim: RefreshClaim) -> None:
        with claim:
            try:
                entry = await self.refresh(document)
            except Exception as exc:  # noqa: BLE001 - refresh failures must not reach queries
                self._logger.warn(f"Lint refresh failed for {document.filename}: {exc}")
                return
            cache.publish(entry)


__all__ = ["RefreshScheduler", "absolute_path"]
