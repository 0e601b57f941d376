# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-document warning cache with staleness checks and refresh coordination.

Entries are keyed by each document's stable ``document_id``. The cache never
stores the document itself, so closing or dropping a document lets both the
document and its entry be reclaimed: :meth:`ResultCache.evict` is the explicit
close hook, and a ``weakref.finalize`` callback performs the same eviction
when a weak-referenceable document is garbage collected.
"""

from __future__ import annotations

import weakref
from collections.abc import Hashable
from typing import TYPE_CHECKING

from .interfaces import Document, NullLogger, RefreshLogger
from .models import CacheEntry

if TYPE_CHECKING:
    from .scheduler import RefreshScheduler


class RefreshClaim:
    """Exclusive right to refresh one document.

    The claim is acquired on construction and released when the ``with`` block
    owning it exits, whether the refresh succeeded or failed.
    """

    __slots__ = ("_guard", "_released", "document_id")

    def __init__(self, guard: set[Hashable], document_id: Hashable) -> None:
        if document_id in guard:
            raise RuntimeError(f"refresh already in progress for document {document_id!r}")
        guard.add(document_id)
        self._guard = guard
        self._released = False
        self.document_id = document_id

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Clear the in-progress marker; repeated calls are no-ops."""

        if not self._released:
            self._guard.discard(self.document_id)
            self._released = True

    def __enter__(self) -> RefreshClaim:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class ResultCache:
    """Store the latest :class:`CacheEntry` per document.

    At most one refresh per document is in flight: :meth:`get` only schedules a
    refresh when it can acquire that document's :class:`RefreshClaim`.
    """

    def __init__(self, scheduler: RefreshScheduler, *, logger: RefreshLogger | None = None) -> None:
        """Initialise an empty cache bound to ``scheduler``.

        Args:
            scheduler: Component that runs refreshes and publishes results.
            logger: Optional sink for scheduling problems.
        """

        self._scheduler = scheduler
        self._logger = logger or NullLogger()
        self._entries: dict[Hashable, CacheEntry] = {}
        self._refreshing: set[Hashable] = set()
        self._live: dict[Hashable, weakref.finalize | None] = {}

    def get(self, document: Document) -> CacheEntry | None:
        """Return the current, possibly stale, entry for ``document`` without blocking.

        When no entry exists or its revision differs from the document's, and
        no refresh is already running, a refresh is scheduled before the old
        entry (or ``None`` on the first query) is returned. Documents without a
        filename never trigger a refresh.

        Args:
            document: Document being queried.

        Returns:
            CacheEntry | None: Latest published entry, if any.
        """

        if not document.filename:
            return None
        document_id = document.document_id
        self._track(document)
        entry = self._entries.get(document_id)
        if (entry is None or not entry.is_current(document)) and document_id not in self._refreshing:
            self._trigger(document)
        return entry

    def peek(self, document: Document) -> CacheEntry | None:
        """Return the stored entry for ``document`` without scheduling anything."""

        return self._entries.get(document.document_id)

    def is_refreshing(self, document: Document) -> bool:
        """Return ``True`` while a refresh for ``document`` is in flight."""

        return document.document_id in self._refreshing

    def publish(self, entry: CacheEntry) -> bool:
        """Replace the stored entry for ``entry.document_id``.

        The last published refresh wins. Entries for documents that were
        evicted while their refresh was running are discarded.

        Args:
            entry: Fully built entry to install.

        Returns:
            bool: ``True`` when the entry was stored.
        """

        if entry.document_id not in self._live:
            self._logger.debug(f"discarded entry document={entry.document_id!r} reason=evicted")
            return False
        self._entries[entry.document_id] = entry
        return True

    def evict(self, document: Document) -> None:
        """Forget ``document``; call this when the document is closed."""

        finalizer = self._live.get(document.document_id)
        if finalizer is not None:
            finalizer.detach()
        self._forget(document.document_id)

    def clear(self) -> None:
        """Drop every entry and stop tracking all documents."""

        for finalizer in self._live.values():
            if finalizer is not None:
                finalizer.detach()
        self._live.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, document: object) -> bool:
        return isinstance(document, Document) and document.document_id in self._entries

    def _trigger(self, document: Document) -> None:
        claim = RefreshClaim(self._refreshing, document.document_id)
        try:
            self._scheduler.schedule(document, self, claim)
        except RuntimeError as exc:
            claim.release()
            self._logger.warn(f"Could not schedule lint refresh for {document.filename}: {exc}")

    def _track(self, document: Document) -> None:
        document_id = document.document_id
        if document_id in self._live:
            return
        try:
            finalizer: weakref.finalize | None = weakref.finalize(document, self._forget, document_id)
        except TypeError:
            finalizer = None
        self._live[document_id] = finalizer

    def _forget(self, document_id: Hashable) -> None:
        self._live.pop(document_id, None)
        self._entries.pop(document_id, None)


__all__ = ["RefreshClaim", "ResultCache"]
