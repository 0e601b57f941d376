# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collaborator interfaces shared across the project."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import LintWarning, WarningSet


@runtime_checkable
class Document(Protocol):
    """Editor buffer that can be linted.

    ``document_id`` is issued once when the document is created and never
    reused. ``revision_id`` changes on every content-modifying edit and stays
    stable across non-modifying operations such as saving.
    """

    @property
    def document_id(self) -> Hashable:
        """Return the stable identity of the document."""

        raise NotImplementedError

    @property
    def filename(self) -> str | None:
        """Return the filename, ``None`` for unsaved buffers."""

        raise NotImplementedError

    @property
    def revision_id(self) -> Hashable:
        """Return the token identifying the current content version."""

        raise NotImplementedError

    @property
    def lines(self) -> Sequence[str]:
        """Return the document text split into lines without terminators."""

        raise NotImplementedError

    def get_line(self, line: int) -> str:
        """Return the 1-based ``line`` or an empty string when out of range."""

        raise NotImplementedError


@runtime_checkable
class RefreshLogger(Protocol):
    """Sink for diagnostics emitted by the refresh machinery."""

    def debug(self, message: str) -> None:
        """Record a debug message."""

        raise NotImplementedError

    def warn(self, message: str) -> None:
        """Record a warning message."""

        raise NotImplementedError


@runtime_checkable
class WarningProvider(Protocol):
    """Read-only warning lookups consumed by presentation layers."""

    def warnings_for_line(self, document: Document, line: int) -> tuple[LintWarning, ...]:
        """Return warnings reported on ``line`` of ``document``."""

        raise NotImplementedError

    def all_warnings(self, document: Document) -> WarningSet:
        """Return every warning currently known for ``document``."""

        raise NotImplementedError


class NullLogger:
    """Logger that discards every message."""

    def debug(self, message: str) -> None:
        del message

    def warn(self, message: str) -> None:
        del message


__all__ = [
    "Document",
    "NullLogger",
    "RefreshLogger",
    "WarningProvider",
]
