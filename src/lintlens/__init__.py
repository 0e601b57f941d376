# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Background lint annotations for editor buffers."""

from __future__ import annotations

from importlib import metadata

from .annotator import LintAnnotator
from .config import AnnotatorConfig, ConfigError, load_config
from .document import TextDocument
from .models import CacheEntry, LintWarning, LinterSpec, WarningSet, WarningSetBuilder
from .text import wrap

__all__ = [
    "AnnotatorConfig",
    "CacheEntry",
    "ConfigError",
    "LintAnnotator",
    "LintWarning",
    "LinterSpec",
    "TextDocument",
    "WarningSet",
    "WarningSetBuilder",
    "__version__",
    "load_config",
    "wrap",
]

try:
    __version__ = metadata.version("lintlens")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
