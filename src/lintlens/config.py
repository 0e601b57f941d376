# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the lint annotator."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import LinterSpec
from .parsers import DEFAULT_BATCH_SIZE, DEFAULT_PLACEHOLDER, DEFAULT_TIMEOUT

CONFIG_FILENAME: Final[str] = "lintlens.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lintlens"

# Only the braced form is expanded so ``$FILENAME`` placeholders survive.
_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([^}]+)\}")


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class AnnotatorConfig(BaseModel):
    """Runtime settings for the lint annotator."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_box_chars: int = Field(default=80, gt=0)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)
    subprocess_timeout: float | None = Field(default=DEFAULT_TIMEOUT, gt=0)
    parallel_linters: bool = False
    placeholder: str = Field(default=DEFAULT_PLACEHOLDER, min_length=1)
    presets: list[str] = Field(default_factory=list)
    linters: list[LinterSpec] = Field(default_factory=list)


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda match: env.get(match.group(1), match.group(0)), value)
    if isinstance(value, Mapping):
        return {key: _expand_env_value(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(item, env) for item in value]
    return value


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration {path}: {exc}") from exc


def _pyproject_section(path: Path) -> Mapping[str, Any] | None:
    data = _read_toml(path)
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return None
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return None
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return section


def discover_config_payload(root: Path, explicit: Path | None = None) -> tuple[Mapping[str, Any], str]:
    """Return the raw configuration mapping and a description of its source.

    Lookup order: ``explicit`` file, ``lintlens.toml`` in ``root``, the
    ``[tool.lintlens]`` table of ``root/pyproject.toml``, built-in defaults.

    Raises:
        ConfigError: If an explicit file is missing or a file cannot be parsed.
    """

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Configuration file {explicit} does not exist")
        return _read_toml(explicit), str(explicit)
    candidate = root / CONFIG_FILENAME
    if candidate.is_file():
        return _read_toml(candidate), str(candidate)
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        section = _pyproject_section(pyproject)
        if section is not None:
            return section, f"{pyproject} [tool.lintlens]"
    return {}, "built-in defaults"


def build_config(payload: Mapping[str, Any], *, env: Mapping[str, str] | None = None) -> AnnotatorConfig:
    """Validate ``payload`` into an :class:`AnnotatorConfig`.

    Args:
        payload: Raw configuration mapping.
        env: Environment used for ``${VAR}`` expansion, defaults to ``os.environ``.

    Returns:
        AnnotatorConfig: Validated configuration.

    Raises:
        ConfigError: If the payload fails validation.
    """

    expanded = _expand_env_value(dict(payload), env if env is not None else os.environ)
    try:
        return AnnotatorConfig.model_validate(expanded)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def load_config(path: Path | None = None, *, root: Path | None = None) -> AnnotatorConfig:
    """Load configuration from ``path`` or discover it beneath ``root``."""

    payload, _source = discover_config_payload(root or Path.cwd(), path)
    return build_config(payload)


__all__ = [
    "CONFIG_FILENAME",
    "AnnotatorConfig",
    "ConfigError",
    "build_config",
    "discover_config_payload",
    "load_config",
]
