# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer

from ..annotator import LintAnnotator
from ..config import ConfigError, build_config, discover_config_payload
from ..document import TextDocument
from ..models import WarningSet
from ..presets import BUILTIN_PRESETS
from ..text import wrap
from .shared import CLIError, CLILogger, build_cli_logger

app = typer.Typer(
    name="lintlens",
    help="Run configured linters over files and show line-addressed warnings.",
    no_args_is_help=True,
    add_completion=False,
)

FilesArg = Annotated[
    list[Path],
    typer.Argument(exists=True, dir_okay=False, readable=True, help="Files to lint."),
]
ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", "-c", dir_okay=False, help="Explicit lintlens TOML file."),
]
PresetOpt = Annotated[
    list[str] | None,
    typer.Option("--preset", "-p", help="Enable a built-in linter preset (repeatable, 'all' for every preset)."),
]
EmojiOpt = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Decorate messages with emoji.")]
ColorOpt = Annotated[bool, typer.Option("--color/--no-color", help="Colourise terminal output.")]
DebugOpt = Annotated[bool, typer.Option("--debug", help="Print refresh and subprocess details.")]


def _build_annotator(
    config_path: Path | None,
    *,
    presets: Sequence[str],
    max_width: int | None,
    logger: CLILogger,
) -> LintAnnotator:
    """Load configuration and return an annotator for the current directory.

    Raises:
        CLIError: If the configuration is invalid.
    """

    try:
        payload, source = discover_config_payload(Path.cwd(), config_path)
        config = build_config(payload)
        if presets:
            config.presets = [*config.presets, *presets]
        if max_width is not None:
            config.max_box_chars = max_width
        logger.debug(f"loaded config source={source!r} linters={len(config.linters)} presets={config.presets}")
        return LintAnnotator(config, logger=logger)
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc
    except ValueError as exc:
        raise CLIError(f"Invalid option: {exc}") from exc


def _open_documents(files: Sequence[Path]) -> list[TextDocument]:
    documents: list[TextDocument] = []
    for path in files:
        try:
            documents.append(TextDocument.open(path))
        except (OSError, UnicodeDecodeError) as exc:
            raise CLIError(f"Unable to read {path}: {exc}") from exc
    return documents


async def _lint_all(annotator: LintAnnotator, documents: Sequence[TextDocument]) -> list[WarningSet]:
    # Prime every document first so refreshes for different files overlap.
    for document in documents:
        annotator.get(document)
    return [await annotator.lint(document) for document in documents]


def _render(document: TextDocument, warnings: WarningSet, *, max_width: int, logger: CLILogger) -> None:
    for line in sorted(warnings):
        for warning in warnings[line]:
            source = f" [{warning.linter}]" if warning.linter else ""
            logger.echo(f"{document.filename}:{line}:{warning.col}:{source}")
            for text_line in wrap(warning.message, max_width):
                logger.echo(f"    {text_line}")


@app.command("check")
def check(
    files: FilesArg,
    config: ConfigOpt = None,
    preset: PresetOpt = None,
    max_width: Annotated[
        int | None,
        typer.Option("--max-width", min=1, help="Wrap messages to this many characters."),
    ] = None,
    emoji: EmojiOpt = True,
    color: ColorOpt = True,
    debug: DebugOpt = False,
) -> None:
    """Lint FILES and print their warnings grouped by line."""

    logger = build_cli_logger(emoji=emoji, debug=debug, no_color=not color)
    try:
        annotator = _build_annotator(config, presets=preset or [], max_width=max_width, logger=logger)
        documents = _open_documents(files)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    results = asyncio.run(_lint_all(annotator, documents))
    total = 0
    for document, warnings in zip(documents, results):
        if not annotator.linters_for(document):
            logger.warn(f"No linters apply to {document.filename}")
            continue
        _render(document, warnings, max_width=annotator.config.max_box_chars, logger=logger)
        total += warnings.count
    if total:
        logger.fail(f"{total} warning(s) across {len(documents)} file(s)")
        raise typer.Exit(code=1)
    logger.ok(f"No warnings in {len(documents)} file(s)")


@app.command("linters")
def linters(
    files: FilesArg,
    config: ConfigOpt = None,
    preset: PresetOpt = None,
    emoji: EmojiOpt = True,
    color: ColorOpt = True,
) -> None:
    """List the linters that apply to each of FILES."""

    logger = build_cli_logger(emoji=emoji, no_color=not color)
    try:
        annotator = _build_annotator(config, presets=preset or [], max_width=None, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    for path in files:
        names = [spec.name for spec in annotator.registry.matching(str(path))]
        logger.echo(f"{path}: {', '.join(names) if names else '-'}")


@app.command("presets")
def presets() -> None:
    """List the built-in linter presets."""

    for name, spec in BUILTIN_PRESETS.items():
        typer.echo(f"{name}: {spec.command}")


__all__ = ["app"]
