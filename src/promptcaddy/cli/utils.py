"""
Shared utilities for CLI commands.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from logging.handlers import RotatingFileHandler
from pathlib import Path

import click

from promptcaddy.config.app import LoggingSettings, PromptCaddyConfig
from promptcaddy.prompts.errors import PromptStoreError
from promptcaddy.prompts.store import PromptStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, settings: LoggingSettings | None = None) -> None:
    """
    Configure logging for the CLI.

    Logs always go to stderr because stdout carries the MCP transport
    and rendered prompt output.

    Args:
        verbose: If True, enable DEBUG level logging
        settings: Logging section of the loaded configuration
    """
    settings = settings or LoggingSettings()
    log_level = logging.DEBUG if verbose else getattr(logging, settings.level.upper())
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stderr,
    )

    if settings.file:
        root = logging.getLogger()
        log_file_path = Path(settings.file).expanduser()
        already_attached = any(
            isinstance(h, RotatingFileHandler)
            and Path(h.baseFilename) == log_file_path.resolve()
            for h in root.handlers
        )
        if not already_attached:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=settings.max_size_mb * 1024 * 1024,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
            root.addHandler(file_handler)

    # Silence noisy third-party loggers
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def load_store(config: PromptCaddyConfig) -> PromptStore:
    """Create a store for the configured directory and load it once.

    Raises:
        click.ClickException: If the prompt directory cannot be scanned
    """
    store = PromptStore(config.get_prompts_path(), extension=config.extension)
    try:
        store.reload()
    except PromptStoreError as e:
        raise click.ClickException(f"failed to load prompts: {e}") from e
    return store


def parse_param_pairs(pairs: Sequence[str]) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` option values.

    Raises:
        click.BadParameter: If an entry has no '=' or an empty key
    """
    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(
                f"expected KEY=VALUE, got '{pair}'", param_hint="'--param' / '-p'"
            )
        values[key] = value
    return values


def parse_extra_options(args: Sequence[str]) -> dict[str, str]:
    """Parse free-form ``--key value`` / ``--key=value`` arguments.

    A ``--key`` followed by another option (or nothing) is bound to "".

    Raises:
        click.UsageError: On a stray positional argument
    """
    values: dict[str, str] = {}
    items = list(args)
    i = 0
    while i < len(items):
        arg = items[i]
        if not arg.startswith("--") or arg == "--":
            raise click.UsageError(f"Unexpected argument: {arg}")

        name, sep, value = arg[2:].partition("=")
        if not name:
            raise click.UsageError(f"Unexpected argument: {arg}")
        if not sep:
            if i + 1 < len(items) and not items[i + 1].startswith("--"):
                value = items[i + 1]
                i += 1
            else:
                value = ""
        values[name] = value
        i += 1
    return values


def read_selection() -> str | None:
    """Read piped stdin for the ``selection`` binding.

    Returns:
        Full stdin content, or None when stdin is an interactive terminal
    """
    stdin = click.get_text_stream("stdin")
    try:
        if stdin.isatty():
            return None
    except ValueError:
        # Closed stream
        return None
    return stdin.read()


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]], padding: int = 2) -> str:
    """Align rows into left-justified columns separated by ``padding`` spaces.

    Headers are followed by an underline row of box-drawing characters.
    """
    underline = ["─" * len(h) for h in headers]
    all_rows = [list(headers), underline] + [list(r) for r in rows]
    widths = [max(len(row[col]) for row in all_rows) for col in range(len(headers))]

    lines = []
    for row in all_rows:
        cells = [cell.ljust(widths[col] + padding) for col, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)
