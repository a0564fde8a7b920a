"""
Prompt file loading.

A prompt file is UTF-8 Markdown with an optional YAML frontmatter block:

    ---
    id: greet
    title: Greeting
    parameters:
      - name: name
        required: true
    ---
    Hello {{name}}!

Everything after the closing ``---`` line is the template body, kept verbatim.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from .errors import PromptParseError
from .models import Prompt

__all__ = ["parse_frontmatter", "load_prompt_file"]

logger = logging.getLogger(__name__)

_OPEN_PATTERN = re.compile(r"\A---[ \t]*\r?\n")
_FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def parse_frontmatter(content: str, path: str | Path | None = None) -> tuple[dict[str, Any], str]:
    """Split raw file content into frontmatter metadata and body.

    Args:
        content: Raw file content
        path: Source path, only used in error messages

    Returns:
        Tuple of (frontmatter dict, body content). Content without a
        frontmatter block yields an empty dict and the content unchanged.

    Raises:
        PromptParseError: If the block is unterminated, is not valid YAML,
            or does not hold a mapping
    """
    if not _OPEN_PATTERN.match(content):
        return {}, content

    match = _FRONTMATTER_PATTERN.match(content)
    if not match:
        raise PromptParseError("unterminated frontmatter block", path)

    try:
        frontmatter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise PromptParseError(f"invalid frontmatter YAML ({e})", path) from e

    if frontmatter is None:
        frontmatter = {}
    if not isinstance(frontmatter, dict):
        raise PromptParseError(
            f"frontmatter must be a mapping, got {type(frontmatter).__name__}", path
        )

    return frontmatter, content[match.end() :]


def load_prompt_file(path: str | Path) -> Prompt:
    """Load a single prompt file.

    Args:
        path: Path to the Markdown file

    Returns:
        Parsed Prompt (its id may be empty; callers decide whether to admit it)

    Raises:
        PromptParseError: If the file cannot be read, decoded or parsed
    """
    path = Path(path)
    try:
        # newline="" keeps the body's line endings untouched
        with open(path, encoding="utf-8", newline="") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise PromptParseError(f"file is not valid UTF-8 ({e.reason})", path) from e
    except OSError as e:
        raise PromptParseError(f"failed to read file ({e.strerror or e})", path) from e

    frontmatter, body = parse_frontmatter(content, path)
    prompt = Prompt.from_frontmatter(frontmatter, body, source_path=str(path))
    logger.debug(f"Parsed prompt '{prompt.id}' from {path}")
    return prompt
