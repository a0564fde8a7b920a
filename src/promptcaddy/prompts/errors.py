"""Exceptions raised while loading, storing, rendering and watching prompts."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "PromptError",
    "PromptParseError",
    "PromptStoreError",
    "PromptNotFoundError",
    "PromptRenderError",
    "MissingParameterError",
    "WatcherError",
]


class PromptError(Exception):
    """Base class for all prompt errors."""


class PromptParseError(PromptError):
    """A single prompt file could not be parsed."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path else None
        super().__init__(f"{message}" + (f": {path}" if path else ""))


class PromptStoreError(PromptError):
    """The prompt directory itself could not be scanned."""


class PromptNotFoundError(PromptError):
    """No prompt with the requested id exists in the current generation."""

    def __init__(self, prompt_id: str):
        self.prompt_id = prompt_id
        super().__init__(f"prompt not found: {prompt_id}")


class PromptRenderError(PromptError):
    """A prompt could not be rendered with the supplied bindings."""


class MissingParameterError(PromptRenderError):
    """A required parameter had no binding."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"required parameter missing: {parameter}")


class WatcherError(PromptError):
    """The prompt directory could not be watched."""
