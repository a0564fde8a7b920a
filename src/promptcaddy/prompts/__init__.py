"""
Prompt loading, storage, rendering and hot reload.

Provides:
- YAML frontmatter parsing of Markdown prompt files
- An in-memory store with atomic wholesale reload
- Literal ``{{name}}`` placeholder rendering
- A directory watcher that reloads the store on change
"""

from .errors import (
    MissingParameterError,
    PromptError,
    PromptNotFoundError,
    PromptParseError,
    PromptRenderError,
    PromptStoreError,
    WatcherError,
)
from .loader import load_prompt_file, parse_frontmatter
from .models import ParameterSpec, Prompt
from .render import SELECTION_PARAMETER, placeholder, render_prompt
from .store import PromptStore, ReloadResult
from .watcher import PromptWatcher

__all__ = [
    "MissingParameterError",
    "ParameterSpec",
    "Prompt",
    "PromptError",
    "PromptNotFoundError",
    "PromptParseError",
    "PromptRenderError",
    "PromptStore",
    "PromptStoreError",
    "PromptWatcher",
    "ReloadResult",
    "SELECTION_PARAMETER",
    "WatcherError",
    "load_prompt_file",
    "parse_frontmatter",
    "placeholder",
    "render_prompt",
]
