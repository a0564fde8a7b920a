"""
In-memory prompt store with atomic wholesale reload.

The store holds one generation of prompts: a mapping from prompt id to
Prompt built by a single scan of the prompt directory. ``reload()`` parses
every file into a fresh mapping without holding any lock, then swaps it in
under the exclusive write section, so readers only ever see a complete
generation (the old one or the new one).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from promptcaddy.utils.locks import ReadWriteLock

from .errors import PromptNotFoundError, PromptParseError, PromptStoreError
from .loader import load_prompt_file
from .models import Prompt

__all__ = ["PromptStore", "ReloadResult", "DEFAULT_EXTENSION"]

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".md"


@dataclass
class ReloadResult:
    """Outcome of one reload pass."""

    loaded: int = 0
    skipped: list[tuple[str, str]] = field(default_factory=list)
    """(path, reason) for every file left out of the new generation."""
    collisions: list[str] = field(default_factory=list)
    """Prompt ids declared by more than one file in this pass."""

    def to_dict(self) -> dict[str, object]:
        return {
            "loaded": self.loaded,
            "skipped": [{"path": p, "reason": r} for p, r in self.skipped],
            "collisions": list(self.collisions),
        }


class PromptStore:
    """
    Thread-safe store of the current prompt generation.

    One writer role (``reload``) and many reader roles (``get``, ``find``,
    ``list``) share the generation through a readers-writer lock. Reload
    passes are serialized against each other by a separate mutex.

    Example:
        >>> store = PromptStore("./prompts")
        >>> store.reload()
        ReloadResult(loaded=3, skipped=[], collisions=[])
        >>> store.get("greet").title
        'Greeting'
    """

    def __init__(self, directory: str | Path, extension: str = DEFAULT_EXTENSION):
        """Create an empty store bound to a directory.

        Args:
            directory: Root directory scanned (recursively) on reload
            extension: File suffix recognized as a prompt source
        """
        self._directory = Path(directory)
        self._extension = extension
        self._prompts: dict[str, Prompt] = {}
        self._lock = ReadWriteLock()
        self._reload_lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def extension(self) -> str:
        return self._extension

    def _scan(self) -> list[Path]:
        """Enumerate prompt source files in lexicographic path order.

        Raises:
            PromptStoreError: If the directory is missing or unreadable
        """
        root = self._directory
        if not root.exists():
            raise PromptStoreError(f"prompt directory does not exist: {root}")
        if not root.is_dir():
            raise PromptStoreError(f"prompt path is not a directory: {root}")

        try:
            candidates = [
                p for p in root.rglob(f"*{self._extension}") if p.suffix == self._extension
            ]
            files = [p for p in candidates if p.is_file()]
        except OSError as e:
            raise PromptStoreError(f"failed to scan prompt directory {root}: {e}") from e

        return sorted(files, key=lambda p: p.as_posix())

    def _build_generation(self, files: list[Path]) -> tuple[dict[str, Prompt], ReloadResult]:
        """Parse files into a complete replacement mapping. No locks held."""
        prompts: dict[str, Prompt] = {}
        result = ReloadResult()

        for path in files:
            try:
                prompt = load_prompt_file(path)
            except PromptParseError as e:
                logger.warning(f"Failed to load {path}: {e}")
                result.skipped.append((str(path), str(e)))
                continue

            if not prompt.id:
                logger.warning(f"Prompt in {path} has no id, skipping")
                result.skipped.append((str(path), "missing id"))
                continue

            previous = prompts.get(prompt.id)
            if previous is not None:
                logger.warning(
                    f"Prompt id '{prompt.id}' in {path} overrides {previous.source_path}"
                )
                if prompt.id not in result.collisions:
                    result.collisions.append(prompt.id)

            prompts[prompt.id] = prompt

        result.loaded = len(prompts)
        return prompts, result

    def reload(self) -> ReloadResult:
        """Rescan the directory and atomically replace the current generation.

        Files that fail to parse, or parse without an id, are logged and
        left out; they never abort the pass. On failure the previous
        generation stays in place.

        Returns:
            ReloadResult describing the new generation

        Raises:
            PromptStoreError: If the directory itself cannot be enumerated
        """
        with self._reload_lock:
            files = self._scan()
            prompts, result = self._build_generation(files)

            with self._lock.write_locked():
                self._prompts = prompts

        logger.debug(
            f"Loaded {result.loaded} prompts from {self._directory} "
            f"({len(result.skipped)} skipped)"
        )
        return result

    def get(self, prompt_id: str) -> Prompt:
        """Get a prompt by id.

        Raises:
            PromptNotFoundError: If no prompt has that id
        """
        with self._lock.read_locked():
            prompt = self._prompts.get(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(prompt_id)
        return prompt

    def find(self, prompt_id: str) -> Prompt | None:
        """Get a prompt by id, or None."""
        with self._lock.read_locked():
            return self._prompts.get(prompt_id)

    def list(self) -> list[Prompt]:
        """Snapshot of every prompt in the current generation (unordered)."""
        with self._lock.read_locked():
            return list(self._prompts.values())

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._prompts)

    def __contains__(self, prompt_id: object) -> bool:
        with self._lock.read_locked():
            return prompt_id in self._prompts
