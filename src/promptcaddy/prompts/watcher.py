"""
Prompt directory watcher.

Observes the store's directory with the watchdog library and reloads the
store whenever a prompt file is created, written, removed or renamed.
Events are handled one at a time on the observer's dispatch thread, so
reload passes never overlap. There is no debouncing: every qualifying
event triggers its own full reload.
"""

from __future__ import annotations

import logging
import os

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from .errors import PromptStoreError, WatcherError
from .store import PromptStore

__all__ = ["PromptWatcher", "PromptReloadHandler"]

logger = logging.getLogger(__name__)

RELOAD_EVENT_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}
)


def _as_str(path: str | bytes) -> str:
    return os.fsdecode(path)


class PromptReloadHandler(FileSystemEventHandler):
    """Reloads a PromptStore on qualifying filesystem events."""

    def __init__(self, store: PromptStore):
        super().__init__()
        self.store = store

    def is_relevant(self, event: FileSystemEvent) -> bool:
        """Whether an event should trigger a reload."""
        if event.is_directory or event.event_type not in RELOAD_EVENT_TYPES:
            return False

        extension = self.store.extension
        paths = [_as_str(event.src_path)]
        if event.event_type == EVENT_TYPE_MOVED:
            paths.append(_as_str(event.dest_path))
        return any(os.path.splitext(p)[1] == extension for p in paths if p)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if not self.is_relevant(event):
            return

        changed = _as_str(event.dest_path or event.src_path)
        try:
            result = self.store.reload()
        except PromptStoreError as e:
            logger.error(f"Error reloading prompts: {e}")
            return

        logger.info(f"Reloaded {result.loaded} prompts after change to: {changed}")


class PromptWatcher:
    """
    Watch session bound to one PromptStore.

    Started once, stopped once; a stopped watcher cannot be restarted.

    Example:
        >>> with PromptWatcher(store):
        ...     serve_forever()
    """

    def __init__(self, store: PromptStore, recursive: bool = True):
        """Initialize the watcher.

        Args:
            store: Store to reload on changes (its directory is watched)
            recursive: Watch subdirectories too
        """
        self.store = store
        self.recursive = recursive
        self.handler = PromptReloadHandler(store)
        self._observer: BaseObserver | None = None
        self._started = False
        self._stopped = False

    @property
    def is_running(self) -> bool:
        return self._started and not self._stopped

    def start(self) -> None:
        """Begin watching the store's directory in a background thread.

        Raises:
            RuntimeError: If the watcher was already started or stopped
            WatcherError: If the directory cannot be watched
        """
        if self._stopped:
            raise RuntimeError("PromptWatcher cannot be restarted after stop()")
        if self._started:
            raise RuntimeError("PromptWatcher already started")

        directory = self.store.directory
        if not directory.is_dir():
            raise WatcherError(f"failed to watch directory: {directory} is not a directory")

        observer = Observer()
        observer.daemon = True
        try:
            observer.schedule(self.handler, str(directory), recursive=self.recursive)
            observer.start()
        except OSError as e:
            raise WatcherError(f"failed to watch directory {directory}: {e}") from e

        self._observer = observer
        self._started = True
        logger.debug(f"Watching {directory} for prompt changes (recursive={self.recursive})")

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop watching and release the watch handle. Safe to call twice."""
        if self._stopped:
            return
        self._stopped = True

        observer = self._observer
        self._observer = None
        if observer is None:
            return

        observer.stop()
        if observer.is_alive():
            observer.join(timeout)
        logger.debug(f"Stopped watching {self.store.directory}")

    def __enter__(self) -> PromptWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
