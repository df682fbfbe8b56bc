"""Filesystem watching for the development server.

Watches the slide store, an optional templates directory and the project
config file with a watchdog ``Observer``.  Raw events arrive on the
observer thread and are handed to the event loop, where a
``PathDebouncer`` coalesces them before ``ChangeNotifier`` broadcasts.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from slidef.config import settings
from slidef.live.debounce import PathDebouncer
from slidef.live.notifier import ChangeNotifier
from slidef.models.events import ChangeKind

logger = logging.getLogger(__name__)


class _ForwardingHandler(FileSystemEventHandler):
    """Maps watchdog file events onto change kinds."""

    def __init__(self, watcher: ChangeWatcher) -> None:
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.post(event.src_path, ChangeKind.ADDED)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.post(event.src_path, ChangeKind.CHANGED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            self._watcher.forget(event.src_path)
        else:
            self._watcher.post(event.src_path, ChangeKind.REMOVED)

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.post_move(event.src_path, event.dest_path)


class ChangeWatcher:
    """Watches project paths and feeds stabilized changes to a notifier.

    Parameters
    ----------
    project_root:
        Reported paths are relative to this directory.
    roots:
        Directories watched recursively.  Missing ones are skipped.
    config_file:
        A single file watched on its own.
    notifier:
        Receives every coalesced change.
    stability_window:
        Debounce window in seconds.
    """

    def __init__(
        self,
        project_root: Path | str,
        roots: Iterable[Path | str],
        config_file: Path | str,
        notifier: ChangeNotifier,
        *,
        stability_window: float | None = None,
    ) -> None:
        self._project_root = Path(project_root).resolve()
        self._roots = [Path(r).resolve() for r in roots]
        self._config_file = Path(config_file).resolve()
        self._notifier = notifier
        self._window = (
            settings.stability_window if stability_window is None else stability_window
        )
        self.handler = _ForwardingHandler(self)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._debouncer: PathDebouncer | None = None
        self._observer: Observer | None = None
        # Files seen on disk; decides whether a rename replaces or adds.
        self._known: set[Path] = set()

    @property
    def debouncer(self) -> PathDebouncer | None:
        return self._debouncer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """Bind to *loop* without starting the observer thread."""
        self._loop = loop
        self._debouncer = PathDebouncer(
            self._window, self._notifier.notify_change, loop=loop
        )

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Attach to the loop and start observing."""
        self.attach(loop or asyncio.get_running_loop())
        self._known = self._scan()

        observer = Observer()
        for root in self._roots:
            if root.is_dir():
                observer.schedule(self.handler, str(root), recursive=True)
                logger.debug("Watching %s", root)
            else:
                logger.warning("Not watching missing directory %s", root)
        if self._config_file.parent.is_dir():
            observer.schedule(
                self.handler, str(self._config_file.parent), recursive=False
            )
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        if self._debouncer is not None:
            self._debouncer.cancel_all()

    def _scan(self) -> set[Path]:
        known = {
            path
            for root in self._roots
            if root.is_dir()
            for path in root.rglob("*")
            if path.is_file()
        }
        if self._config_file.is_file():
            known.add(self._config_file)
        return known

    # ------------------------------------------------------------------
    # Event intake
    # ------------------------------------------------------------------

    def accepts(self, path: Path) -> bool:
        """Whether a raw event path should trigger a reload."""
        if path == self._config_file:
            return True
        for root in self._roots:
            if path.is_relative_to(root):
                return not any(
                    part.startswith(".") for part in path.relative_to(root).parts
                )
        return False

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self._project_root).as_posix()
        except ValueError:
            return path.as_posix()

    def forget(self, raw_dir: str | bytes) -> None:
        """Drop known files under a deleted directory."""
        directory = Path(os.fsdecode(raw_dir))
        self._known = {p for p in self._known if not p.is_relative_to(directory)}

    def post_move(self, src_path: str | bytes, dest_path: str | bytes) -> None:
        """Forward a rename as a removal of the source plus a destination event.

        Renaming onto an existing file (an atomic replace) changes that
        file; renaming onto a new name adds it.
        """
        dest = Path(os.fsdecode(dest_path))
        kind = ChangeKind.CHANGED if dest in self._known else ChangeKind.ADDED
        self.post(src_path, ChangeKind.REMOVED)
        self.post(dest_path, kind)

    def post(self, raw_path: str | bytes, kind: ChangeKind) -> None:
        """Forward a raw event to the loop.  Safe to call from any thread."""
        path = Path(os.fsdecode(raw_path))
        if kind is ChangeKind.REMOVED:
            self._known.discard(path)
        else:
            self._known.add(path)

        if self._loop is None or self._debouncer is None:
            return
        if not self.accepts(path):
            return
        self._loop.call_soon_threadsafe(
            self._debouncer.touch, self.relative(path), kind
        )
