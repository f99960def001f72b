#!/usr/bin/env python3

import logging
import threading
from typing import Callable, Dict

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# Reading a template produces open/close events, only these count as changes
CHANGE_EVENTS = ('created', 'deleted', 'modified', 'moved')


class _ChangeHandler(FileSystemEventHandler):
    """Forwards change events for one watched directory to the watcher."""

    def __init__(self, watcher: 'TemplateWatcher'):
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent):
        if event.event_type in CHANGE_EVENTS:
            self.watcher.notify(event.src_path)


class TemplateWatcher:
    """Watches a set of directories and calls back once per burst of changes."""

    def __init__(self, on_change: Callable[[], None], debounce_ms: int = 250):
        """Initialize watcher.

        Args:
            on_change: Called from a timer thread after changes settle
            debounce_ms: Quiet period before on_change fires
        """
        self.on_change = on_change
        self.debounce_ms = debounce_ms
        self._observer = None
        self._handler = _ChangeHandler(self)
        self._watches: Dict[str, object] = {}
        self._timer = None
        self._stopped = False
        self._lock = threading.Lock()

    @property
    def paths(self):
        """Directories currently watched."""
        return list(self._watches)

    def _ensure_started(self):
        with self._lock:
            if self._stopped:
                return None
            if self._observer is None:
                self._observer = Observer()
                self._observer.daemon = True
                self._observer.start()
            return self._observer

    def watch(self, path: str):
        """Watch a single directory, non-recursively."""
        if path in self._watches:
            return
        observer = self._ensure_started()
        if observer is None:
            return
        logger.info(f" [WATCH]  {path}")
        self._watches[path] = observer.schedule(self._handler, path, recursive=False)

    def clear(self):
        """Remove every watch, the observer keeps running."""
        observer = self._observer
        if observer is not None:
            observer.unschedule_all()
        self._watches.clear()

    def notify(self, path: str):
        """Record a change and (re)start the debounce timer."""
        logger.debug(f"Change detected: {path}")
        with self._lock:
            if self._stopped:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_ms / 1000, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self):
        with self._lock:
            self._timer = None
            if self._stopped:
                return
        try:
            self.on_change()
        except Exception as e:
            logger.error(f"Error handling template change: {e}", exc_info=True)

    def stop(self):
        """Stop watching and shut the observer down.

        A stopped watcher ignores later changes and watch requests, so a
        refresh that is already running cannot start a new observer.
        """
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join()
        self._watches.clear()
