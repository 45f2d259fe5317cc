"""Native watch source built on the watchdog library."""

import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import (
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MOVED,
    PatternMatchingEventHandler,
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
)

from .config import DEFAULT_BUFFER_SIZE, MIN_BUFFER_SIZE
from .exceptions import RootNotFoundError
from .models import NotifyFilters, RawFSEvent
from .paths import strip_trailing_separators


logger = logging.getLogger(__name__)


def _patterns_for(name_filter: Optional[str]):
    if not name_filter or name_filter in ("*", "*.*"):
        return None
    return [name_filter]


class FSEventHandler(PatternMatchingEventHandler):
    """Handler that converts watchdog events to RawFSEvent."""

    def __init__(
        self,
        callback: Callable[[RawFSEvent], None],
        name_filter: Optional[str] = "*",
        notify_filter: NotifyFilters = NotifyFilters.default(),
        root: Optional[str] = None,
    ):
        super().__init__(patterns=_patterns_for(name_filter))
        self.callback = callback
        self.notify_filter = notify_filter
        self.root = strip_trailing_separators(root) if root else None

    def _accepts_name_change(self, is_directory: bool) -> bool:
        required = NotifyFilters.DIRECTORY_NAME if is_directory else NotifyFilters.FILE_NAME
        return bool(self.notify_filter & required)

    def _emit(self, event_type: str, src_path: Path, dest_path: Optional[Path] = None, is_directory: bool = False):
        """Emit a RawFSEvent to the callback."""
        raw_event = RawFSEvent(
            event_type=event_type,
            src_path=src_path,
            dest_path=dest_path,
            is_directory=is_directory,
            timestamp=time.time(),
        )
        self.callback(raw_event)

    def _emit_error(self, error: BaseException) -> None:
        self.callback(RawFSEvent(event_type="error", error=error, timestamp=time.time()))

    def _is_root(self, src_path) -> bool:
        return self.root is not None and strip_trailing_separators(os.fsdecode(src_path)) == self.root

    def dispatch(self, event):
        # Sub-events watchdog synthesizes for directory contents are
        # rebuilt by the observer from its own index.
        if getattr(event, "is_synthetic", False):
            return
        # Checked before pattern matching: the root's own name need not match.
        if event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED) and self._is_root(event.src_path):
            logger.error(f"Watched directory was removed: {self.root}")
            self._emit_error(RootNotFoundError(f"Watched directory was removed: {self.root}"))
            return
        super().dispatch(event)

    def on_created(self, event):
        is_dir = isinstance(event, DirCreatedEvent)
        if self._accepts_name_change(is_dir):
            self._emit("created", Path(os.fsdecode(event.src_path)), is_directory=is_dir)

    def on_deleted(self, event):
        is_dir = isinstance(event, DirDeletedEvent)
        if self._accepts_name_change(is_dir):
            self._emit("deleted", Path(os.fsdecode(event.src_path)), is_directory=is_dir)

    def on_modified(self, event):
        is_dir = isinstance(event, DirModifiedEvent)
        if self.notify_filter & NotifyFilters.content_changes():
            self._emit("modified", Path(os.fsdecode(event.src_path)), is_directory=is_dir)

    def on_moved(self, event):
        is_dir = isinstance(event, DirMovedEvent)
        if self._accepts_name_change(is_dir):
            self._emit(
                "moved",
                Path(os.fsdecode(event.src_path)),
                Path(os.fsdecode(event.dest_path)),
                is_directory=is_dir,
            )


class ReportingObserver(Observer):
    """
    watchdog observer that reports emitter threads which die on their own.

    An emitter whose read fails (an inotify error, for example) exits
    without being stopped and nothing is delivered after that. The check
    runs on the observer's dispatch loop, so it adds no thread.
    """

    def __init__(self, on_error: Callable[[BaseException], None], **kwargs):
        super().__init__(**kwargs)
        self.on_error = on_error
        self._reported = set()

    def dispatch_events(self, event_queue):
        self.check_emitters()
        super().dispatch_events(event_queue)

    def check_emitters(self) -> None:
        for emitter in self.emitters:
            if emitter.is_alive() or emitter.stopped_event.is_set() or emitter in self._reported:
                continue
            self._reported.add(emitter)
            path = emitter.watch.path
            logger.error(f"Native watch on {path} stopped unexpectedly")
            self.on_error(OSError(f"Native watch on {path} stopped unexpectedly"))


class NativeWatchSource:
    """
    Watches a single directory and forwards raw events to a callback.

    Wraps a watchdog observer thread. The thread only runs while
    ``enabled`` is True; changing the path, recursion flag, name
    filter or notify filter while enabled reschedules the watch.
    """

    def __init__(
        self,
        event_callback: Callable[[RawFSEvent], None],
        path: Optional[str] = None,
        name_filter: str = "*",
        include_subdirectories: bool = False,
        internal_buffer_size: int = DEFAULT_BUFFER_SIZE,
        notify_filter: NotifyFilters = NotifyFilters.default(),
    ):
        """
        Initialize the watch source.

        Args:
            event_callback: Callback function for raw filesystem events
            path: Directory to watch
            name_filter: Glob pattern entry names must match
            include_subdirectories: Whether to watch below the root
            internal_buffer_size: Buffer size hint in bytes
            notify_filter: Which kinds of change to report
        """
        self.event_callback = event_callback
        self._path = path
        self._name_filter = name_filter
        self._include_subdirectories = include_subdirectories
        self._internal_buffer_size = max(internal_buffer_size, MIN_BUFFER_SIZE)
        self._notify_filter = notify_filter
        self._observer: Optional[Observer] = None
        self._lock = threading.RLock()

    def _deliver(self, raw_event: RawFSEvent) -> None:
        if self.enabled:
            self.event_callback(raw_event)

    def report_error(self, error: BaseException) -> None:
        """Forward a native watch failure on the error channel."""
        self._deliver(RawFSEvent(event_type="error", error=error, timestamp=time.time()))

    def _start(self) -> None:
        if not self._path or not os.path.isdir(self._path):
            raise RootNotFoundError(f"Cannot watch missing directory: {self._path}")

        observer = ReportingObserver(self.report_error)
        handler = FSEventHandler(self._deliver, self._name_filter, self._notify_filter, root=self._path)
        observer.schedule(
            handler,
            self._path,
            recursive=self._include_subdirectories,
        )
        observer.start()
        self._observer = observer
        logger.info(f"Started watching {self._path} (recursive={self._include_subdirectories})")

    def _stop(self) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        if observer.is_alive() and threading.current_thread() is not observer:
            observer.join(timeout=5.0)
        logger.info(f"Stopped watching {self._path}")

    def _restart_if_enabled(self) -> None:
        if self._observer is not None:
            self._stop()
            self._start()

    @property
    def enabled(self) -> bool:
        return self._observer is not None

    @enabled.setter
    def enabled(self, value: bool) -> None:
        with self._lock:
            if value and self._observer is None:
                self._start()
            elif not value and self._observer is not None:
                self._stop()

    @property
    def path(self) -> Optional[str]:
        return self._path

    @path.setter
    def path(self, value: Optional[str]) -> None:
        with self._lock:
            self._path = value
            self._restart_if_enabled()

    @property
    def include_subdirectories(self) -> bool:
        return self._include_subdirectories

    @include_subdirectories.setter
    def include_subdirectories(self, value: bool) -> None:
        with self._lock:
            self._include_subdirectories = value
            self._restart_if_enabled()

    @property
    def name_filter(self) -> str:
        return self._name_filter

    @name_filter.setter
    def name_filter(self, value: str) -> None:
        with self._lock:
            self._name_filter = value
            self._restart_if_enabled()

    @property
    def notify_filter(self) -> NotifyFilters:
        return self._notify_filter

    @notify_filter.setter
    def notify_filter(self, value: NotifyFilters) -> None:
        with self._lock:
            self._notify_filter = value
            self._restart_if_enabled()

    @property
    def internal_buffer_size(self) -> int:
        return self._internal_buffer_size

    @internal_buffer_size.setter
    def internal_buffer_size(self, value: int) -> None:
        self._internal_buffer_size = max(value, MIN_BUFFER_SIZE)

    def close(self) -> None:
        """Stop the observer thread and release its watches."""
        with self._lock:
            self._stop()
