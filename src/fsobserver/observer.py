"""Observer that adds filtering and subtree events on top of a native watch source."""

import logging
import os
import threading
from typing import Callable, Dict, Iterable, List, Optional, Union

from .classifier import EntryPredicate, EventFilter
from .config import ObserverConfig, normalize_extensions
from .diff import compute_deleted_descendants, compute_renamed_descendants
from .exceptions import ObserverClosedError, RootNotFoundError
from .fs_watcher import NativeWatchSource
from .index import EntryIndex
from .models import (
    ChangeType,
    EntryKind,
    ErrorEvent,
    FileSystemEvent,
    NotifyFilters,
    RawFSEvent,
    RenamedEvent,
    WaitForChangedResult,
)
from .paths import relative_path, strip_trailing_separators
from .scanner import enumerate_directories, enumerate_files


logger = logging.getLogger(__name__)

EventHandler = Callable[[Union[FileSystemEvent, ErrorEvent]], None]


def _normalize(path) -> str:
    return strip_trailing_separators(os.fspath(path))


class FileSystemObserver:
    """
    Watches a directory and delivers filtered, subtree-aware events.

    The native source reports a single event when a directory is
    created, deleted or renamed. The observer keeps an index of the
    files and directories under the root and synthesizes the matching
    events for every descendant, filtered by file extension and by an
    optional ``(kind, path)`` predicate.

    Each raw notification is handled under one lock, so the index and
    the emitted events stay consistent when notifications arrive on
    several threads. Subscribers run synchronously on the delivering
    thread while that lock is held.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        filter: Optional[str] = None,
        predicate: Optional[EntryPredicate] = None,
        file_extensions: Optional[Iterable[str]] = None,
        *,
        config: Optional[ObserverConfig] = None,
        include_subdirectories: Optional[bool] = None,
        raise_subdirectory_events: Optional[bool] = None,
    ):
        """
        Initialize the observer and build the initial index.

        Args:
            path: Directory to observe (overrides config.path)
            filter: Glob name filter forwarded to the native source
            predicate: Optional gate called with (kind, absolute path)
            file_extensions: Extensions files must have, ignoring case
            config: Observer configuration
            include_subdirectories: Overrides config.include_subdirectories
            raise_subdirectory_events: Overrides config.raise_subdirectory_events

        Raises:
            RootNotFoundError: If path is set but is not a directory
        """
        self.config = config or ObserverConfig()
        if path is not None:
            self.config.path = path
        if filter is not None:
            self.config.filter = filter
        if file_extensions is not None:
            self.config.file_extensions = list(file_extensions)
        if include_subdirectories is not None:
            self.config.include_subdirectories = include_subdirectories
        if raise_subdirectory_events is not None:
            self.config.raise_subdirectory_events = raise_subdirectory_events

        self._root = self._check_root(self.config.path)
        self._index = EntryIndex()
        self._filter = EventFilter(
            self._index,
            predicate,
            self.config.normalized_extensions(),
        )
        self._subscribers: Dict[ChangeType, List[EventHandler]] = {
            change_type: [] for change_type in ChangeType
        }
        self._lock = threading.RLock()
        self._closed = False

        self._source = NativeWatchSource(
            self.process,
            path=self._root,
            name_filter=self.config.filter,
            include_subdirectories=self.config.include_subdirectories,
            internal_buffer_size=self.config.internal_buffer_size,
            notify_filter=self.config.notify_filter,
        )
        self.reconfigure()

    @staticmethod
    def _check_root(path) -> Optional[str]:
        if path is None or not os.fspath(path).strip():
            return None
        path = os.fspath(path)
        root = _normalize(os.path.abspath(path))
        if not os.path.isdir(root):
            raise RootNotFoundError(f"Observed path is not a directory: {path}")
        return root

    def _ensure_open(self) -> None:
        if self._closed:
            raise ObserverClosedError("Observer has been closed")

    # Configuration

    @property
    def path(self) -> Optional[str]:
        return self._root

    @path.setter
    def path(self, value: Optional[str]) -> None:
        self._ensure_open()
        root = self._check_root(value)
        was_enabled = self._suspend_source()
        with self._lock:
            self._source.path = root
            self._root = root
            self.config.path = root
            self._rebuild()
        self._resume_source(was_enabled)

    @property
    def include_subdirectories(self) -> bool:
        return self.config.include_subdirectories

    @include_subdirectories.setter
    def include_subdirectories(self, value: bool) -> None:
        self._ensure_open()
        was_enabled = self._suspend_source()
        with self._lock:
            self._source.include_subdirectories = value
            self.config.include_subdirectories = value
            self._rebuild()
        self._resume_source(was_enabled)

    def _suspend_source(self) -> bool:
        # Stopping joins the watchdog thread, which may be waiting on the
        # lock, so it happens before the lock is taken.
        was_enabled = self._source.enabled
        self._source.enabled = False
        return was_enabled

    def _resume_source(self, was_enabled: bool) -> None:
        if was_enabled:
            self._source.enabled = True

    @property
    def raise_subdirectory_events(self) -> bool:
        return self.config.raise_subdirectory_events

    @raise_subdirectory_events.setter
    def raise_subdirectory_events(self, value: bool) -> None:
        with self._lock:
            self.config.raise_subdirectory_events = value

    @property
    def filter(self) -> str:
        return self._source.name_filter

    @filter.setter
    def filter(self, value: str) -> None:
        self._ensure_open()
        self._source.name_filter = value
        self.config.filter = value

    @property
    def notify_filter(self) -> NotifyFilters:
        return self._source.notify_filter

    @notify_filter.setter
    def notify_filter(self, value: NotifyFilters) -> None:
        self._ensure_open()
        self._source.notify_filter = value
        self.config.notify_filter = value

    @property
    def internal_buffer_size(self) -> int:
        return self._source.internal_buffer_size

    @internal_buffer_size.setter
    def internal_buffer_size(self, value: int) -> None:
        self._source.internal_buffer_size = value
        self.config.internal_buffer_size = self._source.internal_buffer_size

    @property
    def enabled(self) -> bool:
        return self._source.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        if value:
            self._ensure_open()
            if not self._source.enabled:
                # Entries may have changed while delivery was off.
                self._check_root(self._root)
                self.reconfigure()
        self._source.enabled = value

    @property
    def file_extensions(self):
        return self._filter.extensions

    @property
    def index(self) -> EntryIndex:
        """The entry index, for read-only diagnostics."""
        return self._index

    @property
    def _recursive(self) -> bool:
        return (
            self.config.include_subdirectories
            and self.config.raise_subdirectory_events
        )

    def reconfigure(self) -> None:
        """Clear the entry index and repopulate it from disk."""
        with self._lock:
            self._rebuild()

    def _rebuild(self) -> None:
        self._filter.extensions = normalize_extensions(self.config.file_extensions)
        self._index.rebuild(
            self._root,
            self.config.include_subdirectories,
            self._filter.extensions,
            onerror=self._on_walk_error,
        )

    # Subscription

    def subscribe(self, change_type: ChangeType, handler: EventHandler) -> None:
        """Register a handler; handlers run in registration order."""
        with self._lock:
            self._subscribers[change_type].append(handler)

    def unsubscribe(self, change_type: ChangeType, handler: EventHandler) -> bool:
        """
        Remove a previously registered handler.

        Returns:
            True if the handler was removed, False if it was not registered
        """
        with self._lock:
            try:
                self._subscribers[change_type].remove(handler)
            except ValueError:
                return False
            return True

    def _publish(self, event: Union[FileSystemEvent, ErrorEvent]) -> None:
        for handler in list(self._subscribers[event.change_type]):
            handler(event)

    def _raise(self, change_type: ChangeType, kind: EntryKind, path: str) -> None:
        if not self._filter.should_emit(kind, path):
            return
        self._publish(FileSystemEvent(
            change_type=change_type,
            kind=kind,
            root=self._root,
            name=relative_path(self._root, path),
        ))

    def _raise_renamed(self, kind: EntryKind, old_path: str, new_path: str) -> None:
        if not self._filter.should_emit(kind, old_path):
            return
        self._publish(RenamedEvent(
            change_type=ChangeType.RENAMED,
            kind=kind,
            root=self._root,
            name=relative_path(self._root, new_path),
            old_name=relative_path(self._root, old_path),
        ))

    def _on_walk_error(self, error: OSError) -> None:
        if isinstance(error, FileNotFoundError):
            logger.debug(f"Entry vanished during enumeration: {error}")
            return
        logger.warning(f"Enumeration failed: {error}")
        self._publish(ErrorEvent(error))

    # Notification routing

    def process(self, raw_event: RawFSEvent) -> None:
        """
        Handle one raw notification from the native source.

        Args:
            raw_event: The raw event to route
        """
        logger.debug(f"FileSystemObserver.process: {raw_event.event_type} - {raw_event.src_path}")

        with self._lock:
            if raw_event.event_type == "error":
                self._publish(ErrorEvent(raw_event.error))
                return
            if self._root is None or raw_event.src_path is None:
                return

            path = _normalize(raw_event.src_path)
            if path == self._root:
                return
            try:
                if raw_event.event_type == "modified":
                    self._handle_changed(path)
                elif raw_event.event_type == "created":
                    self._handle_created(path)
                elif raw_event.event_type == "deleted":
                    self._handle_deleted(path)
                elif raw_event.event_type == "moved" and raw_event.dest_path is not None:
                    self._handle_renamed(path, _normalize(raw_event.dest_path))
            except OSError as e:
                logger.exception(f"Failed to process {raw_event.event_type} for {path}")
                self._publish(ErrorEvent(e))

    def _handle_changed(self, path: str) -> None:
        kind = self._filter.classify(path)
        if kind is not None:
            self._raise(ChangeType.CHANGED, kind, path)

    def _handle_created(self, path: str) -> None:
        kind = self._filter.classify(path)
        if kind is None:
            return

        self._index.insert(kind, path)
        self._raise(ChangeType.CREATED, kind, path)
        if kind is EntryKind.DIRECTORY and self.config.include_subdirectories:
            self._expand_created_directory(path)

    def _add_created_files(self, directory: str, emit: bool) -> None:
        try:
            files = list(enumerate_files(directory, False, self._filter.extensions))
        except FileNotFoundError:
            logger.debug(f"Directory vanished before expansion: {directory}")
            return
        self._index.insert_all(EntryKind.FILE, files)
        if emit:
            for file in files:
                self._raise(ChangeType.CREATED, EntryKind.FILE, file)

    def _expand_created_directory(self, path: str) -> None:
        emit = self._recursive
        self._add_created_files(path, emit)

        # Shorter paths first, so parents are indexed before their children.
        subdirectories = sorted(
            enumerate_directories(path, True, onerror=self._on_walk_error),
            key=len,
        )
        for subdirectory in subdirectories:
            self._index.insert(EntryKind.DIRECTORY, subdirectory)
            if emit:
                self._raise(ChangeType.CREATED, EntryKind.DIRECTORY, subdirectory)
            self._add_created_files(subdirectory, emit)

        logger.debug(f"Expanded created directory {path}: {len(subdirectories)} subdirectories")

    def _handle_deleted(self, path: str) -> None:
        kind = self._filter.classify_deleted(path)
        if kind is None:
            logger.debug(f"Ignoring deleted event for unknown path: {path}")
            return

        self._index.remove(kind, path)
        self._raise(ChangeType.DELETED, kind, path)
        if kind is EntryKind.FILE:
            return

        if not self._recursive:
            self._index.remove_all(
                EntryKind.FILE,
                compute_deleted_descendants(self._index, EntryKind.FILE, path, True),
            )
            self._index.remove_all(
                EntryKind.DIRECTORY,
                compute_deleted_descendants(self._index, EntryKind.DIRECTORY, path, True),
            )
            return

        deleted_dirs = compute_deleted_descendants(self._index, EntryKind.DIRECTORY, path, True)
        self._remove_child_files(path)
        for directory in deleted_dirs:
            self._index.remove(EntryKind.DIRECTORY, directory)
            self._raise(ChangeType.DELETED, EntryKind.DIRECTORY, directory)
            self._remove_child_files(directory)

        logger.debug(f"Deleted directory {path}: {len(deleted_dirs)} subdirectories")

    def _remove_child_files(self, directory: str) -> None:
        deleted_files = compute_deleted_descendants(self._index, EntryKind.FILE, directory, False)
        self._index.remove_all(EntryKind.FILE, deleted_files)
        for file in deleted_files:
            self._raise(ChangeType.DELETED, EntryKind.FILE, file)

    def _handle_renamed(self, old_path: str, new_path: str) -> None:
        kind = self._filter.classify_renamed(old_path, new_path)
        if kind is None:
            logger.debug(f"Ignoring rename of unknown path: {old_path}")
            return

        self._index.remove(kind, old_path)
        self._index.insert(kind, new_path)
        self._raise_renamed(kind, old_path, new_path)
        if kind is EntryKind.FILE:
            return

        if not self._recursive:
            self._remap(EntryKind.DIRECTORY, compute_renamed_descendants(
                self._index, EntryKind.DIRECTORY, old_path, new_path, True,
            ))
            self._remap(EntryKind.FILE, compute_renamed_descendants(
                self._index, EntryKind.FILE, old_path, new_path, True,
            ))
            return

        renamed_dirs = compute_renamed_descendants(
            self._index, EntryKind.DIRECTORY, old_path, new_path, True,
        )
        self._rename_child_files(old_path, new_path)
        for old_dir, new_dir in renamed_dirs.items():
            self._index.remove(EntryKind.DIRECTORY, old_dir)
            self._index.insert(EntryKind.DIRECTORY, new_dir)
            self._raise_renamed(EntryKind.DIRECTORY, old_dir, new_dir)
            self._rename_child_files(old_dir, new_dir)

        logger.debug(f"Renamed directory {old_path} -> {new_path}: {len(renamed_dirs)} subdirectories")

    def _remap(self, kind: EntryKind, renamed: Dict[str, str]) -> None:
        self._index.remove_all(kind, renamed.keys())
        self._index.insert_all(kind, renamed.values())

    def _rename_child_files(self, old_dir: str, new_dir: str) -> None:
        renamed_files = compute_renamed_descendants(
            self._index, EntryKind.FILE, old_dir, new_dir, False,
        )
        self._remap(EntryKind.FILE, renamed_files)
        for old_file, new_file in renamed_files.items():
            self._raise_renamed(EntryKind.FILE, old_file, new_file)

    # Waiting and lifecycle

    def wait_for_changed(
        self,
        change_types: Union[ChangeType, Iterable[ChangeType]],
        timeout: Optional[float] = None,
    ) -> WaitForChangedResult:
        """
        Block until an event of one of the given types is delivered.

        Delivery is enabled for the duration of the wait if it was off.

        Args:
            change_types: Channel or channels to wait on
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            The first matching event's details, or a timed-out result
        """
        self._ensure_open()
        if isinstance(change_types, ChangeType):
            change_types = [change_types]
        change_types = [t for t in change_types if t is not ChangeType.ERROR]

        received: List[FileSystemEvent] = []
        done = threading.Event()

        def on_event(event):
            if not done.is_set():
                received.append(event)
                done.set()

        for change_type in change_types:
            self.subscribe(change_type, on_event)
        was_enabled = self.enabled
        try:
            self.enabled = True
            done.wait(timeout)
        finally:
            for change_type in change_types:
                self.unsubscribe(change_type, on_event)
            if not was_enabled:
                self.enabled = False

        if not received:
            return WaitForChangedResult(timed_out=True)
        event = received[0]
        return WaitForChangedResult(
            change_type=event.change_type,
            name=event.name,
            old_name=getattr(event, "old_name", None),
        )

    def close(self) -> None:
        """Stop the native source. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._source.close()

    def __enter__(self) -> "FileSystemObserver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
