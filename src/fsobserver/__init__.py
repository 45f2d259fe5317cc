"""
Filesystem Observer Package

Wraps a native, single-event filesystem watch source and adds
higher-level semantics on top of it.

Features:
- Events for every descendant when a directory is created, deleted or renamed
- File extension filtering (case-insensitive)
- Caller-supplied (kind, path) predicate for files and directories
- Depth-bucketed index of known entries, rebuilt on reconfiguration
- Per-channel subscriber lists: created, deleted, changed, renamed, error
"""

from .models import (
    EntryKind,
    ChangeType,
    NotifyFilters,
    RawFSEvent,
    FileSystemEvent,
    RenamedEvent,
    ErrorEvent,
    WaitForChangedResult,
)

from .config import ObserverConfig

from .exceptions import (
    ObserverError,
    InvalidArgumentError,
    DifferentRootError,
    RootNotFoundError,
    ObserverClosedError,
)

from .paths import depth, relative_path, relative_path_between
from .index import EntryIndex
from .diff import compute_renamed_descendants, compute_deleted_descendants
from .classifier import EventFilter
from .fs_watcher import NativeWatchSource, FSEventHandler, ReportingObserver
from .observer import FileSystemObserver


__all__ = [
    # Models
    "EntryKind",
    "ChangeType",
    "NotifyFilters",
    "RawFSEvent",
    "FileSystemEvent",
    "RenamedEvent",
    "ErrorEvent",
    "WaitForChangedResult",
    # Config
    "ObserverConfig",
    # Exceptions
    "ObserverError",
    "InvalidArgumentError",
    "DifferentRootError",
    "RootNotFoundError",
    "ObserverClosedError",
    # Components
    "depth",
    "relative_path",
    "relative_path_between",
    "EntryIndex",
    "compute_renamed_descendants",
    "compute_deleted_descendants",
    "EventFilter",
    "NativeWatchSource",
    "FSEventHandler",
    "ReportingObserver",
    # Main Observer
    "FileSystemObserver",
]

__version__ = "0.1.0"
