"""Data models for the fsobserver package."""

import enum
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional
import time


class EntryKind(Enum):
    """Kind of filesystem entry an event refers to."""
    FILE = "file"
    DIRECTORY = "directory"


class ChangeType(Enum):
    """Event channels an observer delivers on."""
    CREATED = "created"
    DELETED = "deleted"
    CHANGED = "changed"
    RENAMED = "renamed"
    ERROR = "error"


class NotifyFilters(enum.Flag):
    """Which kinds of change the native source reports."""
    FILE_NAME = 1
    DIRECTORY_NAME = 2
    ATTRIBUTES = 4
    SIZE = 8
    LAST_WRITE = 16
    LAST_ACCESS = 32
    CREATION_TIME = 64
    SECURITY = 256

    @classmethod
    def default(cls) -> "NotifyFilters":
        return cls.FILE_NAME | cls.DIRECTORY_NAME | cls.LAST_WRITE

    @classmethod
    def content_changes(cls) -> "NotifyFilters":
        return (
            cls.ATTRIBUTES
            | cls.SIZE
            | cls.LAST_WRITE
            | cls.LAST_ACCESS
            | cls.CREATION_TIME
            | cls.SECURITY
        )


@dataclass
class RawFSEvent:
    """
    Raw event from the native watch source before processing.
    
    Attributes:
        event_type: Raw event type string (created, deleted, modified, moved, error)
        src_path: Source path of the event
        dest_path: Destination path (for move events)
        is_directory: Whether the native source reported a directory
        error: The failure carried by an error event
        timestamp: Unix timestamp when the event occurred
    """
    event_type: str
    src_path: Optional[Path] = None
    dest_path: Optional[Path] = None
    is_directory: bool = False
    error: Optional[BaseException] = None
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class FileSystemEvent:
    """
    A created, deleted or changed event delivered to subscribers.
    
    Attributes:
        change_type: The channel this event was delivered on
        kind: Whether the entry is a file or a directory
        root: The observed root directory
        name: Path of the entry relative to root
    """
    change_type: ChangeType
    kind: EntryKind
    root: str
    name: str

    @property
    def full_path(self) -> str:
        return os.path.join(self.root, self.name)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "change_type": self.change_type.value,
            "kind": self.kind.value,
            "root": self.root,
            "name": self.name,
        }


@dataclass(frozen=True)
class RenamedEvent(FileSystemEvent):
    """A rename event; ``name`` is the new relative path."""
    old_name: str = ""

    @property
    def old_full_path(self) -> str:
        return os.path.join(self.root, self.old_name)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["old_name"] = self.old_name
        return data


@dataclass(frozen=True)
class ErrorEvent:
    """A failure forwarded from the native source or a cascade."""
    error: BaseException
    change_type: ChangeType = ChangeType.ERROR

    def to_dict(self) -> dict:
        return {
            "change_type": self.change_type.value,
            "error": f"{type(self.error).__name__}: {self.error}",
        }


@dataclass(frozen=True)
class WaitForChangedResult:
    """
    Outcome of ``FileSystemObserver.wait_for_changed``.
    
    Attributes:
        change_type: Channel of the first matching event, None on timeout
        name: Relative name of the entry
        old_name: Previous relative name for renames
        timed_out: Whether the wait ended without a matching event
    """
    change_type: Optional[ChangeType] = None
    name: Optional[str] = None
    old_name: Optional[str] = None
    timed_out: bool = False
