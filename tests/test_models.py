"""Tests for data models."""

import os

from fsobserver.models import (
    ChangeType,
    EntryKind,
    ErrorEvent,
    FileSystemEvent,
    RawFSEvent,
    RenamedEvent,
    WaitForChangedResult,
)


class TestFileSystemEvent:
    """Tests for FileSystemEvent class."""

    def test_full_path(self):
        event = FileSystemEvent(ChangeType.CREATED, EntryKind.FILE, "/root", os.path.join("A", "f.txt"))
        assert event.full_path == os.path.join("/root", "A", "f.txt")

    def test_to_dict(self):
        event = FileSystemEvent(ChangeType.DELETED, EntryKind.DIRECTORY, "/root", "A")
        assert event.to_dict() == {
            "change_type": "deleted",
            "kind": "directory",
            "root": "/root",
            "name": "A",
        }

    def test_events_are_comparable(self):
        a = FileSystemEvent(ChangeType.CHANGED, EntryKind.FILE, "/root", "a.txt")
        b = FileSystemEvent(ChangeType.CHANGED, EntryKind.FILE, "/root", "a.txt")
        assert a == b


class TestRenamedEvent:
    """Tests for RenamedEvent class."""

    def test_old_full_path(self):
        event = RenamedEvent(ChangeType.RENAMED, EntryKind.DIRECTORY, "/root", "Z", old_name="A")
        assert event.full_path == os.path.join("/root", "Z")
        assert event.old_full_path == os.path.join("/root", "A")

    def test_to_dict_includes_old_name(self):
        event = RenamedEvent(ChangeType.RENAMED, EntryKind.FILE, "/root", "new.txt", old_name="old.txt")
        assert event.to_dict()["old_name"] == "old.txt"
        assert event.to_dict()["name"] == "new.txt"


class TestOtherModels:
    """Tests for the remaining models."""

    def test_error_event(self):
        event = ErrorEvent(OSError("overflow"))
        assert event.change_type is ChangeType.ERROR
        assert event.to_dict() == {"change_type": "error", "error": "OSError: overflow"}

    def test_raw_event_defaults(self):
        event = RawFSEvent("created")
        assert event.src_path is None
        assert event.dest_path is None
        assert event.is_directory is False
        assert event.timestamp > 0

    def test_wait_result_defaults(self):
        result = WaitForChangedResult(timed_out=True)
        assert result.change_type is None
        assert result.name is None
