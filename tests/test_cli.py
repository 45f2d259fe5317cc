"""Tests for the command-line interface."""

import json

from fsobserver.cli import build_parser, build_predicate, format_event, main
from fsobserver.models import ChangeType, EntryKind, ErrorEvent, FileSystemEvent, RenamedEvent


class TestFormatEvent:
    """Tests for format_event()."""

    def test_plain(self):
        event = FileSystemEvent(ChangeType.CREATED, EntryKind.FILE, "/root", "a.txt")
        assert format_event(event) == "created file: a.txt"

    def test_renamed(self):
        event = RenamedEvent(ChangeType.RENAMED, EntryKind.DIRECTORY, "/root", "Z", old_name="A")
        assert format_event(event) == "renamed directory: A -> Z"

    def test_error(self):
        assert format_event(ErrorEvent(OSError("boom"))) == "error: boom"

    def test_json(self):
        event = FileSystemEvent(ChangeType.DELETED, EntryKind.FILE, "/root", "a.txt")
        assert json.loads(format_event(event, as_json=True))["change_type"] == "deleted"


class TestArguments:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["/tmp"])
        assert args.filter == "*"
        assert args.ext == []
        assert args.recursive is False
        assert build_predicate(args) is None

    def test_files_only_predicate(self):
        args = build_parser().parse_args(["/tmp", "--files-only", "-r", "--ext", ".txt", ".md"])
        predicate = build_predicate(args)

        assert args.ext == [".txt", ".md"]
        assert predicate(EntryKind.FILE, "/tmp/a.txt") is True
        assert predicate(EntryKind.DIRECTORY, "/tmp/A") is False

    def test_missing_directory_exits_with_error(self, tmp_path):
        assert main([str(tmp_path / "missing")]) == 1
