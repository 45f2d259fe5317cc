"""Tests for the entry index."""

import pytest

from fsobserver.index import EntryIndex
from fsobserver.models import EntryKind
from fsobserver.paths import depth


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "A" / "B").mkdir(parents=True)
    (tmp_path / "top.txt").write_text("top")
    (tmp_path / "A" / "f.TXT").write_text("f")
    (tmp_path / "A" / "notes.md").write_text("notes")
    (tmp_path / "A" / "B" / "g.txt").write_text("g")
    return tmp_path


class TestEntryIndex:
    """Tests for EntryIndex class."""

    def test_create_empty_index(self):
        index = EntryIndex()
        assert len(index) == 0
        assert index.entries(EntryKind.FILE) == frozenset()

    def test_insert_and_contains(self):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/root/a.txt")

        assert index.contains(EntryKind.FILE, "/root/a.txt")
        assert not index.contains(EntryKind.DIRECTORY, "/root/a.txt")
        assert "/root/a.txt" in index

    def test_insert_is_idempotent(self):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/root/a.txt")
        index.insert(EntryKind.FILE, "/root/a.txt")

        assert index.count(EntryKind.FILE) == 1

    def test_remove(self):
        index = EntryIndex()
        index.insert(EntryKind.DIRECTORY, "/root/A")
        index.remove(EntryKind.DIRECTORY, "/root/A")

        assert not index.contains(EntryKind.DIRECTORY, "/root/A")
        assert len(index) == 0

    def test_remove_missing_is_noop(self):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/root/a.txt")
        index.remove(EntryKind.FILE, "/root/b.txt")
        index.remove(EntryKind.FILE, "/root/deep/er/c.txt")

        assert index.count(EntryKind.FILE) == 1

    def test_bulk_operations(self):
        index = EntryIndex()
        paths = ["/root/a.txt", "/root/A/b.txt", "/root/A/B/c.txt"]
        index.insert_all(EntryKind.FILE, paths)
        assert index.entries(EntryKind.FILE) == frozenset(paths)

        index.remove_all(EntryKind.FILE, paths[:2])
        assert index.entries(EntryKind.FILE) == frozenset(paths[2:])

    def test_entries_below_ascending_depth(self):
        index = EntryIndex()
        index.insert_all(EntryKind.DIRECTORY, ["/r/A/B/C", "/r/A", "/r/A/B"])

        below = list(index.entries_below(EntryKind.DIRECTORY, depth("/r/A")))

        assert below == ["/r/A/B", "/r/A/B/C"]

    def test_is_known_file_uses_index(self):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/nonexistent/12345/a.txt")
        assert index.is_known_file("/nonexistent/12345/a.txt") is True

    def test_is_known_file_falls_back_to_disk(self, tmp_path):
        path = tmp_path / "new.txt"
        path.write_text("new")
        index = EntryIndex()

        assert index.is_known_file(str(path)) is True
        assert index.is_known_directory(str(path)) is False

    def test_is_known_directory_falls_back_to_disk(self, tmp_path):
        index = EntryIndex()
        assert index.is_known_directory(str(tmp_path)) is True
        assert index.is_known_directory(str(tmp_path / "missing")) is False

    def test_clear(self):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/root/a.txt")
        index.insert(EntryKind.DIRECTORY, "/root/A")
        index.clear()

        assert len(index) == 0


class TestEntryIndexRebuild:
    """Tests for EntryIndex.rebuild()."""

    def test_rebuild_recursive(self, tree):
        index = EntryIndex()
        index.rebuild(str(tree), recursive=True)

        assert index.entries(EntryKind.FILE) == {
            str(tree / "top.txt"),
            str(tree / "A" / "f.TXT"),
            str(tree / "A" / "notes.md"),
            str(tree / "A" / "B" / "g.txt"),
        }
        assert index.entries(EntryKind.DIRECTORY) == {
            str(tree / "A"),
            str(tree / "A" / "B"),
        }

    def test_rebuild_top_level_only(self, tree):
        index = EntryIndex()
        index.rebuild(str(tree), recursive=False)

        assert index.entries(EntryKind.FILE) == {str(tree / "top.txt")}
        assert index.entries(EntryKind.DIRECTORY) == {str(tree / "A")}

    def test_rebuild_with_extensions(self, tree):
        index = EntryIndex()
        index.rebuild(str(tree), recursive=True, extensions=frozenset({".txt"}))

        files = index.entries(EntryKind.FILE)
        assert str(tree / "A" / "f.TXT") in files
        assert str(tree / "A" / "notes.md") not in files
        assert index.count(EntryKind.DIRECTORY) == 2

    def test_rebuild_replaces_previous_entries(self, tree):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/elsewhere/stale.txt")
        index.rebuild(str(tree), recursive=False)

        assert not index.contains(EntryKind.FILE, "/elsewhere/stale.txt")

    def test_rebuild_blank_root(self):
        index = EntryIndex()
        index.insert(EntryKind.FILE, "/root/a.txt")
        index.rebuild("", recursive=True)

        assert len(index) == 0

    def test_paths_are_bucketed_by_depth(self, tree):
        index = EntryIndex()
        index.rebuild(str(tree), recursive=True)

        for path in index.entries(EntryKind.FILE):
            assert index.contains(EntryKind.FILE, path)
