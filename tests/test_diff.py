"""Tests for subtree diff computation."""

import os

import pytest

from fsobserver.diff import compute_deleted_descendants, compute_renamed_descendants
from fsobserver.index import EntryIndex
from fsobserver.models import EntryKind


ROOT = os.sep + "root"


def p(*parts):
    return os.path.join(ROOT, *parts)


@pytest.fixture
def index():
    index = EntryIndex()
    index.insert_all(EntryKind.DIRECTORY, [
        p("A"),
        p("A", "B"),
        p("A", "B", "C"),
        p("AB"),
    ])
    index.insert_all(EntryKind.FILE, [
        p("top.txt"),
        p("A", "f.txt"),
        p("A", "B", "g.txt"),
        p("A", "B", "C", "h.txt"),
        p("AB", "sibling.txt"),
    ])
    return index


class TestComputeRenamedDescendants:
    """Tests for compute_renamed_descendants()."""

    def test_all_levels_files(self, index):
        renamed = compute_renamed_descendants(index, EntryKind.FILE, p("A"), p("Z"), True)

        assert renamed == {
            p("A", "f.txt"): p("Z", "f.txt"),
            p("A", "B", "g.txt"): p("Z", "B", "g.txt"),
            p("A", "B", "C", "h.txt"): p("Z", "B", "C", "h.txt"),
        }

    def test_direct_children_only(self, index):
        renamed = compute_renamed_descendants(index, EntryKind.FILE, p("A"), p("Z"), False)

        assert renamed == {p("A", "f.txt"): p("Z", "f.txt")}

    def test_directories_in_ascending_depth(self, index):
        renamed = compute_renamed_descendants(index, EntryKind.DIRECTORY, p("A"), p("Z"), True)

        assert list(renamed.items()) == [
            (p("A", "B"), p("Z", "B")),
            (p("A", "B", "C"), p("Z", "B", "C")),
        ]

    def test_sibling_with_shared_prefix_is_not_affected(self, index):
        renamed = compute_renamed_descendants(index, EntryKind.FILE, p("A"), p("Z"), True)

        assert p("AB", "sibling.txt") not in renamed

    def test_move_to_different_depth(self, index):
        renamed = compute_renamed_descendants(
            index, EntryKind.FILE, p("A", "B"), p("X", "Y", "Z"), True,
        )

        assert renamed == {
            p("A", "B", "g.txt"): p("X", "Y", "Z", "g.txt"),
            p("A", "B", "C", "h.txt"): p("X", "Y", "Z", "C", "h.txt"),
        }

    def test_does_not_mutate_index(self, index):
        compute_renamed_descendants(index, EntryKind.FILE, p("A"), p("Z"), True)

        assert index.contains(EntryKind.FILE, p("A", "f.txt"))

    def test_leaf_directory_has_no_descendants(self, index):
        assert compute_renamed_descendants(index, EntryKind.FILE, p("AB", "x"), p("Q"), True) == {}


class TestComputeDeletedDescendants:
    """Tests for compute_deleted_descendants()."""

    def test_all_levels(self, index):
        deleted = compute_deleted_descendants(index, EntryKind.DIRECTORY, p("A"), True)

        assert deleted == [p("A", "B"), p("A", "B", "C")]

    def test_direct_children_only(self, index):
        deleted = compute_deleted_descendants(index, EntryKind.FILE, p("A", "B"), False)

        assert deleted == [p("A", "B", "g.txt")]

    def test_sibling_with_shared_prefix_is_not_affected(self, index):
        deleted = compute_deleted_descendants(index, EntryKind.FILE, p("A"), True)

        assert p("AB", "sibling.txt") not in deleted
        assert sorted(deleted) == sorted([
            p("A", "f.txt"),
            p("A", "B", "g.txt"),
            p("A", "B", "C", "h.txt"),
        ])

    def test_unknown_directory(self, index):
        assert compute_deleted_descendants(index, EntryKind.FILE, p("missing"), True) == []
