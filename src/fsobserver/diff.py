"""Compute which indexed entries are affected by a directory rename or delete."""

from typing import Dict, List

from .index import EntryIndex
from .models import EntryKind
from .paths import combine, depth, is_under, relative_path


def _affected_entries(
    index: EntryIndex,
    kind: EntryKind,
    path: str,
    include_all_levels: bool,
) -> List[str]:
    """
    Select indexed entries strictly beneath ``path``.

    Candidates are the entries deeper than ``path``, in ascending depth
    order. With ``include_all_levels`` false only immediate children
    are kept.
    """
    path_depth = depth(path)
    affected = []
    for entry in index.entries_below(kind, path_depth):
        if not include_all_levels and depth(entry) != path_depth + 1:
            continue
        if is_under(path, entry):
            affected.append(entry)
    return affected


def compute_renamed_descendants(
    index: EntryIndex,
    kind: EntryKind,
    old_path: str,
    new_path: str,
    include_all_levels: bool = True,
) -> Dict[str, str]:
    """
    Map each indexed descendant of a renamed directory to its new path.

    Args:
        index: The entry index to search
        kind: Which side of the index to search
        old_path: Directory path before the rename
        new_path: Directory path after the rename
        include_all_levels: Include every descendant instead of
            immediate children only

    Returns:
        Mapping from old absolute path to new absolute path, in
        ascending depth order of the old paths
    """
    return {
        entry: combine(new_path, relative_path(old_path, entry))
        for entry in _affected_entries(index, kind, old_path, include_all_levels)
    }


def compute_deleted_descendants(
    index: EntryIndex,
    kind: EntryKind,
    path: str,
    include_all_levels: bool = True,
) -> List[str]:
    """
    List indexed descendants of a deleted directory.

    Args:
        index: The entry index to search
        kind: Which side of the index to search
        path: The deleted directory
        include_all_levels: Include every descendant instead of
            immediate children only

    Returns:
        Affected absolute paths in ascending depth order
    """
    return _affected_entries(index, kind, path, include_all_levels)
