"""Decide what kind of entry a path is and whether its event is delivered."""

import os
from typing import Callable, FrozenSet, Optional

from .index import EntryIndex
from .models import EntryKind


EntryPredicate = Callable[[EntryKind, str], bool]
"""Caller-supplied filter receiving the entry kind and its absolute path."""


class EventFilter:
    """
    Classifies raw paths and gates event emission.

    Classification consults the entry index first and falls back to
    the live filesystem. A path that is neither a known file nor a
    known directory is indeterminate and yields no event.
    """

    def __init__(
        self,
        index: EntryIndex,
        predicate: Optional[EntryPredicate] = None,
        extensions: FrozenSet[str] = frozenset(),
    ):
        """
        Initialize the filter.

        Args:
            index: Entry index used for classification
            predicate: Optional gate called with (kind, absolute path)
            extensions: Normalized extensions applied to file enumeration
        """
        self.index = index
        self.predicate = predicate
        self.extensions = extensions

    def classify(self, path: str) -> Optional[EntryKind]:
        """Classify a path that may still exist on disk."""
        if self.index.is_known_file(path):
            return EntryKind.FILE
        if self.index.is_known_directory(path):
            return EntryKind.DIRECTORY
        return None

    def classify_deleted(self, path: str) -> Optional[EntryKind]:
        """Classify a path that no longer exists, using the index only."""
        if self.index.contains(EntryKind.FILE, path):
            return EntryKind.FILE
        if self.index.contains(EntryKind.DIRECTORY, path):
            return EntryKind.DIRECTORY
        return None

    def classify_renamed(self, old_path: str, new_path: str) -> Optional[EntryKind]:
        """Classify a rename by the old path's index entry or the new path on disk."""
        if self.index.contains(EntryKind.FILE, old_path) or os.path.isfile(new_path):
            return EntryKind.FILE
        if self.index.contains(EntryKind.DIRECTORY, old_path) or os.path.isdir(new_path):
            return EntryKind.DIRECTORY
        return None

    def should_emit(self, kind: EntryKind, path: str) -> bool:
        if self.predicate is None:
            return True
        return bool(self.predicate(kind, path))
