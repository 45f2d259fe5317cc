"""Depth-bucketed index of known files and directories."""

import logging
import os
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, Optional, Set

from .models import EntryKind
from .paths import depth
from .scanner import enumerate_directories, enumerate_files


logger = logging.getLogger(__name__)


class EntryIndex:
    """
    Shadow index of the entries believed to exist under an observed root.

    Files and directories are kept in separate mappings from path depth
    to a set of absolute paths. Depth only bounds which buckets have to
    be visited when looking for descendants; ancestry is still decided
    by a prefix test.

    The index is not thread-safe on its own; the owning observer
    serializes access with its lock.
    """

    def __init__(self):
        """Initialize an empty index."""
        self._buckets: Dict[EntryKind, Dict[int, Set[str]]] = {
            EntryKind.FILE: {},
            EntryKind.DIRECTORY: {},
        }

    def insert(self, kind: EntryKind, path: str) -> None:
        """Add a path to the bucket for its depth."""
        self._buckets[kind].setdefault(depth(path), set()).add(path)

    def remove(self, kind: EntryKind, path: str) -> None:
        """Remove a path if present; no-op otherwise."""
        buckets = self._buckets[kind]
        key = depth(path)
        bucket = buckets.get(key)
        if bucket is None:
            return
        bucket.discard(path)
        if not bucket:
            del buckets[key]

    def contains(self, kind: EntryKind, path: str) -> bool:
        bucket = self._buckets[kind].get(depth(path))
        return bucket is not None and path in bucket

    def insert_all(self, kind: EntryKind, paths: Iterable[str]) -> None:
        for path in paths:
            self.insert(kind, path)

    def remove_all(self, kind: EntryKind, paths: Iterable[str]) -> None:
        for path in paths:
            self.remove(kind, path)

    def is_known_file(self, path: str) -> bool:
        """
        Check if a path is an indexed file or an existing file on disk.

        The live check covers entries that were created or renamed but
        are not indexed yet.
        """
        return self.contains(EntryKind.FILE, path) or os.path.isfile(path)

    def is_known_directory(self, path: str) -> bool:
        """Check if a path is an indexed or existing directory."""
        return self.contains(EntryKind.DIRECTORY, path) or os.path.isdir(path)

    def entries_below(self, kind: EntryKind, min_depth: int) -> Iterator[str]:
        """
        Yield entries whose depth is strictly greater than ``min_depth``.

        Buckets are visited in ascending depth order. Callers must not
        mutate the index while iterating.
        """
        buckets = self._buckets[kind]
        for key in sorted(k for k in buckets if k > min_depth):
            yield from buckets[key]

    def entries(self, kind: EntryKind) -> FrozenSet[str]:
        """Get a snapshot of every indexed path of one kind."""
        return frozenset(
            path for bucket in self._buckets[kind].values() for path in bucket
        )

    def count(self, kind: EntryKind) -> int:
        return sum(len(bucket) for bucket in self._buckets[kind].values())

    def clear(self) -> None:
        for buckets in self._buckets.values():
            buckets.clear()

    def rebuild(
        self,
        root: Optional[str],
        recursive: bool,
        extensions: FrozenSet[str] = frozenset(),
        onerror: Optional[Callable[[OSError], None]] = None,
    ) -> None:
        """
        Clear the index and repopulate it with a full scan.

        Args:
            root: Observed directory; a blank root leaves the index empty
            recursive: Scan all levels instead of the root's children only
            extensions: Normalized extensions files must match (empty for all)
            onerror: Called with errors raised while walking subdirectories
        """
        self.clear()
        if not root or not root.strip():
            return

        self.insert_all(
            EntryKind.FILE,
            enumerate_files(root, recursive, extensions, onerror=onerror),
        )
        self.insert_all(
            EntryKind.DIRECTORY,
            enumerate_directories(root, recursive, onerror=onerror),
        )
        logger.info(
            f"Indexed {self.count(EntryKind.FILE)} file(s) and "
            f"{self.count(EntryKind.DIRECTORY)} directories under {root}"
        )

    def __len__(self) -> int:
        return self.count(EntryKind.FILE) + self.count(EntryKind.DIRECTORY)

    def __contains__(self, path: str) -> bool:
        return (
            self.contains(EntryKind.FILE, path)
            or self.contains(EntryKind.DIRECTORY, path)
        )
