"""Directory enumeration used for index rebuilds and created directories."""

import os
from typing import Callable, FrozenSet, Iterator, Optional


def matches_extension(path: str, extensions: FrozenSet[str]) -> bool:
    """Check a file path against normalized extensions, ignoring case."""
    if not extensions:
        return True
    return os.path.splitext(path)[1].lower() in extensions


def enumerate_files(
    root: str,
    recursive: bool,
    extensions: FrozenSet[str] = frozenset(),
    onerror: Optional[Callable[[OSError], None]] = None,
) -> Iterator[str]:
    """
    Lazily yield absolute paths of files under a directory.

    Args:
        root: Directory to enumerate
        recursive: Descend into all subdirectories instead of the
            immediate children only
        extensions: Normalized (lower-case, dotted) extensions to keep;
            empty keeps every file
        onerror: Called with errors raised while walking subdirectories
            in recursive mode

    Raises:
        OSError: If ``root`` itself cannot be listed in non-recursive mode
    """
    if recursive:
        for dirpath, _dirnames, filenames in os.walk(root, onerror=onerror):
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                if matches_extension(path, extensions):
                    yield path
        return

    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_file() and matches_extension(entry.path, extensions):
                yield entry.path


def enumerate_directories(
    root: str,
    recursive: bool,
    onerror: Optional[Callable[[OSError], None]] = None,
) -> Iterator[str]:
    """Lazily yield absolute paths of directories under a directory."""
    if recursive:
        for dirpath, dirnames, _filenames in os.walk(root, onerror=onerror):
            for dirname in dirnames:
                yield os.path.join(dirpath, dirname)
        return

    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_dir():
                yield entry.path
