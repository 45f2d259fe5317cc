"""Path helpers shared by the entry index and the notification router.

Paths are handled as plain strings. Depth is a bucket key for the
entry index, so every caller must go through :func:`depth` to get it.
"""

import os
import re
from typing import Tuple

from .exceptions import DifferentRootError, InvalidArgumentError


SEPARATORS: Tuple[str, ...] = tuple(
    sep for sep in (os.sep, os.altsep) if sep
)

_SPLIT_PATTERN = re.compile("[" + re.escape("".join(SEPARATORS)) + "]")


def depth(path: str) -> int:
    """
    Count the separator-delimited components of a path.

    Args:
        path: Path to measure

    Returns:
        Number of components, or -1 for an empty or blank path
    """
    if not path or not path.strip():
        return -1
    return len(_SPLIT_PATTERN.split(path))


def split(path: str) -> list:
    """Split a path on every recognized separator, dropping empty parts."""
    return [part for part in _SPLIT_PATTERN.split(path) if part]


def strip_trailing_separators(path: str) -> str:
    stripped = path.rstrip("".join(SEPARATORS))
    # Keep a bare filesystem root such as "/" intact.
    return stripped or path


def combine(root: str, relative: str) -> str:
    return os.path.join(root, relative)


def is_under(parent: str, path: str) -> bool:
    """
    Check if ``parent`` is a proper ancestor of ``path``.

    The prefix must end on a separator boundary, so ``/data/Foo``
    is not treated as a parent of ``/data/FooBar``.
    """
    parent = strip_trailing_separators(parent)
    if parent.endswith(SEPARATORS):
        # Filesystem root, already ends on a boundary.
        return path.startswith(parent) and len(path) > len(parent)
    return path.startswith(tuple(parent + sep for sep in SEPARATORS))


def relative_path(root: str, path: str) -> str:
    """
    Strip ``root`` and any leading separators from ``path``.

    Args:
        root: The base directory
        path: A path that starts with ``root``

    Returns:
        The remainder of ``path`` relative to ``root``

    Raises:
        InvalidArgumentError: If either argument is empty
    """
    if not root:
        raise InvalidArgumentError("root must not be empty")
    if not path:
        raise InvalidArgumentError("path must not be empty")
    return path[len(root):].lstrip("".join(SEPARATORS))


def _filesystem_root(path: str) -> str:
    drive, rest = os.path.splitdrive(path)
    anchor = rest[:1] if rest[:1] in SEPARATORS else ""
    return os.path.normcase(drive + anchor)


def relative_path_between(base: str, path: str, strict: bool = True) -> str:
    """
    Compute ``path`` relative to ``base`` by comparing components.

    Components of ``base`` that ``path`` does not share are replaced
    by ``..`` segments.

    Args:
        base: The directory to compute the relative path from
        path: The target path
        strict: Raise on paths with different filesystem roots;
            when False such a ``path`` is returned unchanged

    Returns:
        The relative path, or "." when both paths are the same

    Raises:
        InvalidArgumentError: If either argument is empty
        DifferentRootError: If strict and the roots differ
    """
    if not base:
        raise InvalidArgumentError("base must not be empty")
    if not path:
        raise InvalidArgumentError("path must not be empty")

    if _filesystem_root(base) != _filesystem_root(path):
        if strict:
            raise DifferentRootError(
                f"'{path}' does not share a root with '{base}'"
            )
        return path

    base_parts = split(os.path.splitdrive(base)[1])
    path_parts = split(os.path.splitdrive(path)[1])

    common = 0
    for base_part, path_part in zip(base_parts, path_parts):
        if os.path.normcase(base_part) != os.path.normcase(path_part):
            break
        common += 1

    parts = [os.pardir] * (len(base_parts) - common) + path_parts[common:]
    if not parts:
        return os.curdir
    return os.path.join(*parts)
