#!/usr/bin/env python3
"""
Subtree event demo.

This example demonstrates:
1. Creating a directory that already has files in it
2. Renaming that directory
3. Deleting it

Each step produces one native notification for the directory; the
observer prints an event for every entry beneath it as well.

Usage:
    python examples/subtree_demo.py
"""

import shutil
import sys
import tempfile
import time
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fsobserver import ChangeType, EntryKind, FileSystemObserver


def print_event(event):
    if event.change_type is ChangeType.ERROR:
        print(f"[ERROR]   {event.error}")
    elif event.change_type is ChangeType.RENAMED:
        print(f"[{event.change_type.value.upper():8}] {event.kind.value}: {event.old_name} -> {event.name}")
    else:
        print(f"[{event.change_type.value.upper():8}] {event.kind.value}: {event.name}")


def main():
    root = Path(tempfile.mkdtemp(prefix="fsobserver_demo_"))
    staging = Path(tempfile.mkdtemp(prefix="fsobserver_staging_"))
    print(f"[DEMO] Observing {root}")

    # Only directories and .txt files are reported
    observer = FileSystemObserver(
        str(root),
        file_extensions=[".txt"],
        predicate=lambda kind, path: kind is EntryKind.DIRECTORY or path.endswith(".txt"),
        include_subdirectories=True,
    )
    try:
        for change_type in ChangeType:
            observer.subscribe(change_type, print_event)
        observer.enabled = True
        time.sleep(0.2)

        print("\n[DEMO] Moving a prepared tree into the observed directory...")
        (staging / "project" / "docs").mkdir(parents=True)
        (staging / "project" / "README.txt").write_text("readme")
        (staging / "project" / "build.log").write_text("ignored")
        (staging / "project" / "docs" / "guide.txt").write_text("guide")
        shutil.move(str(staging / "project"), str(root / "project"))
        time.sleep(0.5)

        print("\n[DEMO] Renaming the tree...")
        (root / "project").rename(root / "renamed")
        time.sleep(0.5)

        print("\n[DEMO] Deleting the tree...")
        shutil.rmtree(root / "renamed")
        time.sleep(0.5)
    finally:
        observer.close()
        shutil.rmtree(root, ignore_errors=True)
        shutil.rmtree(staging, ignore_errors=True)

    print("\n[DEMO] Done")


if __name__ == "__main__":
    main()
