"""Pre-order store walker using os.scandir with an explicit stack (DFS)."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A single filesystem entry yielded by the walk.

    Attributes:
        path: Absolute path of the filesystem entry.
        depth: Distance from the walk root. The root itself is depth 0.
        is_dir: Whether the entry is a directory.
    """

    path: Path
    depth: int
    is_dir: bool


class EntryFilter(Protocol):
    """Protocol for entry filtering.

    Keeps walker logic decoupled from matching strategy.
    """

    def should_exclude(self, name: str, is_dir: bool) -> bool: ...


class HiddenFilter:
    """Exclude entries whose name starts with the hidden-file marker."""

    marker = "."

    def should_exclude(self, name: str, is_dir: bool) -> bool:
        return name.startswith(self.marker)


def _list_children(directory: Path) -> list[os.DirEntry[str]] | None:
    try:
        with os.scandir(directory) as it:
            children = list(it)
    except OSError:
        logger.debug("Cannot read directory: %s", directory)
        return None
    # Sort entries by name for deterministic walk order
    children.sort(key=lambda e: e.name)
    return children


def walk(root: Path, entry_filter: EntryFilter | None = None) -> Iterator[WalkEntry]:
    """Walk ``root`` depth-first, yielding each entry before its contents.

    The root is yielded first with depth 0. A directory's contents are
    yielded in full before the directory's next sibling, so depth can drop
    by several levels between two consecutive entries.

    Excluded directories are not descended into. Entries that cannot be
    read are logged and skipped.

    Args:
        root: Directory to walk.
        entry_filter: Exclusion filter. Defaults to ``HiddenFilter()``.

    Yields:
        WalkEntry: Entries in pre-order.
    """
    active_filter = entry_filter or HiddenFilter()
    root = root.resolve()

    if not root.is_dir():
        return

    # Stack items: WalkEntry not yet yielded.
    # Children are pushed in reverse so first-alphabetical is popped first.
    stack: list[WalkEntry] = [WalkEntry(path=root, depth=0, is_dir=True)]

    while stack:
        entry = stack.pop()
        yield entry

        if not entry.is_dir:
            continue

        children = _list_children(entry.path)
        if children is None:
            continue

        pending: list[WalkEntry] = []
        for dir_entry in children:
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError:
                logger.debug("Cannot stat: %s", dir_entry.path)
                continue

            if active_filter.should_exclude(dir_entry.name, is_dir):
                continue

            pending.append(
                WalkEntry(path=Path(dir_entry.path), depth=entry.depth + 1, is_dir=is_dir)
            )

        stack.extend(reversed(pending))
