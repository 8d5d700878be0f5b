"""Build a nested, sorted tree of the store from a pre-order walk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pointguard import SECRET_SUFFIX, InvalidEntryName
from pointguard.walker import EntryFilter, walk

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TreeNode:
    """A named node with ordered children. Leaves have no children."""

    name: str
    children: list[TreeNode] = field(default_factory=list)

    def sort(self) -> None:
        """Sort children by name at every level, in place.

        The sort is stable, so equal names keep their walk order and
        sorting an already sorted tree changes nothing.
        """
        self.children.sort(key=lambda node: node.name)
        for child in self.children:
            child.sort()


def display_name(path: Path, is_dir: bool = False) -> str:
    """Return the name shown in the tree for ``path``.

    Secret files lose their encryption suffix; directories and other
    files are shown as-is.

    Args:
        path: Entry path.
        is_dir: Whether the entry is a directory.

    Returns:
        str: Display name.

    Raises:
        InvalidEntryName: If the entry has no base name or the name is
            not valid UTF-8 text.
    """
    name = path.name
    if not is_dir and name.endswith(SECRET_SUFFIX):
        name = name[: -len(SECRET_SUFFIX)]
    if not name:
        raise InvalidEntryName(f"Found an entry with no name: {path}")
    try:
        # os.scandir smuggles undecodable bytes through as lone surrogates
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidEntryName(
            f"Entry name is not valid unicode: {path!r}"
        ) from exc
    return name


class TreeBuilder:
    """Incrementally assemble a tree using a stack of open scopes.

    ``_scopes[0]`` is always the root; each ``begin_child`` pushes a new
    scope and each ``end_child`` pops one.
    """

    def __init__(self, root_name: str) -> None:
        self._root = TreeNode(root_name)
        self._scopes: list[TreeNode] = [self._root]

    @property
    def depth(self) -> int:
        """Number of scopes open below the root."""
        return len(self._scopes) - 1

    def begin_child(self, name: str) -> None:
        node = TreeNode(name)
        self._scopes[-1].children.append(node)
        self._scopes.append(node)

    def add_empty_child(self, name: str) -> None:
        self._scopes[-1].children.append(TreeNode(name))

    def end_child(self) -> None:
        if len(self._scopes) == 1:
            raise ValueError("Cannot close the root scope")
        self._scopes.pop()

    def build(self) -> TreeNode:
        return self._root


def build_tree(
    root: Path,
    root_name: str,
    entry_filter: EntryFilter | None = None,
) -> TreeNode:
    """Walk ``root`` and return its sorted tree.

    An entry at walk depth ``d`` is placed under the scope opened for its
    parent, i.e. with exactly ``d - 1`` scopes open below the root. When the
    walk ascends, scopes are closed one by one until that holds, however
    many levels were skipped.

    Args:
        root: Directory to walk.
        root_name: Label of the synthetic root node.
        entry_filter: Exclusion filter passed to the walker.

    Returns:
        TreeNode: Root of the sorted tree.

    Raises:
        InvalidEntryName: If any entry name cannot be displayed. The whole
            build is aborted.
    """
    builder = TreeBuilder(root_name)

    for entry in walk(root, entry_filter):
        if entry.depth == 0:
            continue

        while builder.depth > entry.depth - 1:
            builder.end_child()

        name = display_name(entry.path, entry.is_dir)
        if entry.is_dir:
            builder.begin_child(name)
        else:
            builder.add_empty_child(name)

    tree = builder.build()
    tree.sort()
    logger.debug("Built tree for %s with %d top-level entries", root, len(tree.children))
    return tree
