"""Box-drawing text renderer for store trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pointguard.tree import TreeNode


@dataclass(frozen=True, slots=True)
class Glyphs:
    """Box-drawing character set for tree rendering."""

    branch: str  # ├──
    last_branch: str  # └──
    vertical: str  # │
    space: str  # (indent)


UNICODE_GLYPHS = Glyphs(
    branch="├── ",
    last_branch="└── ",
    vertical="│   ",
    space="    ",
)

ASCII_GLYPHS = Glyphs(
    branch="|-- ",
    last_branch="\\-- ",
    vertical="|   ",
    space="    ",
)


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options for the tree renderer.

    Attributes:
        charset: Output charset, ``unicode`` or ``ascii``.
    """

    charset: Literal["unicode", "ascii"] = "unicode"


def render_tree(root: TreeNode, options: RenderOptions | None = None) -> str:
    """Render a tree as box-drawing text.

    Children are drawn in the order they appear in the tree, so callers
    sort the tree first for deterministic output.

    Args:
        root: Tree to render. Its name is the first line.
        options: Rendering options.

    Returns:
        str: Rendered tree without a trailing newline.
    """
    opts = options or RenderOptions()
    glyphs = ASCII_GLYPHS if opts.charset == "ascii" else UNICODE_GLYPHS

    lines: list[str] = [root.name]

    # Iterative DFS using an explicit stack.
    # Stack items: (node, prefix, is_last_sibling)
    # Push children in reverse order so that the first child is popped first.
    stack: list[tuple[TreeNode, str, bool]] = []
    for i in range(len(root.children) - 1, -1, -1):
        stack.append((root.children[i], "", i == len(root.children) - 1))

    while stack:
        node, prefix, is_last = stack.pop()
        connector = glyphs.last_branch if is_last else glyphs.branch
        lines.append(f"{prefix}{connector}{node.name}")

        next_prefix = prefix + (glyphs.space if is_last else glyphs.vertical)
        for j in range(len(node.children) - 1, -1, -1):
            stack.append(
                (node.children[j], next_prefix, j == len(node.children) - 1)
            )

    return "\n".join(lines)
