"""Tests for pointguard.render, including golden snapshots."""

from pathlib import Path

import pytest

from pointguard import DEFAULT_TITLE
from pointguard.render import RenderOptions, render_tree
from pointguard.tree import TreeNode, build_tree
from tests.conftest import assert_golden


class TestRenderGolden:
    @pytest.mark.parametrize(
        ("charset", "golden_name"),
        [
            ("unicode", "store_unicode"),
            ("ascii", "store_ascii"),
        ],
    )
    def test_store_golden(
        self, sample_store: Path, charset: str, golden_name: str
    ) -> None:
        tree = build_tree(sample_store, DEFAULT_TITLE)
        output = render_tree(tree, RenderOptions(charset=charset))
        assert_golden(output, golden_name)

    def test_subdirectory_golden(self, sample_store: Path) -> None:
        tree = build_tree(sample_store / "dir", "dir/")
        assert_golden(render_tree(tree), "subdir_unicode")


class TestRenderTree:
    def test_root_only(self) -> None:
        assert render_tree(TreeNode("root")) == "root"

    def test_no_trailing_newline(self) -> None:
        output = render_tree(TreeNode("root", [TreeNode("a")]))
        assert output == "root\n└── a"

    def test_vertical_bar_continues_past_nested_children(self) -> None:
        tree = TreeNode(
            "root",
            [TreeNode("a", [TreeNode("a1")]), TreeNode("b", [TreeNode("b1")])],
        )
        assert render_tree(tree).split("\n") == [
            "root",
            "├── a",
            "│   └── a1",
            "└── b",
            "    └── b1",
        ]

    def test_deterministic(self, sample_store: Path) -> None:
        first = render_tree(build_tree(sample_store, DEFAULT_TITLE))
        second = render_tree(build_tree(sample_store, DEFAULT_TITLE))
        assert first == second
