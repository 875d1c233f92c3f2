"""Deterministic tree generators for performance benchmarks.

All generators produce fixed, reproducible trees. No random values.
Three tiers: 100-element wide, 1000-element nested, 5000-element deep.
Each tier provides a labeled "before" file and an edited "after" parse that
inserts one element at the front of every child list, the worst case for
position-based matching.
"""

from __future__ import annotations

from typing import Any

import pytest

from stable_uid import ParsedFile, TreeBuilder, reconcile

_builder = TreeBuilder()


def generate_wide(num_children: int, prefix: str = "item") -> dict[str, Any]:
    """A single container with ``num_children`` distinct leaf elements."""
    return {
        "name": "div",
        "children": [
            {"name": "View", "attributes": {"key": f"{prefix}_{i}", "width": i}}
            for i in range(num_children)
        ],
    }


def generate_nested(sections: int, per_section: int) -> dict[str, Any]:
    """``sections`` containers of ``per_section`` leaves each."""
    return {
        "name": "div",
        "children": [
            generate_wide(per_section, prefix=f"s{i}") for i in range(sections)
        ],
    }


def generate_deep(depth: int, fan_out: int) -> dict[str, Any]:
    """A complete tree of the given depth and fan-out."""
    if depth == 0:
        return {"name": "Text", "children": ["leaf"]}
    return {
        "name": "section",
        "attributes": {"depth": depth},
        "children": [generate_deep(depth - 1, fan_out) for _ in range(fan_out)],
    }


def _prepend_everywhere(node: dict[str, Any]) -> dict[str, Any]:
    children = node.get("children", [])
    if not children or isinstance(children[0], str):
        return node
    return {
        **node,
        "children": [{"name": "Inserted"}]
        + [_prepend_everywhere(child) for child in children],
    }


def _pair(root: dict[str, Any]) -> tuple[ParsedFile, ParsedFile]:
    before = reconcile(_builder.build_file({"components": {"App": root}})).parsed_file
    after = _builder.build_file({"components": {"App": _prepend_everywhere(root)}})
    return before, after


@pytest.fixture(scope="session")
def pair_wide_100() -> tuple[ParsedFile, ParsedFile]:
    return _pair(generate_wide(100))


@pytest.fixture(scope="session")
def pair_nested_1000() -> tuple[ParsedFile, ParsedFile]:
    return _pair(generate_nested(20, 50))


@pytest.fixture(scope="session")
def pair_deep_5000() -> tuple[ParsedFile, ParsedFile]:
    # 4^6 leaves, ~5.5k nodes in total
    return _pair(generate_deep(6, 4))
