"""Traversal helpers over SyntaxNode trees.

All helpers are pure: they never mutate their inputs and accept a single
SyntaxNode, a ComponentTree or a whole ParsedFile where that makes sense.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from stable_uid.tree.nodes import ComponentTree, ParsedFile, SyntaxNode

Tree = SyntaxNode | ComponentTree | ParsedFile


def _roots(tree: Tree) -> list[SyntaxNode]:
    if isinstance(tree, ParsedFile):
        return [c.root for c in tree.components]
    if isinstance(tree, ComponentTree):
        return [tree.root]
    return [tree]


def iter_nodes(tree: Tree) -> Iterator[SyntaxNode]:
    """Yield every node of ``tree`` in document (pre-)order."""
    stack = list(reversed(_roots(tree)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_identifiers(tree: Tree) -> Iterator[str]:
    """Yield the identifier of every labeled node, in document order."""
    for node in iter_nodes(tree):
        if node.identifier is not None:
            yield node.identifier


def _unlabel_node(node: SyntaxNode) -> SyntaxNode:
    children = tuple(_unlabel_node(child) for child in node.children)
    return SyntaxNode(
        kind=node.kind,
        name=node.name,
        attributes=node.attributes,
        children=children,
        identifier=None,
    )


def unlabel(tree: Tree) -> Any:
    """Return a copy of ``tree`` with every identifier stripped.

    Equivalent to what the parser would produce for the printed source of
    ``tree`` (minus any explicit identifier attributes written by a printer).
    The return type matches the argument type.
    """
    if isinstance(tree, ParsedFile):
        return ParsedFile(
            components=tuple(
                ComponentTree(name=c.name, root=_unlabel_node(c.root))
                for c in tree.components
            ),
            declarations=tree.declarations,
        )
    if isinstance(tree, ComponentTree):
        return ComponentTree(name=tree.name, root=_unlabel_node(tree.root))
    return _unlabel_node(tree)


def _shape_node(node: SyntaxNode) -> tuple[Any, ...]:
    return (
        str(node.kind),
        node.name,
        tuple(sorted(node.attributes.items(), key=lambda item: item[0])),
        tuple(_shape_node(child) for child in node.children),
    )


def shape(tree: Tree) -> Any:
    """Identifier-free structural projection of ``tree``.

    Two trees have equal shapes iff they differ at most in identifiers.
    """
    if isinstance(tree, ParsedFile):
        return tuple((c.name, _shape_node(c.root)) for c in tree.components)
    if isinstance(tree, ComponentTree):
        return (tree.name, _shape_node(tree.root))
    return _shape_node(tree)


def uid_tree(tree: Tree, placeholder: str = "?") -> str:
    """Render the identifiers of ``tree`` as an indented outline.

    One line per node, two spaces of indentation per depth level, unlabeled
    nodes printed as ``placeholder``::

        aaa
          bbb
          ccc
    """
    lines: list[str] = []

    def walk(node: SyntaxNode, depth: int) -> None:
        label = node.identifier if node.identifier is not None else placeholder
        lines.append(f"{'  ' * depth}{label}")
        for child in node.children:
            walk(child, depth + 1)

    for root in _roots(tree):
        walk(root, 0)
    return "\n".join(lines)
