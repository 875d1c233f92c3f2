"""TreeBuilder: converts JSON-like Python values into SyntaxNode trees.

The builder is the in-process counterpart of a parser: tooling, fixtures and
the JSON document backend describe trees as plain dicts and lists, and the
builder turns them into typed, immutable SyntaxNode trees.

Node description format::

    {
        "kind": "element",            # element | expression | fragment | text
        "name": "View",               # optional, defaults to ""
        "attributes": {"style": {}},  # optional, defaults to {}
        "children": [...],            # optional, defaults to []
        "uid": "aaa",                 # optional persistent identifier
    }

A bare string is shorthand for a TEXT node.  Files are described as
``{"components": {"App": <node>, ...}, "declarations": [...]}``; the
components mapping preserves insertion order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from stable_uid.tree.nodes import ComponentTree, NodeKind, ParsedFile, SyntaxNode

_NODE_KEYS = frozenset({"kind", "name", "attributes", "children", "uid"})


@dataclass
class TreeBuilder:
    """Converts node descriptions into SyntaxNode trees and back.

    Dispatch is on the description's type: ``str`` becomes a TEXT node,
    ``Mapping`` is read as a full node description.  Anything else is a
    parser-side error and raises ``TypeError``.

    Example::

        builder = TreeBuilder()
        node = builder.build(
            {"kind": "element", "name": "div", "children": ["hello"]}
        )
        # node: ELEMENT("div") -> TEXT("hello")
    """

    def build(self, value: Any) -> SyntaxNode:
        """Convert a node description to a SyntaxNode tree.

        Args:
            value: A node description mapping, or a string for a text node.

        Returns:
            The root SyntaxNode.

        Raises:
            TypeError:  If ``value`` (or a nested child) has an unsupported type.
            ValueError: If a mapping has an unknown ``kind`` or unknown keys.
        """
        if isinstance(value, str):
            return SyntaxNode(kind=NodeKind.TEXT, name=value)

        if isinstance(value, Mapping):
            return self._build_node(value)

        raise TypeError(f"Unsupported node description type: {type(value)!r}")

    def _build_node(self, description: Mapping[str, Any]) -> SyntaxNode:
        unknown = set(description) - _NODE_KEYS
        if unknown:
            msg = f"Unknown node description keys: {sorted(unknown)}"
            raise ValueError(msg)

        raw_kind = description.get("kind", NodeKind.ELEMENT)
        try:
            kind = NodeKind(raw_kind)
        except ValueError:
            msg = f"Unknown node kind: {raw_kind!r}"
            raise ValueError(msg) from None

        attributes = description.get("attributes", {})
        if not isinstance(attributes, Mapping):
            raise TypeError(f"attributes must be a mapping, got {type(attributes)!r}")

        raw_children = description.get("children", [])
        if not isinstance(raw_children, (list, tuple)):
            raise TypeError(f"children must be a list, got {type(raw_children)!r}")

        identifier = description.get("uid")
        if identifier is not None and not isinstance(identifier, str):
            raise TypeError(f"uid must be a string, got {type(identifier)!r}")

        return SyntaxNode(
            kind=kind,
            name=str(description.get("name", "")),
            attributes=dict(attributes),
            children=tuple(self.build(child) for child in raw_children),
            identifier=identifier,
        )

    def build_component(self, name: str, value: Any) -> ComponentTree:
        """Build a named ComponentTree from a root node description."""
        return ComponentTree(name=name, root=self.build(value))

    def build_file(self, value: Mapping[str, Any]) -> ParsedFile:
        """Build a ParsedFile from ``{"components": {...}, "declarations": [...]}``.

        Raises:
            TypeError: If ``value`` or its ``components`` entry is not a mapping.
        """
        if not isinstance(value, Mapping):
            raise TypeError(f"File description must be a mapping, got {type(value)!r}")
        components = value.get("components", {})
        if not isinstance(components, Mapping):
            raise TypeError(
                f"components must be a mapping of name -> node, got {type(components)!r}"
            )
        return ParsedFile(
            components=tuple(
                self.build_component(name, root) for name, root in components.items()
            ),
            declarations=tuple(value.get("declarations", ())),
        )

    # ------------------------------------------------------------------
    # Reverse direction
    # ------------------------------------------------------------------

    def describe(self, node: SyntaxNode) -> dict[str, Any]:
        """Convert a SyntaxNode back into its description mapping.

        Always emits the long form (TEXT nodes included) so that identifiers
        survive the round trip.
        """
        description: dict[str, Any] = {"kind": str(node.kind)}
        if node.name:
            description["name"] = node.name
        if node.attributes:
            description["attributes"] = dict(node.attributes)
        if node.children:
            description["children"] = [self.describe(c) for c in node.children]
        if node.identifier is not None:
            description["uid"] = node.identifier
        return description

    def describe_file(self, parsed_file: ParsedFile) -> dict[str, Any]:
        """Convert a ParsedFile back into its description mapping."""
        description: dict[str, Any] = {
            "components": {
                c.name: self.describe(c.root) for c in parsed_file.components
            }
        }
        if parsed_file.declarations:
            description["declarations"] = list(parsed_file.declarations)
        return description
