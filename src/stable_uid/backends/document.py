"""JsonDocumentBackend: parse/print bridge for JSON-encoded component files.

The document format is the TreeBuilder description format serialized as
JSON::

    {
      "components": {
        "App": {"kind": "element", "name": "div", "children": [...]}
      },
      "declarations": ["import View from 'ui'"]
    }

Parsing returns an unlabeled ParsedFile: any ``"uid"`` keys in the document
are dropped, exactly as a source parser never produces identifiers.
Printing writes each node's identifier into its identifier attribute (for
element nodes), the way the editor writes ``data-uid`` back into source, so
that a printed document reparses with every element pinned to its identifier.

This backend satisfies the ``ParserBackend`` Protocol structurally without
inheriting from it.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any

from stable_uid.tree.builder import TreeBuilder
from stable_uid.tree.nodes import ComponentTree, NodeKind, ParsedFile, SyntaxNode
from stable_uid.tree.walk import unlabel

# Module-level builder (stateless, safe to share).
_builder = TreeBuilder()


class JsonDocumentBackend:
    """ParserBackend for JSON component documents.

    Args:
        identifier_attribute: Attribute that ``print`` writes identifiers
            into.  ``None`` prints identifiers as ``"uid"`` keys instead,
            which ``parse`` then discards.
        indent: JSON indentation used by ``print``.

    Example::

        backend = JsonDocumentBackend()
        parsed = backend.parse('{"components": {"App": {"name": "div"}}}')
        parsed.components[0].root.identifier  # None
    """

    def __init__(
        self, identifier_attribute: str | None = "data-uid", indent: int | None = 2
    ) -> None:
        self._identifier_attribute = identifier_attribute
        self._indent = indent

    def parse(self, text: str) -> ParsedFile:
        """Parse a JSON document into an unlabeled ParsedFile.

        Raises:
            json.JSONDecodeError: If ``text`` is not valid JSON.
            TypeError, ValueError: If the document is not a valid description.
        """
        document: Any = json.loads(text)
        return unlabel(_builder.build_file(document))

    def print(self, parsed_file: ParsedFile) -> str:
        """Serialize ``parsed_file`` to a JSON document."""
        if self._identifier_attribute is not None:
            parsed_file = ParsedFile(
                components=tuple(
                    ComponentTree(name=c.name, root=self._pin(c.root))
                    for c in parsed_file.components
                ),
                declarations=parsed_file.declarations,
            )
        return json.dumps(_builder.describe_file(parsed_file), indent=self._indent)

    def _pin(self, node: SyntaxNode) -> SyntaxNode:
        children = tuple(self._pin(child) for child in node.children)
        if node.kind != NodeKind.ELEMENT or node.identifier is None:
            return replace(node, children=children)
        attributes = dict(node.attributes)
        attributes[self._identifier_attribute] = node.identifier
        return replace(node, attributes=attributes, children=children, identifier=None)
