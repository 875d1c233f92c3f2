"""SyntaxNode, ComponentTree and ParsedFile: the immutable parse-tree model.

A parsed source file is a sequence of named ComponentTrees, each wrapping one
SyntaxNode subtree.  Nodes are frozen: reconciliation builds new trees with
identifiers attached rather than mutating the parser's output.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum, auto
from types import MappingProxyType
from typing import Any

# Syntactic attribute value: str, int, float, bool, None, list or dict thereof.
AttributeValue = Any


class NodeKind(StrEnum):
    """Closed set of syntax node kinds.

    - ELEMENT    -> "element"    : a tag with attributes and children
    - EXPRESSION -> "expression" : an embedded code expression
    - FRAGMENT   -> "fragment"   : an anonymous grouping of children
    - TEXT       -> "text"       : literal text content
    """

    ELEMENT = auto()
    EXPRESSION = auto()
    FRAGMENT = auto()
    TEXT = auto()


def _freeze_attributes(attributes: Mapping[str, AttributeValue]) -> Mapping[str, Any]:
    if isinstance(attributes, MappingProxyType):
        return attributes
    return MappingProxyType(dict(attributes))


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """A node in a component's syntax tree.

    Attributes:
        kind:       Which kind of node this is (see NodeKind).
        name:       Tag name for ELEMENT nodes; source text for EXPRESSION and
                    TEXT nodes; empty string for FRAGMENT nodes.
        attributes: Attribute name -> syntactic value.  Wrapped read-only.
        children:   Child nodes in rendering order.
        identifier: Persistent identifier, None on freshly parsed nodes.
    """

    kind: NodeKind
    name: str = ""
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    children: tuple[SyntaxNode, ...] = ()
    identifier: str | None = None

    def __post_init__(self) -> None:
        # frozen dataclass: normalise through object.__setattr__
        if not isinstance(self.kind, NodeKind):
            # Unrecognised kinds are kept as-is; the matcher never pairs them.
            try:
                object.__setattr__(self, "kind", NodeKind(self.kind))
            except ValueError:
                pass
        object.__setattr__(self, "attributes", _freeze_attributes(self.attributes))
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_labeled(self) -> bool:
        """True when this node (not its descendants) carries an identifier."""
        return self.identifier is not None

    def with_identifier(self, identifier: str | None) -> SyntaxNode:
        """Return a copy of this node with ``identifier`` set."""
        return replace(self, identifier=identifier)

    def with_children(self, children: tuple[SyntaxNode, ...]) -> SyntaxNode:
        """Return a copy of this node with ``children`` replaced."""
        return replace(self, children=tuple(children))


@dataclass(frozen=True, slots=True)
class ComponentTree:
    """A named top-level component.

    The component ``name`` (its exported binding) is the stable key used to
    pair old and new components; it is never a generated identifier.
    """

    name: str
    root: SyntaxNode


@dataclass(frozen=True, slots=True)
class ParsedFile:
    """Parse result for one source file.

    Attributes:
        components:   Top-level components in source order.
        declarations: Auxiliary top-level declarations (imports, helpers).
                      Opaque to reconciliation and carried through unchanged.
    """

    components: tuple[ComponentTree, ...] = ()
    declarations: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "declarations", tuple(self.declarations))

    @property
    def component_names(self) -> list[str]:
        return [c.name for c in self.components]

    def component(self, name: str) -> ComponentTree | None:
        """Return the component called ``name``, or None."""
        for component in self.components:
            if component.name == name:
                return component
        return None
