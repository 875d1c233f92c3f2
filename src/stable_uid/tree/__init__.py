"""Tree subpackage: immutable parse-tree primitives.

Re-exports the public API for the tree module:
- SyntaxNode: frozen dataclass representing a node in a component tree
- NodeKind: StrEnum of the four node kinds (ELEMENT, EXPRESSION, FRAGMENT, TEXT)
- ComponentTree / ParsedFile: named component roots and whole-file results
- TreeBuilder: converts JSON-like node descriptions into SyntaxNode trees
- iter_nodes, iter_identifiers, unlabel, shape, uid_tree: traversal helpers
"""

from stable_uid.tree.builder import TreeBuilder
from stable_uid.tree.nodes import ComponentTree, NodeKind, ParsedFile, SyntaxNode
from stable_uid.tree.walk import iter_identifiers, iter_nodes, shape, uid_tree, unlabel

__all__ = [
    "ComponentTree",
    "NodeKind",
    "ParsedFile",
    "SyntaxNode",
    "TreeBuilder",
    "iter_identifiers",
    "iter_nodes",
    "shape",
    "uid_tree",
    "unlabel",
]
