"""Node similarity and cost functions for the matcher's similarity pass.

Similarity blends two components:
    sim = w_attributes * gamma_attributes + w_children * gamma_children

- gamma_attributes: share of attribute names whose values agree, over the
  union of attribute names (1.0 when neither node has attributes).
- gamma_children: multiset overlap of child signatures, over the longer
  child list (1.0 when neither node has children).

Nodes of different kind or name, or of an unrecognised kind, have similarity
0.0 and an infinite matching cost.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence

import numpy as np

from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.tree.nodes import NodeKind, SyntaxNode

__all__ = ["cost_matrix", "is_compatible", "node_similarity"]


def is_compatible(node_a: SyntaxNode, node_b: SyntaxNode) -> bool:
    """True if the two nodes may ever be paired: same known kind, same name."""
    return (
        isinstance(node_a.kind, NodeKind)
        and node_a.kind == node_b.kind
        and node_a.name == node_b.name
    )


def _attribute_agreement(
    node_a: SyntaxNode, node_b: SyntaxNode, identifier_attribute: str | None
) -> float:
    names = (set(node_a.attributes) | set(node_b.attributes)) - {identifier_attribute}
    if not names:
        return 1.0
    agreeing = sum(
        1
        for name in names
        if name in node_a.attributes
        and name in node_b.attributes
        and node_a.attributes[name] == node_b.attributes[name]
    )
    return agreeing / len(names)


def _child_overlap(
    node_a: SyntaxNode,
    node_b: SyntaxNode,
    signature: Callable[[SyntaxNode], str],
) -> float:
    longest = max(len(node_a.children), len(node_b.children))
    if longest == 0:
        return 1.0
    sigs_a = Counter(signature(child) for child in node_a.children)
    sigs_b = Counter(signature(child) for child in node_b.children)
    shared = sum((sigs_a & sigs_b).values())
    return shared / longest


def node_similarity(
    node_a: SyntaxNode,
    node_b: SyntaxNode,
    signature: Callable[[SyntaxNode], str],
    config: ReconcilerConfig,
) -> float:
    """Return the similarity of two nodes in [0, 1].

    Args:
        node_a: Old node.
        node_b: New node.
        signature: Signature function (usually a shared SignatureBuilder).
        config: Supplies the weights and the identifier attribute.
    """
    if not is_compatible(node_a, node_b):
        return 0.0
    gamma_attributes = _attribute_agreement(
        node_a, node_b, config.identifier_attribute
    )
    gamma_children = _child_overlap(node_a, node_b, signature)
    return config.w_attributes * gamma_attributes + config.w_children * gamma_children


def cost_matrix(
    old_nodes: Sequence[SyntaxNode],
    new_nodes: Sequence[SyntaxNode],
    signature: Callable[[SyntaxNode], str],
    config: ReconcilerConfig,
) -> np.ndarray:
    """Build the ``(len(old), len(new))`` matching cost matrix.

    Cell ``[i, j]`` is ``1 - similarity`` for pairs at or above
    ``config.min_similarity`` and ``np.inf`` (forbidden) otherwise.
    """
    matrix = np.full((len(old_nodes), len(new_nodes)), np.inf, dtype=float)
    for i, old in enumerate(old_nodes):
        for j, new in enumerate(new_nodes):
            sim = node_similarity(old, new, signature, config)
            if sim > 0.0 and sim >= config.min_similarity:
                matrix[i, j] = 1.0 - sim
    return matrix
