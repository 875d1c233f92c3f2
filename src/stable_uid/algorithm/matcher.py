"""Child-list matching: pairs new syntax nodes with their old counterparts.

``match_children`` aligns the children of a new node against the children of
its old counterpart in passes, each only considering what earlier passes left
unclaimed:

1. Pinned: a new child whose explicit identifier attribute names an old
   child's identifier is paired with that child.
2. Anchored: in a sibling list whose length did not change, a new child whose
   signature equals that of the old child at the same index is paired with
   it.  Editing one of several identical siblings thus leaves the unchanged
   ones where they were.
3. Signature: old children are bucketed by structural signature (FIFO).  New
   children are walked left to right and pop the *earliest remaining* old
   child with the same signature.  Inserting an element before identical
   siblings therefore never shifts their identifiers, and duplicating an
   element leaves the original identifier on the first copy only.
4. Positional: in a sibling list whose length did not change, a new child
   still unmatched is paired with the unclaimed old child at the same index
   when both share kind and name, so a value-only edit does not register as
   delete + insert.  Lists whose length changed skip this pass; an
   insertion there would pair every edited sibling with its neighbour.
5. Similarity: the remaining children are paired by optimal assignment
   (Hungarian algorithm) over a ``1 - similarity`` cost matrix, so an element
   that was both edited and moved keeps its identifier.

Anchored and positional passes are both switched by
``ReconcilerConfig.positional_fallback``.  Old children never claimed are
deletions.  Recursion into matched pairs is the reconciler's job: it runs
even when signatures are equal, so identifiers are assigned per node
instance.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable, Sequence

import numpy as np
from scipy.optimize import linear_sum_assignment  # type: ignore[import-untyped]

from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.similarity import cost_matrix, is_compatible
from stable_uid.tree.nodes import ComponentTree, SyntaxNode

__all__ = [
    "explicit_identifier",
    "match_children",
    "match_components",
    "optimal_pairs",
]

Match = tuple[SyntaxNode, SyntaxNode | None]


def optimal_pairs(costs: np.ndarray) -> list[tuple[int, int]]:
    """Pair rows with columns of a ``1 - similarity`` cost matrix.

    Cells marked ``np.inf`` are forbidden and never appear in the result.
    Among assignments with the most allowed pairs, the cheapest wins.

    Args:
        costs: Matrix of shape ``(old, new)`` with finite entries in ``[0, 1]``.

    Returns:
        ``(row, column)`` index pairs, sorted by row.
    """
    if costs.size == 0:
        return []
    allowed = np.isfinite(costs)
    if not allowed.any():
        return []

    # A forbidden cell costs more than any full set of allowed pairs.
    forbidden = float(min(costs.shape)) + 1.0
    rows, cols = linear_sum_assignment(np.where(allowed, costs, forbidden))
    return [
        (int(r), int(c))
        for r, c in zip(rows.tolist(), cols.tolist(), strict=True)
        if allowed[r, c]
    ]


def explicit_identifier(node: SyntaxNode, config: ReconcilerConfig) -> str | None:
    """Return the identifier pinned by ``node``'s identifier attribute, if any.

    Only non-empty string literals count; any other value is an ordinary
    attribute expression.
    """
    if config.identifier_attribute is None:
        return None
    value = node.attributes.get(config.identifier_attribute)
    if isinstance(value, str) and value:
        return value
    return None


def match_children(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    signature: Callable[[SyntaxNode], str],
    config: ReconcilerConfig | None = None,
) -> list[Match]:
    """Pair every new child with its old counterpart, or None if it is new.

    Args:
        old_children: Labeled children of the old node, in document order.
        new_children: Unlabeled children of the new node, in document order.
        signature: Structural signature function shared across the call.
        config: Matcher switches.  Defaults to ``ReconcilerConfig()``.

    Returns:
        One ``(new_child, old_child_or_None)`` tuple per new child, in
        new-child order.  Each old child appears at most once.
    """
    if config is None:
        config = ReconcilerConfig()

    assigned: list[int | None] = [None] * len(new_children)
    claimed: set[int] = set()

    same_length = len(old_children) == len(new_children)

    _match_pinned(old_children, new_children, config, assigned, claimed)
    if config.positional_fallback and same_length:
        _match_anchored(old_children, new_children, signature, assigned, claimed)
    _match_by_signature(old_children, new_children, signature, assigned, claimed)
    if config.positional_fallback and same_length:
        _match_by_position(old_children, new_children, assigned, claimed)
    if config.similarity_fallback:
        _match_by_similarity(
            old_children, new_children, signature, config, assigned, claimed
        )

    return [
        (new, old_children[idx] if idx is not None else None)
        for new, idx in zip(new_children, assigned, strict=True)
    ]


def _match_pinned(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    config: ReconcilerConfig,
    assigned: list[int | None],
    claimed: set[int],
) -> None:
    by_identifier: dict[str, int] = {}
    for i, old in enumerate(old_children):
        if old.identifier is not None:
            by_identifier.setdefault(old.identifier, i)

    for j, new in enumerate(new_children):
        pinned = explicit_identifier(new, config)
        if pinned is None:
            continue
        i = by_identifier.get(pinned)
        if i is not None and i not in claimed:
            assigned[j] = i
            claimed.add(i)


def _match_anchored(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    signature: Callable[[SyntaxNode], str],
    assigned: list[int | None],
    claimed: set[int],
) -> None:
    for j, new in enumerate(new_children):
        if assigned[j] is not None or j in claimed:
            continue
        if signature(old_children[j]) == signature(new):
            assigned[j] = j
            claimed.add(j)


def _match_by_signature(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    signature: Callable[[SyntaxNode], str],
    assigned: list[int | None],
    claimed: set[int],
) -> None:
    buckets: dict[str, deque[int]] = defaultdict(deque)
    for i, old in enumerate(old_children):
        if i not in claimed:
            buckets[signature(old)].append(i)

    for j, new in enumerate(new_children):
        if assigned[j] is not None:
            continue
        bucket = buckets.get(signature(new))
        if bucket:
            i = bucket.popleft()
            assigned[j] = i
            claimed.add(i)


def _match_by_position(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    assigned: list[int | None],
    claimed: set[int],
) -> None:
    for j, new in enumerate(new_children):
        if assigned[j] is not None or j in claimed:
            continue
        if is_compatible(old_children[j], new):
            assigned[j] = j
            claimed.add(j)


def _match_by_similarity(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    signature: Callable[[SyntaxNode], str],
    config: ReconcilerConfig,
    assigned: list[int | None],
    claimed: set[int],
) -> None:
    old_left = [i for i in range(len(old_children)) if i not in claimed]
    new_left = [j for j in range(len(new_children)) if assigned[j] is None]
    if not old_left or not new_left:
        return

    costs = cost_matrix(
        [old_children[i] for i in old_left],
        [new_children[j] for j in new_left],
        signature,
        config,
    )
    for r, c in optimal_pairs(costs):
        i = old_left[r]
        assigned[new_left[c]] = i
        claimed.add(i)


def match_components(
    old_components: Sequence[ComponentTree],
    new_components: Sequence[ComponentTree],
) -> list[tuple[ComponentTree, ComponentTree | None]]:
    """Pair top-level components by name.

    Source order is irrelevant; a renamed component has no counterpart.
    """
    by_name: dict[str, ComponentTree] = {}
    for component in old_components:
        by_name.setdefault(component.name, component)
    return [(new, by_name.get(new.name)) for new in new_components]
