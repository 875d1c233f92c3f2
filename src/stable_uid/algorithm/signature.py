"""SignatureBuilder: content-only structural hashes of syntax subtrees.

A node's signature covers its kind, its name, its attributes (by name and
syntactic value) and the signatures of its children *in order*.  Identifiers
never contribute, and neither does the explicit identifier attribute, so a
labeled tree and its unlabeled re-parse hash identically.

Two nodes with equal signatures are treated as structurally interchangeable.
There is no deep-equality fallback: a BLAKE2b collision is accepted as
negligible.

Nodes whose kind is not a NodeKind are salted with their object identity, so
their signature never equals another node's and they are never matched.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from stable_uid.tree.nodes import NodeKind, SyntaxNode

__all__ = ["SignatureBuilder", "signature"]

_SEP = "\x1f"


def _canonical(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {repr(key): _canonical(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(repr(_canonical(item)) for item in value)
    return value


def _encode_attributes(
    attributes: Any, identifier_attribute: str | None
) -> str:
    items = {
        name: value
        for name, value in attributes.items()
        if name != identifier_attribute
    }
    # Keys are repr'd so mixed key types sort; repr also covers non-JSON leaves.
    return json.dumps(
        _canonical(items), sort_keys=True, separators=(",", ":"), default=repr
    )


class SignatureBuilder:
    """Memoizing bottom-up signature computation.

    The memo is keyed by node object identity and lives as long as the
    builder, so build one per reconciliation call while both trees are alive.

    Args:
        identifier_attribute: Attribute name excluded from signatures.
    """

    def __init__(self, identifier_attribute: str | None = "data-uid") -> None:
        self._identifier_attribute = identifier_attribute
        self._memo: dict[int, str] = {}
        # Keeps memoized nodes alive so their ids cannot be reused mid-call.
        self._alive: list[SyntaxNode] = []

    def __call__(self, node: SyntaxNode) -> str:
        return self.signature(node)

    def signature(self, node: SyntaxNode) -> str:
        """Return the hex signature of ``node``'s subtree."""
        key = id(node)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        child_signatures = [self.signature(child) for child in node.children]

        if isinstance(node.kind, NodeKind):
            kind = str(node.kind)
        else:
            kind = f"unknown:{node.kind!r}:{key}"

        payload = _SEP.join(
            [
                kind,
                node.name,
                _encode_attributes(node.attributes, self._identifier_attribute),
                ",".join(child_signatures),
            ]
        )
        digest = hashlib.blake2b(payload.encode("utf-8"), digest_size=16).hexdigest()
        self._memo[key] = digest
        self._alive.append(node)
        return digest


def signature(node: SyntaxNode, identifier_attribute: str | None = "data-uid") -> str:
    """Return the structural signature of ``node`` (one-shot, no shared memo)."""
    return SignatureBuilder(identifier_attribute).signature(node)
