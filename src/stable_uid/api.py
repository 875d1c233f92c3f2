"""Public API functions for stable-uid.

This module provides the user-facing functions: reconcile, is_identity_stable,
signature and match_children.  ``reconcile`` creates a fresh Reconciler per
call; the only state it touches is the namespace the caller passes in.
"""

from __future__ import annotations

from collections.abc import Sequence

from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.matcher import match_children as _match_children
from stable_uid.algorithm.reconciler import Reconciler
from stable_uid.algorithm.signature import SignatureBuilder
from stable_uid.namespace import IdentifierNamespace
from stable_uid.result import ReconciliationResult
from stable_uid.tree.nodes import ParsedFile, SyntaxNode
from stable_uid.tree.walk import iter_identifiers, unlabel

__all__ = ["is_identity_stable", "match_children", "reconcile", "signature"]


def reconcile(
    new_file: ParsedFile,
    old_file: ParsedFile | None = None,
    namespace: IdentifierNamespace | None = None,
    config: ReconcilerConfig | None = None,
) -> ReconciliationResult:
    """Label ``new_file`` with persistent identifiers, reusing ``old_file``'s.

    Args:
        new_file:  Fresh, unlabeled parse result.
        old_file:  The previous labeled version of the same file, or None on
                   a cold start.
        namespace: The project's identifier namespace.  Pass the same object
                   to every call of a project; when None, a throwaway
                   namespace seeded with ``old_file``'s identifiers is used.
        config:    Reconciler parameters.  Defaults to ``ReconcilerConfig()``.

    Returns:
        A ``ReconciliationResult`` whose ``parsed_file`` has the shape of
        ``new_file`` and a unique identifier on every node.
    """
    if namespace is None:
        cfg = config if config is not None else ReconcilerConfig()
        namespace = IdentifierNamespace(
            iter_identifiers(old_file) if old_file is not None else (),
            min_length=cfg.min_identifier_length,
        )
    return Reconciler(namespace=namespace, config=config).reconcile(new_file, old_file)


def is_identity_stable(
    labeled_file: ParsedFile,
    config: ReconcilerConfig | None = None,
) -> bool:
    """Return True if re-parsing ``labeled_file`` would keep every identifier.

    Reconciles ``unlabel(labeled_file)`` against ``labeled_file`` in a
    throwaway namespace and checks that the output equals the input.
    """
    result = reconcile(unlabel(labeled_file), labeled_file, config=config)
    return result.parsed_file == labeled_file


def signature(node: SyntaxNode, config: ReconcilerConfig | None = None) -> str:
    """Return the structural signature of ``node``."""
    cfg = config if config is not None else ReconcilerConfig()
    return SignatureBuilder(cfg.identifier_attribute).signature(node)


def match_children(
    old_children: Sequence[SyntaxNode],
    new_children: Sequence[SyntaxNode],
    config: ReconcilerConfig | None = None,
) -> list[tuple[SyntaxNode, SyntaxNode | None]]:
    """Pair each new child with its old counterpart (or None if it is new)."""
    cfg = config if config is not None else ReconcilerConfig()
    builder = SignatureBuilder(cfg.identifier_attribute)
    return _match_children(old_children, new_children, builder, cfg)
