"""stable-uid - persistent element identifiers across re-parses of UI source."""

from __future__ import annotations

import logging

from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.reconciler import Reconciler
from stable_uid.api import (
    is_identity_stable,
    match_children,
    reconcile,
    signature,
)
from stable_uid.errors import IdentifierCollisionError, StableUidError
from stable_uid.namespace import IdentifierNamespace
from stable_uid.result import ReconciliationResult
from stable_uid.session import ReconciliationSession
from stable_uid.tree import (
    ComponentTree,
    NodeKind,
    ParsedFile,
    SyntaxNode,
    TreeBuilder,
    shape,
    uid_tree,
    unlabel,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "ComponentTree",
    "IdentifierCollisionError",
    "IdentifierNamespace",
    "NodeKind",
    "ParsedFile",
    "ReconciliationResult",
    "ReconciliationSession",
    "Reconciler",
    "ReconcilerConfig",
    "StableUidError",
    "SyntaxNode",
    "TreeBuilder",
    "is_identity_stable",
    "match_children",
    "reconcile",
    "shape",
    "signature",
    "uid_tree",
    "unlabel",
]
