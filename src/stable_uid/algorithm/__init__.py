"""algorithm subpackage: public API for identifier reconciliation.

Provides the reconciler, its configuration, and the building blocks it is
made of (signatures, child matching, identifier allocation).  Import from
this module (not from sub-modules directly) to stay on the stable public
interface.

Example::

    from stable_uid.algorithm import Reconciler, ReconcilerConfig
    from stable_uid.namespace import IdentifierNamespace

    reconciler = Reconciler(IdentifierNamespace(), ReconcilerConfig())
    result = reconciler.reconcile(new_file, old_file)
"""

from __future__ import annotations

from stable_uid.algorithm.allocator import IdentifierAllocator
from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.matcher import match_children, optimal_pairs
from stable_uid.algorithm.reconciler import Reconciler
from stable_uid.algorithm.signature import SignatureBuilder, signature

__all__ = [
    "IdentifierAllocator",
    "Reconciler",
    "ReconcilerConfig",
    "SignatureBuilder",
    "match_children",
    "optimal_pairs",
    "signature",
]
