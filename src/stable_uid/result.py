"""ReconciliationResult dataclass for reconciliation output.

This module provides the rich result type returned by reconcile() calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from stable_uid.tree.nodes import ParsedFile

__all__ = ["ReconciliationResult"]


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Rich result of a reconcile() call.

    Attributes:
        parsed_file: The new file with every node labeled.  Same shape as the
            unlabeled input.
        reused: Identifiers carried over from the old file, in document order.
        minted: Identifiers that are new to this file (freshly minted or
            taken from an explicit identifier attribute), in document order.
        dropped: Identifiers of the old file that were not reused.  They have
            been released from the namespace.
        computation_time_ms: Wall-clock duration of the call in milliseconds.
    """

    parsed_file: ParsedFile
    reused: list[str]
    minted: list[str]
    dropped: list[str]
    computation_time_ms: float

    @property
    def is_identity_stable(self) -> bool:
        """True when no identifier was minted or dropped."""
        return not self.minted and not self.dropped
