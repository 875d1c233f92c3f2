"""IdentifierAllocator: turns match decisions into persistent identifiers.

One allocator serves one reconciliation call.  It remembers every identifier
it has handed out during that call, so even a malformed old tree (the same
identifier on two nodes) or a pasted explicit identifier can never yield two
nodes with the same identifier in the output.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stable_uid.namespace import IdentifierNamespace
from stable_uid.tree.nodes import SyntaxNode

__all__ = ["IdentifierAllocator"]

logger = logging.getLogger(__name__)


class IdentifierAllocator:
    """Reuses or mints identifiers for one reconciliation call.

    Args:
        namespace: The project-wide identifier namespace.
        reusable: Identifiers owned by the old version of the file being
            reconciled.  These may be reused (and explicitly pinned) even
            though the namespace already holds them.
        reserved: Identifiers pinned explicitly somewhere in the new file.
            They are never handed to a node through its old counterpart.
        min_length: Starting length of minted identifiers.
    """

    def __init__(
        self,
        namespace: IdentifierNamespace,
        reusable: Iterable[str] = (),
        reserved: Iterable[str] = (),
        min_length: int = 3,
    ) -> None:
        self._namespace = namespace
        self._reusable = frozenset(reusable)
        self._reserved = frozenset(reserved)
        self._min_length = min_length
        self._issued: set[str] = set()
        self.reused: list[str] = []
        self.minted: list[str] = []

    @property
    def issued(self) -> frozenset[str]:
        """Every identifier handed out so far in this call."""
        return frozenset(self._issued)

    def allocate(
        self,
        new_node: SyntaxNode,
        old_node: SyntaxNode | None,
        seed: str,
        pinned: str | None = None,
    ) -> str:
        """Return the identifier for ``new_node``.

        Resolution order:
        1. ``pinned`` (an explicit identifier attribute), if it is not issued
           yet in this call and is either reusable or free in the namespace.
        2. ``old_node.identifier``, if not issued yet in this call.
        3. A fresh identifier minted from ``seed``.
        """
        if pinned is not None:
            if self._can_take(pinned):
                return self._take(pinned)
            logger.warning("explicit identifier %r is already in use, ignoring", pinned)

        if old_node is not None and old_node.identifier is not None:
            previous = old_node.identifier
            if previous not in self._issued and previous not in self._reserved:
                return self._take(previous)
            logger.debug(
                "identifier %r is issued or pinned elsewhere, minting instead",
                previous,
            )

        uid = self._namespace.mint(seed, min_length=self._min_length)
        self._issued.add(uid)
        self.minted.append(uid)
        return uid

    def checkpoint(self) -> tuple[int, int]:
        """Mark the current allocation state for a later ``rollback``."""
        return len(self.reused), len(self.minted)

    def rollback(self, checkpoint: tuple[int, int]) -> None:
        """Undo every allocation made since ``checkpoint``.

        Identifiers minted since then are released from the namespace; reused
        identifiers stay held because the old file still owns them.
        """
        reused_mark, minted_mark = checkpoint
        undone_reused = self.reused[reused_mark:]
        undone_minted = self.minted[minted_mark:]
        del self.reused[reused_mark:]
        del self.minted[minted_mark:]
        self._issued.difference_update(undone_reused)
        self._issued.difference_update(undone_minted)
        self._namespace.release_all(undone_minted)

    def _can_take(self, identifier: str) -> bool:
        if identifier in self._issued:
            return False
        return identifier in self._reusable or identifier not in self._namespace

    def _take(self, identifier: str) -> str:
        # Reused identifiers are normally still held; re-register if a caller
        # released them in between.
        self._namespace.ensure(identifier)
        self._issued.add(identifier)
        if identifier in self._reusable:
            self.reused.append(identifier)
        else:
            self.minted.append(identifier)
        return identifier
