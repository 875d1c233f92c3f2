"""Exception types raised by stable-uid."""

from __future__ import annotations

__all__ = ["IdentifierCollisionError", "StableUidError"]


class StableUidError(Exception):
    """Base class for all stable-uid errors."""


class IdentifierCollisionError(StableUidError, RuntimeError):
    """An identifier was committed twice to the same namespace.

    Minting checks the namespace before committing, so this can only be
    observed when a caller bypasses the single-writer discipline (for example
    by claiming an identifier another live file already holds).  It signals
    a programming error, not a recoverable runtime condition.
    """

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"identifier {identifier!r} is already held in this namespace")
