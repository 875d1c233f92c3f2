"""IdentifierNamespace: the project-wide registry of live persistent identifiers.

One namespace exists per project.  It is constructed when the project is
loaded and passed explicitly into every reconciliation call; there is no
module-level registry.  Every identifier held by any labeled file of the
project is registered here, so a freshly minted identifier is unique across
the whole project forest, not just within one file.

Minting is deterministic: the candidate is a prefix of the SHA-256 hex digest
of a caller-supplied seed.  The prefix starts short (three characters by
default) and is lengthened, then salted with a counter, until it no longer
collides with a held identifier.  Given the same namespace contents and the
same seed, ``mint`` always returns the same identifier.

All operations take an internal lock, so the namespace may be queried and
extended from whichever thread runs reconciliation.

Example::

    namespace = IdentifierNamespace()
    uid = namespace.mint("App/0/1")
    assert uid in namespace
    namespace.release(uid)
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Iterable, Iterator

from stable_uid.errors import IdentifierCollisionError

__all__ = ["IdentifierNamespace"]

_DIGEST_LENGTH = 64


class IdentifierNamespace:
    """Thread-safe set of identifiers currently held by a project.

    Args:
        identifiers: Identifiers already held (for example, restored from a
            saved project).  Duplicates in this iterable are ignored.
        min_length: Default starting length of minted identifiers.
    """

    def __init__(self, identifiers: Iterable[str] = (), min_length: int = 3) -> None:
        if not 1 <= min_length <= _DIGEST_LENGTH:
            msg = f"min_length must be in [1, {_DIGEST_LENGTH}], got {min_length}"
            raise ValueError(msg)
        self._held: set[str] = set(identifiers)
        self._min_length = min_length
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._held

    def __len__(self) -> int:
        with self._lock:
            return len(self._held)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def snapshot(self) -> frozenset[str]:
        """Return an immutable copy of the held identifiers."""
        with self._lock:
            return frozenset(self._held)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def mint(self, seed: str, min_length: int | None = None) -> str:
        """Create, commit and return a fresh identifier derived from ``seed``.

        The check against held identifiers and the commit happen under one
        lock acquisition, so two minting threads can never receive the same
        identifier.

        Args:
            seed: Any string; equal seeds yield equal candidates.
            min_length: Starting prefix length, defaults to the namespace's.
        """
        length = self._min_length if min_length is None else min_length
        with self._lock:
            salt = 0
            while True:
                material = seed if salt == 0 else f"{seed}#{salt}"
                digest = hashlib.sha256(material.encode("utf-8")).hexdigest()
                for end in range(length, _DIGEST_LENGTH + 1):
                    candidate = digest[:end]
                    if candidate not in self._held:
                        self._held.add(candidate)
                        return candidate
                salt += 1

    def claim(self, identifier: str) -> None:
        """Register an existing identifier.

        Raises:
            IdentifierCollisionError: If ``identifier`` is already held.
        """
        with self._lock:
            if identifier in self._held:
                raise IdentifierCollisionError(identifier)
            self._held.add(identifier)

    def ensure(self, identifier: str) -> bool:
        """Register ``identifier`` if absent; return True if it was added."""
        with self._lock:
            if identifier in self._held:
                return False
            self._held.add(identifier)
            return True

    def release(self, identifier: str) -> None:
        """Forget ``identifier``.  Releasing an unknown identifier is a no-op."""
        with self._lock:
            self._held.discard(identifier)

    def release_all(self, identifiers: Iterable[str]) -> None:
        """Forget every identifier in ``identifiers``."""
        with self._lock:
            self._held.difference_update(identifiers)
