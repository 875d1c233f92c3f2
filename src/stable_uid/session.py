"""ReconciliationSession: per-project state that outlives a single reconcile call.

The session owns the project's IdentifierNamespace and remembers the last
labeled version of every file it has seen, keyed by path.  Each update
reconciles the new parse against that remembered version and replaces it:
last write wins, so a caller that wants to cancel simply never submits a
superseded parse.

Remembered files live in a ``cachetools.LRUCache``.  When a file is evicted
(or forgotten explicitly) its identifiers are released from the namespace;
the next update of that path is a cold start.

All public methods hold one session lock, so a session can be driven from a
background worker thread while the editor thread reads ``last()``.

Example::

    from stable_uid.session import ReconciliationSession

    session = ReconciliationSession()
    first = session.update_text("/src/app.json", text)
    again = session.update_text("/src/app.json", text)
    assert again.reused == first.minted  # unchanged source, unchanged ids
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from cachetools import LRUCache

from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.reconciler import Reconciler
from stable_uid.backends import JsonDocumentBackend
from stable_uid.namespace import IdentifierNamespace
from stable_uid.tree.walk import iter_identifiers

if TYPE_CHECKING:
    from stable_uid.protocols import ParserBackend
    from stable_uid.result import ReconciliationResult
    from stable_uid.tree.nodes import ParsedFile

__all__ = ["ReconciliationSession"]

logger = logging.getLogger(__name__)


class _FileCache(LRUCache):  # type: ignore[type-arg]
    """LRUCache that reports evicted entries."""

    def __init__(
        self, maxsize: int, on_evict: Callable[[str, ParsedFile], None]
    ) -> None:
        super().__init__(maxsize=maxsize)
        self._on_evict = on_evict

    def popitem(self) -> tuple[Any, Any]:
        key, value = super().popitem()
        self._on_evict(key, value)
        return key, value


class ReconciliationSession:
    """Editor-session front end for identifier reconciliation.

    Args:
        backend: A ParserBackend-conformant object used by ``update_text``
            and ``print``.  Defaults to ``JsonDocumentBackend()``.
        config: Reconciler parameters.  Defaults to ``ReconcilerConfig()``.
        namespace: The project namespace.  A new one is created when None.
        max_files: Maximum number of files remembered.  When exceeded, the
            least-recently-used file is evicted and its identifiers released.
            This is an infrastructure parameter, not part of
            ``ReconcilerConfig``.
    """

    def __init__(
        self,
        backend: ParserBackend | None = None,
        config: ReconcilerConfig | None = None,
        namespace: IdentifierNamespace | None = None,
        max_files: int = 256,
    ) -> None:
        self._config = config if config is not None else ReconcilerConfig()
        if namespace is None:
            namespace = IdentifierNamespace(
                min_length=self._config.min_identifier_length
            )
        self._namespace = namespace
        self._backend: Any = backend if backend is not None else JsonDocumentBackend(
            identifier_attribute=self._config.identifier_attribute
        )
        self._reconciler = Reconciler(namespace=namespace, config=self._config)
        self._files = _FileCache(max_files, self._release)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def namespace(self) -> IdentifierNamespace:
        return self._namespace

    @property
    def max_files(self) -> int:
        """The maximum number of files this session remembers."""
        return int(self._files.maxsize)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._files

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(self, path: str, new_file: ParsedFile) -> ReconciliationResult:
        """Reconcile a fresh parse of ``path`` and remember the labeled result."""
        with self._lock:
            old_file = self._files.get(path)
            result = self._reconciler.reconcile(new_file, old_file)
            self._files[path] = result.parsed_file
            logger.debug(
                "updated %s: %d reused, %d minted, %d dropped",
                path,
                len(result.reused),
                len(result.minted),
                len(result.dropped),
            )
            return result

    def update_text(self, path: str, text: str) -> ReconciliationResult:
        """Parse ``text`` with the backend, then ``update`` ``path`` with it.

        Parse errors propagate unchanged; the remembered file is untouched.
        """
        new_file = self._backend.parse(text)
        return self.update(path, new_file)

    def last(self, path: str) -> ParsedFile | None:
        """Return the last labeled version of ``path``, or None."""
        with self._lock:
            return self._files.get(path)

    def print(self, path: str) -> str:
        """Print the last labeled version of ``path`` with the backend.

        Raises:
            KeyError: If the session has no version of ``path``.
        """
        with self._lock:
            parsed_file = self._files[path]
        return str(self._backend.print(parsed_file))

    def forget(self, path: str) -> None:
        """Drop ``path`` and release its identifiers.  Unknown paths are a no-op."""
        with self._lock:
            parsed_file = self._files.pop(path, None)
            if parsed_file is not None:
                self._release(path, parsed_file)

    def _release(self, path: str, parsed_file: ParsedFile) -> None:
        logger.debug("releasing identifiers of %s", path)
        self._namespace.release_all(iter_identifiers(parsed_file))
