"""Reconciler: labels a freshly parsed file with persistent identifiers.

Given the new, unlabeled ParsedFile and the previously labeled version of the
same file, the reconciler produces a labeled copy of the new file that reuses
old identifiers wherever an element is still "the same" element and mints
fresh identifiers only for genuinely new elements.

Architecture:
- Components:  paired by name (``match_components``).  Each component root is
  matched against the old root as a one-element child list, so a root whose
  tag changed is treated like any other edited child.
- Children:    paired by ``match_children`` (pinned, signature, positional,
  similarity passes).  Matched pairs are recursed into unconditionally.
- Allocation:  ``IdentifierAllocator`` decides reuse vs. mint per node, in
  document (pre-)order, so minted identifiers follow document order.
- Signatures:  one ``SignatureBuilder`` per call, shared by both trees.

The call is synchronous and does no I/O.  Inputs are never mutated.  The
only shared state is the namespace: minted identifiers are committed to it
and identifiers of the old file that were not reused are released.

A component whose matching fails unexpectedly is logged and relabeled from
scratch; the result is then merely suboptimal (identifier continuity lost for
that component), never corrupt.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from stable_uid.algorithm.allocator import IdentifierAllocator
from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.matcher import (
    explicit_identifier,
    match_children,
    match_components,
)
from stable_uid.algorithm.signature import SignatureBuilder
from stable_uid.errors import IdentifierCollisionError
from stable_uid.namespace import IdentifierNamespace
from stable_uid.result import ReconciliationResult
from stable_uid.tree.nodes import ComponentTree, ParsedFile, SyntaxNode
from stable_uid.tree.walk import iter_identifiers, iter_nodes

__all__ = ["Reconciler"]

logger = logging.getLogger(__name__)


class Reconciler:
    """Identifier reconciliation for whole files.

    Example::

        from stable_uid.algorithm import Reconciler
        from stable_uid.namespace import IdentifierNamespace

        reconciler = Reconciler(IdentifierNamespace())
        first = reconciler.reconcile(parsed)            # cold start
        second = reconciler.reconcile(reparsed, first.parsed_file)
        # second.parsed_file reuses first's identifiers wherever possible
    """

    def __init__(
        self,
        namespace: IdentifierNamespace | None = None,
        config: ReconcilerConfig | None = None,
    ) -> None:
        """Initialise the reconciler.

        Args:
            namespace: The project's identifier namespace.  A private one is
                created when None, which only guarantees uniqueness among
                files reconciled by this instance.
            config: Matcher and allocator parameters.  Defaults to
                ``ReconcilerConfig()``.
        """
        self._config = config if config is not None else ReconcilerConfig()
        if namespace is None:
            namespace = IdentifierNamespace(
                min_length=self._config.min_identifier_length
            )
        self._namespace = namespace

    @property
    def namespace(self) -> IdentifierNamespace:
        return self._namespace

    @property
    def config(self) -> ReconcilerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reconcile(
        self,
        new_file: ParsedFile,
        old_file: ParsedFile | None = None,
    ) -> ReconciliationResult:
        """Label ``new_file``, reusing identifiers from ``old_file``.

        Args:
            new_file: Fresh parse result.  Identifiers on it, if any, are
                ignored; explicit identifier attributes are honoured.
            old_file: Previous labeled version of the file, or None on a
                cold start.

        Returns:
            A ``ReconciliationResult`` whose ``parsed_file`` has the same
            shape as ``new_file`` and a unique identifier on every node.
        """
        t0 = time.perf_counter()

        signatures = SignatureBuilder(self._config.identifier_attribute)
        old_identifiers = (
            list(dict.fromkeys(iter_identifiers(old_file)))
            if old_file is not None
            else []
        )
        pinned = {
            uid
            for node in iter_nodes(new_file)
            if (uid := explicit_identifier(node, self._config)) is not None
        }
        allocator = IdentifierAllocator(
            self._namespace,
            reusable=old_identifiers,
            reserved=pinned,
            min_length=self._config.min_identifier_length,
        )

        old_components = old_file.components if old_file is not None else ()
        labeled: list[ComponentTree] = []
        for new_component, old_component in match_components(
            old_components, new_file.components
        ):
            if old_component is None:
                logger.debug("component %r has no previous tree", new_component.name)
            root = self._label_component(
                new_component, old_component, signatures, allocator
            )
            labeled.append(ComponentTree(name=new_component.name, root=root))

        issued = allocator.issued
        dropped = [uid for uid in old_identifiers if uid not in issued]
        self._namespace.release_all(dropped)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug(
            "reconciled %d component(s): %d reused, %d minted, %d dropped in %.2fms",
            len(labeled),
            len(allocator.reused),
            len(allocator.minted),
            len(dropped),
            elapsed_ms,
        )

        return ReconciliationResult(
            parsed_file=ParsedFile(
                components=tuple(labeled),
                declarations=new_file.declarations,
            ),
            reused=list(allocator.reused),
            minted=list(allocator.minted),
            dropped=dropped,
            computation_time_ms=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Tree walking
    # ------------------------------------------------------------------

    def _label_component(
        self,
        new_component: ComponentTree,
        old_component: ComponentTree | None,
        signatures: SignatureBuilder,
        allocator: IdentifierAllocator,
    ) -> SyntaxNode:
        old_roots = (old_component.root,) if old_component is not None else ()
        checkpoint = allocator.checkpoint()
        try:
            (root,) = self._label_children(
                old_roots,
                (new_component.root,),
                new_component.name,
                signatures,
                allocator,
            )
            return root
        except IdentifierCollisionError:
            raise
        except Exception:
            logger.warning(
                "matching failed for component %r, assigning fresh identifiers",
                new_component.name,
                exc_info=True,
            )
            allocator.rollback(checkpoint)
            return self._label_fresh(
                new_component.root, f"{new_component.name}/0", allocator
            )

    def _label_children(
        self,
        old_children: tuple[SyntaxNode, ...],
        new_children: tuple[SyntaxNode, ...],
        path: str,
        signatures: SignatureBuilder,
        allocator: IdentifierAllocator,
    ) -> tuple[SyntaxNode, ...]:
        pairs = match_children(old_children, new_children, signatures, self._config)
        return tuple(
            self._label_node(new, old, f"{path}/{index}", signatures, allocator)
            for index, (new, old) in enumerate(pairs)
        )

    def _label_node(
        self,
        new: SyntaxNode,
        old: SyntaxNode | None,
        path: str,
        signatures: SignatureBuilder,
        allocator: IdentifierAllocator,
    ) -> SyntaxNode:
        uid = allocator.allocate(
            new,
            old,
            seed=f"{path}:{signatures(new)}",
            pinned=explicit_identifier(new, self._config),
        )
        old_children = old.children if old is not None else ()
        children = self._label_children(
            old_children, new.children, path, signatures, allocator
        )
        return replace(new, children=children, identifier=uid)

    def _label_fresh(
        self,
        node: SyntaxNode,
        path: str,
        allocator: IdentifierAllocator,
    ) -> SyntaxNode:
        uid = allocator.allocate(
            node,
            None,
            seed=f"{path}:{node.kind}:{node.name}",
            pinned=explicit_identifier(node, self._config),
        )
        children = tuple(
            self._label_fresh(child, f"{path}/{index}", allocator)
            for index, child in enumerate(node.children)
        )
        return replace(node, children=children, identifier=uid)
