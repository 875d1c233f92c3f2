"""Test suite for child-list matching and the optimal assignment helper.

match_children is exercised pass by pass (pinned, anchored, signature,
positional, similarity) and on the insertion / duplication / edit scenarios
that must never shift identifiers.  optimal_pairs is tested for forbidden
cells, rectangular and empty matrices.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from stable_uid.algorithm.config import ReconcilerConfig
from stable_uid.algorithm.matcher import (
    explicit_identifier,
    match_children,
    match_components,
    optimal_pairs,
)
from stable_uid.algorithm.signature import SignatureBuilder
from stable_uid.tree.nodes import ComponentTree, NodeKind, SyntaxNode


def _el(
    name: str,
    *children: SyntaxNode,
    uid: str | None = None,
    **attributes: Any,
) -> SyntaxNode:
    return SyntaxNode(
        kind=NodeKind.ELEMENT,
        name=name,
        attributes=attributes,
        children=children,
        identifier=uid,
    )


def _pinned(name: str, pin: str) -> SyntaxNode:
    return SyntaxNode(kind=NodeKind.ELEMENT, name=name, attributes={"data-uid": pin})


def _old_ids(
    pairs: list[tuple[SyntaxNode, SyntaxNode | None]],
) -> list[str | None]:
    return [old.identifier if old is not None else None for _, old in pairs]


def _match(
    old: list[SyntaxNode],
    new: list[SyntaxNode],
    config: ReconcilerConfig | None = None,
) -> list[str | None]:
    return _old_ids(match_children(old, new, SignatureBuilder(), config))


# ---------------------------------------------------------------------------
# match_children
# ---------------------------------------------------------------------------


class TestSignaturePass:
    def test_identical_lists_match_in_order(self) -> None:
        old = [_el("A", uid="a"), _el("B", uid="b")]
        assert _match(old, [_el("A"), _el("B")]) == ["a", "b"]

    def test_result_preserves_new_order(self) -> None:
        old = [_el("A", uid="a"), _el("B", uid="b")]
        new = [_el("A"), _el("B")]
        pairs = match_children(old, new, SignatureBuilder())
        assert [n for n, _ in pairs] == new

    def test_prepend_does_not_shift(self) -> None:
        old = [_el("A", uid="a"), _el("B", uid="b")]
        assert _match(old, [_el("C"), _el("A"), _el("B")]) == [None, "a", "b"]

    def test_prepend_same_tag_does_not_shift(self) -> None:
        old = [_el("View", w=191, uid="v1")]
        new = [_el("View", w=100), _el("View", w=191)]
        assert _match(old, new) == [None, "v1"]

    def test_reorder_follows_elements(self) -> None:
        old = [_el("A", uid="a"), _el("B", uid="b")]
        assert _match(old, [_el("B"), _el("A")]) == ["b", "a"]

    def test_duplication_first_copy_inherits(self) -> None:
        old = [_el("X", uid="x")]
        assert _match(old, [_el("X"), _el("X"), _el("X")]) == ["x", None, None]

    def test_insert_before_duplicates(self) -> None:
        old = [_el("X", uid="x1"), _el("X", uid="x2")]
        new = [_el("Y"), _el("X"), _el("X")]
        assert _match(old, new) == [None, "x1", "x2"]

    def test_insert_same_tag_before_duplicates(self) -> None:
        old = [_el("View", w=191, uid=u) for u in ("c8a", "af7", "a72")]
        new = [_el("View", w=5)] + [_el("View", w=191) for _ in range(3)]
        assert _match(old, new) == [None, "c8a", "af7", "a72"]

    def test_deletion_leaves_old_unclaimed(self) -> None:
        old = [_el("A", uid="a"), _el("B", uid="b"), _el("C", uid="c")]
        assert _match(old, [_el("A"), _el("C")]) == ["a", "c"]

    def test_cold_start_all_unmatched(self) -> None:
        assert _match([], [_el("A"), _el("B")]) == [None, None]

    def test_empty_new_list(self) -> None:
        assert _match([_el("A", uid="a")], []) == []


class TestPositionalPass:
    def test_value_edit_matches_same_index(self) -> None:
        old = [_el("View", w=191, uid="v")]
        assert _match(old, [_el("View", w=101)]) == ["v"]

    def test_value_edit_among_unchanged_siblings(self) -> None:
        old = [_el("A", uid="a"), _el("View", w=1, uid="v"), _el("B", uid="b")]
        new = [_el("A"), _el("View", w=2), _el("B")]
        assert _match(old, new) == ["a", "v", "b"]

    def test_incompatible_tag_is_not_matched(self) -> None:
        old = [_el("View", uid="v")]
        assert _match(old, [_el("Text")]) == [None]

    def test_can_be_disabled(self) -> None:
        config = ReconcilerConfig(positional_fallback=False, similarity_fallback=False)
        old = [_el("View", w=191, uid="v")]
        assert _match(old, [_el("View", w=101)], config) == [None]

    def test_claimed_index_is_skipped(self) -> None:
        # old[1] is claimed by new[0] through its signature
        old = [_el("View", w=1, uid="v1"), _el("View", w=2, uid="v2")]
        new = [_el("View", w=2), _el("View", w=5)]
        config = ReconcilerConfig(similarity_fallback=False)
        assert _match(old, new, config) == ["v2", None]

    def test_skipped_when_list_length_changes(self) -> None:
        old = [_el("View", w=1, uid="v")]
        new = [_el("View", w=2), _el("Text")]
        config = ReconcilerConfig(similarity_fallback=False)
        assert _match(old, new, config) == [None, None]

    def test_insertion_before_edited_containers(self) -> None:
        old = [
            _el("section", _el("A"), _el("B"), uid="s1"),
            _el("section", _el("C"), _el("D"), uid="s2"),
        ]
        new = [
            _el("Inserted"),
            _el("section", _el("A"), _el("B"), _el("X")),
            _el("section", _el("C"), _el("D"), _el("X")),
        ]
        assert _match(old, new) == [None, "s1", "s2"]


class TestAnchoredPass:
    def test_edit_first_of_identical_pair(self) -> None:
        old = [_el("View", w=191, uid="v1"), _el("View", w=191, uid="v2")]
        new = [_el("View", w=101), _el("View", w=191)]
        assert _match(old, new) == ["v1", "v2"]

    def test_edit_middle_of_identical_triple(self) -> None:
        old = [_el("View", w=191, uid=u) for u in ("a", "b", "c")]
        new = [_el("View", w=191), _el("View", w=101), _el("View", w=191)]
        assert _match(old, new) == ["a", "b", "c"]

    def test_edit_into_copy_of_neighbour(self) -> None:
        old = [_el("View", w=1, uid="a"), _el("View", w=2, uid="b")]
        new = [_el("View", w=2), _el("View", w=2)]
        assert _match(old, new) == ["a", "b"]

    def test_edit_first_of_identical_containers(self) -> None:
        old = [
            _el("Row", _el("Text", value="x"), uid="r1"),
            _el("Row", _el("Text", value="x"), uid="r2"),
        ]
        new = [
            _el("Row", _el("Text", value="y")),
            _el("Row", _el("Text", value="x")),
        ]
        assert _match(old, new) == ["r1", "r2"]

    def test_reorder_is_not_anchored(self) -> None:
        old = [_el("A", uid="a"), _el("B", uid="b"), _el("C", uid="c")]
        assert _match(old, [_el("C"), _el("B"), _el("A")]) == ["c", "b", "a"]

    def test_pinned_index_is_not_anchored(self) -> None:
        old = [_el("View", uid="v1"), _el("View", uid="v2")]
        new = [_el("View"), _pinned("View", "v1")]
        config = ReconcilerConfig(similarity_fallback=False)
        assert _match(old, new, config) == ["v2", "v1"]

    def test_switched_off_with_positional_fallback(self) -> None:
        config = ReconcilerConfig(positional_fallback=False, similarity_fallback=False)
        old = [_el("View", w=191, uid="v1"), _el("View", w=191, uid="v2")]
        new = [_el("View", w=101), _el("View", w=191)]
        assert _match(old, new, config) == [None, "v1"]


class TestSimilarityPass:
    def test_edited_and_moved(self) -> None:
        old = [_el("View", a=1, b=2, c=3, uid="v"), _el("Image", uid="img")]
        new = [_el("Image"), _el("View", a=1, b=2, c=4)]
        assert _match(old, new) == ["img", "v"]

    def test_disabled(self) -> None:
        config = ReconcilerConfig(similarity_fallback=False)
        old = [_el("View", a=1, b=2, c=3, uid="v"), _el("Image", uid="img")]
        new = [_el("Image"), _el("View", a=1, b=2, c=4)]
        assert _match(old, new, config) == ["img", None]

    def test_picks_the_most_similar_candidate(self) -> None:
        old = [
            _el("Image", uid="img"),
            _el("View", a=1, b=2, c=3, d=4, uid="close"),
            _el("View", a=9, b=9, c=9, d=4, uid="far"),
        ]
        new = [_el("View", a=1, b=2, c=3, d=5), _el("Image")]
        # old[0] is taken by the Image, so the View reaches the similarity pass

        assert _match(old, new) == ["close", "img"]

    def test_below_threshold_stays_unmatched(self) -> None:
        config = ReconcilerConfig(min_similarity=0.9)
        old = [_el("Image", uid="img"), _el("View", a=1, b=2, uid="v")]
        new = [_el("View", a=7, b=8), _el("Image")]
        assert _match(old, new, config) == [None, "img"]


class TestPinnedPass:
    def test_explicit_identifier_pins_to_old_node(self) -> None:
        old = [_el("View", uid="first"), _el("View", uid="second")]
        new = [_pinned("View", "second"), _el("View")]
        assert _match(old, new) == ["second", "first"]

    def test_unknown_pin_falls_through(self) -> None:
        old = [_el("View", uid="first")]
        assert _match(old, [_pinned("View", "other")]) == ["first"]

    def test_explicit_identifier_helper(self) -> None:
        config = ReconcilerConfig()
        assert explicit_identifier(_pinned("V", "scene"), config) == "scene"
        assert explicit_identifier(_el("V"), config) is None
        assert explicit_identifier(_pinned("V", ""), config) is None
        assert (
            explicit_identifier(
                _pinned("V", "scene"), ReconcilerConfig(identifier_attribute=None)
            )
            is None
        )

    def test_non_string_pin_is_ignored(self) -> None:
        node = SyntaxNode(
            kind=NodeKind.ELEMENT, name="V", attributes={"data-uid": {"expr": "x"}}
        )
        assert explicit_identifier(node, ReconcilerConfig()) is None


class TestUnknownKinds:
    def test_unknown_kind_is_never_matched(self) -> None:
        old = [SyntaxNode(kind="widget", name="w", identifier="old")]  # type: ignore[arg-type]
        new = [SyntaxNode(kind="widget", name="w")]  # type: ignore[arg-type]
        assert _match(old, new) == [None]


class TestMatchComponents:
    def test_components_pair_by_name(self) -> None:
        a_old = ComponentTree(name="A", root=_el("div", uid="a"))
        b_old = ComponentTree(name="B", root=_el("div", uid="b"))
        a_new = ComponentTree(name="A", root=_el("div"))
        b_new = ComponentTree(name="B", root=_el("div"))
        pairs = match_components([a_old, b_old], [b_new, a_new])
        assert pairs == [(b_new, b_old), (a_new, a_old)]

    def test_renamed_component_has_no_counterpart(self) -> None:
        old = ComponentTree(name="A", root=_el("div", uid="a"))
        new = ComponentTree(name="Renamed", root=_el("div"))
        assert match_components([old], [new]) == [(new, None)]


# ---------------------------------------------------------------------------
# optimal_pairs
# ---------------------------------------------------------------------------


class TestOptimalPairsEmpty:
    @pytest.mark.parametrize("shape", [(0, 0), (0, 3), (3, 0)])
    def test_empty_matrix_returns_no_pairs(self, shape: tuple[int, int]) -> None:
        assert optimal_pairs(np.empty(shape, dtype=float)) == []

    def test_all_forbidden_returns_no_pairs(self) -> None:
        assert optimal_pairs(np.full((2, 3), np.inf)) == []


class TestOptimalPairsAssignment:
    def test_cheapest_square_assignment(self) -> None:
        cost = np.array([[0.8, 0.1], [0.2, 0.6]], dtype=float)
        assert optimal_pairs(cost) == [(0, 1), (1, 0)]

    def test_rectangular_assignment(self) -> None:
        cost = np.array([[0.1, 0.9, 0.9], [0.9, 0.2, 0.9]], dtype=float)
        assert optimal_pairs(cost) == [(0, 0), (1, 1)]

    def test_forbidden_cells_are_never_paired(self) -> None:
        cost = np.array(
            [[0.0, np.inf, 1.0], [np.inf, 0.0, np.inf], [np.inf, 1.0, np.inf]],
            dtype=float,
        )
        pairs = optimal_pairs(cost)
        assert pairs
        assert all(np.isfinite(cost[r, c]) for r, c in pairs)

    def test_forced_diagonal(self) -> None:
        cost = np.array([[0.5, np.inf], [np.inf, 0.7]], dtype=float)
        assert optimal_pairs(cost) == [(0, 0), (1, 1)]

    def test_more_pairs_beat_one_cheap_pair(self) -> None:
        # Taking the free (0, 0) cell would leave row 1 with only a forbidden cell.
        cost = np.array([[0.0, 0.9], [0.1, np.inf]], dtype=float)
        assert optimal_pairs(cost) == [(0, 1), (1, 0)]

    def test_pairs_are_plain_ints(self) -> None:
        pairs = optimal_pairs(np.array([[0.3]], dtype=float))
        assert pairs == [(0, 0)]
        assert all(type(i) is int for pair in pairs for i in pair)
