"""ReconcilerConfig for identifier reconciliation.

ReconcilerConfig is a frozen (immutable) dataclass holding the matcher and
allocator parameters.  Infrastructure knobs (session cache size) are not part
of it; they are constructor arguments of the classes that own them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconcilerConfig:
    """Immutable configuration for the reconciler.

    Attributes:
        identifier_attribute: Attribute whose literal string value pins an
            element's identifier (``data-uid='scene'``).  Excluded from
            structural signatures.  ``None`` disables explicit identifiers.
        positional_fallback: When True, and the sibling list kept its length,
            a new child whose signature equals that of the old child at the
            same index is paired with it before signature buckets run, and a
            new child left unmatched by signature is paired with the
            unclaimed old child at the same index if both have the same kind
            and name.
        similarity_fallback: When True, children still unmatched after the
            positional pass are paired by optimal assignment over a node
            similarity cost matrix.
        min_similarity: Lowest similarity in [0, 1] accepted by the
            similarity pass.
        w_attributes: Weight of attribute agreement in node similarity.
        w_children: Weight of child-signature overlap in node similarity.
            Must satisfy w_attributes + w_children == 1.0.
        min_identifier_length: Number of hex characters a freshly minted
            identifier starts with before it is lengthened on collision.
    """

    identifier_attribute: str | None = "data-uid"
    positional_fallback: bool = True
    similarity_fallback: bool = True
    min_similarity: float = 0.5
    w_attributes: float = 0.5
    w_children: float = 0.5
    min_identifier_length: int = 3

    def __post_init__(self) -> None:
        if self.identifier_attribute == "":
            msg = "identifier_attribute must be a non-empty string or None"
            raise ValueError(msg)
        if not 0.0 <= self.min_similarity <= 1.0:
            msg = f"min_similarity must be in [0, 1], got {self.min_similarity}"
            raise ValueError(msg)
        if not 0.0 <= self.w_attributes <= 1.0:
            msg = f"w_attributes must be in [0, 1], got {self.w_attributes}"
            raise ValueError(msg)
        if not 0.0 <= self.w_children <= 1.0:
            msg = f"w_children must be in [0, 1], got {self.w_children}"
            raise ValueError(msg)
        if abs(self.w_attributes + self.w_children - 1.0) >= 1e-9:
            msg = (
                "w_attributes + w_children must sum to 1.0, "
                f"got {self.w_attributes + self.w_children}"
            )
            raise ValueError(msg)
        if not 1 <= self.min_identifier_length <= 64:
            msg = (
                "min_identifier_length must be in [1, 64], "
                f"got {self.min_identifier_length}"
            )
            raise ValueError(msg)
