"""
scoring/relationship.py — Relationship Weights

Canonical and renormalized weight tables per reviewer relationship.

Canonical weights (overridable through Settings):
    senior     0.40
    peer       0.35
    junior     0.25
    aggregate  1.00  (only for combining already-aggregated scores)
"""

from typing import Dict, Mapping, Optional

from feedback360.config import Settings, get_settings
from feedback360.models.enumerations import REVIEWER_RELATIONSHIPS, Relationship

AGGREGATE_WEIGHT = 1.0


def relationship_weights(
    settings: Optional[Settings] = None,
    equal_weights: bool = False,
) -> Dict[Relationship, float]:
    """
    Base weight per relationship.

    With ``equal_weights`` every relationship weighs 1.0, which is how scores
    pooled across many employees are combined.
    """
    if equal_weights:
        return {rel: 1.0 for rel in Relationship}
    settings = settings or get_settings()
    weights = {
        Relationship(key): value
        for key, value in settings.relationship_weights.items()
    }
    weights[Relationship.AGGREGATE] = AGGREGATE_WEIGHT
    return weights


def normalized_relationship_weights(
    response_counts: Mapping[Relationship, int],
    settings: Optional[Settings] = None,
) -> Dict[Relationship, float]:
    """
    Renormalize the canonical weights over relationships that have responses.

    Relationships with zero responses drop out of the pool and the remaining
    weights are scaled to sum to 1.0. With no responses at all every weight is 0.

    Examples:
        >>> w = normalized_relationship_weights(
        ...     {Relationship.SENIOR: 2, Relationship.PEER: 3, Relationship.JUNIOR: 0}
        ... )
        >>> round(w[Relationship.SENIOR], 3), round(w[Relationship.PEER], 3)
        (0.533, 0.467)
    """
    base = relationship_weights(settings)
    present = {
        rel: base[rel]
        for rel in REVIEWER_RELATIONSHIPS
        if response_counts.get(rel, 0) > 0
    }
    total = sum(present.values())
    return {
        rel: (present[rel] / total if rel in present and total > 0 else 0.0)
        for rel in REVIEWER_RELATIONSHIPS
    }
