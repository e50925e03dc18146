"""
models/relationship.py — Relationship Normalizer

Maps free-form reviewer relationship labels ("senior_colleague",
"SENIOR COLLEAGUE", "equal_colleague", ...) onto senior / peer / junior.
The synthetic ``aggregate`` tag passes through unchanged.
"""

import re

import structlog

from feedback360.core.exceptions import UnrecognizedRelationshipWarning
from feedback360.models.enumerations import Relationship

logger = structlog.get_logger(__name__)

_SEPARATORS = re.compile(r"[_\s-]+")


def normalize_relationship(label: str) -> Relationship:
    """
    Collapse a relationship label to senior, peer or junior.

    Matching is case-insensitive and ignores underscores, hyphens and
    whitespace. ``aggregate`` maps to Relationship.AGGREGATE. Anything
    unrecognized becomes peer, and an ``unrecognized_relationship`` warning
    event is logged.

    Examples:
        >>> normalize_relationship("SENIOR COLLEAGUE")
        <Relationship.SENIOR: 'senior'>
        >>> normalize_relationship("weird_value")
        <Relationship.PEER: 'peer'>
    """
    normalized = _SEPARATORS.sub("", label.lower())
    if normalized == Relationship.AGGREGATE.value:
        return Relationship.AGGREGATE
    if "senior" in normalized:
        return Relationship.SENIOR
    if "peer" in normalized or "equal" in normalized:
        return Relationship.PEER
    if "junior" in normalized:
        return Relationship.JUNIOR

    logger.warning(
        "unrecognized_relationship",
        label=label,
        default=Relationship.PEER.value,
        category=UnrecognizedRelationshipWarning.__name__,
    )
    return Relationship.PEER
