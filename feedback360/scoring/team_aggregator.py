"""
scoring/team_aggregator.py — Team Aggregator

Pools the stored relationship insights of many employees into one
CompetencyResult per competency, for team-level dashboards.

Each stored per-relationship competency result is treated as one score:
    score        = its weighted score
    relationship = the insight's relationship
    evidence     = its evidence count and quotes

Aggregate insights are skipped so nothing is counted twice, and results
with no evidence are dropped before aggregation.
"""

from typing import Iterable, List, Optional, Sequence, Set, Union

import structlog

from feedback360.config import Settings
from feedback360.models.enumerations import Relationship
from feedback360.models.scores import CompetencyResult, RawScore, RelationshipInsight
from feedback360.scoring.competency_aggregator import CompetencyAggregator
from feedback360.models.relationship import normalize_relationship

logger = structlog.get_logger(__name__)


class TeamAggregator:
    """Aggregate competency results across a team of employees."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        equal_weights: bool = False,
    ):
        self.aggregator = CompetencyAggregator(settings, equal_weights=equal_weights)

    @staticmethod
    def to_raw_scores(insight: RelationshipInsight) -> List[RawScore]:
        """Turn one stored relationship insight back into scorable inputs."""
        return [
            RawScore(
                competency_name=c.name,
                score=c.weighted_score,
                relationship=insight.relationship,
                confidence=c.confidence_level,
                evidence_count=c.evidence_count,
                evidence_quotes=c.evidence_quotes,
            )
            for c in insight.competencies
        ]

    def aggregate(
        self,
        insight_sets: Sequence[Sequence[RelationshipInsight]],
        relationships: Optional[Iterable[Union[Relationship, str]]] = None,
    ) -> List[CompetencyResult]:
        """
        Args:
            insight_sets: One list of RelationshipInsight per employee.
            relationships: Optional filter; only these relationship groups are pooled.
                           Labels are normalized ("senior_colleague" → senior).
                           None or empty means every relationship.

        Returns:
            CompetencyResults in display order; competencies without evidence are omitted.
        """
        selected: Optional[Set[Relationship]] = {
            normalize_relationship(r.value if isinstance(r, Relationship) else r)
            for r in (relationships or [])
        } or None

        pooled: List[RawScore] = []
        for insights in insight_sets:
            for insight in insights:
                if insight.relationship == Relationship.AGGREGATE:
                    continue
                if selected is not None and insight.relationship not in selected:
                    continue
                pooled.extend(
                    raw for raw in self.to_raw_scores(insight) if raw.evidence_count > 0
                )

        logger.info(
            "team_scores_pooled",
            employees=len(insight_sets),
            scores=len(pooled),
            relationships=sorted(r.value for r in selected) if selected else None,
        )
        return self.aggregator.aggregate_all(pooled)
