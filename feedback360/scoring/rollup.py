"""
scoring/rollup.py — Cross-Relationship Rollup

Combines the senior, peer and junior analyses of one feedback cycle into
four RelationshipInsight records: aggregate, senior, peer, junior.

Per relationship:
    competencies = CompetencyAggregator over that relationship's raw scores

Aggregate, per competency:
    score      = Σ relationship_score × w_rel
                 w_rel = canonical weight renormalized over the relationships
                 that have responses; a relationship with responses but no
                 score for this competency contributes 0
    confidence = ConfidenceCalculator over every underlying raw score
                 (all relationships pooled, each keeping its own tag)

Aggregate themes are senior → peer → junior concatenated; the aggregate
response count is the sum of the three.
"""

from typing import Dict, List, Optional

import structlog

from feedback360.config import Settings, get_settings
from feedback360.core.exceptions import ScoringException
from feedback360.models.enumerations import REVIEWER_RELATIONSHIPS, Relationship
from feedback360.models.scores import (
    CompetencyResult,
    RelationshipAnalysis,
    RelationshipInsight,
)
from feedback360.scoring.competency_aggregator import (
    CompetencyAggregator,
    ordered_competency_names,
    relationship_breakdown,
    score_distribution,
    score_stats,
    unique_quotes,
)
from feedback360.scoring.relationship import normalized_relationship_weights
from feedback360.scoring.utils import mean, round_half_up, std_dev

logger = structlog.get_logger(__name__)


class CrossRelationshipRollup:
    """Roll per-relationship analyses up into one aggregate view."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.aggregator = CompetencyAggregator(self.settings)
        self.confidence_calculator = self.aggregator.confidence_calculator

    def rollup(
        self,
        senior: RelationshipAnalysis,
        peer: RelationshipAnalysis,
        junior: RelationshipAnalysis,
    ) -> List[RelationshipInsight]:
        """
        Build the four insights of a feedback cycle.

        Args:
            senior: Analysis of senior colleagues' feedback.
            peer: Analysis of equal colleagues' feedback.
            junior: Analysis of junior colleagues' feedback.

        Returns:
            [aggregate, senior, peer, junior] RelationshipInsights.
        """
        analyses = {
            Relationship.SENIOR: senior,
            Relationship.PEER: peer,
            Relationship.JUNIOR: junior,
        }
        for expected, analysis in analyses.items():
            if analysis.relationship != expected:
                raise ValueError(
                    f"expected a {expected.value} analysis, got {analysis.relationship.value}"
                )

        insights = {
            rel: RelationshipInsight(
                relationship=rel,
                themes=list(analysis.themes),
                competencies=self.aggregator.aggregate_all(analysis.scores),
                response_count=analysis.response_count,
            )
            for rel, analysis in analyses.items()
        }

        aggregate = RelationshipInsight(
            relationship=Relationship.AGGREGATE,
            themes=[t for rel in REVIEWER_RELATIONSHIPS for t in analyses[rel].themes],
            competencies=self._aggregate_competencies(analyses, insights),
            response_count=sum(a.response_count for a in analyses.values()),
        )

        logger.info(
            "feedback_cycle_rolled_up",
            response_count=aggregate.response_count,
            competencies=len(aggregate.competencies),
            themes=len(aggregate.themes),
        )
        return [aggregate] + [insights[rel] for rel in REVIEWER_RELATIONSHIPS]

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    def _aggregate_competencies(
        self,
        analyses: Dict[Relationship, RelationshipAnalysis],
        insights: Dict[Relationship, RelationshipInsight],
    ) -> List[CompetencyResult]:
        weights = normalized_relationship_weights(
            {rel: a.response_count for rel, a in analyses.items()}, self.settings
        )
        names = ordered_competency_names(
            c.name for rel in REVIEWER_RELATIONSHIPS for c in insights[rel].competencies
        )

        results = []
        for name in names:
            try:
                result = self._aggregate_competency(name, analyses, insights, weights)
            except ScoringException as e:
                logger.warning("competency_failed", competency=name, error=str(e))
                continue
            if result is not None:
                results.append(result)
        return results

    def _aggregate_competency(
        self,
        name: str,
        analyses: Dict[Relationship, RelationshipAnalysis],
        insights: Dict[Relationship, RelationshipInsight],
        weights: Dict[Relationship, float],
    ) -> Optional[CompetencyResult]:
        contributions = {}
        for rel in REVIEWER_RELATIONSHIPS:
            result = insights[rel].get_competency(name)
            if result is not None and weights[rel] > 0:
                contributions[rel] = result
        if not contributions:
            logger.warning("competency_skipped", competency=name, reason="no_weighted_responses")
            return None

        weighted = sum(
            result.weighted_score * weights[rel]
            for rel, result in contributions.items()
        )

        underlying = [
            raw
            for rel in REVIEWER_RELATIONSHIPS
            for raw in analyses[rel].scores
            if raw.competency_name == name
        ]
        confidence = self.confidence_calculator.calculate(underlying)
        values = [raw.score for raw in underlying]

        return CompetencyResult(
            name=name,
            weighted_score=round_half_up(weighted, 3),
            confidence_level=confidence.level,
            confidence_metrics=confidence.metrics,
            evidence_count=sum(raw.evidence_count for raw in underlying),
            effective_evidence_count=confidence.metrics.factors.evidence_count,
            relationship_breakdown=relationship_breakdown(underlying),
            score_distribution=score_distribution(values),
            average_score=mean(values),
            score_spread=std_dev(values),
            has_outliers=any(r.has_outliers for r in contributions.values()),
            adjustment_details=[
                adj for r in contributions.values() for adj in r.adjustment_details
            ],
            evidence_quotes=unique_quotes(underlying),
            stats=score_stats(values),
        )
