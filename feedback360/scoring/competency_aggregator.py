"""
scoring/competency_aggregator.py — Competency Aggregator

Turns the raw reviewer scores of one competency into a CompetencyResult.

Pipeline (one call per competency):
    1. OutlierDetector       → adjusted weight per score
    2. ConfidenceCalculator  → level + metrics, on the unadjusted scores
    3. weighted_score = Σ(score × adjusted_weight) / Σ(adjusted_weight), 3 decimals
    4. Distribution summaries: average, population σ, rounded-score histogram,
       evidence per relationship, min / max / median / mode
    5. has_outliers = any adjusted weight differs from its base relationship weight

A competency with no scores yields None, never a placeholder result.
"""

import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from feedback360.config import Settings, get_settings
from feedback360.core.exceptions import ScoringException
from feedback360.models.enumerations import COMPETENCY_ORDER, Relationship
from feedback360.models.scores import (
    CompetencyResult,
    RawScore,
    RelationshipBreakdown,
    ScoreStats,
)
from feedback360.scoring.confidence_calculator import ConfidenceCalculator
from feedback360.scoring.outlier_detector import OutlierDetector
from feedback360.scoring.utils import mean, mode, quartiles, round_half_up, std_dev

logger = structlog.get_logger(__name__)


def score_bucket(score: float) -> int:
    """Round half up to the nearest integer (2.5 → 3)."""
    return math.floor(score + 0.5)


def ordered_competency_names(names: Iterable[str]) -> List[str]:
    """Known competencies in display order, then unknown names in first-seen order."""
    seen = list(dict.fromkeys(names))
    known = [name for name in COMPETENCY_ORDER if name in seen]
    return known + [name for name in seen if name not in COMPETENCY_ORDER]


def unique_quotes(scores: Iterable[RawScore]) -> List[str]:
    """All evidence quotes, duplicates removed, first occurrence order kept."""
    return list(dict.fromkeys(q for raw in scores for q in raw.evidence_quotes))


def relationship_breakdown(scores: Iterable[RawScore]) -> RelationshipBreakdown:
    totals: Dict[Relationship, int] = Counter()
    for raw in scores:
        totals[raw.relationship] += raw.evidence_count
    return RelationshipBreakdown(
        senior=totals[Relationship.SENIOR],
        peer=totals[Relationship.PEER],
        junior=totals[Relationship.JUNIOR],
    )


def score_distribution(values: Sequence[float]) -> Dict[int, int]:
    counts = Counter(score_bucket(v) for v in values)
    return dict(sorted(counts.items()))


def score_stats(values: Sequence[float]) -> ScoreStats:
    return ScoreStats(
        min=min(values),
        max=max(values),
        median=quartiles(values).median,
        mode=mode(values),
    )


class CompetencyAggregator:
    """Relationship-weighted, outlier-corrected composite score per competency."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        equal_weights: bool = False,
    ):
        self.settings = settings or get_settings()
        self.equal_weights = equal_weights
        self.outlier_detector = OutlierDetector(self.settings, equal_weights=equal_weights)
        self.confidence_calculator = ConfidenceCalculator(self.settings)

    def aggregate(
        self,
        competency_name: str,
        scores: Sequence[RawScore],
    ) -> Optional[CompetencyResult]:
        """
        Aggregate every score of one competency.

        Args:
            competency_name: Name reported on the result.
            scores: RawScores for this competency in one grouping context.

        Returns:
            CompetencyResult, or None when there are no scores.

        Examples:
            >>> agg = CompetencyAggregator()
            >>> result = agg.aggregate("Growth & Development", [
            ...     RawScore(competency_name="Growth & Development", score=4,
            ...              relationship="senior_colleague"),
            ... ])
            >>> result.weighted_score
            4.0
        """
        if not scores:
            logger.debug("competency_skipped", competency=competency_name, reason="no_scores")
            return None

        adjusted = self.outlier_detector.detect(scores)
        confidence = self.confidence_calculator.calculate(scores)

        total_weight = sum(a.adjusted_weight for a in adjusted)
        values = [raw.score for raw in scores]
        if total_weight > 0:
            weighted = sum(a.score * a.adjusted_weight for a in adjusted) / total_weight
        else:
            # Only reachable when a relationship is configured with weight 0
            weighted = mean(values)

        has_outliers = any(a.adjusted_weight != a.base_weight for a in adjusted)
        adjustment_details = [a.adjustment for a in adjusted if a.adjustment is not None]

        result = CompetencyResult(
            name=competency_name,
            weighted_score=round_half_up(weighted, 3),
            confidence_level=confidence.level,
            confidence_metrics=confidence.metrics,
            evidence_count=sum(raw.evidence_count for raw in scores),
            effective_evidence_count=confidence.metrics.factors.evidence_count,
            relationship_breakdown=relationship_breakdown(scores),
            score_distribution=score_distribution(values),
            average_score=mean(values),
            score_spread=std_dev(values),
            has_outliers=has_outliers,
            adjustment_details=adjustment_details,
            evidence_quotes=unique_quotes(scores),
            stats=score_stats(values),
        )

        logger.info(
            "competency_aggregated",
            competency=competency_name,
            score_count=len(scores),
            weighted_score=result.weighted_score,
            average_score=result.average_score,
            confidence_level=result.confidence_level.value,
            has_outliers=has_outliers,
            adjustments=len(adjustment_details),
        )
        return result

    def aggregate_all(self, scores: Sequence[RawScore]) -> List[CompetencyResult]:
        """
        Group scores by competency and aggregate each group.

        Competencies are returned in display order. A competency that fails is
        logged and skipped; the others are still aggregated.
        """
        by_competency: Dict[str, List[RawScore]] = {}
        for raw in scores:
            by_competency.setdefault(raw.competency_name, []).append(raw)

        results = []
        for name in ordered_competency_names(by_competency):
            try:
                result = self.aggregate(name, by_competency[name])
            except ScoringException as e:
                logger.warning("competency_failed", competency=name, error=str(e))
                continue
            if result is not None:
                results.append(result)
        return results
