"""
scoring/confidence_calculator.py — Confidence Estimator

Rates how far a competency score can be trusted, from the raw reviewer
scores behind it (never from outlier-adjusted weights).

Formula:
    evidence      = min(1, E / 15)                     weight 0.4
    consistency   = max(0, 1 − variance / 2.0)         weight 0.3
    relationship  = 0.7 if ≥2 types else 0.3           weight 0.2
                    +0.2 if 3 types, +0.1 if every type has ≥3 scores
    distribution  = max(0, 1 − (maxSkew − 1) / 1.5)    weight 0.1
    final         = Σ component × weight

    E       = Σ over reviewers of 1 + 0.5 + 0.25 + … (one term per mention)
    maxSkew = largest relationship group / (reviewer scores / relationship types)

Level (first match wins):
    high    E ≥ 12 and consistency ≥ 0.5 and final ≥ 0.65
    medium  (E ≥ 8 and consistency ≥ 0.3) or (consistency ≥ 0.5 and final ≥ 0.55)
    low     otherwise

All thresholds come from Settings.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import structlog

from feedback360.config import Settings, get_settings
from feedback360.models.enumerations import ConfidenceLevel, Relationship
from feedback360.models.scores import ConfidenceFactors, ConfidenceMetrics, RawScore
from feedback360.scoring.utils import clamp, variance

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ConfidenceResult:
    """Output of ConfidenceCalculator.calculate()."""
    level: ConfidenceLevel
    metrics: ConfidenceMetrics


class ConfidenceCalculator:
    """Calculate a 0-1 confidence score and a low/medium/high level."""

    EVIDENCE_WEIGHT: float = 0.4
    CONSISTENCY_WEIGHT: float = 0.3
    RELATIONSHIP_WEIGHT: float = 0.2
    DISTRIBUTION_WEIGHT: float = 0.1

    # Each further mention by the same reviewer counts half the previous one
    MENTION_DECAY: float = 0.5

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def effective_evidence(self, mentions: int) -> float:
        """
        Diminishing-returns value of one reviewer's mentions.

        Examples:
            >>> calc = ConfidenceCalculator()
            >>> calc.effective_evidence(1), calc.effective_evidence(3)
            (1.0, 1.75)
        """
        return sum(self.MENTION_DECAY ** k for k in range(max(0, mentions)))

    def total_effective_evidence(self, scores: Sequence[RawScore]) -> float:
        """
        Sum effective evidence across reviewers.

        Scores sharing a reviewer_id pool their mentions before the decay is
        applied; scores without one each count as a separate reviewer.
        """
        mentions_by_reviewer: Dict[object, int] = {}
        for index, raw in enumerate(scores):
            key = raw.reviewer_id if raw.reviewer_id is not None else ("anonymous", index)
            mentions_by_reviewer[key] = mentions_by_reviewer.get(key, 0) + raw.evidence_count
        return sum(self.effective_evidence(m) for m in mentions_by_reviewer.values())

    def calculate(self, scores: Sequence[RawScore]) -> ConfidenceResult:
        """
        Estimate confidence for one competency in one grouping context.

        Args:
            scores: Raw reviewer scores, unadjusted.

        Returns:
            ConfidenceResult with level and component metrics.

        Raises:
            EmptyInputError: if scores is empty.
        """
        s = self.settings

        total_evidence = self.total_effective_evidence(scores)
        evidence_score = min(1.0, total_evidence / s.EVIDENCE_SATURATION)

        score_variance = variance([raw.score for raw in scores])
        consistency_score = max(0.0, 1.0 - score_variance / s.VARIANCE_CEILING)

        group_counts = Counter(
            raw.relationship for raw in scores
            if raw.relationship != Relationship.AGGREGATE
        )
        relationship_count = len(group_counts)

        relationship_score = 0.7 if relationship_count >= 2 else 0.3
        if relationship_count >= 3:
            relationship_score += 0.2
        if group_counts and all(count >= 3 for count in group_counts.values()):
            relationship_score += 0.1
        relationship_score = clamp(relationship_score)

        if relationship_count > 0:
            ideal_count = sum(group_counts.values()) / relationship_count
            max_skew = max(group_counts.values()) / ideal_count
            distribution_quality = max(0.0, 1.0 - (max_skew - 1.0) / 1.5)
        else:
            distribution_quality = 0.0

        final_score = (
            self.EVIDENCE_WEIGHT * evidence_score
            + self.CONSISTENCY_WEIGHT * consistency_score
            + self.RELATIONSHIP_WEIGHT * relationship_score
            + self.DISTRIBUTION_WEIGHT * distribution_quality
        )

        level = self._select_level(total_evidence, consistency_score, final_score)

        logger.debug(
            "confidence_calculated",
            score_count=len(scores),
            effective_evidence=total_evidence,
            variance=score_variance,
            relationship_count=relationship_count,
            final_score=final_score,
            level=level.value,
        )

        return ConfidenceResult(
            level=level,
            metrics=ConfidenceMetrics(
                evidence_score=evidence_score,
                consistency_score=consistency_score,
                relationship_score=relationship_score,
                final_score=final_score,
                factors=ConfidenceFactors(
                    evidence_count=total_evidence,
                    variance=score_variance,
                    relationship_count=relationship_count,
                    distribution_quality=distribution_quality,
                ),
            ),
        )

    def _select_level(
        self,
        total_evidence: float,
        consistency_score: float,
        final_score: float,
    ) -> ConfidenceLevel:
        s = self.settings
        if (
            total_evidence >= s.HIGH_MIN_EVIDENCE
            and consistency_score >= s.HIGH_MIN_CONSISTENCY
            and final_score >= s.HIGH_MIN_SCORE
        ):
            return ConfidenceLevel.HIGH
        if (
            total_evidence >= s.MEDIUM_MIN_EVIDENCE
            and consistency_score >= s.MEDIUM_MIN_CONSISTENCY
        ) or (
            consistency_score >= s.MEDIUM_ALT_MIN_CONSISTENCY
            and final_score >= s.MEDIUM_ALT_MIN_SCORE
        ):
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
