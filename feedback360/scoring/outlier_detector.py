"""
scoring/outlier_detector.py — Outlier Detector

Flags and down-weights anomalous reviewer scores for one competency.
Outliers are never discarded, only given less weight.

Classification (per score, groups of >= OUTLIER_MIN_SAMPLE_SIZE scores):
    extreme   contextually invalid, or |z| > 3, or (boxplot outlier and |z| > 2)
              → weight × 0.5
    moderate  |z| > 2, or boxplot outlier
              → weight × 0.75
    none      otherwise

    z        = (score − mean) / σ over the whole group
    boxplot  = outside [q1 − 1.5·IQR, q3 + 1.5·IQR]
    weight   = relationship weight × mention weight (high 1.0, medium 0.85, low 0.7)

A classification only stands when the score is also anomalous inside its
own relationship cohort (|z_relationship| > 2); otherwise it reverts to none.
The contextual-validity flag is not re-checked at that step, so a cohort
that agrees on an out-of-range score keeps its full weight.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from feedback360.config import Settings, get_settings
from feedback360.core.exceptions import DegenerateDistributionError
from feedback360.models.enumerations import AdjustmentType, Relationship
from feedback360.models.scores import OutlierAdjustment, RawScore
from feedback360.scoring.relationship import relationship_weights
from feedback360.scoring.utils import mean, quartiles, std_dev, z_score

logger = structlog.get_logger(__name__)

# Sane score range per competency, matched on a lowercase name fragment
CONTEXTUAL_THRESHOLDS: Dict[str, Tuple[float, float]] = {
    "technical":     (1.5, 5.0),
    "leadership":    (1.0, 5.0),
    "collaboration": (2.0, 5.0),
}


def is_contextually_valid(score: float, competency_name: str) -> bool:
    """True unless the competency has a sane range and the score falls outside it."""
    name = competency_name.lower()
    for fragment, (low, high) in CONTEXTUAL_THRESHOLDS.items():
        if fragment in name:
            return low <= score <= high
    return True


def _safe_z(value: float, mu: float, sigma: float) -> float:
    # Identical scores carry no outlier signal
    try:
        return z_score(value, mu, sigma)
    except DegenerateDistributionError:
        return 0.0


@dataclass(frozen=True)
class AdjustedScore:
    """A raw score with the weight the aggregator should give it."""
    raw: RawScore
    base_weight: float        # relationship weight alone
    adjusted_weight: float    # after mention-confidence and outlier discounts
    adjustment_type: AdjustmentType
    z_score: float
    relationship_z_score: float
    adjustment: Optional[OutlierAdjustment] = None

    @property
    def score(self) -> float:
        return self.raw.score

    @property
    def relationship(self) -> Relationship:
        return self.raw.relationship


class OutlierDetector:
    """Down-weight statistically or contextually anomalous scores."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        equal_weights: bool = False,
    ):
        self.settings = settings or get_settings()
        self.weights = relationship_weights(self.settings, equal_weights=equal_weights)
        self.mention_weights = self.settings.mention_weights

    def detect(self, scores: Sequence[RawScore]) -> List[AdjustedScore]:
        """
        Assign an adjusted weight to every score of one competency.

        Args:
            scores: All RawScores for one competency in one grouping context.

        Returns:
            One AdjustedScore per input score, in input order.
        """
        s = self.settings
        if len(scores) < s.OUTLIER_MIN_SAMPLE_SIZE:
            return [self._unadjusted(raw) for raw in scores]

        values = [raw.score for raw in scores]
        mu = mean(values)
        sigma = std_dev(values)
        q = quartiles(values)
        iqr = q.q3 - q.q1
        lower_bound = q.q1 - iqr * s.OUTLIER_IQR_MULTIPLIER
        upper_bound = q.q3 + iqr * s.OUTLIER_IQR_MULTIPLIER

        cohorts: Dict[Relationship, List[float]] = defaultdict(list)
        for raw in scores:
            cohorts[raw.relationship].append(raw.score)
        cohort_stats = {
            rel: (mean(vals), std_dev(vals)) for rel, vals in cohorts.items()
        }

        adjusted = []
        for raw in scores:
            base_weight = self.weights[raw.relationship]
            weight = base_weight * self.mention_weights[raw.confidence.value]

            if len(cohorts[raw.relationship]) < s.OUTLIER_RELATIONSHIP_MIN_SAMPLES:
                adjusted.append(AdjustedScore(
                    raw=raw,
                    base_weight=base_weight,
                    adjusted_weight=weight,
                    adjustment_type=AdjustmentType.NONE,
                    z_score=0.0,
                    relationship_z_score=0.0,
                ))
                continue

            z = _safe_z(raw.score, mu, sigma)
            is_boxplot_outlier = raw.score < lower_bound or raw.score > upper_bound
            is_contextual_outlier = not is_contextually_valid(raw.score, raw.competency_name)

            adjustment_type = AdjustmentType.NONE
            adjusted_weight = weight
            if (
                is_contextual_outlier
                or abs(z) > s.OUTLIER_EXTREME_Z_SCORE
                or (is_boxplot_outlier and abs(z) > s.OUTLIER_MAX_Z_SCORE)
            ):
                adjustment_type = AdjustmentType.EXTREME
                adjusted_weight = weight * s.OUTLIER_EXTREME_REDUCTION
            elif abs(z) > s.OUTLIER_MAX_Z_SCORE or is_boxplot_outlier:
                adjustment_type = AdjustmentType.MODERATE
                adjusted_weight = weight * s.OUTLIER_MODERATE_REDUCTION

            rel_mean, rel_std = cohort_stats[raw.relationship]
            rel_z = _safe_z(raw.score, rel_mean, rel_std)
            if abs(rel_z) <= s.OUTLIER_MAX_Z_SCORE:
                adjustment_type = AdjustmentType.NONE
                adjusted_weight = weight

            adjustment = None
            if adjustment_type != AdjustmentType.NONE:
                adjustment = OutlierAdjustment(
                    original_score=raw.score,
                    adjustment_type=adjustment_type,
                    adjusted_weight=adjusted_weight,
                    relationship=raw.relationship,
                )
                logger.debug(
                    "outlier_adjusted",
                    competency=raw.competency_name,
                    score=raw.score,
                    relationship=raw.relationship.value,
                    adjustment_type=adjustment_type.value,
                    z_score=round(z, 4),
                    relationship_z_score=round(rel_z, 4),
                    adjusted_weight=adjusted_weight,
                )

            adjusted.append(AdjustedScore(
                raw=raw,
                base_weight=base_weight,
                adjusted_weight=adjusted_weight,
                adjustment_type=adjustment_type,
                z_score=z,
                relationship_z_score=rel_z,
                adjustment=adjustment,
            ))

        return adjusted

    def _unadjusted(self, raw: RawScore) -> AdjustedScore:
        base_weight = self.weights[raw.relationship]
        return AdjustedScore(
            raw=raw,
            base_weight=base_weight,
            adjusted_weight=base_weight,
            adjustment_type=AdjustmentType.NONE,
            z_score=0.0,
            relationship_z_score=0.0,
        )
