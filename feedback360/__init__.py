"""
Feedback360 Scoring Engine

Turns per-reviewer competency ratings from 360-degree feedback into
outlier-corrected, confidence-rated composite scores.

    from feedback360 import CrossRelationshipRollup, RelationshipAnalysis

    insights = CrossRelationshipRollup().rollup(senior, peer, junior)
"""

from feedback360.config import Settings, get_settings
from feedback360.models.enumerations import (
    AdjustmentType,
    Competency,
    ConfidenceLevel,
    Relationship,
)
from feedback360.models.relationship import normalize_relationship
from feedback360.models.scores import (
    CompetencyResult,
    RawScore,
    RelationshipAnalysis,
    RelationshipInsight,
)
from feedback360.scoring.competency_aggregator import CompetencyAggregator
from feedback360.scoring.confidence_calculator import ConfidenceCalculator
from feedback360.scoring.outlier_detector import OutlierDetector
from feedback360.scoring.rollup import CrossRelationshipRollup
from feedback360.scoring.team_aggregator import TeamAggregator

__version__ = "1.0.0"

__all__ = [
    "AdjustmentType",
    "Competency",
    "CompetencyAggregator",
    "CompetencyResult",
    "ConfidenceCalculator",
    "ConfidenceLevel",
    "CrossRelationshipRollup",
    "OutlierDetector",
    "RawScore",
    "Relationship",
    "RelationshipAnalysis",
    "RelationshipInsight",
    "Settings",
    "TeamAggregator",
    "get_settings",
    "normalize_relationship",
]
