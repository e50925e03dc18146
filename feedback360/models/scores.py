# feedback360/models/scores.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional

from feedback360.models.enumerations import (
    AdjustmentType,
    ConfidenceLevel,
    Relationship,
)
from feedback360.models.relationship import normalize_relationship


# Input Models


class RawScore(BaseModel):
    """One reviewer's rating of one competency, as extracted from free text."""
    model_config = ConfigDict(frozen=True)

    competency_name: str
    score: float  # nominally 1-5, range is not enforced
    relationship: Relationship
    confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM
    evidence_count: int = Field(default=1, ge=0)
    evidence_quotes: List[str] = Field(default_factory=list)
    reviewer_id: Optional[str] = None

    @field_validator("relationship", mode="before")
    @classmethod
    def normalize_relationship_label(cls, v):
        """Free-form labels are collapsed to senior / peer / junior on ingest."""
        return normalize_relationship(str(v.value if isinstance(v, Relationship) else v))

    @field_validator("confidence", mode="before")
    @classmethod
    def lowercase_confidence(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class RelationshipAnalysis(BaseModel):
    """Text-analysis output for one relationship group of a feedback cycle."""
    relationship: Relationship
    themes: List[str] = Field(default_factory=list)
    scores: List[RawScore] = Field(default_factory=list)
    response_count: int = Field(default=0, ge=0)

    @field_validator("relationship", mode="before")
    @classmethod
    def normalize_relationship_label(cls, v):
        return normalize_relationship(str(v.value if isinstance(v, Relationship) else v))


# Result Models


class OutlierAdjustment(BaseModel):
    """Audit record for a score whose weight was reduced."""
    model_config = ConfigDict(frozen=True)

    original_score: float
    adjustment_type: AdjustmentType
    adjusted_weight: float
    relationship: Relationship


class ConfidenceFactors(BaseModel):
    model_config = ConfigDict(frozen=True)

    evidence_count: float       # total effective evidence
    variance: float             # population variance of raw scores
    relationship_count: int     # distinct reviewer relationships present
    distribution_quality: float


class ConfidenceMetrics(BaseModel):
    """Component scores behind a confidence level, all in [0, 1]."""
    model_config = ConfigDict(frozen=True)

    evidence_score: float
    consistency_score: float
    relationship_score: float
    final_score: float
    factors: ConfidenceFactors


class RelationshipBreakdown(BaseModel):
    """Evidence count contributed by each reviewer relationship."""
    model_config = ConfigDict(frozen=True)

    senior: int = 0
    peer: int = 0
    junior: int = 0


class ScoreStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    median: float
    mode: float


class CompetencyResult(BaseModel):
    """Aggregated score for one competency within one relationship group."""
    model_config = ConfigDict(frozen=True)

    name: str
    weighted_score: float  # rounded to 3 decimals
    confidence_level: ConfidenceLevel
    confidence_metrics: ConfidenceMetrics
    evidence_count: int
    effective_evidence_count: float
    relationship_breakdown: RelationshipBreakdown
    score_distribution: Dict[int, int]
    average_score: float
    score_spread: float  # population standard deviation
    has_outliers: bool
    adjustment_details: List[OutlierAdjustment] = Field(default_factory=list)
    evidence_quotes: List[str] = Field(default_factory=list)
    stats: ScoreStats


class RelationshipInsight(BaseModel):
    """Per-relationship (or aggregate) view of a feedback cycle."""
    model_config = ConfigDict(frozen=True)

    relationship: Relationship
    themes: List[str] = Field(default_factory=list)
    competencies: List[CompetencyResult] = Field(default_factory=list)
    response_count: int = 0

    def get_competency(self, name: str) -> Optional[CompetencyResult]:
        """Look up a competency result by name."""
        return next((c for c in self.competencies if c.name == name), None)
