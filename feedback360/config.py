"""Engine configuration with validation."""
from typing import Dict, Literal
from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Scoring engine settings. Every threshold can be tuned from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Feedback360 Scoring Engine"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # Relationship Weights
    W_SENIOR: float = Field(default=0.40, ge=0.0, le=1.0)
    W_PEER: float = Field(default=0.35, ge=0.0, le=1.0)
    W_JUNIOR: float = Field(default=0.25, ge=0.0, le=1.0)

    # Outlier Detection
    OUTLIER_MIN_SAMPLE_SIZE: int = Field(default=3, ge=1, le=50)
    OUTLIER_RELATIONSHIP_MIN_SAMPLES: int = Field(default=2, ge=1, le=50)
    OUTLIER_IQR_MULTIPLIER: float = Field(default=1.5, gt=0, le=5.0)
    OUTLIER_MAX_Z_SCORE: float = Field(default=2.0, gt=0, le=10.0)
    OUTLIER_EXTREME_Z_SCORE: float = Field(default=3.0, gt=0, le=10.0)
    OUTLIER_EXTREME_REDUCTION: float = Field(default=0.5, gt=0, le=1.0)
    OUTLIER_MODERATE_REDUCTION: float = Field(default=0.75, gt=0, le=1.0)

    # Per-mention confidence weights (confidence tag set by the text-analysis step)
    MENTION_WEIGHT_HIGH: float = Field(default=1.0, gt=0, le=1.0)
    MENTION_WEIGHT_MEDIUM: float = Field(default=0.85, gt=0, le=1.0)
    MENTION_WEIGHT_LOW: float = Field(default=0.7, gt=0, le=1.0)

    # Confidence Estimation
    EVIDENCE_SATURATION: float = Field(default=15.0, gt=0)
    VARIANCE_CEILING: float = Field(default=2.0, gt=0)
    HIGH_MIN_EVIDENCE: float = Field(default=12.0, ge=0)
    HIGH_MIN_CONSISTENCY: float = Field(default=0.5, ge=0, le=1)
    HIGH_MIN_SCORE: float = Field(default=0.65, ge=0, le=1)
    MEDIUM_MIN_EVIDENCE: float = Field(default=8.0, ge=0)
    MEDIUM_MIN_CONSISTENCY: float = Field(default=0.3, ge=0, le=1)
    MEDIUM_ALT_MIN_CONSISTENCY: float = Field(default=0.5, ge=0, le=1)
    MEDIUM_ALT_MIN_SCORE: float = Field(default=0.55, ge=0, le=1)

    @model_validator(mode="after")
    def validate_relationship_weights(self):
        """Validate relationship weights sum to 1.0."""
        total = self.W_SENIOR + self.W_PEER + self.W_JUNIOR
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"Relationship weights must sum to 1.0, got {total}")
        return self

    @model_validator(mode="after")
    def validate_confidence_thresholds(self):
        """The high-confidence evidence bar may not sit below the medium one."""
        if self.HIGH_MIN_EVIDENCE < self.MEDIUM_MIN_EVIDENCE:
            raise ValueError(
                f"HIGH_MIN_EVIDENCE ({self.HIGH_MIN_EVIDENCE}) must be >= "
                f"MEDIUM_MIN_EVIDENCE ({self.MEDIUM_MIN_EVIDENCE})"
            )
        return self

    @property
    def relationship_weights(self) -> Dict[str, float]:
        """Canonical weights keyed by relationship value."""
        return {
            "senior": self.W_SENIOR,
            "peer": self.W_PEER,
            "junior": self.W_JUNIOR,
        }

    @property
    def mention_weights(self) -> Dict[str, float]:
        """Per-mention confidence multipliers keyed by confidence value."""
        return {
            "high": self.MENTION_WEIGHT_HIGH,
            "medium": self.MENTION_WEIGHT_MEDIUM,
            "low": self.MENTION_WEIGHT_LOW,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
