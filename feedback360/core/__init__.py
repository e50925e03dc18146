"""
Core Package - Feedback360 Scoring Engine
feedback360/core/__init__.py

Core infrastructure: exceptions, logging.
"""

from feedback360.core.exceptions import (
    DegenerateDistributionError,
    EmptyInputError,
    ScoringException,
    UnrecognizedRelationshipWarning,
)
from feedback360.core.log_config import configure_logging

__all__ = [
    # Logging
    "configure_logging",
    # Exceptions
    "DegenerateDistributionError",
    "EmptyInputError",
    "ScoringException",
    "UnrecognizedRelationshipWarning",
]
