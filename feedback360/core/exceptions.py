"""
Custom Exceptions - Feedback360 Scoring Engine
feedback360/core/exceptions.py

Errors raised by the scoring engine. All of them are local to one competency:
callers skip the competency and carry on with the rest.
"""


class ScoringException(Exception):
    """Base exception for scoring operations."""

    pass


class EmptyInputError(ScoringException):
    """A statistic was requested over zero values."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} requires at least one value")


class DegenerateDistributionError(ScoringException):
    """Standard deviation is zero, so a z-score is undefined."""

    def __init__(self, value: float, mean: float):
        self.value = value
        self.mean = mean
        super().__init__(
            f"cannot compute z-score of {value}: all values equal {mean}"
        )


class UnrecognizedRelationshipWarning(UserWarning):
    """A relationship label matched no known pattern and fell back to peer.

    Not raised. Its name is attached to the ``unrecognized_relationship`` log
    event so data-quality monitoring can filter on it.
    """

    pass
