# tests/conftest.py

"""
Pytest Fixtures - Shared score builders and settings for the scoring engine tests
"""

import pytest
import structlog

from feedback360.config import Settings
from feedback360.models.enumerations import Competency, Relationship
from feedback360.models.scores import RawScore, RelationshipAnalysis


LEADERSHIP = Competency.LEADERSHIP.value
TECHNICAL = Competency.TECHNICAL.value
COLLABORATION = Competency.COLLABORATION.value
GROWTH = Competency.GROWTH.value


def make_score(
    score,
    relationship="senior",
    competency=LEADERSHIP,
    confidence="high",
    evidence_count=1,
    evidence_quotes=None,
    reviewer_id=None,
):
    """Build a RawScore with test-friendly defaults."""
    return RawScore(
        competency_name=competency,
        score=score,
        relationship=relationship,
        confidence=confidence,
        evidence_count=evidence_count,
        evidence_quotes=evidence_quotes or [],
        reviewer_id=reviewer_id,
    )


def make_scores(values, relationship="senior", **kwargs):
    return [make_score(v, relationship=relationship, **kwargs) for v in values]


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================

@pytest.fixture
def settings():
    """Default settings, independent of the process environment."""
    return Settings(_env_file=None)


# =============================================================================
# SCORE FIXTURES
# =============================================================================

@pytest.fixture
def extreme_outlier_scores():
    """Seven senior 5s and one senior 1: the 1 is anomalous globally and in its cohort."""
    return make_scores([5, 5, 5, 5, 5, 5, 5, 1])


@pytest.fixture
def well_covered_scores():
    """Four reviewers per relationship, three mentions each, all scoring 4."""
    return [
        make_score(4, relationship=rel, evidence_count=3, reviewer_id=f"{rel}-{i}")
        for rel in ("senior", "peer", "junior")
        for i in range(4)
    ]


@pytest.fixture
def cycle_analyses():
    """Senior / peer / junior analyses of one feedback cycle."""
    senior = RelationshipAnalysis(
        relationship=Relationship.SENIOR,
        themes=["Owns delivery end to end"],
        scores=[
            make_score(5, "senior", LEADERSHIP, evidence_quotes=["Led the migration"]),
            make_score(4, "senior", TECHNICAL),
        ],
        response_count=2,
    )
    peer = RelationshipAnalysis(
        relationship=Relationship.PEER,
        themes=["Great collaborator", "Clear writer"],
        scores=[
            make_score(4, "peer", LEADERSHIP, evidence_quotes=["Led the migration"]),
            make_score(3, "peer", COLLABORATION),
        ],
        response_count=3,
    )
    junior = RelationshipAnalysis(
        relationship=Relationship.JUNIOR,
        themes=["Patient mentor"],
        scores=[make_score(3, "junior", LEADERSHIP)],
        response_count=1,
    )
    return senior, peer, junior


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after a test reconfigures it."""
    yield
    structlog.reset_defaults()
