# tests/test_competency_aggregator.py
"""
Competency Aggregator: weighted scores, summaries and per-competency isolation
"""

import pytest
from structlog.testing import capture_logs

from feedback360.config import Settings
from feedback360.core.exceptions import DegenerateDistributionError
from feedback360.models.enumerations import AdjustmentType, ConfidenceLevel
from feedback360.scoring.competency_aggregator import (
    CompetencyAggregator,
    ordered_competency_names,
    score_bucket,
)

from conftest import GROWTH, LEADERSHIP, TECHNICAL, make_score, make_scores


@pytest.fixture
def aggregator(settings):
    return CompetencyAggregator(settings)


@pytest.fixture
def three_relationships():
    return [
        make_score(5, "senior"),
        make_score(4, "peer"),
        make_score(3, "junior"),
    ]


class TestHelpers:

    @pytest.mark.parametrize("score, bucket", [
        (2.5, 3), (2.49, 2), (3.5, 4), (4.2, 4), (1.0, 1),
    ])
    def test_score_bucket_rounds_half_up(self, score, bucket):
        assert score_bucket(score) == bucket

    def test_ordered_competency_names(self):
        names = [GROWTH, "Custom Skill", TECHNICAL, LEADERSHIP, GROWTH]
        assert ordered_competency_names(names) == [
            TECHNICAL, LEADERSHIP, GROWTH, "Custom Skill"
        ]


class TestAggregate:

    def test_no_scores_returns_none(self, aggregator):
        assert aggregator.aggregate(LEADERSHIP, []) is None

    def test_relationship_weighted_score(self, aggregator, three_relationships):
        result = aggregator.aggregate(LEADERSHIP, three_relationships)
        assert result.name == LEADERSHIP
        assert result.weighted_score == pytest.approx(4.15)
        assert result.average_score == pytest.approx(4.0)
        assert result.has_outliers is False
        assert result.adjustment_details == []

    def test_extreme_outlier_pulls_less(self, aggregator, extreme_outlier_scores):
        result = aggregator.aggregate(LEADERSHIP, extreme_outlier_scores)
        assert result.weighted_score == 4.733
        assert result.average_score == pytest.approx(4.5)
        assert result.has_outliers is True
        assert len(result.adjustment_details) == 1
        detail = result.adjustment_details[0]
        assert detail.adjustment_type == AdjustmentType.EXTREME
        assert detail.original_score == 1
        assert detail.adjusted_weight == pytest.approx(0.2)

    def test_weighted_score_stays_in_score_range(self, aggregator, extreme_outlier_scores):
        result = aggregator.aggregate(LEADERSHIP, extreme_outlier_scores)
        assert 1 <= result.weighted_score <= 5

    def test_mention_discount_counts_as_outlier(self, aggregator):
        scores = make_scores([4, 4, 4]) + [make_score(4, "peer", confidence="medium")]
        result = aggregator.aggregate(LEADERSHIP, scores)
        assert result.has_outliers is True
        assert result.adjustment_details == []
        assert result.weighted_score == 4.0

    def test_distribution_summaries(self, aggregator):
        result = aggregator.aggregate(LEADERSHIP, make_scores([3.5, 4.2, 2.5, 4]))
        assert result.score_distribution == {3: 1, 4: 3}
        assert list(result.score_distribution) == [3, 4]
        assert result.average_score == pytest.approx(3.55)

    def test_score_stats(self, aggregator):
        result = aggregator.aggregate(LEADERSHIP, make_scores([5, 5, 4, 5, 1]))
        assert result.stats.min == 1
        assert result.stats.max == 5
        assert result.stats.median == 5
        assert result.stats.mode == 5
        assert result.score_spread == pytest.approx(2.4 ** 0.5)

    def test_evidence_breakdown(self, aggregator):
        scores = [
            make_score(4, "senior", evidence_count=2),
            make_score(4, "peer", evidence_count=3),
        ]
        result = aggregator.aggregate(LEADERSHIP, scores)
        assert result.evidence_count == 5
        assert result.relationship_breakdown.senior == 2
        assert result.relationship_breakdown.peer == 3
        assert result.relationship_breakdown.junior == 0
        assert result.effective_evidence_count == pytest.approx(1.5 + 1.75)

    def test_quotes_deduplicated_in_order(self, aggregator):
        scores = [
            make_score(4, evidence_quotes=["Ran the offsite", "Owns the roadmap"]),
            make_score(5, "peer", evidence_quotes=["Owns the roadmap", "Unblocks people"]),
        ]
        result = aggregator.aggregate(LEADERSHIP, scores)
        assert result.evidence_quotes == [
            "Ran the offsite", "Owns the roadmap", "Unblocks people"
        ]

    def test_confidence_attached(self, aggregator, well_covered_scores):
        result = aggregator.aggregate(LEADERSHIP, well_covered_scores)
        assert result.confidence_level == ConfidenceLevel.HIGH
        assert result.confidence_metrics.final_score == pytest.approx(1.0)

    def test_deterministic(self, aggregator, extreme_outlier_scores):
        first = aggregator.aggregate(LEADERSHIP, extreme_outlier_scores)
        second = aggregator.aggregate(LEADERSHIP, extreme_outlier_scores)
        assert first == second

    def test_equal_weights(self, settings, three_relationships):
        aggregator = CompetencyAggregator(settings, equal_weights=True)
        assert aggregator.aggregate(LEADERSHIP, three_relationships).weighted_score == 4.0

    def test_zero_weight_falls_back_to_mean(self):
        settings = Settings(_env_file=None, W_SENIOR=0.0, W_PEER=0.6, W_JUNIOR=0.4)
        result = CompetencyAggregator(settings).aggregate(LEADERSHIP, make_scores([3, 5]))
        assert result.weighted_score == 4.0

    def test_result_is_logged(self, aggregator, three_relationships):
        with capture_logs() as logs:
            aggregator.aggregate(LEADERSHIP, three_relationships)
        event = next(e for e in logs if e["event"] == "competency_aggregated")
        assert event["competency"] == LEADERSHIP
        assert event["weighted_score"] == pytest.approx(4.15)


class TestAggregateAll:

    def test_groups_in_display_order(self, aggregator):
        scores = [
            make_score(4, competency=GROWTH),
            make_score(3, competency="Custom Skill"),
            make_score(5, competency=TECHNICAL),
            make_score(4, competency=LEADERSHIP),
            make_score(2, competency=GROWTH),
        ]
        results = aggregator.aggregate_all(scores)
        assert [r.name for r in results] == [TECHNICAL, LEADERSHIP, GROWTH, "Custom Skill"]
        assert results[2].weighted_score == 3.0

    def test_empty_input(self, aggregator):
        assert aggregator.aggregate_all([]) == []

    def test_failure_isolated_to_one_competency(self, aggregator, monkeypatch):
        detect = aggregator.outlier_detector.detect

        def failing_detect(scores):
            if scores[0].competency_name == TECHNICAL:
                raise DegenerateDistributionError(4.0, 4.0)
            return detect(scores)

        monkeypatch.setattr(aggregator.outlier_detector, "detect", failing_detect)
        scores = [make_score(4, competency=TECHNICAL), make_score(4, competency=LEADERSHIP)]

        with capture_logs() as logs:
            results = aggregator.aggregate_all(scores)

        assert [r.name for r in results] == [LEADERSHIP]
        failed = [e for e in logs if e["event"] == "competency_failed"]
        assert failed[0]["competency"] == TECHNICAL
        assert failed[0]["log_level"] == "warning"
