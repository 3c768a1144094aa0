"""
Unit tests for interview score rollup and summaries.
"""

import pytest

from app.schemas.interview import InterviewSummary
from app.services.scoring import (
    AnsweredQuestion,
    ScoreBreakdown,
    ScoringAggregator,
    compute_scores,
    fallback_summary,
    round_half_up,
)


def answered(scores):
    return [
        AnsweredQuestion(question=f"Question {i + 1}", answer="An answer", score=s)
        for i, s in enumerate(scores)
    ]


class StubSummarizer:
    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    def summarize(self, job_role, answered):
        self.calls += 1
        if self.error:
            raise self.error
        return InterviewSummary(
            strengths=["Thorough answers"],
            improvement_areas=["Brevity"],
            recommendation="Recommended for the next round",
        )


class TestComputeScores:

    def test_standard_interview(self):
        breakdown = compute_scores([8, 6, 7, 9, 5])

        assert breakdown == ScoreBreakdown(overall_score=70, technical_score=75, behavioral_score=50)

    def test_halves_round_up(self):
        # technical mean 7.25 -> 72.5 -> 73
        breakdown = compute_scores([7, 7, 7, 8, 6])

        assert breakdown.technical_score == 73
        assert breakdown.overall_score == 70

    @pytest.mark.parametrize("value,expected", [(72.5, 73), (72.4999, 72), (0.5, 1), (0, 0), (100, 100)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_empty_behavioral_partition_scores_zero(self):
        breakdown = compute_scores([10, 10, 10, 10])

        assert breakdown.technical_score == 100
        assert breakdown.behavioral_score == 0

    def test_no_answers(self):
        assert compute_scores([]) == ScoreBreakdown(0, 0, 0)

    def test_custom_technical_count(self):
        breakdown = compute_scores([10, 0, 0], technical_count=1)

        assert breakdown.technical_score == 100
        assert breakdown.behavioral_score == 0
        assert breakdown.overall_score == 33

    def test_scores_stay_in_range(self):
        breakdown = compute_scores([0, 10, 0, 10, 10])

        for value in (breakdown.overall_score, breakdown.technical_score, breakdown.behavioral_score):
            assert 0 <= value <= 100


class TestScoringAggregator:

    def test_summarizer_called_once(self):
        summarizer = StubSummarizer()

        result = ScoringAggregator(summarizer).aggregate("Backend Engineer", answered([8, 6, 7, 9, 5]))

        assert summarizer.calls == 1
        assert result.summary.strengths == ["Thorough answers"]
        assert not result.summary_from_fallback

    def test_summarizer_failure_uses_fallback(self):
        summarizer = StubSummarizer(error=RuntimeError("provider down"))

        result = ScoringAggregator(summarizer).aggregate("Backend Engineer", answered([8, 6, 7, 9, 5]))

        assert summarizer.calls == 1
        assert result.summary_from_fallback
        assert result.scores.overall_score == 70
        assert result.summary.recommendation == "Recommended for the next round"

    def test_no_summarizer(self):
        result = ScoringAggregator(None).aggregate("Backend Engineer", answered([2, 3, 2, 1, 4]))

        assert result.summary_from_fallback
        assert result.summary.recommendation == "Not recommended at this time"


class TestFallbackSummary:

    def test_middle_band(self):
        scores = [6, 6, 5, 5, 4]
        summary = fallback_summary(compute_scores(scores), answered(scores))

        assert summary.recommendation == "Consider with reservations"
        assert "Review the topic of: Question 5" in summary.improvement_areas

    def test_strong_candidate(self):
        scores = [9, 8, 9, 8, 9]
        summary = fallback_summary(compute_scores(scores), answered(scores))

        assert "Solid technical answers" in summary.strengths
        assert "Clear communication in behavioral questions" in summary.strengths
        assert summary.improvement_areas == []
