"""
Score rollup for completed interviews.

Per-answer scores arrive on a 0-10 scale. The first `technical_count`
answers are "technical", the rest "behavioral"; this is positional, not
content based. Rollups are reported on a 0-100 scale.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence
from app.schemas.interview import InterviewSummary

logger = logging.getLogger(__name__)

DEFAULT_TECHNICAL_COUNT = 4
STRONG_HIRE_THRESHOLD = 70
CONSIDER_THRESHOLD = 50


@dataclass
class AnsweredQuestion:
    question: str
    answer: str
    score: float
    feedback: str = ""


@dataclass
class ScoreBreakdown:
    overall_score: int
    technical_score: int
    behavioral_score: int


@dataclass
class AggregateResult:
    scores: ScoreBreakdown
    summary: InterviewSummary
    summary_from_fallback: bool = False


def round_half_up(value: float) -> int:
    # round() is banker's rounding: round(72.5) == 72
    return int(math.floor(value + 0.5))


def _scaled_mean(values: Sequence[float]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values) * 10)


def compute_scores(scores: Sequence[float], technical_count: int = DEFAULT_TECHNICAL_COUNT) -> ScoreBreakdown:
    """
    Roll up 0-10 answer scores into 0-100 overall/technical/behavioral scores.

    >>> compute_scores([8, 6, 7, 9, 5])
    ScoreBreakdown(overall_score=70, technical_score=75, behavioral_score=50)
    """
    scores = list(scores)
    return ScoreBreakdown(
        overall_score=_scaled_mean(scores),
        technical_score=_scaled_mean(scores[:technical_count]),
        behavioral_score=_scaled_mean(scores[technical_count:]),
    )


class Summarizer(Protocol):
    def summarize(self, job_role: str, answered: List[AnsweredQuestion]) -> InterviewSummary:
        ...


def fallback_summary(breakdown: ScoreBreakdown, answered: Sequence[AnsweredQuestion]) -> InterviewSummary:
    """Narrative derived only from the numbers, used when the summarizer fails."""
    strengths: List[str] = []
    improvements: List[str] = []

    if breakdown.technical_score >= STRONG_HIRE_THRESHOLD:
        strengths.append("Solid technical answers")
    elif breakdown.technical_score < CONSIDER_THRESHOLD:
        improvements.append("Technical depth")
    if breakdown.behavioral_score >= STRONG_HIRE_THRESHOLD:
        strengths.append("Clear communication in behavioral questions")
    elif breakdown.behavioral_score < CONSIDER_THRESHOLD:
        improvements.append("Behavioral examples and communication")

    if answered:
        best = max(answered, key=lambda a: a.score)
        worst = min(answered, key=lambda a: a.score)
        if best.score >= 7:
            strengths.append(f"Strong answer to: {best.question}")
        if worst.score < 5:
            improvements.append(f"Review the topic of: {worst.question}")

    if breakdown.overall_score >= STRONG_HIRE_THRESHOLD:
        recommendation = "Recommended for the next round"
    elif breakdown.overall_score >= CONSIDER_THRESHOLD:
        recommendation = "Consider with reservations"
    else:
        recommendation = "Not recommended at this time"

    return InterviewSummary(
        strengths=strengths,
        improvement_areas=improvements,
        recommendation=recommendation,
    )


class ScoringAggregator:
    """Numeric rollup plus exactly one summarizer call per completed interview."""

    def __init__(self, summarizer: Optional[Summarizer], technical_count: int = DEFAULT_TECHNICAL_COUNT):
        self.summarizer = summarizer
        self.technical_count = technical_count

    def aggregate(self, job_role: str, answered: List[AnsweredQuestion]) -> AggregateResult:
        breakdown = compute_scores([a.score for a in answered], self.technical_count)
        logger.info(
            f"Interview scores: overall={breakdown.overall_score}, "
            f"technical={breakdown.technical_score}, behavioral={breakdown.behavioral_score}"
        )

        if self.summarizer is not None:
            try:
                summary = self.summarizer.summarize(job_role, answered)
                return AggregateResult(scores=breakdown, summary=summary)
            except Exception as e:
                logger.warning(f"Summary generation failed, deriving summary from scores: {e}")

        return AggregateResult(
            scores=breakdown,
            summary=fallback_summary(breakdown, answered),
            summary_from_fallback=True,
        )
