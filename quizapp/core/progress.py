# quizapp/core/progress.py
"""Trend and summary statistics over a user's score history for one quiz.

Scores are expected in chronological order (oldest first).
"""
from __future__ import annotations

import math
from typing import List, Literal, Sequence

from pydantic import BaseModel

from quizapp.schemas.quiz import Number, ScoringDirection

Trend = Literal["improving", "declining", "stable"]

TREND_THRESHOLD = 2


class ProgressStats(BaseModel):
    attempts: int
    trend: Trend
    average: float
    best: Number
    worst: Number
    latest: Number
    change: Number


def calculate_trend(scores: Sequence[Number], scoring_direction: ScoringDirection = "higher-is-better") -> Trend:
    if len(scores) < 2:
        return "stable"
    change = scores[-1] - scores[0]
    if scoring_direction == "lower-is-better":
        change = -change
    if change > TREND_THRESHOLD:
        return "improving"
    if change < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def get_average_score(scores: Sequence[Number]) -> float:
    """Mean rounded half-up to one decimal; 0 for no scores."""
    if not scores:
        return 0
    avg = sum(scores) / len(scores)
    return math.floor(avg * 10 + 0.5) / 10


def get_best_score(scores: Sequence[Number], scoring_direction: ScoringDirection = "higher-is-better") -> Number:
    if not scores:
        return 0
    return min(scores) if scoring_direction == "lower-is-better" else max(scores)


def get_worst_score(scores: Sequence[Number], scoring_direction: ScoringDirection = "higher-is-better") -> Number:
    if not scores:
        return 0
    return max(scores) if scoring_direction == "lower-is-better" else min(scores)


def get_score_change(scores: Sequence[Number]) -> Number:
    if len(scores) < 2:
        return 0
    return scores[-1] - scores[0]


def calculate_progress_stats(
    scores: List[Number],
    scoring_direction: ScoringDirection = "higher-is-better",
) -> ProgressStats:
    return ProgressStats(
        attempts=len(scores),
        trend=calculate_trend(scores, scoring_direction),
        average=get_average_score(scores),
        best=get_best_score(scores, scoring_direction),
        worst=get_worst_score(scores, scoring_direction),
        latest=scores[-1] if scores else 0,
        change=get_score_change(scores),
    )
