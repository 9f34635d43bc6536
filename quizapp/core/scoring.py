# quizapp/core/scoring.py
"""Turns submitted answers plus a quiz definition into a scored result.

Functions:
- calculate_score: total, per-category sub-scores, matched result message.
- calculate_max_score: highest reachable total, for "x out of y" displays.

Nothing here raises on malformed input: an unknown option, a missing mapping
entry or an unreadable number simply contributes 0 points.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from quizapp.schemas.quiz import (
    Answer,
    MultipleChoiceQuestion,
    Number,
    Question,
    ScaleQuestion,
    ScoreRange,
    ScoreResult,
)

logger = logging.getLogger(__name__)

DEFAULT_RESULT_MESSAGE = "Assessment Complete"
DEFAULT_RESULT_DESCRIPTION = "Thank you for completing the assessment."
DEFAULT_SCALE_MAX = 10


def answer_key(question_id: str) -> str:
    """Lookup key used by submissions: ``question_<id>``."""
    return f"question_{question_id}"


def normalize_number(value: float) -> Number:
    # 14.0 -> 14, 3.5 stays 3.5
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_number(raw: Any) -> Optional[Number]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except (TypeError, ValueError):
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return normalize_number(value)


def _coerce_answer(question: Question, raw: Any) -> Union[Number, str]:
    if isinstance(question, ScaleQuestion):
        number = _to_number(raw)
        # unreadable scale input is kept verbatim and scores 0
        return number if number is not None else str(raw).strip()
    return str(raw)


def _points_for(question: Question, value: Union[Number, str]) -> Number:
    if isinstance(question, ScaleQuestion):
        # face value, no clamping to [scale_min, scale_max]
        return value if isinstance(value, (int, float)) else 0

    if isinstance(question, MultipleChoiceQuestion) and isinstance(value, str):
        if question.score_mapping is not None:
            return question.score_mapping.get(value, 0)
        if question.points is not None and question.options:
            try:
                idx = question.options.index(value)
            except ValueError:
                return 0
            if idx < len(question.points):
                return question.points[idx]
        return 0

    return 0


def match_range(score: Number, score_ranges: Optional[Sequence[ScoreRange]]) -> Optional[ScoreRange]:
    """First range, in definition order, whose closed interval holds `score`."""
    for r in score_ranges or []:
        if r.contains(score):
            return r
    return None


def calculate_score(
    answers_source: Mapping[str, Any],
    questions: Sequence[Question],
    score_ranges: Optional[Sequence[ScoreRange]],
    score_multiplier: Optional[float] = None,
) -> ScoreResult:
    total: Number = 0
    sub_scores: Dict[str, Number] = {}
    answers: List[Answer] = []

    for question in questions:
        raw = answers_source.get(answer_key(question.id))
        if raw is None or raw == "":
            continue

        value = _coerce_answer(question, raw)
        answers.append(Answer(question_id=question.id, value=value))

        points = _points_for(question, value)
        total += points

        category = (question.category or "").strip()
        if category:
            sub_scores[category] = sub_scores.get(category, 0) + points

    if score_multiplier and score_multiplier > 0:
        total = normalize_number(total * score_multiplier)
        sub_scores = {cat: normalize_number(v * score_multiplier) for cat, v in sub_scores.items()}

    matched = match_range(total, score_ranges)
    if matched is not None:
        message, description = matched.status, matched.description
    else:
        message, description = DEFAULT_RESULT_MESSAGE, DEFAULT_RESULT_DESCRIPTION

    logger.debug(
        "scored answers=%d total=%s sub_scores=%s matched=%s",
        len(answers), total, sub_scores, message,
    )

    return ScoreResult(
        total_score=total,
        sub_scores=sub_scores or None,
        result_message=message,
        result_description=description,
        answers=answers,
    )


def calculate_max_score(questions: Sequence[Question], score_multiplier: Optional[float] = None) -> Number:
    max_score: Number = 0
    for q in questions:
        if isinstance(q, ScaleQuestion):
            max_score += q.scale_max if q.scale_max is not None else DEFAULT_SCALE_MAX
        elif isinstance(q, MultipleChoiceQuestion):
            if q.score_mapping is not None:
                if q.score_mapping:
                    max_score += max(q.score_mapping.values())
            elif q.points:
                max_score += max(q.points)

    if score_multiplier and score_multiplier > 0:
        max_score = normalize_number(max_score * score_multiplier)
    return max_score
