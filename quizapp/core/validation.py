# quizapp/core/validation.py
"""Structural and semantic checks for a quiz definition before it is stored.

Every rule runs; nothing short-circuits. Problems come back as a map of
field-scoped messages (``title``, ``slug``, ``question_3``, ``range_1_overlap``
...) rather than as exceptions.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Sequence

from quizapp.schemas.quiz import (
    MultipleChoiceQuestion,
    Question,
    QuizDefinition,
    ScaleQuestion,
    ScoreRange,
    ValidationResult,
)

SLUG_RE = re.compile(r"[a-z0-9-]+")


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _question_error(index: int, q: Question) -> Optional[str]:
    # later checks overwrite earlier ones: only the last failure is reported
    n = index + 1
    error = None
    if _blank(q.text):
        error = f"Question {n} text is required"

    if isinstance(q, MultipleChoiceQuestion):
        options = q.options or []
        if len(options) < 2:
            error = f"Question {n} must have at least 2 options"
        if any(_blank(opt) for opt in options):
            error = f"Question {n} has empty options"

    elif isinstance(q, ScaleQuestion):
        if (q.scale_min or 0) >= (q.scale_max or 0):
            error = f"Question {n} scale min must be less than max"

    return error


def _range_error(index: int, r: ScoreRange) -> Optional[str]:
    n = index + 1
    error = None
    if r.min > r.max:
        error = f"Range {n} min must be less than or equal to max"
    if _blank(r.status):
        error = f"Range {n} status is required"
    return error


def ranges_overlap(a: ScoreRange, b: ScoreRange) -> bool:
    return a.min <= b.max and a.max >= b.min


def validate_quiz(
    title: Optional[str],
    slug: Optional[str],
    description: Optional[str],
    questions: Optional[Sequence[Question]],
    score_ranges: Optional[Sequence[ScoreRange]],
) -> ValidationResult:
    errors: Dict[str, str] = {}

    if _blank(title):
        errors["title"] = "Title is required"

    if _blank(slug):
        errors["slug"] = "Slug is required"
    elif not SLUG_RE.fullmatch(str(slug)):
        errors["slug"] = "Slug may only contain lowercase letters, numbers, and hyphens"

    if _blank(description):
        errors["description"] = "Description is required"

    if not questions:
        errors["questions"] = "At least one question is required"
    else:
        for i, q in enumerate(questions):
            msg = _question_error(i, q)
            if msg:
                errors[f"question_{i}"] = msg

    ranges = list(score_ranges or [])
    for i, r in enumerate(ranges):
        msg = _range_error(i, r)
        if msg:
            errors[f"range_{i}"] = msg

    # pairwise, keyed by the lower index; no transitive grouping
    for i in range(len(ranges)):
        for j in range(i + 1, len(ranges)):
            if ranges_overlap(ranges[i], ranges[j]):
                errors[f"range_{i}_overlap"] = f"Range {i + 1} overlaps with Range {j + 1}"

    return ValidationResult(errors=errors)


def validate_definition(quiz: QuizDefinition) -> ValidationResult:
    return validate_quiz(quiz.title, quiz.slug, quiz.description, quiz.questions, quiz.score_ranges)
