# quizapp/routers/results.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from quizapp.core.db import get_session
from quizapp.core.exceptions import NotFoundError
from quizapp.core.scoring import calculate_max_score, normalize_number
from quizapp.models.db_models import Quiz, QuizResult
from quizapp.schemas.quiz import ResultOut, parse_questions

router = APIRouter(prefix="/results", tags=["results"])


def result_out(row: QuizResult, quiz: Optional[Quiz]) -> ResultOut:
    """Stored result row -> API shape, with the quiz's max score for display."""
    max_score = 0
    if quiz is not None:
        max_score = calculate_max_score(parse_questions(quiz.questions), quiz.score_multiplier)

    sub_scores = None
    if row.sub_scores:
        sub_scores = {k: normalize_number(float(v)) for k, v in row.sub_scores.items()}

    return ResultOut.model_validate({
        "id": row.id,
        "quizId": row.quiz_id,
        "quizTitle": quiz.title if quiz is not None else None,
        "userId": row.user_id,
        "sessionId": row.session_id,
        "totalScore": normalize_number(float(row.score)),
        "subScores": sub_scores,
        "resultMessage": row.result_message,
        "resultDescription": row.result_description,
        "answers": row.answers or [],
        "maxScore": max_score,
        "completedAt": row.completed_at.isoformat(),
    })


@router.get("/{result_id}", response_model=ResultOut, response_model_exclude_none=True)
def get_result(result_id: str, session: Session = Depends(get_session)):
    row = session.get(QuizResult, result_id)
    if row is None:
        raise NotFoundError(f"Result {result_id} not found")
    quiz = session.get(Quiz, row.quiz_id)
    return result_out(row, quiz)
