from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from quizapp.core.db import get_session
from quizapp.core.exceptions import NotFoundError
from quizapp.core.progress import calculate_progress_stats
from quizapp.core.scoring import calculate_max_score, normalize_number
from quizapp.models.db_models import Quiz, QuizResult
from quizapp.schemas.quiz import parse_questions

router = APIRouter(prefix="/progress", tags=["progress"])

UNKNOWN_QUIZ_TITLE = "Unknown Quiz"


def _max_score(quiz: Quiz) -> Any:
    return calculate_max_score(parse_questions(quiz.questions), quiz.score_multiplier)


@router.get("")
def progress_overview(
    user_id: str = Query(..., alias="userId", min_length=1),
    session: Session = Depends(get_session),
) -> List[Dict[str, Any]]:
    """One entry per quiz the user has taken, most recently taken first."""
    rows = session.exec(
        select(QuizResult)
        .where(QuizResult.user_id == user_id)
        .order_by(QuizResult.completed_at, QuizResult.attempt_no)
    ).all()

    grouped: Dict[int, List[QuizResult]] = {}
    for r in rows:
        grouped.setdefault(r.quiz_id, []).append(r)

    out: List[Dict[str, Any]] = []
    for quiz_id, results in grouped.items():
        results.sort(key=lambda r: (r.attempt_no, r.completed_at))
        quiz = session.get(Quiz, quiz_id)
        direction = quiz.scoring_direction if quiz is not None else "higher-is-better"
        scores = [normalize_number(float(r.score)) for r in results]
        stats = calculate_progress_stats(scores, direction)  # type: ignore[arg-type]
        out.append({
            "quizId": quiz_id,
            "quizTitle": quiz.title if quiz is not None else UNKNOWN_QUIZ_TITLE,
            "slug": quiz.slug if quiz is not None else None,
            "scoringDirection": direction,
            "maxScore": _max_score(quiz) if quiz is not None else 0,
            "scores": scores,
            "dates": [r.completed_at.isoformat() for r in results],
            **stats.model_dump(),
        })

    out.sort(key=lambda p: p["dates"][-1], reverse=True)
    return out


@router.get("/{quiz_id}")
def quiz_progress(
    quiz_id: int,
    user_id: str = Query(..., alias="userId", min_length=1),
    session: Session = Depends(get_session),
) -> Dict[str, Any]:
    """Score history of one user for one quiz, oldest first, with summary stats."""
    quiz = session.get(Quiz, quiz_id)
    if quiz is None:
        raise NotFoundError(f"Quiz {quiz_id} not found")

    rows = session.exec(
        select(QuizResult)
        .where(QuizResult.quiz_id == quiz_id, QuizResult.user_id == user_id)
        .order_by(QuizResult.attempt_no, QuizResult.completed_at)
    ).all()

    scores = [normalize_number(float(r.score)) for r in rows]
    history: List[Dict[str, Any]] = [
        {
            "resultId": r.id,
            "attempt": r.attempt_no,
            "date": r.completed_at.isoformat(),
            "score": s,
            "resultMessage": r.result_message,
        }
        for r, s in zip(rows, scores)
    ]
    stats = calculate_progress_stats(scores, quiz.scoring_direction)  # type: ignore[arg-type]

    return {
        "quizId": quiz.id,
        "quizTitle": quiz.title,
        "scoringDirection": quiz.scoring_direction,
        "maxScore": _max_score(quiz),
        "results": history,
        "stats": stats.model_dump(),
    }
