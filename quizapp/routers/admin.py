# quizapp/routers/admin.py
"""Quiz authoring endpoints (x-api-key protected).

Every create/replace goes through the validator first; an invalid definition
is never written. Updates replace the whole definition.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from quizapp.core.db import get_session
from quizapp.core.exceptions import ConflictError, NotFoundError, QuizValidationError
from quizapp.core.security import verify_api_key
from quizapp.core.validation import validate_definition
from quizapp.models.db_models import Quiz, QuizResult
from quizapp.routers.quizzes import ordered, quiz_out, quiz_summary
from quizapp.schemas.quiz import QuizDefinition, QuizOut, QuizSummary, ValidationResult

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/quizzes",
    tags=["admin"],
    dependencies=[Depends(verify_api_key)],
)


def _get_or_404(session: Session, quiz_id: int) -> Quiz:
    quiz = session.get(Quiz, quiz_id)
    if quiz is None:
        raise NotFoundError(f"Quiz {quiz_id} not found")
    return quiz


def _ensure_valid(definition: QuizDefinition) -> None:
    result = validate_definition(definition)
    if not result.is_valid:
        logger.info("Rejected quiz slug=%r errors=%s", definition.slug, sorted(result.errors))
        raise QuizValidationError("Quiz definition is invalid", details=result.errors)


def _ensure_slug_free(session: Session, slug: str, exclude_id: Optional[int] = None) -> None:
    stmt = select(Quiz).where(Quiz.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Quiz.id != exclude_id)
    if session.exec(stmt).first() is not None:
        raise ConflictError(f"Slug '{slug}' is already in use", details={"slug": "Slug is already in use"})


@router.get("", response_model=List[QuizSummary])
def list_all_quizzes(session: Session = Depends(get_session)):
    return [quiz_summary(q) for q in session.exec(ordered(select(Quiz))).all()]


@router.post("/validate", response_model=ValidationResult)
def validate_only(definition: QuizDefinition):
    """Dry run: report errors without storing anything."""
    return validate_definition(definition)


@router.post("", response_model=QuizOut, response_model_exclude_none=True, status_code=201)
def create_quiz(definition: QuizDefinition, session: Session = Depends(get_session)):
    _ensure_valid(definition)
    _ensure_slug_free(session, definition.slug)

    quiz = Quiz.from_definition(definition)
    session.add(quiz)
    session.commit()
    session.refresh(quiz)
    logger.info("Created quiz id=%s slug=%s questions=%d", quiz.id, quiz.slug, len(definition.questions))
    return quiz_out(quiz)


@router.get("/{quiz_id}", response_model=QuizOut, response_model_exclude_none=True)
def get_quiz_admin(quiz_id: int, session: Session = Depends(get_session)):
    return quiz_out(_get_or_404(session, quiz_id))


@router.put("/{quiz_id}", response_model=QuizOut, response_model_exclude_none=True)
def replace_quiz(quiz_id: int, definition: QuizDefinition, session: Session = Depends(get_session)):
    quiz = _get_or_404(session, quiz_id)
    _ensure_valid(definition)
    _ensure_slug_free(session, definition.slug, exclude_id=quiz_id)

    quiz.apply_definition(definition)
    session.add(quiz)
    session.commit()
    session.refresh(quiz)
    logger.info("Replaced quiz id=%s slug=%s", quiz.id, quiz.slug)
    return quiz_out(quiz)


@router.delete("/{quiz_id}")
def delete_quiz(quiz_id: int, session: Session = Depends(get_session)):
    quiz = _get_or_404(session, quiz_id)
    results = session.exec(select(QuizResult).where(QuizResult.quiz_id == quiz_id)).all()
    for r in results:
        session.delete(r)
    session.delete(quiz)
    session.commit()
    logger.info("Deleted quiz id=%s with %d results", quiz_id, len(results))
    return {"ok": True, "deleted": quiz_id, "results_deleted": len(results)}
