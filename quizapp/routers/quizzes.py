# quizapp/routers/quizzes.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, func, select

from quizapp.core.db import get_session
from quizapp.core.exceptions import NotFoundError
from quizapp.core.scoring import calculate_max_score, calculate_score
from quizapp.models.db_models import Quiz, QuizResult
from quizapp.routers.results import result_out
from quizapp.schemas.quiz import QuizOut, QuizOverviewOut, QuizSummary, ResultOut, SubmissionIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


def quiz_summary(quiz: Quiz) -> QuizSummary:
    return QuizSummary(
        id=quiz.id,
        title=quiz.title,
        slug=quiz.slug,
        description=quiz.description,
        is_published=quiz.is_published,
        question_count=len(quiz.questions or []),
        order=quiz.order,
        short_name=quiz.short_name,
        cover_image=quiz.cover_image,
    )


def quiz_out(quiz: Quiz) -> QuizOut:
    definition = quiz.to_definition()
    return QuizOut(
        id=quiz.id,
        max_score=calculate_max_score(definition.questions, definition.score_multiplier),
        **definition.model_dump(),
    )


def ordered(statement):
    # explicit order first (unset last), newest first within the same order
    return statement.order_by(Quiz.order.is_(None), Quiz.order, Quiz.created_at.desc())


def _published_by_slug(session: Session, slug: str) -> Quiz:
    quiz = session.exec(
        select(Quiz).where(Quiz.slug == slug, Quiz.is_published == True)  # noqa: E712
    ).first()
    if quiz is None:
        raise NotFoundError(f"Quiz '{slug}' not found")
    return quiz


@router.get("", response_model=List[QuizSummary])
def list_quizzes(session: Session = Depends(get_session)):
    rows = session.exec(ordered(select(Quiz).where(Quiz.is_published == True))).all()  # noqa: E712
    return [quiz_summary(q) for q in rows]


@router.get("/{slug}", response_model=QuizOut, response_model_exclude_none=True)
def get_quiz(slug: str, session: Session = Depends(get_session)):
    return quiz_out(_published_by_slug(session, slug))


@router.get("/{slug}/overview", response_model=QuizOverviewOut, response_model_exclude_none=True)
def get_quiz_overview(slug: str, session: Session = Depends(get_session)):
    """Information page shown before a quiz is started: visible sections only, by ``order``."""
    quiz = _published_by_slug(session, slug)
    definition = quiz.to_definition()
    return QuizOverviewOut(
        id=quiz.id,
        title=definition.title,
        slug=definition.slug,
        description=definition.description,
        instructions=definition.instructions,
        base_test_name=definition.base_test_name,
        short_name=definition.short_name,
        cover_image=definition.cover_image,
        question_count=len(definition.questions),
        sections=definition.overview.visible_sections() if definition.overview else [],
    )


@router.post("/{slug}/submit", response_model=ResultOut, response_model_exclude_none=True, status_code=201)
def submit_quiz(slug: str, payload: SubmissionIn, session: Session = Depends(get_session)):
    quiz = _published_by_slug(session, slug)
    definition = quiz.to_definition()

    scored = calculate_score(
        payload.answers,
        definition.questions,
        definition.score_ranges,
        definition.score_multiplier,
    )

    last_attempt = session.exec(
        select(func.max(QuizResult.attempt_no)).where(
            QuizResult.quiz_id == quiz.id, QuizResult.user_id == payload.user_id
        )
    ).one()

    row = QuizResult(
        quiz_id=quiz.id,
        user_id=payload.user_id,
        session_id=payload.session_id,
        attempt_no=(last_attempt or 0) + 1,
        answers=[a.model_dump(by_alias=True) for a in scored.answers],
        score=scored.total_score,
        sub_scores=scored.sub_scores,
        result_message=scored.result_message,
        result_description=scored.result_description,
    )
    session.add(row)
    session.commit()
    session.refresh(row)

    logger.info(
        "Quiz submitted slug=%s user=%s answers=%d score=%s result=%r",
        slug, payload.user_id, len(scored.answers), scored.total_score, scored.result_message,
    )
    return result_out(row, quiz)
