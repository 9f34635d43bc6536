# scripts/seed_quizzes.py
"""Insert sample quizzes for local development.

Usage: python scripts/seed_quizzes.py [--database-url sqlite:///quizapp.db]

Every quiz goes through the validator first; slugs already present are skipped.
"""
from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List

from sqlmodel import Session, select

from quizapp.core.db import init_db, make_engine
from quizapp.core.logging import setup_logging
from quizapp.core.settings import settings
from quizapp.core.validation import validate_definition
from quizapp.models.db_models import Quiz
from quizapp.schemas.quiz import QuizDefinition

logger = logging.getLogger("seed_quizzes")

FREQUENCY = ["Not at all", "Several days", "More than half the days", "Nearly every day"]
FREQUENCY_POINTS = {opt: i for i, opt in enumerate(FREQUENCY)}

DASS_OPTIONS = [
    "Did not apply to me at all",
    "Applied to me to some degree",
    "Applied to me a considerable degree",
    "Applied to me very much",
]


def _phq(qid: str, text: str) -> Dict[str, Any]:
    return {"id": qid, "text": text, "type": "multiple-choice", "options": FREQUENCY, "scoreMapping": FREQUENCY_POINTS}


def _dass(qid: str, text: str, category: str) -> Dict[str, Any]:
    return {
        "id": qid, "text": text, "type": "multiple-choice",
        "options": DASS_OPTIONS, "points": [0, 1, 2, 3], "category": category,
    }


SAMPLE_QUIZZES: List[Dict[str, Any]] = [
    {
        "title": "Depression Screening (PHQ-9)",
        "slug": "phq-9",
        "description": "A brief questionnaire to assess symptoms of depression over the past two weeks.",
        "shortName": "PHQ-9",
        "baseTestName": "Patient Health Questionnaire",
        "overview": {"sections": [
            {"id": "purpose", "type": "purpose", "title": "What this measures", "order": 1,
             "content": "How often common symptoms of low mood affected you over the last two weeks."},
            {"id": "seek-help", "type": "seek-help", "title": "Getting help", "order": 2,
             "content": "This is not a diagnosis. If you are struggling, talk to a health professional."},
        ]},
        "isPublished": True,
        "scoringDirection": "lower-is-better",
        "order": 1,
        "questions": [
            _phq("1", "Little interest or pleasure in doing things"),
            _phq("2", "Feeling down, depressed, or hopeless"),
            _phq("3", "Trouble falling or staying asleep, or sleeping too much"),
            _phq("4", "Feeling tired or having little energy"),
            _phq("5", "Poor appetite or overeating"),
        ],
        "scoreRanges": [
            {"min": 0, "max": 4, "status": "Minimal", "description": "Few or no symptoms reported.", "color": "green"},
            {"min": 5, "max": 9, "status": "Mild", "description": "Some symptoms worth keeping an eye on.", "color": "yellow"},
            {"min": 10, "max": 15, "status": "Moderate or higher", "description": "Consider talking to a professional.", "color": "orange"},
        ],
    },
    {
        "title": "Depression, Anxiety and Stress (DASS-21, short form)",
        "slug": "dass-21",
        "description": "Sub-scores for depression, anxiety and stress; totals are doubled to match the full scale.",
        "isPublished": True,
        "scoringDirection": "lower-is-better",
        "scoreMultiplier": 2,
        "order": 2,
        "questions": [
            _dass("1", "I found it hard to wind down", "Stress"),
            _dass("2", "I was aware of dryness of my mouth", "Anxiety"),
            _dass("3", "I couldn't seem to experience any positive feeling at all", "Depression"),
            _dass("4", "I tended to over-react to situations", "Stress"),
            _dass("5", "I felt I was close to panic", "Anxiety"),
            _dass("6", "I felt that I had nothing to look forward to", "Depression"),
        ],
        "scoreRanges": [
            {"min": 0, "max": 10, "status": "Normal", "description": "Within the typical range.", "color": "green"},
            {"min": 11, "max": 22, "status": "Elevated", "description": "Some areas are elevated.", "color": "yellow"},
            {"min": 23, "max": 36, "status": "High", "description": "Several areas are high; consider support.", "color": "orange"},
        ],
    },
    {
        "title": "Daily Check-in",
        "slug": "daily-check-in",
        "description": "How are you feeling today?",
        "isPublished": True,
        "order": 3,
        "questions": [
            {"id": "mood", "text": "How are you feeling today?", "type": "scale", "scaleMin": 1, "scaleMax": 10},
            {"id": "note", "text": "Anything you'd like to note?", "type": "text"},
        ],
        "scoreRanges": [
            {"min": 1, "max": 4, "status": "Low", "description": "A tough day.", "color": "orange"},
            {"min": 5, "max": 7, "status": "Steady", "description": "An ordinary day.", "color": "yellow"},
            {"min": 8, "max": 10, "status": "Great", "description": "A good day.", "color": "green"},
        ],
    },
]


def seed(session: Session, quizzes: List[Dict[str, Any]] = SAMPLE_QUIZZES) -> List[str]:
    """Insert the given quiz documents; returns the slugs actually created."""
    created: List[str] = []
    for raw in quizzes:
        definition = QuizDefinition.model_validate(raw)
        result = validate_definition(definition)
        if not result.is_valid:
            logger.warning("Skipping %r: %s", definition.slug, result.errors)
            continue
        if session.exec(select(Quiz).where(Quiz.slug == definition.slug)).first() is not None:
            logger.info("Quiz %r already exists", definition.slug)
            continue
        session.add(Quiz.from_definition(definition))
        created.append(definition.slug)
    session.commit()
    return created


def main() -> None:
    p = argparse.ArgumentParser(description="Seed sample quizzes")
    p.add_argument("--database-url", default=settings.DATABASE_URL)
    args = p.parse_args()

    setup_logging(settings.LOG_LEVEL)
    engine = make_engine(args.database_url)
    init_db(engine)
    with Session(engine) as session:
        created = seed(session)
    logger.info("Seeded %d quizzes: %s", len(created), ", ".join(created) or "-")


if __name__ == "__main__":
    main()
