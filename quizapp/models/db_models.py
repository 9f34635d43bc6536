# quizapp/models/db_models.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from quizapp.schemas.quiz import QuizDefinition


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Quiz(SQLModel, table=True):
    __tablename__ = "quizzes"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    slug: str = Field(index=True, unique=True)
    description: str = ""
    instructions: Optional[str] = None

    # nested documents, stored as-is (camelCase keys)
    questions: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    score_ranges: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    is_published: bool = Field(default=False, index=True)
    scoring_direction: str = "higher-is-better"
    score_multiplier: Optional[float] = None
    order: Optional[int] = None

    base_test_name: Optional[str] = None
    short_name: Optional[str] = None
    cover_image: Optional[str] = None
    overview: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def to_definition(self) -> QuizDefinition:
        return QuizDefinition.model_validate({
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "instructions": self.instructions,
            "questions": self.questions or [],
            "scoreRanges": self.score_ranges or [],
            "isPublished": self.is_published,
            "scoringDirection": self.scoring_direction,
            "scoreMultiplier": self.score_multiplier,
            "order": self.order,
            "baseTestName": self.base_test_name,
            "shortName": self.short_name,
            "coverImage": self.cover_image,
            "overview": self.overview,
        })

    def apply_definition(self, definition: QuizDefinition) -> None:
        """Replace the whole stored definition (no partial updates)."""
        self.title = definition.title.strip()
        self.slug = definition.slug
        self.description = definition.description.strip()
        self.instructions = definition.instructions
        # new list objects so SQLAlchemy sees the JSON columns as changed
        self.questions = [q.model_dump(by_alias=True, exclude_none=True) for q in definition.questions]
        self.score_ranges = [r.model_dump(by_alias=True) for r in definition.score_ranges]
        self.is_published = definition.is_published
        self.scoring_direction = definition.scoring_direction
        self.score_multiplier = definition.score_multiplier
        self.order = definition.order
        self.base_test_name = definition.base_test_name
        self.short_name = definition.short_name
        self.cover_image = definition.cover_image
        self.overview = (
            definition.overview.model_dump(by_alias=True, exclude_none=True) if definition.overview else None
        )
        self.updated_at = _utcnow()

    @classmethod
    def from_definition(cls, definition: QuizDefinition) -> "Quiz":
        quiz = cls(title=definition.title, slug=definition.slug)
        quiz.apply_definition(definition)
        return quiz


class QuizResult(SQLModel, table=True):
    __tablename__ = "quiz_results"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    quiz_id: int = Field(foreign_key="quizzes.id", index=True)
    user_id: str = Field(index=True)
    session_id: Optional[str] = None
    # 1-based, counted per (quiz, user)
    attempt_no: int = Field(default=1, index=True)

    answers: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    score: float = 0
    sub_scores: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    result_message: str = ""
    result_description: str = ""

    completed_at: datetime = Field(default_factory=_utcnow, index=True)
