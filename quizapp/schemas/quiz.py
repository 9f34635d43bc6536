"""Quiz data model shared by the validator, the scorer and the HTTP layer.

Wire format is camelCase (``scoreMapping``, ``scaleMin``, ``totalScore`` ...);
models accept either the alias or the python field name.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, computed_field, field_validator

Number = Union[int, float]
ScoringDirection = Literal["higher-is-better", "lower-is-better"]
OverviewSectionType = Literal[
    "purpose", "target-audience", "question-basis", "format", "scoring",
    "interpretation", "limitations", "seek-help", "privacy",
    "scientific-background", "custom",
]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


# ============================== Questions ==============================
class _QuestionBase(CamelModel):
    id: str
    text: str = ""
    category: Optional[str] = None

    @field_validator("text", mode="before")
    @classmethod
    def _null_text(cls, v: Any) -> Any:
        # null text reaches the validator as missing text
        return "" if v is None else v


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multiple-choice"] = "multiple-choice"
    options: Optional[List[str]] = None
    score_mapping: Optional[Dict[str, int]] = Field(default=None, alias="scoreMapping")
    points: Optional[List[int]] = None

    @field_validator("options", mode="before")
    @classmethod
    def _null_options(cls, v: Any) -> Any:
        if isinstance(v, list):
            return ["" if opt is None else opt for opt in v]
        return v


class ScaleQuestion(_QuestionBase):
    type: Literal["scale"] = "scale"
    scale_min: Optional[int] = Field(default=None, alias="scaleMin")
    scale_max: Optional[int] = Field(default=None, alias="scaleMax")


class TextQuestion(_QuestionBase):
    type: Literal["text"] = "text"


Question = Annotated[
    Union[MultipleChoiceQuestion, ScaleQuestion, TextQuestion],
    Field(discriminator="type"),
]

QuestionListAdapter: TypeAdapter[List[Question]] = TypeAdapter(List[Question])


def parse_questions(raw: Any) -> List[Question]:
    """Build typed questions from stored/submitted dicts."""
    return QuestionListAdapter.validate_python(raw or [])


# ============================== Score ranges ==============================
class ScoreRange(CamelModel):
    min: int
    max: int
    status: str = ""
    description: str = ""
    color: str = "gray"  # presentation only

    def contains(self, score: Number) -> bool:
        return self.min <= score <= self.max


ScoreRangeListAdapter: TypeAdapter[List[ScoreRange]] = TypeAdapter(List[ScoreRange])


def parse_score_ranges(raw: Any) -> List[ScoreRange]:
    return ScoreRangeListAdapter.validate_python(raw or [])


# ============================== Overview page ==============================
class OverviewSection(CamelModel):
    id: str
    type: OverviewSectionType = "custom"
    title: str = ""
    content: str = ""
    visible: bool = True
    order: int = 0
    character_limit: Optional[int] = Field(default=None, alias="characterLimit")


class QuizOverview(CamelModel):
    sections: List[OverviewSection] = Field(default_factory=list)

    def visible_sections(self) -> List[OverviewSection]:
        """Visible sections by ``order``; equal orders keep their stored position."""
        return sorted((s for s in self.sections if s.visible), key=lambda s: s.order)


# ============================== Quiz definition ==============================
class QuizDefinition(CamelModel):
    title: str = ""
    slug: str = ""
    description: str = ""
    instructions: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    score_ranges: List[ScoreRange] = Field(default_factory=list, alias="scoreRanges")
    is_published: bool = Field(default=False, alias="isPublished")
    scoring_direction: ScoringDirection = Field(default="higher-is-better", alias="scoringDirection")
    score_multiplier: Optional[float] = Field(default=None, alias="scoreMultiplier")
    order: Optional[int] = None

    # quiz information page
    base_test_name: Optional[str] = Field(default=None, alias="baseTestName")
    short_name: Optional[str] = Field(default=None, alias="shortName")
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    overview: Optional[QuizOverview] = None


# ============================== Scoring output ==============================
class Answer(CamelModel):
    question_id: str = Field(alias="questionId")
    value: Union[int, float, str]


class ScoreResult(CamelModel):
    total_score: Number = Field(alias="totalScore")
    sub_scores: Optional[Dict[str, Number]] = Field(default=None, alias="subScores")
    result_message: str = Field(alias="resultMessage")
    result_description: str = Field(alias="resultDescription")
    answers: List[Answer] = Field(default_factory=list)


class ValidationResult(CamelModel):
    errors: Dict[str, str] = Field(default_factory=dict)

    @computed_field(alias="isValid")  # type: ignore[misc]
    @property
    def is_valid(self) -> bool:
        return not self.errors


# ============================== API payloads ==============================
class QuizSummary(CamelModel):
    id: int
    title: str
    slug: str
    description: str
    is_published: bool = Field(alias="isPublished")
    question_count: int = Field(alias="questionCount")
    order: Optional[int] = None
    short_name: Optional[str] = Field(default=None, alias="shortName")
    cover_image: Optional[str] = Field(default=None, alias="coverImage")


class QuizOut(QuizDefinition):
    id: int
    max_score: Number = Field(alias="maxScore")


class QuizOverviewOut(CamelModel):
    id: int
    title: str
    slug: str
    description: str
    instructions: Optional[str] = None
    base_test_name: Optional[str] = Field(default=None, alias="baseTestName")
    short_name: Optional[str] = Field(default=None, alias="shortName")
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    question_count: int = Field(alias="questionCount")
    sections: List[OverviewSection] = Field(default_factory=list)


class SubmissionIn(CamelModel):
    # keys are "question_<questionId>"
    answers: Dict[str, Any] = Field(default_factory=dict)
    user_id: str = Field(alias="userId", min_length=1)
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ResultOut(ScoreResult):
    id: str
    quiz_id: int = Field(alias="quizId")
    quiz_title: Optional[str] = Field(default=None, alias="quizTitle")
    user_id: str = Field(alias="userId")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    max_score: Number = Field(alias="maxScore")
    completed_at: str = Field(alias="completedAt")
