"""
Pydantic schemas for the paper assembly pipeline.

PaperConfig     → what the paper setter asked for
PoolQuestion    → read-only snapshot of a bank question handed to the assembler
PaperOutput     → the assembled paper (configuration snapshot + ordered selection)
AssemblyResult  → success/failure value returned by the assembler
"""

import enum
from typing import List, Optional, Dict
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import datetime

from database.models import Difficulty


# ─── Configuration ─────────────────────────────────────────────────────────────

class QuestionTypeConfig(BaseModel):
    """Per-category sub-config. total_marks defaults to count × marks."""
    count: int = Field(0, ge=0, description="Number of questions in this category")
    marks: int = Field(1, ge=1, description="Marks per question")
    total_marks: Optional[int] = Field(None, ge=0, description="Marks for the whole category")

    @model_validator(mode="after")
    def _fill_total_marks(self):
        if self.total_marks is None:
            self.total_marks = self.count * self.marks
        return self


class QuestionTypesConfig(BaseModel):
    mcq: QuestionTypeConfig = Field(default_factory=QuestionTypeConfig)
    short: QuestionTypeConfig = Field(default_factory=QuestionTypeConfig)
    long: QuestionTypeConfig = Field(default_factory=QuestionTypeConfig)


class DifficultyDistribution(BaseModel):
    """Percentages per difficulty. The 100% total is checked by the assembler."""
    easy: int = Field(..., ge=0, le=100)
    medium: int = Field(..., ge=0, le=100)
    hard: int = Field(..., ge=0, le=100)


class PaperConfig(BaseModel):
    """User-facing request to generate a paper."""
    title: str = Field(..., min_length=1, description="Paper title")
    subject: str = Field(..., min_length=1, description="Subject name")
    total_marks: int = Field(..., ge=1, description="Total marks for the paper")
    duration: int = Field(..., ge=1, description="Duration in minutes")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Overall difficulty label")
    question_types: QuestionTypesConfig
    topics: List[str] = Field(default_factory=list, description="Topics to draw from; empty = all")
    difficulty_distribution: DifficultyDistribution


class PaperConfigSnapshot(BaseModel):
    """The part of PaperConfig stored with every paper."""
    question_types: QuestionTypesConfig
    topics: List[str] = Field(default_factory=list)
    difficulty_distribution: DifficultyDistribution


# ─── Pool / selection ──────────────────────────────────────────────────────────

class PoolQuestion(BaseModel):
    """Immutable snapshot of one bank question."""
    id: int
    question: str
    type: str
    difficulty: str
    answer: Optional[str] = None
    options: Optional[List[str]] = None
    tags: List[str] = Field(default_factory=list)
    confidence: Optional[int] = 0
    source_text: str = ""
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class SelectedQuestion(BaseModel):
    """A pool question placed in a paper section."""
    question_id: int
    question: str
    type: str
    difficulty: str
    marks: int
    section: str
    tags: List[str] = Field(default_factory=list)


class Shortfall(BaseModel):
    """A difficulty bucket that could not supply every requested question."""
    category: str
    difficulty: str
    requested: int
    selected: int


class PaperStats(BaseModel):
    total_questions: int
    questions_by_type: Dict[str, int] = Field(default_factory=dict)
    questions_by_difficulty: Dict[str, int] = Field(default_factory=dict)
    topic_coverage: List[str] = Field(default_factory=list)
    total_marks: int


class PaperOutput(BaseModel):
    """Complete assembled paper."""
    paper_id: Optional[int] = None
    title: str
    subject: str
    total_marks: int
    duration: int
    difficulty: str
    configuration: PaperConfigSnapshot
    questions: List[SelectedQuestion]
    created_at: Optional[datetime] = None


class StoredPaper(PaperOutput):
    """A paper read back from the store, with the stats saved at generation time."""
    stats: Optional[PaperStats] = None


# ─── Result ────────────────────────────────────────────────────────────────────

class AssemblyError(str, enum.Enum):
    CONFIGURATION_INVALID = "configuration_invalid"
    EMPTY_POOL = "empty_pool"
    NO_MATCHING_QUESTIONS = "no_matching_questions"
    INSUFFICIENT_QUESTIONS = "insufficient_questions"


class AssemblyResult(BaseModel):
    success: bool
    message: str
    paper: Optional[PaperOutput] = None
    error: Optional[AssemblyError] = None
    stats: Optional[PaperStats] = None
    shortfalls: List[Shortfall] = Field(default_factory=list)


# ─── API request/response ──────────────────────────────────────────────────────

class GeneratePaperResponse(BaseModel):
    paper_id: int
    message: str
    paper: PaperOutput
    stats: PaperStats
    shortfalls: List[Shortfall] = Field(default_factory=list)


class PaperSummary(BaseModel):
    paper_id: int
    title: str
    subject: str
    total_marks: int
    duration: int
    difficulty: str
    question_count: int
    created_at: Optional[datetime]


class TemplateResponse(PaperConfig):
    """Saved paper configuration."""
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
