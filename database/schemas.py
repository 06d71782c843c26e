"""
Pydantic schemas for request/response validation
Separate from SQLAlchemy models for clean API contracts
"""

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List, Dict
from datetime import datetime

from database.models import QuestionType, Difficulty


# ==========================================
# QUESTION SCHEMAS
# ==========================================

class QuestionBase(BaseModel):
    """Base schema for Question - shared fields"""
    question: str = Field(..., min_length=1, description="Question text")
    type: QuestionType = Field(..., description="multiple-choice | true-false | short-answer | essay")
    difficulty: Difficulty = Field(..., description="easy | medium | hard")
    source_text: str = Field(default="", description="Material the question was written from")
    answer: Optional[str] = Field(None, description="Correct answer or marking notes")
    options: Optional[List[str]] = Field(None, description="Options for multiple choice")
    tags: List[str] = Field(default_factory=list, description="Topic tags")
    confidence: int = Field(default=0, ge=0, le=100, description="Quality confidence score")


class QuestionCreate(QuestionBase):
    """Schema for creating a new Question"""
    pass


NON_NULLABLE_FIELDS = frozenset({"question", "type", "difficulty", "source_text", "tags", "confidence"})


class QuestionUpdate(BaseModel):
    """Schema for editing a Question - all fields optional"""
    question: Optional[str] = Field(None, min_length=1)
    type: Optional[QuestionType] = None
    difficulty: Optional[Difficulty] = None
    source_text: Optional[str] = None
    answer: Optional[str] = None
    options: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    confidence: Optional[int] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def _reject_null_required(self):
        # Omit a field to leave it unchanged; null is only valid for answer and options
        nulled = sorted(f for f in self.model_fields_set if f in NON_NULLABLE_FIELDS and getattr(self, f) is None)
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self


class QuestionResponse(QuestionBase):
    """Schema for Question response"""
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class QuestionListResponse(BaseModel):
    total: int
    questions: List[QuestionResponse]


class QuestionBankStats(BaseModel):
    """Counts over the whole question bank"""
    count: int
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_difficulty: Dict[str, int] = Field(default_factory=dict)


# ==========================================
# SEARCH SCHEMAS
# ==========================================

class QuestionSearchHit(BaseModel):
    """One keyword search result"""
    question_id: int
    question: str
    answer: Optional[str] = None
    type: str
    difficulty: str
    tags: List[str] = Field(default_factory=list)
    score: float


class QuestionSearchResponse(BaseModel):
    query: str
    total_results: int
    results: List[QuestionSearchHit]
