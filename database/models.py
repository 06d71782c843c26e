"""
SQLAlchemy models for the question bank and paper store

Question            → one stored question (manual or imported)
QuestionPaper       → an assembled paper, frozen at creation time
PaperConfiguration  → reusable paper configuration (template)

Papers keep a snapshot of the selected questions in JSON so that editing or
deleting a bank question never rewrites a paper that was already issued.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON
from sqlalchemy.sql import func
import enum
from database.database import Base


class QuestionType(str, enum.Enum):
    """Enum for stored question types"""
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    ESSAY = "essay"


class Difficulty(str, enum.Enum):
    """Enum for difficulty levels"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# ==========================================
# QUESTION BANK
# ==========================================

class Question(Base):
    """
    A stored question.
    tags drive topic filtering during paper assembly; confidence (0-100)
    ranks candidates inside a difficulty bucket.
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, index=True)  # multiple-choice, true-false, short-answer, essay
    difficulty = Column(String(20), nullable=False, index=True)  # easy, medium, hard
    source_text = Column(Text, nullable=False, default="")
    answer = Column(Text, nullable=True)
    options = Column(JSON, nullable=True)  # ["...", "...", "...", "..."] for multiple choice
    tags = Column(JSON, default=list, nullable=False)
    confidence = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    def __repr__(self):
        return f"<Question(id={self.id}, type='{self.type}', difficulty='{self.difficulty}')>"


# ==========================================
# PAPERS
# ==========================================

class QuestionPaper(Base):
    """
    An assembled question paper.
    configuration holds {question_types, topics, difficulty_distribution};
    questions holds the ordered selection with section + marks per entry.
    There is no update path: regenerating creates a new row.
    """
    __tablename__ = "question_papers"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False, index=True)
    total_marks = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    difficulty = Column(String(20), nullable=False)
    configuration = Column(JSON, nullable=False)
    questions = Column(JSON, default=list, nullable=False)
    stats = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<QuestionPaper(id={self.id}, title='{self.title}', questions={len(self.questions or [])})>"


class PaperConfiguration(Base):
    """Saved paper configuration, reused to generate new papers."""
    __tablename__ = "paper_configurations"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    total_marks = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)
    difficulty = Column(String(20), nullable=False)
    question_types = Column(JSON, nullable=False)  # {mcq: {...}, short: {...}, long: {...}}
    topics = Column(JSON, default=list, nullable=False)
    difficulty_distribution = Column(JSON, nullable=False)  # {easy, medium, hard}
    is_template = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PaperConfiguration(id={self.id}, title='{self.title}')>"
