"""
CRUD operations for the question bank and paper store
All database operations go through these functions
"""

from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from database import models, schemas
from generation.schemas import PaperConfig, PaperOutput, PaperStats, StoredPaper


# ==========================================
# QUESTION CRUD
# ==========================================

def create_question(db: Session, question: schemas.QuestionCreate) -> models.Question:
    """Create a new question"""
    db_question = models.Question(**question.model_dump(mode="json"))
    db.add(db_question)
    db.commit()
    db.refresh(db_question)
    return db_question


def get_question(db: Session, question_id: int) -> Optional[models.Question]:
    """Get question by ID"""
    return db.query(models.Question).filter(models.Question.id == question_id).first()


def get_questions(
    db: Session,
    question_type: Optional[str] = None,
    difficulty: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> Tuple[int, List[models.Question]]:
    """Get questions newest first with optional filters; returns (total, page)"""
    query = db.query(models.Question)
    if question_type:
        query = query.filter(models.Question.type == question_type)
    if difficulty:
        query = query.filter(models.Question.difficulty == difficulty)

    total = query.count()
    page = query.order_by(
        models.Question.created_at.desc(), models.Question.id.desc()
    ).offset(skip).limit(limit).all()
    return total, page


def get_all_questions(db: Session) -> List[models.Question]:
    """Get the full question pool, newest first"""
    return db.query(models.Question).order_by(
        models.Question.created_at.desc(), models.Question.id.desc()
    ).all()


def get_questions_by_tags(db: Session, tags: List[str]) -> List[models.Question]:
    """Get questions carrying any of the given tags (exact, case-sensitive match)"""
    # Tags live in a JSON column and JSON containment differs between SQLite and
    # Postgres, so this is a full scan of the bank done in Python
    wanted = {t.strip() for t in tags if t.strip()}
    return [q for q in get_all_questions(db) if wanted.intersection(q.tags or [])]


def get_available_topics(db: Session) -> List[str]:
    """Sorted unique tags across the question bank"""
    topics = set()
    for (tags,) in db.query(models.Question.tags).all():
        topics.update(tags or [])
    return sorted(topics)


def update_question(db: Session, question_id: int, question_update: schemas.QuestionUpdate) -> Optional[models.Question]:
    """Update an existing question"""
    db_question = get_question(db, question_id)
    if not db_question:
        return None

    update_data = question_update.model_dump(mode="json", exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_question, field, value)

    db.commit()
    db.refresh(db_question)
    return db_question


def delete_question(db: Session, question_id: int) -> bool:
    """Delete a question (papers keep their own snapshot)"""
    db_question = get_question(db, question_id)
    if not db_question:
        return False

    db.delete(db_question)
    db.commit()
    return True


# ==========================================
# PAPER CRUD
# ==========================================

def create_paper(db: Session, paper: PaperOutput, stats: Optional[PaperStats] = None) -> models.QuestionPaper:
    """Persist an assembled paper"""
    db_paper = models.QuestionPaper(
        title=paper.title,
        subject=paper.subject,
        total_marks=paper.total_marks,
        duration=paper.duration,
        difficulty=paper.difficulty,
        configuration=paper.configuration.model_dump(mode="json"),
        questions=[q.model_dump(mode="json") for q in paper.questions],
        stats=stats.model_dump(mode="json") if stats else None,
    )
    if paper.created_at:
        db_paper.created_at = paper.created_at
    db.add(db_paper)
    db.commit()
    db.refresh(db_paper)
    return db_paper


def get_paper(db: Session, paper_id: int) -> Optional[models.QuestionPaper]:
    """Get paper by ID"""
    return db.query(models.QuestionPaper).filter(models.QuestionPaper.id == paper_id).first()


def get_papers(db: Session, skip: int = 0, limit: int = 100) -> List[models.QuestionPaper]:
    """Get papers newest first"""
    return db.query(models.QuestionPaper).order_by(
        models.QuestionPaper.created_at.desc(), models.QuestionPaper.id.desc()
    ).offset(skip).limit(limit).all()


def delete_paper(db: Session, paper_id: int) -> bool:
    """Delete a paper"""
    db_paper = get_paper(db, paper_id)
    if not db_paper:
        return False

    db.delete(db_paper)
    db.commit()
    return True


def paper_to_output(db_paper: models.QuestionPaper) -> StoredPaper:
    """Rebuild the paper stored in a row, stats included"""
    return StoredPaper(
        paper_id=db_paper.id,
        title=db_paper.title,
        subject=db_paper.subject,
        total_marks=db_paper.total_marks,
        duration=db_paper.duration,
        difficulty=db_paper.difficulty,
        configuration=db_paper.configuration,
        questions=db_paper.questions or [],
        created_at=db_paper.created_at,
        stats=db_paper.stats,
    )


# ==========================================
# TEMPLATE CRUD
# ==========================================

def create_template(db: Session, config: PaperConfig) -> models.PaperConfiguration:
    """Save a paper configuration as a reusable template"""
    data = config.model_dump(mode="json")
    db_template = models.PaperConfiguration(**data, is_template=True)
    db.add(db_template)
    db.commit()
    db.refresh(db_template)
    return db_template


def get_templates(db: Session) -> List[models.PaperConfiguration]:
    """Get all saved templates, oldest first"""
    return db.query(models.PaperConfiguration).filter(
        models.PaperConfiguration.is_template == True
    ).order_by(models.PaperConfiguration.id).all()
