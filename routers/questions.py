"""
Question Bank router.
Teachers add questions manually, edit or delete them, and browse the bank by
type, difficulty, tag or keyword. The bank is the pool papers are drawn from.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database.database import get_db
from database.models import QuestionType, Difficulty
from database import crud, schemas
from services.question_search import search_questions, DEFAULT_MIN_SCORE

router = APIRouter(prefix="/api/questions", tags=["questions"])


# ─── Routes ────────────────────────────────────────────────────────────────────

@router.post("", response_model=schemas.QuestionResponse, status_code=201)
def create_question(request: schemas.QuestionCreate, db: Session = Depends(get_db)):
    """Manually add a question to the bank."""
    return crud.create_question(db, request)


@router.get("", response_model=schemas.QuestionListResponse)
def list_questions(
    type: Optional[QuestionType] = None,
    difficulty: Optional[Difficulty] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List questions newest first, with optional filters."""
    total, questions = crud.get_questions(
        db,
        question_type=type.value if type else None,
        difficulty=difficulty.value if difficulty else None,
        skip=offset,
        limit=limit,
    )
    return {"total": total, "questions": questions}


@router.get("/stats", response_model=schemas.QuestionBankStats)
def question_bank_stats(db: Session = Depends(get_db)):
    """Counts per type and difficulty across the bank."""
    questions = crud.get_all_questions(db)
    by_type: dict = {}
    by_difficulty: dict = {}
    for q in questions:
        by_type[q.type] = by_type.get(q.type, 0) + 1
        by_difficulty[q.difficulty] = by_difficulty.get(q.difficulty, 0) + 1
    return {"count": len(questions), "by_type": by_type, "by_difficulty": by_difficulty}


@router.get("/search", response_model=schemas.QuestionSearchResponse)
def keyword_search(
    query: str = Query(..., min_length=1, description="Free-text query"),
    limit: int = Query(5, ge=1, le=50),
    min_score: float = Query(DEFAULT_MIN_SCORE, ge=0.0, le=1.0),
    db: Session = Depends(get_db),
):
    """Keyword similarity search over question text, answer and source text."""
    hits = search_questions(query, crud.get_all_questions(db), limit=limit, min_score=min_score)
    results = [
        schemas.QuestionSearchHit(
            question_id=q.id,
            question=q.question,
            answer=q.answer,
            type=q.type,
            difficulty=q.difficulty,
            tags=q.tags or [],
            score=round(score, 4),
        )
        for q, score in hits
    ]
    return {"query": query, "total_results": len(results), "results": results}


@router.get("/tags/{tags}", response_model=schemas.QuestionListResponse)
def questions_by_tags(tags: str, db: Session = Depends(get_db)):
    """Questions carrying any of the comma-separated tags."""
    questions = crud.get_questions_by_tags(db, tags.split(","))
    return {"total": len(questions), "questions": questions}


@router.get("/{question_id}", response_model=schemas.QuestionResponse)
def get_question(question_id: int, db: Session = Depends(get_db)):
    """Get a single question."""
    question = crud.get_question(db, question_id)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")
    return question


@router.patch("/{question_id}", response_model=schemas.QuestionResponse)
def update_question(question_id: int, request: schemas.QuestionUpdate, db: Session = Depends(get_db)):
    """Edit a question. Papers already assembled keep their snapshot."""
    question = crud.update_question(db, question_id, request)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")
    return question


@router.delete("/{question_id}")
def delete_question(question_id: int, db: Session = Depends(get_db)):
    """Delete a question."""
    if not crud.delete_question(db, question_id):
        raise HTTPException(status_code=404, detail="Question not found")
    return {"message": "Question deleted successfully"}
