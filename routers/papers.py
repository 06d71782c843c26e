"""
Papers Router — /api/papers

Endpoints:
  POST   /api/papers/generate    — assemble a paper from the question bank
  GET    /api/papers             — list papers, newest first
  GET    /api/papers/topics      — tags available for topic selection
  GET    /api/papers/templates   — saved paper configurations
  POST   /api/papers/templates   — save a configuration as a template
  GET    /api/papers/{id}        — full paper
  DELETE /api/papers/{id}        — delete a paper
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database.database import get_db
from database import crud
from generation.schemas import (
    GeneratePaperResponse, PaperConfig, PaperSummary,
    PoolQuestion, StoredPaper, TemplateResponse,
)
from generation.paper_assembler import assemble_paper

router = APIRouter(prefix="/api/papers", tags=["papers"])

log = logging.getLogger("generation.pipeline")


# ─── Generate ──────────────────────────────────────────────────────────────────

@router.post("/generate", response_model=GeneratePaperResponse, status_code=201)
def generate_paper(config: PaperConfig, db: Session = Depends(get_db)):
    """
    Assemble and store a new paper.

    Failures (marks or percentage mismatch, empty bank, no topic match,
    nothing selectable) come back as 400 with
    `{"error": <code>, "message": <text>}` in `detail`.
    """
    log.info(f"[GENERATE] '{config.title}' ({config.subject}), topics={config.topics}")

    pool = [PoolQuestion.model_validate(q) for q in crud.get_all_questions(db)]
    result = assemble_paper(pool, config)

    if not result.success:
        raise HTTPException(
            status_code=400,
            detail={"error": result.error.value, "message": result.message},
        )

    db_paper = crud.create_paper(db, result.paper, result.stats)
    paper = result.paper.model_copy(update={"paper_id": db_paper.id})
    log.info(f"[GENERATE] Stored paper {db_paper.id} with {len(paper.questions)} questions")

    return GeneratePaperResponse(
        paper_id=db_paper.id,
        message=result.message,
        paper=paper,
        stats=result.stats,
        shortfalls=result.shortfalls,
    )


# ─── Listing ───────────────────────────────────────────────────────────────────

@router.get("", response_model=List[PaperSummary])
def list_papers(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List stored papers, newest first."""
    return [
        PaperSummary(
            paper_id=p.id,
            title=p.title,
            subject=p.subject,
            total_marks=p.total_marks,
            duration=p.duration,
            difficulty=p.difficulty,
            question_count=len(p.questions or []),
            created_at=p.created_at,
        )
        for p in crud.get_papers(db, skip=offset, limit=limit)
    ]


@router.get("/topics")
def available_topics(db: Session = Depends(get_db)):
    """Every tag in the question bank, sorted."""
    return {"topics": crud.get_available_topics(db)}


# ─── Templates ─────────────────────────────────────────────────────────────────

@router.get("/templates", response_model=List[TemplateResponse])
def list_templates(db: Session = Depends(get_db)):
    """Saved paper configurations."""
    return crud.get_templates(db)


@router.post("/templates", response_model=TemplateResponse, status_code=201)
def save_template(config: PaperConfig, db: Session = Depends(get_db)):
    """Save a paper configuration for reuse."""
    return crud.create_template(db, config)


# ─── Single paper ──────────────────────────────────────────────────────────────

@router.get("/{paper_id}", response_model=StoredPaper)
def get_paper(paper_id: int, db: Session = Depends(get_db)):
    """Full paper with its configuration snapshot, ordered questions and stats."""
    db_paper = crud.get_paper(db, paper_id)
    if not db_paper:
        raise HTTPException(status_code=404, detail=f"Paper {paper_id} not found")
    return crud.paper_to_output(db_paper)


@router.delete("/{paper_id}")
def delete_paper(paper_id: int, db: Session = Depends(get_db)):
    """Delete a paper."""
    if not crud.delete_paper(db, paper_id):
        raise HTTPException(status_code=404, detail=f"Paper {paper_id} not found")
    return {"message": "Paper deleted successfully"}
