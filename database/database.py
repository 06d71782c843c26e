"""
Engine and session setup for the question bank.

DATABASE_URL selects the store directly (sqlite:///./papers.db for local runs,
a temp file under tests). Without it the URL is assembled from POSTGRES_*.
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker


def _postgres_url() -> str:
    user = os.getenv("POSTGRES_USER", "paper_user")
    password = os.getenv("POSTGRES_PASSWORD", "paper_pass")
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    name = os.getenv("POSTGRES_DB", "question_papers")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


def _engine_options(url: str) -> dict:
    """SQLite sessions cross TestClient/uvicorn threads; Postgres gets a small checked pool."""
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


DATABASE_URL = os.getenv("DATABASE_URL") or _postgres_url()

engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False)
Base = declarative_base()


def get_db():
    """Request-scoped session for Depends(); closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
