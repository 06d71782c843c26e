from __future__ import annotations

import os
import tempfile

# Must be set before anything imports database.database
_DB_DIR = tempfile.mkdtemp(prefix="question-paper-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"

import pytest
from fastapi.testclient import TestClient

from database import models  # noqa: F401
from database.database import Base, SessionLocal, engine
from generation.schemas import PaperConfig, PoolQuestion


def build_pool(
    counts: dict[tuple[str, str], int],
    *,
    tags: tuple[str, ...] = ("Mechanics",),
    start_id: int = 1,
) -> list[PoolQuestion]:
    """Deterministic pool: `counts` maps (type, difficulty) to how many questions.

    Confidence is scrambled inside each bucket ((i * 37) % 100) so that
    selection order differs from insertion order.
    """

    pool: list[PoolQuestion] = []
    next_id = start_id
    for (question_type, level), n in counts.items():
        for idx in range(n):
            pool.append(
                PoolQuestion(
                    id=next_id,
                    question=f"{question_type} {level} #{idx}",
                    type=question_type,
                    difficulty=level,
                    tags=list(tags),
                    confidence=(idx * 37) % 100,
                    source_text="synthetic",
                )
            )
            next_id += 1
    return pool


def build_config(
    *,
    mcq: tuple[int, int] = (10, 1),
    short: tuple[int, int] = (0, 1),
    long: tuple[int, int] = (0, 1),
    distribution: tuple[int, int, int] = (30, 50, 20),
    topics: list[str] | None = None,
    total_marks: int | None = None,
) -> PaperConfig:
    """Paper config whose total marks match the (count, marks) pairs unless overridden."""

    computed = mcq[0] * mcq[1] + short[0] * short[1] + long[0] * long[1]
    easy, medium, hard = distribution
    return PaperConfig.model_validate(
        {
            "title": "Unit Test Paper",
            "subject": "Physics",
            "total_marks": total_marks if total_marks is not None else max(computed, 1),
            "duration": 60,
            "difficulty": "medium",
            "question_types": {
                "mcq": {"count": mcq[0], "marks": mcq[1]},
                "short": {"count": short[0], "marks": short[1]},
                "long": {"count": long[0], "marks": long[1]},
            },
            "topics": topics or [],
            "difficulty_distribution": {"easy": easy, "medium": medium, "hard": hard},
        }
    )


@pytest.fixture
def pool_builder():
    return build_pool


@pytest.fixture
def config_builder():
    return build_config


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    from main import app

    with TestClient(app) as test_client:
        yield test_client
