"""
Keyword search over the question bank.
Scores each question against a free-text query by word overlap, partial word
overlap ("newton" ~ "newton's") and exact phrase hits. No embeddings, no LLM.
"""

import logging
from typing import List, Tuple

from database.models import Question

log = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3
DEFAULT_MIN_SCORE = 0.1

# weights: best of the three signals wins
OVERLAP_WEIGHT = 0.4
PARTIAL_WEIGHT = 0.3
PHRASE_WEIGHT = 0.3


def _words(text: str) -> List[str]:
    return [w for w in text.lower().split() if len(w) >= MIN_WORD_LENGTH]


def _searchable_text(q: Question) -> str:
    return f"{q.question} {q.answer or ''} {q.source_text or ''}".lower()


def score_question(query: str, q: Question) -> float:
    """Similarity in [0, OVERLAP_WEIGHT] between the query and one question."""
    query_words = _words(query)
    text = _searchable_text(q)
    question_words = _words(text)

    denominator = max(len(query_words), len(question_words))
    if denominator == 0:
        return 0.0

    common = [w for w in query_words if w in question_words]
    partial = [
        w for w in query_words
        if any(qw in w or w in qw for qw in question_words)
    ]
    phrase = 1.0 if query.strip() and query.lower().strip() in text else 0.0

    return max(
        OVERLAP_WEIGHT * len(common) / denominator,
        PARTIAL_WEIGHT * len(partial) / denominator,
        PHRASE_WEIGHT * phrase,
    )


def search_questions(
    query: str,
    questions: List[Question],
    limit: int = 5,
    min_score: float = DEFAULT_MIN_SCORE,
) -> List[Tuple[Question, float]]:
    """Return up to `limit` (question, score) pairs, best first."""
    scored = [(q, score_question(query, q)) for q in questions]
    results = sorted(
        (item for item in scored if item[1] >= min_score),
        key=lambda item: item[1],
        reverse=True,
    )[:limit]

    log.info(f"Keyword search: {len(results)} match(es) for '{query[:80]}'")
    return results
