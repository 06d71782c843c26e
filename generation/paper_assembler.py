"""
Paper Assembly Engine

Selects questions from the bank for a PaperConfig and packages them into a
PaperOutput. Selection is stratified: per category (MCQ / short / long) the
requested count is split across easy / medium / hard by the configured
percentages, and each difficulty bucket is filled with its highest-confidence
unused questions.

Domain failures are returned as AssemblyResult values, never raised.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from generation.schemas import (
    AssemblyError, AssemblyResult, DifficultyDistribution, PaperConfig,
    PaperConfigSnapshot, PaperOutput, PaperStats, PoolQuestion,
    QuestionTypeConfig, SelectedQuestion, Shortfall,
)

log = logging.getLogger("generation.pipeline")

# (config key, stored question type, section label) in paper order
CATEGORIES: List[Tuple[str, str, str]] = [
    ("mcq", "multiple-choice", "MCQ"),
    ("short", "short-answer", "Short Answer"),
    ("long", "essay", "Long Answer"),
]

DIFFICULTY_ORDER = ("easy", "medium", "hard")


# ─── Validation ────────────────────────────────────────────────────────────────

def validate_configuration(config: PaperConfig) -> Optional[str]:
    """Return an error message, or None when the configuration is consistent."""
    types = config.question_types
    calculated_total = types.mcq.total_marks + types.short.total_marks + types.long.total_marks
    if calculated_total != config.total_marks:
        return (
            f"Total marks mismatch. Calculated: {calculated_total}, "
            f"Expected: {config.total_marks}"
        )

    dist = config.difficulty_distribution
    difficulty_total = dist.easy + dist.medium + dist.hard
    if difficulty_total != 100:
        return f"Difficulty distribution must total 100%. Current total: {difficulty_total}%"

    return None


# ─── Topic filter ──────────────────────────────────────────────────────────────

def _tag_matches(tag: str, topics: List[str]) -> bool:
    tag = tag.lower()
    return any(topic in tag or tag in topic for topic in topics)


def filter_by_topics(pool: Iterable[PoolQuestion], topics: List[str]) -> List[PoolQuestion]:
    """
    Keep questions with at least one tag matching a requested topic.
    Match is case-insensitive substring in either direction; no topics = no filter.
    """
    pool = list(pool)
    if not topics:
        return pool
    wanted = [t.lower() for t in topics]
    return [q for q in pool if any(_tag_matches(tag, wanted) for tag in (q.tags or []))]


# ─── Difficulty split ──────────────────────────────────────────────────────────

def _round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with .5 going up, for non-negative ints."""
    return (2 * numerator + denominator) // (2 * denominator)


def difficulty_split(total: int, dist: DifficultyDistribution) -> Dict[str, int]:
    """
    Split `total` questions across difficulties.
    Hard takes whatever easy + medium leave, so the three always sum to total.
    """
    easy = min(_round_half_up(total * dist.easy, 100), total)
    medium = min(_round_half_up(total * dist.medium, 100), total - easy)
    hard = total - easy - medium
    return {"easy": easy, "medium": medium, "hard": hard}


# ─── Selection ─────────────────────────────────────────────────────────────────

def group_by_type_and_difficulty(
    questions: Iterable[PoolQuestion],
) -> Dict[str, Dict[str, List[PoolQuestion]]]:
    grouped: Dict[str, Dict[str, List[PoolQuestion]]] = {}
    for q in questions:
        by_difficulty = grouped.setdefault(q.type, {d: [] for d in DIFFICULTY_ORDER})
        by_difficulty.setdefault(q.difficulty, []).append(q)
    return grouped


def select_for_category(
    buckets: Dict[str, List[PoolQuestion]],
    category: str,
    type_config: QuestionTypeConfig,
    dist: DifficultyDistribution,
    used_ids: FrozenSet[int],
) -> Tuple[List[PoolQuestion], FrozenSet[int], List[Shortfall]]:
    """
    Fill one category bucket by bucket.

    Returns the picks in easy → medium → hard order, the used-id set extended
    with those picks, and one Shortfall per undersupplied bucket.
    """
    picked: List[PoolQuestion] = []
    shortfalls: List[Shortfall] = []

    for level, wanted in difficulty_split(type_config.count, dist).items():
        if wanted == 0:
            continue
        available = [q for q in buckets.get(level, []) if q.id not in used_ids]
        available.sort(key=lambda q: q.confidence or 0, reverse=True)
        chosen = available[:wanted]
        picked.extend(chosen)
        used_ids = used_ids | {q.id for q in chosen}

        if len(chosen) < wanted:
            shortfalls.append(Shortfall(
                category=category, difficulty=level,
                requested=wanted, selected=len(chosen),
            ))

    return picked, used_ids, shortfalls


def select_questions(
    questions: List[PoolQuestion],
    config: PaperConfig,
) -> Tuple[List[SelectedQuestion], List[Shortfall]]:
    """Run every category in paper order, threading the used-id set through."""
    grouped = group_by_type_and_difficulty(questions)
    selected: List[SelectedQuestion] = []
    shortfalls: List[Shortfall] = []
    used_ids: FrozenSet[int] = frozenset()

    for key, question_type, section in CATEGORIES:
        type_config: QuestionTypeConfig = getattr(config.question_types, key)
        if type_config.count == 0:
            continue

        picked, used_ids, missing = select_for_category(
            grouped.get(question_type, {}),
            key,
            type_config,
            config.difficulty_distribution,
            used_ids,
        )
        shortfalls.extend(missing)
        selected.extend(
            SelectedQuestion(
                question_id=q.id,
                question=q.question,
                type=q.type,
                difficulty=q.difficulty,
                marks=type_config.marks,
                section=section,
                tags=list(q.tags or []),
            )
            for q in picked
        )

    return selected, shortfalls


# ─── Stats ─────────────────────────────────────────────────────────────────────

def build_stats(selected: List[SelectedQuestion], total_marks: int) -> PaperStats:
    by_type: Dict[str, int] = {}
    by_difficulty: Dict[str, int] = {}
    topics: List[str] = []
    for q in selected:
        by_type[q.type] = by_type.get(q.type, 0) + 1
        by_difficulty[q.difficulty] = by_difficulty.get(q.difficulty, 0) + 1
        for tag in q.tags:
            if tag not in topics:
                topics.append(tag)
    return PaperStats(
        total_questions=len(selected),
        questions_by_type=by_type,
        questions_by_difficulty=by_difficulty,
        topic_coverage=topics,
        total_marks=total_marks,
    )


# ─── Entry point ───────────────────────────────────────────────────────────────

def _failure(error: AssemblyError, message: str) -> AssemblyResult:
    log.warning(f"[ASSEMBLE] {error.value}: {message}")
    return AssemblyResult(success=False, error=error, message=message)


def assemble_paper(
    pool: Iterable[PoolQuestion],
    config: PaperConfig,
    created_at: Optional[datetime] = None,
) -> AssemblyResult:
    """
    Assemble a paper from `pool` for `config`.

    Args:
        pool:       Snapshot of every available question
        config:     Paper configuration
        created_at: Timestamp for the paper (defaults to now, UTC)

    Returns:
        AssemblyResult — paper + stats on success, error code + message otherwise
    """
    error = validate_configuration(config)
    if error:
        return _failure(AssemblyError.CONFIGURATION_INVALID, error)

    pool = list(pool)
    if not pool:
        return _failure(
            AssemblyError.EMPTY_POOL,
            "No questions available in the database. Please add some questions first.",
        )

    candidates = filter_by_topics(pool, config.topics)
    if not candidates:
        return _failure(
            AssemblyError.NO_MATCHING_QUESTIONS,
            f"No questions found for the specified topics: {', '.join(config.topics)}",
        )

    selected, shortfalls = select_questions(candidates, config)
    for s in shortfalls:
        log.warning(
            f"[ASSEMBLE] {s.category}/{s.difficulty}: wanted {s.requested}, "
            f"only {s.selected} available"
        )

    if not selected:
        return _failure(
            AssemblyError.INSUFFICIENT_QUESTIONS,
            "Could not select enough questions matching the criteria",
        )

    paper = PaperOutput(
        title=config.title,
        subject=config.subject,
        total_marks=config.total_marks,
        duration=config.duration,
        difficulty=config.difficulty.value,
        configuration=PaperConfigSnapshot(
            question_types=config.question_types,
            topics=config.topics,
            difficulty_distribution=config.difficulty_distribution,
        ),
        questions=selected,
        created_at=created_at or datetime.now(timezone.utc),
    )
    log.info(
        f"[ASSEMBLE] '{config.title}': {len(selected)} questions from "
        f"{len(candidates)}/{len(pool)} candidates, {len(shortfalls)} shortfall(s)"
    )

    return AssemblyResult(
        success=True,
        message="Paper generated successfully",
        paper=paper,
        stats=build_stats(selected, config.total_marks),
        shortfalls=shortfalls,
    )
