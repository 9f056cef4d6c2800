from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from .types import (
    DIFFICULTIES,
    BucketStats,
    PerformanceProfile,
    Question,
    QuizAttempt,
    utcnow,
)

log = logging.getLogger(__name__)


def empty_profile(student_id: str, now: Optional[datetime] = None) -> PerformanceProfile:
    return PerformanceProfile(student_id=student_id, last_updated=now or utcnow())


def apply(
    profile: PerformanceProfile,
    attempts: Sequence[QuizAttempt],
    quiz_questions: Iterable[Question],
    now: Optional[datetime] = None,
) -> PerformanceProfile:
    """Fold one completed session's attempts into ``profile``.

    Attempts are matched against the questions handed out for that session
    only. An attempt whose question id is not among them is skipped and adds
    nothing to the buckets. Totals are re-derived from the difficulty buckets,
    so they stay consistent with them whatever was skipped.
    """

    if not attempts:
        return profile

    by_id: Dict[str, Question] = {q.id: q for q in quiz_questions}
    difficulty: Dict[str, BucketStats] = {
        d: profile.difficulty_distribution.get(d, BucketStats()) for d in DIFFICULTIES
    }
    categories: Dict[str, BucketStats] = dict(profile.category_performance)

    skipped: List[str] = []
    for attempt in attempts:
        question = by_id.get(attempt.question_id)
        if question is None:
            skipped.append(attempt.question_id)
            continue
        difficulty[question.difficulty] = difficulty[question.difficulty].add(attempt.is_correct)
        categories[question.category] = categories.get(question.category, BucketStats()).add(attempt.is_correct)

    if skipped:
        # TODO: surface orphaned attempts to the caller once generated ids are persisted with the quiz
        log.debug("aggregate student=%s skipped_orphans=%s", profile.student_id, skipped)

    total = sum(difficulty[d].total for d in DIFFICULTIES)
    correct = sum(difficulty[d].correct for d in DIFFICULTIES)

    previous_time = profile.average_time * profile.total_questions
    new_time = sum(a.time_spent for a in attempts)
    average_time = (previous_time + new_time) / total if total > 0 else 0.0

    log.debug(
        "aggregate student=%s attempts=%d total=%d->%d correct=%d->%d avg_time=%.2f->%.2f",
        profile.student_id,
        len(attempts),
        profile.total_questions,
        total,
        profile.correct_answers,
        correct,
        profile.average_time,
        average_time,
    )

    return profile.with_updates(
        total_questions=total,
        correct_answers=correct,
        average_time=average_time,
        difficulty_distribution=difficulty,
        category_performance=categories,
        last_updated=now or utcnow(),
    )
