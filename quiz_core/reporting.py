# quiz_core/reporting.py
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Sequence

from .config import (
    DEVELOPING_ACCURACY_PCT,
    EASY_MASTERY_RATE,
    SLOW_RESPONSE_SEC,
    STRONG_ACCURACY_PCT,
)
from .scoring import (
    accuracy,
    bucket_accuracy,
    calculate_fit_score,
    classify_difficulty_for_next_quiz,
    displayed_fit_score,
    weakest_category,
)
from .types import DIFFICULTIES, AdaptiveSettings, BucketStats, PerformanceProfile, Question, QuizAttempt


# -------- utils: make any object JSON-safe ----------
def to_basic(x: Any) -> Any:
    if x is None or isinstance(x, (bool, int, float, str)):
        return x
    if isinstance(x, datetime):
        return x.isoformat()
    if isinstance(x, dict):
        return {str(k): to_basic(v) for k, v in x.items()}
    if isinstance(x, (list, tuple, set)):
        return [to_basic(v) for v in x]
    if hasattr(x, "__dataclass_fields__"):
        return {k: to_basic(getattr(x, k)) for k in x.__dataclass_fields__}
    return str(x)


def strength_label(pct: float) -> str:
    if pct >= STRONG_ACCURACY_PCT: return "strong"
    if pct >= DEVELOPING_ACCURACY_PCT: return "developing"
    return "needs_work"


def _bucket_row(stats: BucketStats) -> Dict[str, Any]:
    pct = round(100.0 * bucket_accuracy(stats), 1)
    return {"correct": stats.correct, "total": stats.total, "accuracy": pct, "label": strength_label(pct)}


def recommendations(profile: PerformanceProfile) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    if 100.0 * accuracy(profile) < DEVELOPING_ACCURACY_PCT:
        out.append({
            "type": "warning",
            "message": "Focus on foundational concepts before moving to advanced topics",
            "action": "Review easy-level questions",
        })
    if profile.average_time > SLOW_RESPONSE_SEC:
        out.append({
            "type": "info",
            "message": "Consider practicing time management techniques",
            "action": "Take timed practice quizzes",
        })
    easy = profile.difficulty_distribution.get("easy", BucketStats())
    if easy.total > 0 and bucket_accuracy(easy) > EASY_MASTERY_RATE:
        out.append({
            "type": "success",
            "message": "Strong foundation! Ready for more challenging material",
            "action": "Increase medium and hard difficulty questions",
        })
    return out


def profile_report(profile: PerformanceProfile, settings: AdaptiveSettings) -> Dict[str, Any]:
    return {
        "student_id": profile.student_id,
        "total_questions": profile.total_questions,
        "correct_answers": profile.correct_answers,
        "accuracy": round(100.0 * accuracy(profile), 1),
        "average_time": round(profile.average_time, 2),
        "fit_score": calculate_fit_score(profile),
        "display_fit_score": displayed_fit_score(profile, settings),
        "adaptive": profile.total_questions >= settings.min_questions_before_adaptation,
        "next_difficulty": classify_difficulty_for_next_quiz(profile),
        "weakest_category": weakest_category(profile),
        "by_difficulty": {d: _bucket_row(profile.difficulty_distribution.get(d, BucketStats())) for d in DIFFICULTIES},
        "by_category": {c: _bucket_row(s) for c, s in profile.category_performance.items()},
        "recommendations": recommendations(profile),
    }


def session_summary(attempts: Sequence[QuizAttempt], questions: Sequence[Question]) -> Dict[str, Any]:
    by_id = {q.id: q for q in questions}
    n = len(attempts)
    correct = sum(1 for a in attempts if a.is_correct)
    total_time = sum(a.time_spent for a in attempts)
    review: List[Dict[str, Any]] = []
    for a in attempts:
        q = by_id.get(a.question_id)
        if q is None:
            continue
        review.append({
            "question_id": q.id,
            "text": q.text,
            "selected": q.options[a.selected_answer],
            "correct": q.options[q.correct_answer],
            "is_correct": a.is_correct,
            "time_spent": a.time_spent,
            "explanation": q.explanation,
        })
    return {
        "answered": n,
        "correct": correct,
        "accuracy": round(100.0 * correct / n, 1) if n else 0.0,
        "total_time": total_time,
        "average_time": round(total_time / n, 1) if n else 0.0,
        "review": review,
    }
