from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

Difficulty = Literal["easy", "medium", "hard"]
DIFFICULTIES: Tuple[str, ...] = ("easy", "medium", "hard")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Question:
    id: str; text: str
    options: Tuple[str, ...]
    correct_answer: int
    difficulty: Difficulty
    category: str
    tags: Tuple[str, ...] = ()
    explanation: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.options) < 2:
            raise ValueError(f"question {self.id!r} needs at least two options")
        if not 0 <= int(self.correct_answer) < len(self.options):
            raise ValueError(f"question {self.id!r} has correct_answer out of range")
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"question {self.id!r} has unknown difficulty {self.difficulty!r}")


@dataclass(frozen=True)
class QuizAttempt:
    id: str; question_id: str
    selected_answer: int
    is_correct: bool
    time_spent: int
    timestamp: datetime


@dataclass(frozen=True)
class BucketStats:
    correct: int = 0
    total: int = 0

    def add(self, is_correct: bool) -> "BucketStats":
        return BucketStats(correct=self.correct + int(bool(is_correct)), total=self.total + 1)


def _zero_distribution() -> Dict[str, BucketStats]:
    return {d: BucketStats() for d in DIFFICULTIES}


@dataclass(frozen=True)
class PerformanceProfile:
    """Cumulative answer statistics for one student.

    Treated as a value: updates go through ``quiz_core.aggregator.apply``,
    which returns a new instance with fresh bucket maps.
    """

    student_id: str
    total_questions: int = 0
    correct_answers: int = 0
    average_time: float = 0.0
    difficulty_distribution: Dict[str, BucketStats] = field(default_factory=_zero_distribution)
    category_performance: Dict[str, BucketStats] = field(default_factory=dict)
    last_updated: Optional[datetime] = None

    def with_updates(self, **changes: Any) -> "PerformanceProfile":
        return replace(self, **changes)


@dataclass(frozen=True)
class AdaptiveSettings:
    pool_size: int
    min_questions_before_adaptation: int
    adaptive_source: Literal["bank", "generative"] = "bank"
    topic: Optional[str] = None


@dataclass(frozen=True)
class QuizCompletion:
    student_id: str
    student_name: str
    score: float
    total_questions: int
    completed_at: datetime


# ---- dict conversion (storage / API / bank files) ----

def _parse_ts(raw: Any) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


def _ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def question_from_dict(raw: Dict[str, Any]) -> Question:
    correct = raw.get("correct_answer", raw.get("correctAnswer"))
    return Question(
        id=str(raw["id"]),
        text=str(raw["text"]),
        options=tuple(str(o) for o in raw.get("options") or ()),
        correct_answer=int(correct),
        difficulty=raw["difficulty"],
        category=str(raw.get("category") or ""),
        tags=tuple(str(t) for t in raw.get("tags") or ()),
        explanation=raw.get("explanation"),
    )


def question_to_dict(q: Question, *, reveal: bool = True) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": q.id,
        "text": q.text,
        "options": list(q.options),
        "difficulty": q.difficulty,
        "category": q.category,
        "tags": list(q.tags),
    }
    if reveal:
        out["correct_answer"] = q.correct_answer
        out["explanation"] = q.explanation
    return out


def attempt_to_dict(a: QuizAttempt) -> Dict[str, Any]:
    return {
        "id": a.id,
        "question_id": a.question_id,
        "selected_answer": a.selected_answer,
        "is_correct": a.is_correct,
        "time_spent": a.time_spent,
        "timestamp": _ts(a.timestamp),
    }


def _bucket_map_to_dict(buckets: Dict[str, BucketStats]) -> Dict[str, Dict[str, int]]:
    return {k: {"correct": v.correct, "total": v.total} for k, v in buckets.items()}


def _bucket_map_from_dict(raw: Optional[Dict[str, Any]]) -> Dict[str, BucketStats]:
    out: Dict[str, BucketStats] = {}
    for k, v in (raw or {}).items():
        v = v or {}
        out[str(k)] = BucketStats(correct=int(v.get("correct", 0)), total=int(v.get("total", 0)))
    return out


def profile_to_dict(p: PerformanceProfile) -> Dict[str, Any]:
    return {
        "student_id": p.student_id,
        "total_questions": p.total_questions,
        "correct_answers": p.correct_answers,
        "average_time": p.average_time,
        "difficulty_distribution": _bucket_map_to_dict(p.difficulty_distribution),
        "category_performance": _bucket_map_to_dict(p.category_performance),
        "last_updated": _ts(p.last_updated),
    }


def profile_from_dict(raw: Dict[str, Any]) -> PerformanceProfile:
    dist = _zero_distribution()
    dist.update(_bucket_map_from_dict(raw.get("difficulty_distribution")))
    return PerformanceProfile(
        student_id=str(raw["student_id"]),
        total_questions=int(raw.get("total_questions", 0)),
        correct_answers=int(raw.get("correct_answers", 0)),
        average_time=float(raw.get("average_time", 0.0)),
        difficulty_distribution={d: dist[d] for d in DIFFICULTIES},
        category_performance=_bucket_map_from_dict(raw.get("category_performance")),
        last_updated=_parse_ts(raw.get("last_updated")),
    )


def completion_to_dict(c: QuizCompletion) -> Dict[str, Any]:
    return {
        "studentId": c.student_id,
        "studentName": c.student_name,
        "score": c.score,
        "totalQuestions": c.total_questions,
        "completedAt": _ts(c.completed_at),
    }
