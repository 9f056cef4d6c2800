from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from quiz_core.types import DIFFICULTIES, BucketStats, PerformanceProfile, Question, QuizAttempt

CATEGORIES = ["Mathematics", "Science", "History"]
FIXED_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_synthetic_bank(
    *,
    categories: list[str] | None = None,
    per_difficulty: int = 5,
) -> list[Question]:
    """Create a deterministic synthetic bank; option 0 is always correct."""

    items: list[Question] = []
    for cat in categories or CATEGORIES:
        for difficulty in DIFFICULTIES:
            for idx in range(per_difficulty):
                items.append(
                    Question(
                        id=f"{cat}_{difficulty}_{idx}",
                        text=f"{cat} {difficulty} #{idx}",
                        options=("A", "B", "C", "D"),
                        correct_answer=0,
                        difficulty=difficulty,
                        category=cat,
                        tags=(difficulty,),
                        explanation=f"A is right for {cat} #{idx}",
                    )
                )
    return items


def make_profile(
    student_id: str = "s1",
    *,
    easy: Tuple[int, int] = (0, 0),
    medium: Tuple[int, int] = (0, 0),
    hard: Tuple[int, int] = (0, 0),
    categories: Optional[Dict[str, Tuple[int, int]]] = None,
    average_time: float = 0.0,
) -> PerformanceProfile:
    """Profile from (correct, total) pairs; totals follow the buckets."""

    dist = {
        "easy": BucketStats(*easy),
        "medium": BucketStats(*medium),
        "hard": BucketStats(*hard),
    }
    return PerformanceProfile(
        student_id=student_id,
        total_questions=sum(b.total for b in dist.values()),
        correct_answers=sum(b.correct for b in dist.values()),
        average_time=average_time,
        difficulty_distribution=dist,
        category_performance={k: BucketStats(*v) for k, v in (categories or {}).items()},
        last_updated=FIXED_TS,
    )


def make_attempt(question: Question, selected: int, time_spent: int = 10) -> QuizAttempt:
    return QuizAttempt(
        id=f"{question.id}-t",
        question_id=question.id,
        selected_answer=selected,
        is_correct=selected == question.correct_answer,
        time_spent=time_spent,
        timestamp=FIXED_TS,
    )


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def tick(self, sec: float) -> None:
        self.t += sec


def generated_payload(n: int = 3, *, key: str = "questions") -> str:
    records = [
        {
            "text": f"Generated question {i}",
            "options": ["w", "x", "y", "z"],
            "correctAnswer": i % 4,
            "difficulty": "medium",
            "category": "whatever",
            "tags": ["gen"],
            "explanation": "because",
        }
        for i in range(n)
    ]
    return json.dumps({key: records})


class StaticGenerator:
    def __init__(self, payload):
        self.payload = payload
        self.calls: List[tuple] = []

    def generate_questions(self, topic, count, difficulty, category):
        self.calls.append((topic, count, difficulty, category))
        return self.payload


class FailingGenerator:
    def generate_questions(self, topic, count, difficulty, category):
        raise ConnectionError("upstream unavailable")


@pytest.fixture
def synthetic_bank() -> list[Question]:
    return build_synthetic_bank()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
