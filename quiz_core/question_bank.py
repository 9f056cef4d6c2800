from __future__ import annotations
import json, pathlib
from typing import Iterable, List, Optional, Protocol

from .types import Question, question_from_dict

BANK_PATH = pathlib.Path(__file__).resolve().parent / "data" / "bank.json"


class QuestionBank(Protocol):
    def fetch_by_difficulty(
        self, difficulty: str, count: int, category: Optional[str] = None
    ) -> List[Question]: ...


def load_bank() -> List[Question]:
    data = BANK_PATH.read_text(encoding="utf-8")
    raw = json.loads(data)
    return [question_from_dict(r) for r in raw]


class InMemoryQuestionBank:
    """Bank over a fixed question list; returns at most ``count`` matches in list order."""

    def __init__(self, questions: Iterable[Question]):
        self.questions: List[Question] = list(questions)

    def fetch_by_difficulty(
        self, difficulty: str, count: int, category: Optional[str] = None
    ) -> List[Question]:
        if count <= 0:
            return []
        out: List[Question] = []
        for q in self.questions:
            if q.difficulty != difficulty:
                continue
            if category is not None and q.category != category:
                continue
            out.append(q)
            if len(out) >= count:
                break
        return out

    def categories(self) -> List[str]:
        seen: List[str] = []
        for q in self.questions:
            if q.category not in seen:
                seen.append(q.category)
        return seen
