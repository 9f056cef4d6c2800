from __future__ import annotations
import json
import uuid
from dataclasses import dataclass
from typing import Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .types import Question

_FENCES = ("```json", "```")


class GeneratedQuestion(BaseModel):
    """Shape a generated record must have before it becomes a Question."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    text: str = Field(min_length=1)
    options: List[str] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer")
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def _answer_in_range(self) -> "GeneratedQuestion":
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer} is not a valid index into {len(self.options)} options"
            )
        return self


@dataclass(frozen=True)
class ParseResult:
    ok: bool
    questions: Tuple[Question, ...] = ()
    error: Optional[str] = None

    @classmethod
    def success(cls, questions: List[Question]) -> "ParseResult":
        return cls(ok=True, questions=tuple(questions))

    @classmethod
    def failure(cls, reason: str) -> "ParseResult":
        return cls(ok=False, error=reason)


def _strip_fences(text: str) -> str:
    t = text.strip()
    for fence in _FENCES:
        if t.startswith(fence):
            t = t[len(fence):]
            if t.endswith("```"):
                t = t[:-3]
            return t.strip()
    return t


def _records(payload: Any) -> Optional[list]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        # models name the key "questions", "results", ...; take the first list
        for value in payload.values():
            if isinstance(value, list):
                return value
    return None


def parse_generated_questions(raw: Any, *, difficulty: str, category: str) -> ParseResult:
    """Validate a text-generation payload; never trusts its structure.

    ``raw`` may be the message text or an already-decoded object. The whole
    payload is rejected if any record is malformed. Accepted questions get a
    synthetic ``ai-`` id and are stamped with the requested difficulty and
    category.
    """

    payload = raw
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
        try:
            payload = json.loads(_strip_fences(text))
        except ValueError as e:
            return ParseResult.failure(f"payload is not valid JSON: {e}")

    records = _records(payload)
    if records is None:
        return ParseResult.failure("payload does not contain a list of questions")
    if not records:
        return ParseResult.failure("payload contains no questions")

    out: List[Question] = []
    for idx, rec in enumerate(records):
        if not isinstance(rec, dict):
            return ParseResult.failure(f"record {idx} is not an object")
        try:
            gq = GeneratedQuestion.model_validate(rec)
        except ValidationError as e:
            return ParseResult.failure(f"record {idx} is malformed: {e.errors()[0].get('msg')}")
        out.append(
            Question(
                id=f"ai-{uuid.uuid4().hex}",
                text=gq.text,
                options=tuple(gq.options),
                correct_answer=gq.correct_answer,
                difficulty=difficulty,  # type: ignore[arg-type]
                category=category,
                tags=tuple(gq.tags),
                explanation=gq.explanation or None,
            )
        )
    return ParseResult.success(out)
