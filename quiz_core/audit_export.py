"""Helpers to export a session's attempts in JSON/CSV formats."""
from __future__ import annotations

from typing import Iterable, List, Dict, Any
import csv
import io

from .types import QuizAttempt, attempt_to_dict

_FIELDS: tuple[str, ...] = (
    "id",
    "question_id",
    "selected_answer",
    "is_correct",
    "time_spent",
    "timestamp",
)


def _normalize(attempt: QuizAttempt) -> Dict[str, Any]:
    raw = attempt_to_dict(attempt)
    out: Dict[str, Any] = {}
    for key in _FIELDS:
        val = raw.get(key)
        if key in {"selected_answer", "time_spent"}:
            out[key] = int(val or 0)
        elif key == "is_correct":
            out[key] = bool(val)
        else:
            out[key] = "" if val is None else str(val)
    return out


def to_json(attempts: Iterable[QuizAttempt]) -> Dict[str, Any]:
    """Return a JSON-safe payload for attempt export."""

    normalized: List[Dict[str, Any]] = [_normalize(a) for a in attempts]
    return {"attempts": normalized}


def to_csv(attempts: Iterable[QuizAttempt]) -> str:
    """Render attempts as CSV with a fixed header."""

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for a in attempts:
        row = _normalize(a)
        row["is_correct"] = int(row["is_correct"])
        writer.writerow(row)
    return buf.getvalue()


__all__ = ["to_json", "to_csv"]
