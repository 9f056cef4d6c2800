"""Utility helpers for persisting performance profiles and quiz completions.

Profiles and the completion log are JSON files under ``DATA_DIR``. Each
profile is read once when a quiz starts and written once when it completes;
concurrent quizzes for the same student are not reconciled.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, List

from quiz_core.aggregator import empty_profile
from quiz_core.config import RECENT_COMPLETIONS_LIMIT
from quiz_core.types import (
    PerformanceProfile,
    QuizCompletion,
    completion_to_dict,
    profile_from_dict,
    profile_to_dict,
)

log = logging.getLogger(__name__)

DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()
PROFILES_DIR = DATA_ROOT / "profiles"
COMPLETIONS_PATH = DATA_ROOT / "completions.json"

_LOCK = threading.Lock()


def _ensure_dirs() -> None:
    PROFILES_DIR.mkdir(parents=True, exist_ok=True)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError:
        log.warning("unreadable json at %s; using default", path)
        return default


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


def _profile_path(student_id: str) -> Path:
    safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in student_id)
    return PROFILES_DIR / f"{safe}.json"


def get_profile(student_id: str) -> PerformanceProfile:
    """Stored profile for ``student_id``, or a zeroed one if none exists."""

    raw = _read_json(_profile_path(student_id), None)
    if not raw:
        return empty_profile(student_id)
    return profile_from_dict(raw)


def put_profile(student_id: str, profile: PerformanceProfile) -> None:
    _ensure_dirs()
    with _LOCK:
        _write_json(_profile_path(student_id), profile_to_dict(profile))


def list_profiles() -> List[PerformanceProfile]:
    if not PROFILES_DIR.exists():
        return []
    out: List[PerformanceProfile] = []
    for path in sorted(PROFILES_DIR.glob("*.json")):
        raw = _read_json(path, None)
        if raw:
            out.append(profile_from_dict(raw))
    return out


def record_completion(completion: QuizCompletion) -> None:
    with _LOCK:
        entries: List[Dict[str, Any]] = _read_json(COMPLETIONS_PATH, [])
        entries.append(completion_to_dict(completion))
        _write_json(COMPLETIONS_PATH, entries)


def recent_completions(limit: int = RECENT_COMPLETIONS_LIMIT) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = _read_json(COMPLETIONS_PATH, [])
    entries.sort(key=lambda r: r.get("completedAt", ""), reverse=True)
    return entries[: max(0, limit)]


class JsonProfileStore:
    """ProfileStore over the module-level JSON helpers."""

    def get(self, student_id: str) -> PerformanceProfile:
        return get_profile(student_id)

    def put(self, student_id: str, profile: PerformanceProfile) -> None:
        put_profile(student_id, profile)

