from __future__ import annotations
import os, json, pathlib, random
from typing import Dict, Optional

from .types import AdaptiveSettings, Difficulty


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


# fit score
OPTIMAL_TIME_SEC: float = 30.0
FIT_WEIGHTS: Dict[str, float] = {"accuracy": 0.5, "balance": 0.3, "time": 0.2}
BALANCE_WEIGHTS: Dict[str, float] = {"easy": 0.4, "medium": 0.4, "hard": 0.2}

# accuracy tiers
TIER_HIGH: float = 0.8
TIER_MID: float = 0.6
NEW_PROFILE_DIFFICULTY: Difficulty = "medium"

MIX_HIGH: Dict[str, float] = {"easy": 0.2, "medium": 0.4, "hard": 0.4}
MIX_MID: Dict[str, float]  = {"easy": 0.3, "medium": 0.5, "hard": 0.2}
MIX_LOW: Dict[str, float]  = {"easy": 0.5, "medium": 0.4, "hard": 0.1}
INITIAL_SPLIT: Dict[str, float] = {"easy": 0.4, "medium": 0.4, "hard": 0.2}

FALLBACK_CATEGORY: str = "General"

DEFAULT_POOL_SIZE: int = 10
DEFAULT_MIN_QUESTIONS_BEFORE_ADAPTATION: int = 5
ADAPTIVE_SOURCES: tuple[str, ...] = ("bank", "generative")

RECENT_COMPLETIONS_LIMIT: int = 5

# reporting (percent / seconds)
STRONG_ACCURACY_PCT: float = 80.0
DEVELOPING_ACCURACY_PCT: float = 60.0
SLOW_RESPONSE_SEC: float = 45.0
EASY_MASTERY_RATE: float = 0.9

ATTEMPT_EXPORT_ENABLED: bool = True
FINISHED_EXPORTS_LIMIT: int = 100  # completed sessions whose attempts stay exportable

# // env overrides for staging/ops
ATTEMPT_EXPORT_ENABLED = _env_bool("ATTEMPT_EXPORT_ENABLED", ATTEMPT_EXPORT_ENABLED)
FINISHED_EXPORTS_LIMIT = max(0, _env_int("FINISHED_EXPORTS_LIMIT", FINISHED_EXPORTS_LIMIT))


def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except ValueError: cfg = {}
    e = os.environ
    if e.get("POOL_SIZE"): cfg["POOL_SIZE"] = _env_int("POOL_SIZE", DEFAULT_POOL_SIZE)
    if e.get("MIN_QUESTIONS_BEFORE_ADAPTATION"):
        cfg["MIN_QUESTIONS_BEFORE_ADAPTATION"] = _env_int(
            "MIN_QUESTIONS_BEFORE_ADAPTATION", DEFAULT_MIN_QUESTIONS_BEFORE_ADAPTATION
        )
    if e.get("ADAPTIVE_SOURCE"): cfg["ADAPTIVE_SOURCE"] = e.get("ADAPTIVE_SOURCE")
    if e.get("QUIZ_TOPIC"): cfg["QUIZ_TOPIC"] = e.get("QUIZ_TOPIC")
    if e.get("QUIZ_SEED"): cfg["QUIZ_SEED"] = _env_int("QUIZ_SEED", 0)
    return cfg


def _as_int(raw: object, default: int) -> int:
    try:
        return int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def load_settings(cfg: Optional[dict] = None) -> AdaptiveSettings:
    """Build AdaptiveSettings from config, clamping bad values instead of failing."""

    cfg = load_config() if cfg is None else cfg
    pool = max(0, _as_int(cfg.get("POOL_SIZE", DEFAULT_POOL_SIZE), DEFAULT_POOL_SIZE))
    min_q = max(0, _as_int(
        cfg.get("MIN_QUESTIONS_BEFORE_ADAPTATION", DEFAULT_MIN_QUESTIONS_BEFORE_ADAPTATION),
        DEFAULT_MIN_QUESTIONS_BEFORE_ADAPTATION,
    ))
    source = str(cfg.get("ADAPTIVE_SOURCE") or "bank").lower().strip()
    if source not in ADAPTIVE_SOURCES:
        source = "bank"
    topic = cfg.get("QUIZ_TOPIC") or None
    return AdaptiveSettings(
        pool_size=pool,
        min_questions_before_adaptation=min_q,
        adaptive_source=source,  # type: ignore[arg-type]
        topic=topic,
    )


def make_rng(cfg: dict) -> random.Random:
    s = cfg.get("QUIZ_SEED")
    return random.Random(int(s)) if s is not None else random.Random()
