# quiz_core/scoring.py
"""Fit score and difficulty-tier policy derived from a PerformanceProfile.

Everything here is pure: no I/O, no mutation, and every zero-denominator case
contributes 0 rather than raising.
"""
from __future__ import annotations

import math
from typing import Dict

from .config import (
    BALANCE_WEIGHTS,
    FALLBACK_CATEGORY,
    FIT_WEIGHTS,
    MIX_HIGH,
    MIX_LOW,
    MIX_MID,
    NEW_PROFILE_DIFFICULTY,
    OPTIMAL_TIME_SEC,
    TIER_HIGH,
    TIER_MID,
)
from .types import DIFFICULTIES, AdaptiveSettings, BucketStats, Difficulty, PerformanceProfile


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _clamp01(x: float) -> float:
    if x < 0.0: return 0.0
    if x > 1.0: return 1.0
    return float(x)


def bucket_accuracy(stats: BucketStats) -> float:
    return stats.correct / stats.total if stats.total > 0 else 0.0


def accuracy(profile: PerformanceProfile) -> float:
    if profile.total_questions <= 0:
        return 0.0
    return profile.correct_answers / profile.total_questions


def difficulty_balance(profile: PerformanceProfile) -> float:
    """Weighted per-difficulty accuracy; acing only easy items caps out at 0.4."""

    dist = profile.difficulty_distribution
    total = 0.0
    for d in DIFFICULTIES:
        total += bucket_accuracy(dist.get(d, BucketStats())) * BALANCE_WEIGHTS[d]
    return min(total, 1.0)


def time_efficiency(profile: PerformanceProfile) -> float:
    score = 1.0 - (profile.average_time - OPTIMAL_TIME_SEC) / OPTIMAL_TIME_SEC
    return _clamp01(score)


def calculate_fit_score(profile: PerformanceProfile) -> int:
    raw = (
        FIT_WEIGHTS["accuracy"] * accuracy(profile)
        + FIT_WEIGHTS["balance"] * difficulty_balance(profile)
        + FIT_WEIGHTS["time"] * time_efficiency(profile)
    )
    return max(0, min(100, round_half_up(100.0 * raw)))


def displayed_fit_score(profile: PerformanceProfile, settings: AdaptiveSettings) -> int:
    """Dashboards show 0 until the student has enough history to adapt on."""

    if profile.total_questions < settings.min_questions_before_adaptation:
        return 0
    return calculate_fit_score(profile)


def classify_difficulty_for_next_quiz(profile: PerformanceProfile) -> Difficulty:
    if profile.total_questions <= 0:
        return NEW_PROFILE_DIFFICULTY
    acc = accuracy(profile)
    if acc >= TIER_HIGH:
        return "hard"
    if acc >= TIER_MID:
        return "medium"
    return "easy"


def difficulty_mix_ratio(profile: PerformanceProfile) -> Dict[str, float]:
    acc = accuracy(profile)
    if acc >= TIER_HIGH:
        mix = MIX_HIGH
    elif acc >= TIER_MID:
        mix = MIX_MID
    else:
        mix = MIX_LOW
    return dict(mix)


def weakest_category(profile: PerformanceProfile) -> str:
    """Lowest correct/total category; the first one seen wins ties."""

    weakest = None
    weakest_rate = math.inf
    for name, stats in profile.category_performance.items():
        rate = bucket_accuracy(stats)
        if rate < weakest_rate:
            weakest, weakest_rate = name, rate
    return weakest if weakest is not None else FALLBACK_CATEGORY
