# quiz_core/composer.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from .config import INITIAL_SPLIT
from .llm_bridge import QuestionGenerator
from .question_bank import QuestionBank
from .scoring import (
    classify_difficulty_for_next_quiz,
    difficulty_mix_ratio,
    round_half_up,
    weakest_category,
)
from .types import DIFFICULTIES, AdaptiveSettings, PerformanceProfile, Question
from .validators import parse_generated_questions

log = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """The text-generation collaborator failed or returned an unusable payload."""


@dataclass(frozen=True)
class QuizPlan:
    mode: Literal["initial", "adaptive"]
    source: Literal["bank", "generative"]
    counts: Dict[str, int] = field(default_factory=dict)
    difficulty: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class ComposedQuiz:
    plan: QuizPlan
    questions: Tuple[Question, ...]


def split_counts(pool_size: int, ratio: Dict[str, float]) -> Dict[str, int]:
    """Easy and medium are rounded; hard takes the remainder, never below 0."""

    pool = max(0, int(pool_size))
    easy = max(0, round_half_up(pool * ratio["easy"]))
    medium = max(0, round_half_up(pool * ratio["medium"]))
    hard = max(0, pool - easy - medium)
    return {"easy": easy, "medium": medium, "hard": hard}


def plan_quiz(profile: PerformanceProfile, settings: AdaptiveSettings) -> QuizPlan:
    if profile.total_questions < settings.min_questions_before_adaptation:
        return QuizPlan(mode="initial", source="bank", counts=split_counts(settings.pool_size, INITIAL_SPLIT))
    if settings.adaptive_source == "generative":
        return QuizPlan(
            mode="adaptive",
            source="generative",
            counts={"total": max(0, int(settings.pool_size))},
            difficulty=classify_difficulty_for_next_quiz(profile),
            category=weakest_category(profile),
        )
    ratio = difficulty_mix_ratio(profile)
    return QuizPlan(mode="adaptive", source="bank", counts=split_counts(settings.pool_size, ratio))


class QuizComposer:
    """Decide the shape of the next quiz and fetch questions for it."""

    def __init__(
        self,
        bank: QuestionBank,
        generator: Optional[QuestionGenerator] = None,
        rng: Optional[random.Random] = None,
    ):
        self.bank = bank
        self.generator = generator
        self.rng = rng or random.Random()

    def compose(self, profile: PerformanceProfile, settings: AdaptiveSettings) -> ComposedQuiz:
        plan = plan_quiz(profile, settings)
        log.debug(
            "plan student=%s total=%d mode=%s source=%s counts=%s",
            profile.student_id, profile.total_questions, plan.mode, plan.source, plan.counts,
        )
        if plan.source == "generative":
            questions = self._from_generator(plan, settings)
        else:
            questions = self._from_bank(plan)
        self.rng.shuffle(questions)
        log.info(
            "quiz composed student=%s mode=%s source=%s size=%d",
            profile.student_id, plan.mode, plan.source, len(questions),
        )
        return ComposedQuiz(plan=plan, questions=tuple(questions))

    def _from_bank(self, plan: QuizPlan) -> List[Question]:
        out: List[Question] = []
        for difficulty in DIFFICULTIES:
            want = plan.counts.get(difficulty, 0)
            if want <= 0:
                continue
            got = self.bank.fetch_by_difficulty(difficulty, want)[:want]
            if len(got) < want:
                log.warning("bank shortfall difficulty=%s requested=%d got=%d", difficulty, want, len(got))
            out.extend(got)
        return out

    def _from_generator(self, plan: QuizPlan, settings: AdaptiveSettings) -> List[Question]:
        count = plan.counts.get("total", 0)
        if count <= 0:
            return []
        if self.generator is None:
            raise GenerationError("adaptive source is 'generative' but no question generator is configured")
        difficulty = plan.difficulty or "medium"
        category = plan.category or ""
        topic = settings.topic or category
        try:
            raw = self.generator.generate_questions(topic, count, difficulty, category)
        except Exception as e:
            log.warning("generation failed topic=%s difficulty=%s: %s", topic, difficulty, e)
            raise GenerationError(f"question generation failed: {e}") from e
        parsed = parse_generated_questions(raw, difficulty=difficulty, category=category)
        if not parsed.ok:
            log.warning("generation rejected topic=%s reason=%s", topic, parsed.error)
            raise GenerationError(f"generated payload rejected: {parsed.error}")
        return list(parsed.questions)[:count]
