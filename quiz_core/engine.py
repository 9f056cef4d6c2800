# quiz_core/engine.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from . import aggregator
from .composer import QuizComposer, QuizPlan
from .reporting import session_summary
from .scoring import accuracy, calculate_fit_score
from .session import QuizSession
from .types import (
    AdaptiveSettings,
    PerformanceProfile,
    Question,
    QuizAttempt,
    QuizCompletion,
    utcnow,
)

log = logging.getLogger(__name__)


class ProfileStore(Protocol):
    def get(self, student_id: str) -> PerformanceProfile: ...
    def put(self, student_id: str, profile: PerformanceProfile) -> None: ...


class InMemoryProfileStore:
    def __init__(self) -> None:
        self.profiles: Dict[str, PerformanceProfile] = {}

    def get(self, student_id: str) -> PerformanceProfile:
        found = self.profiles.get(student_id)
        return found if found is not None else aggregator.empty_profile(student_id)

    def put(self, student_id: str, profile: PerformanceProfile) -> None:
        self.profiles[student_id] = profile


@dataclass
class QuizOutcome:
    profile: PerformanceProfile
    fit_score: int
    summary: Dict[str, object]
    completion: Optional[QuizCompletion] = None


@dataclass
class ActiveQuiz:
    student_id: str
    student_name: str
    plan: QuizPlan
    profile: PerformanceProfile
    questions: Tuple[Question, ...]
    session: Optional[QuizSession] = None
    outcome: Optional[QuizOutcome] = None
    started_at: datetime = field(default_factory=utcnow)


class AdaptiveEngine:
    """Composer -> session -> aggregator -> store, one quiz at a time per student.

    The profile is read once when the quiz starts and written once when its
    session completes. Dropping an unfinished ActiveQuiz leaves the store
    untouched.
    """

    def __init__(
        self,
        composer: QuizComposer,
        store: ProfileStore,
        settings: AdaptiveSettings,
        completion_log: Optional[Callable[[QuizCompletion], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.composer = composer
        self.store = store
        self.settings = settings
        self.completion_log = completion_log
        self.clock = clock

    def start_quiz(self, student_id: str, student_name: Optional[str] = None) -> ActiveQuiz:
        profile = self.store.get(student_id)
        composed = self.composer.compose(profile, self.settings)
        active = ActiveQuiz(
            student_id=student_id,
            student_name=student_name or student_id,
            plan=composed.plan,
            profile=profile,
            questions=composed.questions,
        )
        active.session = QuizSession(
            composed.questions,
            on_complete=partial(self._finish, active),
            clock=self.clock,
        )
        return active

    def _finish(self, active: ActiveQuiz, attempts: List[QuizAttempt]) -> None:
        updated = aggregator.apply(active.profile, attempts, active.questions)
        completion: Optional[QuizCompletion] = None
        if attempts:
            self.store.put(active.student_id, updated)
            completion = QuizCompletion(
                student_id=active.student_id,
                student_name=active.student_name,
                score=100.0 * accuracy(updated),
                total_questions=updated.total_questions,
                completed_at=utcnow(),
            )
            if self.completion_log is not None:
                self.completion_log(completion)
            log.info(
                "profile saved student=%s total=%d correct=%d",
                active.student_id, updated.total_questions, updated.correct_answers,
            )
        active.outcome = QuizOutcome(
            profile=updated,
            fit_score=calculate_fit_score(updated),
            summary=session_summary(attempts, active.questions),
            completion=completion,
        )
