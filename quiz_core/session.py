# quiz_core/session.py
from __future__ import annotations

import logging
import math
import time
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from .types import Question, QuizAttempt, utcnow

log = logging.getLogger(__name__)

AWAITING_ANSWER = "awaiting_answer"
COMPLETED = "completed"


class SessionStateError(RuntimeError):
    """Operation not allowed in the session's current state."""


class QuizSession:
    """Linear walk through a fixed question list, one attempt per question.

    States are ``awaiting_answer`` (at ``index``) and ``completed``. There is
    no going back. The attempt list is handed to ``on_complete``
    when the last question is advanced past; an empty quiz completes on
    construction with zero attempts. If ``on_complete`` raises, the session
    stays on the last question with its selection pending and ``advance()``
    can be called again. A finished session is not reusable.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        on_complete: Optional[Callable[[List[QuizAttempt]], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utcnow,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.questions: tuple[Question, ...] = tuple(questions)
        self._on_complete = on_complete
        self._clock = clock
        self._now = now
        self._attempts: List[QuizAttempt] = []
        self._index = 0
        self._selection: Optional[int] = None
        self._started_at = clock()
        self._state = AWAITING_ANSWER
        if not self.questions:
            self._complete()

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_completed(self) -> bool:
        return self._state == COMPLETED

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_completed:
            return None
        return self.questions[self._index]

    @property
    def pending_selection(self) -> Optional[int]:
        return self._selection

    @property
    def attempts(self) -> List[QuizAttempt]:
        return list(self._attempts)

    def elapsed(self) -> int:
        """Whole seconds on the current question (display only)."""
        if self.is_completed:
            return 0
        return max(0, int(math.floor(self._clock() - self._started_at)))

    def select_answer(self, option_index: int) -> None:
        question = self._require_open()
        idx = int(option_index)
        if not 0 <= idx < len(question.options):
            raise SessionStateError(
                f"option {idx} out of range for question {question.id} ({len(question.options)} options)"
            )
        self._selection = idx

    def advance(self) -> Optional[List[QuizAttempt]]:
        """Record the pending selection; returns the attempt list on completion."""

        question = self._require_open()
        if self._selection is None:
            raise SessionStateError(f"no answer selected for question {question.id}")

        spent = self.elapsed()
        attempt = QuizAttempt(
            id=f"{question.id}-{uuid.uuid4().hex[:12]}",
            question_id=question.id,
            selected_answer=self._selection,
            is_correct=self._selection == question.correct_answer,
            time_spent=spent,
            timestamp=self._now(),
        )
        self._attempts.append(attempt)
        log.debug(
            "session=%s q=%d/%d item=%s selected=%d correct=%s spent=%ds",
            self.id, self._index + 1, len(self.questions), question.id,
            attempt.selected_answer, attempt.is_correct, spent,
        )

        if self._index == len(self.questions) - 1:
            try:
                return self._complete()
            except Exception:
                self._attempts.pop()
                raise

        self._index += 1
        self._selection = None
        self._started_at = self._clock()
        return None

    def _require_open(self) -> Question:
        if self.is_completed:
            raise SessionStateError("session is completed; start a new quiz")
        return self.questions[self._index]

    def _complete(self) -> List[QuizAttempt]:
        attempts = list(self._attempts)
        if self._on_complete is not None:
            self._on_complete(attempts)
        self._state = COMPLETED
        self._selection = None
        log.info("session=%s completed attempts=%d", self.id, len(attempts))
        return attempts
