from __future__ import annotations

import random
from collections import Counter

import pytest

from quiz_core.composer import QuizComposer
from quiz_core.engine import AdaptiveEngine, InMemoryProfileStore
from quiz_core.question_bank import InMemoryQuestionBank
from quiz_core.types import AdaptiveSettings

from tests.conftest import build_synthetic_bank


def _engine(clock, pool=10, threshold=5, log=None):
    composer = QuizComposer(InMemoryQuestionBank(build_synthetic_bank()), rng=random.Random(3))
    settings = AdaptiveSettings(pool_size=pool, min_questions_before_adaptation=threshold)
    store = InMemoryProfileStore()
    return AdaptiveEngine(composer, store, settings, completion_log=log, clock=clock), store


def _play(active, clock, pick=lambda q: q.correct_answer, seconds=20):
    sess = active.session
    while not sess.is_completed:
        sess.select_answer(pick(sess.current_question))
        clock.tick(seconds)
        sess.advance()


def test_first_quiz_persists_profile_and_logs_completion(clock):
    completions = []
    engine, store = _engine(clock, log=completions.append)

    active = engine.start_quiz("s1", "Ada")
    assert active.plan.mode == "initial"
    assert "s1" not in store.profiles

    _play(active, clock)

    saved = store.profiles["s1"]
    assert saved.total_questions == 10
    assert saved.correct_answers == 10
    assert saved.average_time == 20.0
    assert active.outcome.profile == saved
    assert active.outcome.fit_score == 100
    assert active.outcome.summary["answered"] == 10
    (done,) = completions
    assert (done.student_id, done.student_name, done.score, done.total_questions) == ("s1", "Ada", 100.0, 10)


def test_second_quiz_adapts_to_history(clock):
    engine, store = _engine(clock)
    _play(engine.start_quiz("s1"), clock)

    second = engine.start_quiz("s1")
    assert second.plan.mode == "adaptive"
    assert Counter(q.difficulty for q in second.questions) == {"easy": 2, "medium": 4, "hard": 4}

    _play(second, clock, pick=lambda q: 1)
    assert store.profiles["s1"].total_questions == 20
    assert store.profiles["s1"].correct_answers == 10


def test_abandoned_quiz_leaves_store_untouched(clock):
    engine, store = _engine(clock)
    active = engine.start_quiz("s1")
    active.session.select_answer(0)
    active.session.advance()
    assert store.profiles == {}
    assert active.outcome is None


def test_empty_quiz_completes_without_persisting(clock):
    completions = []
    engine, store = _engine(clock, pool=0, log=completions.append)
    active = engine.start_quiz("s1")
    assert active.session.is_completed
    assert active.outcome is not None
    assert active.outcome.profile.total_questions == 0
    assert store.profiles == {}
    assert completions == []


def test_student_name_defaults_to_id(clock):
    engine, _ = _engine(clock)
    assert engine.start_quiz("s9").student_name == "s9"


class _FlakyStore(InMemoryProfileStore):
    def __init__(self, failures=1):
        super().__init__()
        self.failures = failures

    def put(self, student_id, profile):
        if self.failures > 0:
            self.failures -= 1
            raise OSError("profile store unavailable")
        super().put(student_id, profile)


def test_store_failure_at_completion_can_be_retried(clock):
    completions = []
    composer = QuizComposer(InMemoryQuestionBank(build_synthetic_bank()), rng=random.Random(3))
    store = _FlakyStore()
    engine = AdaptiveEngine(
        composer, store, AdaptiveSettings(pool_size=2, min_questions_before_adaptation=5),
        completion_log=completions.append, clock=clock,
    )
    active = engine.start_quiz("s1")
    sess = active.session
    sess.select_answer(0)
    sess.advance()
    sess.select_answer(0)

    with pytest.raises(OSError):
        sess.advance()
    assert not sess.is_completed
    assert active.outcome is None
    assert store.profiles == {}
    assert completions == []

    sess.advance()
    assert sess.is_completed
    assert store.profiles["s1"].total_questions == 2
    assert active.outcome.profile.total_questions == 2
    assert len(completions) == 1
