# autoplay.py
from __future__ import annotations
import argparse, json, logging, random
from typing import Dict
import quiz_core.question_bank as qb
from quiz_core.composer import QuizComposer
from quiz_core.config import load_config, load_settings
from quiz_core.engine import AdaptiveEngine, InMemoryProfileStore
from quiz_core.reporting import profile_report, to_basic
from quiz_core.types import Question

# simulated response time per difficulty (seconds)
RT_BY_DIFFICULTY: Dict[str, float] = {"easy": 12.0, "medium": 25.0, "hard": 48.0}


class SimClock:
    def __init__(self) -> None:
        self.t = 0.0
    def __call__(self) -> float:
        return self.t
    def tick(self, sec: float) -> None:
        self.t += sec


def _wrong(q: Question) -> int:
    return (q.correct_answer + 1) % len(q.options)


def _answer_for(q: Question, profile: str, rng: random.Random) -> int:
    if profile == "perfect":
        return q.correct_answer
    if profile == "all-wrong":
        return _wrong(q)
    # mixed: strong on easy, shaky on hard
    p_correct = {"easy": 0.9, "medium": 0.65, "hard": 0.35}[q.difficulty]
    return q.correct_answer if rng.random() < p_correct else _wrong(q)


def run(profile: str, quizzes: int, seed: int) -> dict:
    rng = random.Random(seed)
    clock = SimClock()
    settings = load_settings(load_config())
    composer = QuizComposer(qb.InMemoryQuestionBank(qb.load_bank()), rng=random.Random(seed))
    store = InMemoryProfileStore()
    engine = AdaptiveEngine(composer, store, settings, clock=clock)
    student = f"auto-{profile}"
    answered = 0
    for n in range(quizzes):
        active = engine.start_quiz(student)
        sess = active.session
        while not sess.is_completed:
            q = sess.current_question
            sess.select_answer(_answer_for(q, profile, rng))
            clock.tick(RT_BY_DIFFICULTY[q.difficulty])
            sess.advance(); answered += 1
        logging.info("quiz %d mode=%s size=%d fit=%s", n + 1, active.plan.mode, len(active.questions),
                     active.outcome.fit_score if active.outcome else None)
    if answered <= 0: raise RuntimeError("Driver answered 0 items.")
    return profile_report(store.get(student), settings)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--profile", choices=["perfect", "all-wrong", "mixed"], default="mixed")
    ap.add_argument("--quizzes", type=int, default=3)
    ap.add_argument("--seed", type=int, default=1337)
    a = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    print(json.dumps(to_basic(run(a.profile, a.quizzes, a.seed)), indent=2))

if __name__ == "__main__":
    main()
