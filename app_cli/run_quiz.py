from __future__ import annotations
import argparse, logging
import quiz_core.question_bank as qb
from quiz_core.composer import GenerationError, QuizComposer
from quiz_core.config import load_config, load_settings, make_rng
from quiz_core.engine import AdaptiveEngine
from quiz_core.llm_bridge import TextGenerator
from quiz_core.llm_cfg import backend_in_use
from quiz_core.reporting import profile_report
from api.storage import JsonProfileStore, record_completion
def ask(prompt: str, options) -> int:
    print(prompt)
    for i,opt in enumerate(options): print(f"  [{i}] {opt}")
    while True:
        v = input("Your choice (index): ").strip()
        if v.isdigit() and int(v) < len(options): return int(v)
        print(f"Enter a number index between 0 and {len(options)-1}.")
def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--student", required=True)
    ap.add_argument("--name", default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    a = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if a.verbose else logging.WARNING, format="[%(levelname)s] %(message)s")
    cfg = load_config(); settings = load_settings(cfg)
    gen = TextGenerator() if backend_in_use() != "none" else None
    composer = QuizComposer(qb.InMemoryQuestionBank(qb.load_bank()), generator=gen, rng=make_rng(cfg))
    engine = AdaptiveEngine(composer, JsonProfileStore(), settings, completion_log=record_completion)
    try:
        active = engine.start_quiz(a.student, a.name)
    except GenerationError as e:
        print(f"Could not build a quiz: {e}"); raise SystemExit(2)
    sess = active.session
    print(f"Adaptive Quiz ({active.plan.mode}, {len(active.questions)} questions)")
    while not sess.is_completed:
        q = sess.current_question
        print(f"\nQuestion {sess.index+1} of {len(sess.questions)}  [{q.difficulty} | {q.category}]")
        sess.select_answer(ask(q.text, q.options))
        sess.advance()
    out = active.outcome
    s = out.summary
    print(f"\nQuiz complete: {s['correct']}/{s['answered']} correct ({s['accuracy']}%), "
          f"total {s['total_time']}s, avg {s['average_time']}s per question")
    for row in s["review"]:
        if not row["is_correct"]:
            print(f"  x {row['text']}  your answer: {row['selected']}  correct: {row['correct']}")
            if row["explanation"]: print(f"    {row['explanation']}")
    rep = profile_report(out.profile, settings)
    print(f"Fit score: {rep['display_fit_score']}  next difficulty: {rep['next_difficulty']}  "
          f"weakest: {rep['weakest_category']}")
    for r in rep["recommendations"]: print(f"  - {r['message']} ({r['action']})")
if __name__ == "__main__": main()
