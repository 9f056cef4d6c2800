from __future__ import annotations
from collections import defaultdict
import os
from quiz_core.question_bank import load_bank
from quiz_core.types import DIFFICULTIES

# Configurable targets; defaults match the packaged bank
TARGETS = {
    "per_difficulty_min": int(os.getenv("TARGET_PER_DIFFICULTY_MIN", 1)),
    "categories_min": int(os.getenv("TARGET_CATEGORIES_MIN", 2)),
}

def main():
    items = load_bank()
    by_cat = defaultdict(list)
    for q in items:
        by_cat[q.category].append(q)

    dup = {q.id for q in items if sum(1 for o in items if o.id == q.id) > 1}
    print(f"{len(items)} questions, {len(by_cat)} categories, duplicate ids: {sorted(dup) or 'none'}")
    print(f"Targets per category: ≥{TARGETS['per_difficulty_min']} per difficulty; "
          f"≥{TARGETS['categories_min']} categories overall.\n")

    for cat, qs in by_cat.items():
        counts = {d: sum(1 for q in qs if q.difficulty == d) for d in DIFFICULTIES}
        print(f"{cat}: " + "  ".join(f"{d}={n}" for d, n in counts.items()))
        need = {d: max(0, TARGETS["per_difficulty_min"] - n) for d, n in counts.items()}
        if any(need.values()):
            print("  → Add: " + ", ".join(f"{d} {n}" for d, n in need.items() if n) + "\n")
        else:
            print("  ✓ Meets targets\n")

    if len(by_cat) < TARGETS["categories_min"]:
        print(f"Only {len(by_cat)} categories; weakest-category targeting needs ≥{TARGETS['categories_min']}.")

if __name__ == "__main__":
    main()
