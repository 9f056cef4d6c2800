from __future__ import annotations

from collections import Counter

from quiz_core.question_bank import InMemoryQuestionBank, load_bank
from quiz_core.types import DIFFICULTIES


def test_packaged_bank_loads_and_is_well_formed():
    bank = load_bank()
    assert len(bank) == 17
    assert len({q.id for q in bank}) == len(bank)
    assert set(Counter(q.difficulty for q in bank)) == set(DIFFICULTIES)
    assert InMemoryQuestionBank(bank).categories() == ["Mathematics", "Science", "History"]
    for q in bank:
        assert 0 <= q.correct_answer < len(q.options)


def test_fetch_returns_first_matches_in_order(synthetic_bank):
    bank = InMemoryQuestionBank(synthetic_bank)
    got = bank.fetch_by_difficulty("medium", 3)
    assert [q.id for q in got] == ["Mathematics_medium_0", "Mathematics_medium_1", "Mathematics_medium_2"]


def test_fetch_with_category_and_shortfall(synthetic_bank):
    bank = InMemoryQuestionBank(synthetic_bank)
    got = bank.fetch_by_difficulty("hard", 50, category="History")
    assert len(got) == 5
    assert {q.category for q in got} == {"History"}


def test_fetch_nonpositive_count(synthetic_bank):
    bank = InMemoryQuestionBank(synthetic_bank)
    assert bank.fetch_by_difficulty("easy", 0) == []
    assert bank.fetch_by_difficulty("easy", -2) == []
