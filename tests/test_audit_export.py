from __future__ import annotations

from quiz_core.audit_export import to_csv, to_json

from tests.conftest import FIXED_TS, build_synthetic_bank, make_attempt


def _attempts():
    questions = build_synthetic_bank(categories=["History"], per_difficulty=1)
    return [make_attempt(questions[0], 0, 7), make_attempt(questions[1], 2, 31)]


def test_json_export_shape():
    payload = to_json(_attempts())
    first, second = payload["attempts"]
    assert set(first) == {"id", "question_id", "selected_answer", "is_correct", "time_spent", "timestamp"}
    assert first["question_id"] == "History_easy_0"
    assert first["is_correct"] is True
    assert second["selected_answer"] == 2 and second["time_spent"] == 31
    assert second["timestamp"] == FIXED_TS.isoformat()


def test_csv_export_has_header_and_int_flags():
    lines = to_csv(_attempts()).strip().splitlines()
    assert lines[0] == "id,question_id,selected_answer,is_correct,time_spent,timestamp"
    assert len(lines) == 3
    cells = lines[2].split(",")
    assert cells[1] == "History_medium_0"
    assert cells[3] == "0"
    assert cells[4] == "31"


def test_empty_export():
    assert to_json([]) == {"attempts": []}
    assert to_csv([]).strip() == "id,question_id,selected_answer,is_correct,time_spent,timestamp"
