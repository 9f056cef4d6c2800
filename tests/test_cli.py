from __future__ import annotations

import importlib
import sys

import pytest

import quiz_core.question_bank as qb

from tests.conftest import build_synthetic_bank


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    for name in ("POOL_SIZE", "MIN_QUESTIONS_BEFORE_ADAPTATION", "ADAPTIVE_SOURCE", "LLM_BACKEND"):
        monkeypatch.delenv(name, raising=False)
    if "api.storage" in sys.modules:
        importlib.reload(sys.modules["api.storage"])
    return sys.modules.get("api.storage") or importlib.import_module("api.storage")


def test_console_quiz_saves_profile(data_dir, monkeypatch, capsys):
    from app_cli import run_quiz

    monkeypatch.setattr(qb, "load_bank", build_synthetic_bank)
    monkeypatch.setenv("POOL_SIZE", "3")
    answers = iter(["7", "x", "0", "1", "0"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(answers))
    monkeypatch.setattr(sys, "argv", ["run_quiz", "--student", "cli-1", "--name", "Cli"])

    run_quiz.main()

    out = capsys.readouterr().out
    assert "Adaptive Quiz (initial, 3 questions)" in out
    assert "Enter a number index between 0 and 3." in out
    assert "Quiz complete: 2/3 correct" in out
    saved = data_dir.get_profile("cli-1")
    assert (saved.total_questions, saved.correct_answers) == (3, 2)
    assert data_dir.recent_completions()[0]["studentName"] == "Cli"


def test_bank_report_lists_categories(capsys):
    from tools import validate_bank

    validate_bank.main()
    out = capsys.readouterr().out
    assert out.startswith("17 questions, 3 categories, duplicate ids: none")
    assert "History: easy=2  medium=1  hard=1" in out
