from __future__ import annotations

from pathlib import Path

from quizboard.bank.loader import QuestionBank, load_question_bank


_BANK: QuestionBank | None = None


def init_bank(*, project_root: Path) -> QuestionBank:
    """Load the question bank once and cache it.

    Safe to call multiple times; subsequent calls return the already loaded instance.
    """

    global _BANK
    if _BANK is None:
        _BANK = load_question_bank(root=project_root)
    return _BANK


def reset_bank_for_tests() -> None:
    global _BANK
    _BANK = None


def get_bank() -> QuestionBank:
    if _BANK is None:
        raise RuntimeError("Question bank not initialized. Call init_bank() at startup.")
    return _BANK
