from __future__ import annotations

from pathlib import Path

from quizboard.bank.singleton import init_bank


def init_bank_for_app() -> None:
    # project root is two levels up from this file: quizboard/bank/startup.py
    project_root = Path(__file__).resolve().parents[2]
    init_bank(project_root=project_root)
