from __future__ import annotations

from typing import Any, Literal, get_args

from quizboard.fsm import AppliedCommand
from quizboard.lock import session_lock
from quizboard.session import GameSession


ActionName = Literal[
    "names",
    "open",
    "answer",
    "close",
    "winner",
    "restart_request",
    "restart_cancel",
    "restart_confirm",
]

ACTION_NAMES: frozenset[str] = frozenset(get_args(ActionName))


def _require_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return value


def _apply(session: GameSession, action: ActionName, payload: dict[str, Any]) -> AppliedCommand:
    if action == "names":
        return session.confirm_names(str(payload.get("player1") or ""), str(payload.get("player2") or ""))
    if action == "open":
        return session.open_question(_require_int(payload, "category_index"), _require_int(payload, "question_index"))
    if action == "answer":
        return session.submit_answer(_require_int(payload, "value"))
    if action == "close":
        return session.close_question()
    if action == "winner":
        return session.reveal_winner()
    if action == "restart_request":
        return session.request_restart()
    if action == "restart_cancel":
        return session.cancel_restart()
    if action == "restart_confirm":
        return session.confirm_restart()
    raise ValueError(f"Unknown action: {action}")


def dispatch_action(*, session: GameSession, action: ActionName, payload: dict[str, Any] | None = None) -> AppliedCommand:
    """Entry point for every presentation-layer intent.

    The session lives in this process only; the lock keeps concurrent requests from
    interleaving one command with another. Raises ValueError only for requests that
    cannot name a command (unknown action, missing arguments); commands that are merely
    invalid for the current state come back with `applied=False`.
    """

    if action not in ACTION_NAMES:
        raise ValueError(f"Unknown action: {action}")

    with session_lock(r=session.store.r):
        return _apply(session, action, payload or {})
