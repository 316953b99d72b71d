from __future__ import annotations

from quizboard.bank.singleton import get_bank
from quizboard.infra.redis_client import create_redis
from quizboard.session import GameSession
from quizboard.store import SnapshotStore


_SESSION: GameSession | None = None


def init_session(*, store: SnapshotStore | None = None) -> GameSession:
    """Start (or resume) the process-wide game session once and cache it.

    The question bank must already be initialized.
    """

    global _SESSION
    if _SESSION is None:
        if store is None:
            store = SnapshotStore(create_redis())
        _SESSION = GameSession.start(bank=get_bank(), store=store)
    return _SESSION


def reset_session_for_tests() -> None:
    global _SESSION
    _SESSION = None


def get_session() -> GameSession:
    return init_session()
