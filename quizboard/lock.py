from __future__ import annotations

from contextlib import contextmanager

import redis


SESSION_LOCK_KEY = "quizboard:lock:session"


class SessionBusyError(ValueError):
    pass


@contextmanager
def session_lock(*, r: redis.Redis, ttl_ms: int = 5_000):
    """Best-effort lock serializing command application across processes.

    Single holder only: release is an unconditional delete, not a token check.
    """

    acquired = r.set(SESSION_LOCK_KEY, "1", nx=True, px=ttl_ms)
    if not acquired:
        raise SessionBusyError("Game session is busy")
    try:
        yield
    finally:
        r.delete(SESSION_LOCK_KEY)
