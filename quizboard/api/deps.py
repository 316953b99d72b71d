from __future__ import annotations

from collections.abc import Generator

import redis

from quizboard.infra.redis_client import create_redis
from quizboard.session import GameSession
from quizboard.session_holder import get_session


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        client.close()


def get_game_session() -> GameSession:
    return get_session()
