from __future__ import annotations

import os

import redis


DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def get_redis_url() -> str:
    # A project-specific URL wins so the snapshot store can live apart from a shared REDIS_URL.
    return os.environ.get("QUIZBOARD_REDIS_URL") or os.environ.get("REDIS_URL", DEFAULT_REDIS_URL)


def create_redis() -> redis.Redis:
    # decode_responses=True => snapshot JSON comes back as str, not bytes
    return redis.Redis.from_url(get_redis_url(), decode_responses=True)
