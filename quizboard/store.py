from __future__ import annotations

import logging

import redis
from pydantic import ValidationError

from quizboard.api.models import GameSnapshot


logger = logging.getLogger(__name__)

# Bump the version suffix whenever the GameSnapshot shape changes, so records written by
# an older shape are ignored instead of misread. v1 predates player names.
SNAPSHOT_KEY = "quizboard:snapshot:v2"


class SnapshotStore:
    """Durable home of the single game snapshot.

    Unreadable records are treated exactly like a missing one.
    """

    def __init__(self, r: redis.Redis, *, key: str = SNAPSHOT_KEY) -> None:
        self.r = r
        self.key = key

    def save(self, snapshot: GameSnapshot) -> None:
        self.r.set(self.key, snapshot.model_dump_json())

    def load(self) -> GameSnapshot | None:
        raw = self.r.get(self.key)
        if not raw:
            return None
        try:
            return GameSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("discarding unreadable snapshot under %s (%d errors)", self.key, e.error_count())
            return None

    def clear(self) -> None:
        self.r.delete(self.key)

    def exists(self) -> bool:
        return bool(self.r.exists(self.key))
