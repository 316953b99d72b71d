from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import fakeredis
import pytest
from fastapi.testclient import TestClient

from quizboard.bank.loader import QuestionBank
from quizboard.session import GameSession
from quizboard.store import SnapshotStore


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (e.g. a REDIS_URL pointing at a dev instance).

    In CI we don't auto-load `.env`; opt in with QUIZBOARD_LOAD_DOTENV_FOR_TESTS=1.
    """

    if os.environ.get("CI") and os.environ.get("QUIZBOARD_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture(scope="session", autouse=True)
def _init_bank_from_test_fixtures() -> None:
    """Initialize the question bank from `tests/assets` and forbid the built-in fallback.

    This keeps tests hermetic and decoupled from the repo's real question bank.
    """

    os.environ["QUIZBOARD_STRICT_BANK"] = "1"
    os.environ.pop("QUIZBOARD_BANK_PATH", None)

    from quizboard.bank.singleton import init_bank, reset_bank_for_tests

    reset_bank_for_tests()

    # Point the loader at a fake project root: tests/ contains an assets/ dir.
    test_root = Path(__file__).resolve().parent
    init_bank(project_root=test_root)


@pytest.fixture()
def bank() -> QuestionBank:
    from quizboard.bank.singleton import get_bank

    return get_bank()


@pytest.fixture()
def redis_client() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def store(redis_client: fakeredis.FakeRedis) -> SnapshotStore:
    return SnapshotStore(redis_client)


@pytest.fixture()
def session(bank: QuestionBank, store: SnapshotStore) -> GameSession:
    return GameSession.start(bank=bank, store=store)


@pytest.fixture()
def client_and_redis(
    session: GameSession, redis_client: fakeredis.FakeRedis
) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """FastAPI TestClient wired to a fakeredis-backed session."""

    from quizboard.api.deps import get_game_session, get_redis
    from quizboard.main import app

    def _override_redis() -> Generator[fakeredis.FakeRedis, None, None]:
        yield redis_client

    app.dependency_overrides[get_redis] = _override_redis
    app.dependency_overrides[get_game_session] = lambda: session
    with TestClient(app) as c:
        yield c, redis_client
    app.dependency_overrides.clear()
