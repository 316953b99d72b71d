from __future__ import annotations

import fakeredis
from fastapi.testclient import TestClient


def _cell(game: dict, category: int, point_value: int) -> tuple[int, dict]:
    questions = game["categories"][category]["questions"]
    idx = next(i for i, q in enumerate(questions) if q["point_value"] == point_value)
    return idx, questions[idx]


def test_fresh_game_waits_for_names(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    resp = client.get("/game")
    assert resp.status_code == 200
    game = resp.json()
    assert game["mode"] == "name_setup"
    assert game["scores"] == {"player1": 0, "player2": 0}
    assert game["player_names"] == {"player1": "Player 1", "player2": "Player 2"}
    assert len(game["categories"]) == 5

    # The board is blocked until names are confirmed; ignored commands are not errors.
    resp2 = client.post("/game/questions/0/0/open")
    assert resp2.status_code == 200
    assert resp2.json()["applied"] is False


def test_full_turn_over_http(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    resp = client.post("/game/names", json={"player1": " Ada ", "player2": ""})
    assert resp.status_code == 200
    body = resp.json()
    assert body["applied"] is True
    assert body["game"]["mode"] == "overview"
    assert body["game"]["player_names"] == {"player1": "Ada", "player2": "Player 2"}

    qi, q = _cell(body["game"], 0, 3)
    assert q["payload"]["kind"] == "choice"
    assert q["payload"]["correct_index"] == 2

    opened = client.post(f"/game/questions/0/{qi}/open").json()
    assert opened["applied"] is True
    assert opened["game"]["mode"] == "question_pending"
    assert opened["game"]["active_question"] == {
        "category_index": 0,
        "question_index": qi,
        "selection": None,
        "evaluated": False,
        "correct": None,
    }

    # Closing before answering is ignored.
    assert client.post("/game/close").json()["applied"] is False

    answered = client.post("/game/answer", json={"value": 2}).json()
    assert answered["applied"] is True
    assert answered["game"]["mode"] == "question_evaluated"
    assert answered["game"]["scores"] == {"player1": 3, "player2": 0}
    assert answered["game"]["active_question"]["correct"] is True
    assert answered["game"]["categories"][0]["questions"][qi]["answered"] is True

    again = client.post("/game/answer", json={"value": 1}).json()
    assert again["applied"] is False
    assert again["game"]["scores"] == {"player1": 3, "player2": 0}

    closed = client.post("/game/close").json()
    assert closed["game"]["mode"] == "overview"
    assert closed["game"]["active_player"] == "player2"
    assert closed["game"]["active_question"] is None

    snap = client.get("/snapshot")
    assert snap.status_code == 200
    assert snap.json()["scores"] == {"player1": 3, "player2": 0}
    assert snap.json()["active_player"] == "player2"


def test_restart_over_http(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    client.post("/game/names", json={"player1": "Ada", "player2": "Linus"})
    client.post("/game/questions/0/0/open")
    client.post("/game/answer", json={"value": 0})
    client.post("/game/close")

    assert client.post("/game/restart/request").json()["game"]["mode"] == "restart_confirm"
    assert client.post("/game/restart/cancel").json()["game"]["mode"] == "overview"

    client.post("/game/restart/request")
    done = client.post("/game/restart/confirm").json()
    assert done["applied"] is True
    assert done["game"]["mode"] == "name_setup"
    assert done["game"]["scores"] == {"player1": 0, "player2": 0}
    assert done["game"]["player_names"] == {"player1": "Player 1", "player2": "Player 2"}

    assert client.get("/snapshot").status_code == 404


def test_generic_action_endpoint(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    resp = client.post("/game/actions/names", json={"player1": "Ada", "player2": "Linus"})
    assert resp.status_code == 200
    assert resp.json()["game"]["mode"] == "overview"

    resp2 = client.post("/game/actions/open", json={"category_index": 2, "question_index": 3})
    assert resp2.json()["game"]["mode"] == "question_pending"

    resp3 = client.post("/game/actions/answer", json={"value": 7})
    assert resp3.json()["game"]["scores"]["player1"] == 4

    resp4 = client.post("/game/actions/winner", json={})
    assert resp4.status_code == 200
    assert resp4.json()["applied"] is False


def test_generic_action_validation(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    assert client.post("/game/actions/nope", json={}).status_code == 422
    assert client.post("/game/actions/answer", json={"value": "seven"}).status_code == 422
    assert client.post("/game/actions/open", json={"category_index": 0}).status_code == 422
    assert client.post("/game/answer", json={}).status_code == 422


def test_busy_session_returns_conflict(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    from quizboard.lock import SESSION_LOCK_KEY

    client, r = client_and_redis
    r.set(SESSION_LOCK_KEY, "1")

    resp = client.post("/game/names", json={"player1": "Ada", "player2": "Linus"})
    assert resp.status_code == 409

    r.delete(SESSION_LOCK_KEY)
    assert client.post("/game/names", json={"player1": "Ada", "player2": "Linus"}).json()["applied"] is True


def test_snapshot_404_before_first_write(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis
    assert client.get("/snapshot").status_code == 404


def test_info_and_healthcheck(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis
    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "quizboard"


def test_out_of_range_answer_is_ignored(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    client.post("/game/names", json={"player1": "Ada", "player2": "Linus"})
    client.post("/game/questions/2/3/open")  # Art, rated on a 1..10 scale

    resp = client.post("/game/answer", json={"value": 42})
    assert resp.status_code == 200
    body = resp.json()
    assert body["applied"] is False
    assert body["game"]["mode"] == "question_pending"
    assert body["game"]["categories"][2]["questions"][3]["answered"] is False
    assert body["game"]["scores"] == {"player1": 0, "player2": 0}
