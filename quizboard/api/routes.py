from __future__ import annotations

from typing import Any

import redis
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from quizboard.actions import ACTION_NAMES, ActionName, dispatch_action
from quizboard.api.deps import get_game_session, get_redis
from quizboard.api.models import CommandResponse, ConfirmNamesRequest, GameSnapshot, GameView, SubmitAnswerRequest
from quizboard.lock import SessionBusyError
from quizboard.session import GameSession
from quizboard.store import SnapshotStore
from quizboard.websocket_hub import hub

router = APIRouter()


async def _run_action(session: GameSession, action: ActionName, payload: dict[str, Any] | None = None) -> CommandResponse:
    try:
        result = dispatch_action(session=session, action=action, payload=payload)
    except SessionBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    if result.applied:
        await hub.broadcast({"type": "game_updated", "mode": result.mode.value})
    return CommandResponse(applied=result.applied, game=session.view())


@router.websocket("/ws/game")
async def game_updates_ws(websocket: WebSocket) -> None:
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/game", response_model=GameView)
async def get_game_route(session: GameSession = Depends(get_game_session)) -> GameView:
    return session.view()


@router.post("/game/names", response_model=CommandResponse)
async def confirm_names_route(payload: ConfirmNamesRequest, session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "names", payload.model_dump())


@router.post("/game/questions/{category_index}/{question_index}/open", response_model=CommandResponse)
async def open_question_route(
    category_index: int,
    question_index: int,
    session: GameSession = Depends(get_game_session),
) -> CommandResponse:
    return await _run_action(session, "open", {"category_index": category_index, "question_index": question_index})


@router.post("/game/answer", response_model=CommandResponse)
async def submit_answer_route(payload: SubmitAnswerRequest, session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "answer", payload.model_dump())


@router.post("/game/close", response_model=CommandResponse)
async def close_question_route(session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "close")


@router.post("/game/winner", response_model=CommandResponse)
async def reveal_winner_route(session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "winner")


@router.post("/game/restart/request", response_model=CommandResponse)
async def request_restart_route(session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "restart_request")


@router.post("/game/restart/cancel", response_model=CommandResponse)
async def cancel_restart_route(session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "restart_cancel")


@router.post("/game/restart/confirm", response_model=CommandResponse)
async def confirm_restart_route(session: GameSession = Depends(get_game_session)) -> CommandResponse:
    return await _run_action(session, "restart_confirm")


@router.post("/game/actions/{action}", response_model=CommandResponse)
async def generic_action_route(
    action: str,
    body: dict[str, Any],
    session: GameSession = Depends(get_game_session),
) -> CommandResponse:
    if action not in ACTION_NAMES:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Unknown action: {action}")
    act: ActionName = action  # type: ignore[assignment]
    return await _run_action(session, act, body)


@router.get("/snapshot", response_model=GameSnapshot)
async def get_snapshot_route(r: redis.Redis = Depends(get_redis)) -> GameSnapshot:
    """Debug endpoint: read the persisted snapshot straight from the store.

    Useful for checking write-through without redis-cli.
    """

    snap = SnapshotStore(r).load()
    if snap is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No saved game")
    return snap
