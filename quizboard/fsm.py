from __future__ import annotations

from dataclasses import dataclass

from statemachine import State, StateMachine

from quizboard.api.models import GameMode


@dataclass(frozen=True, slots=True)
class AppliedCommand:
    """Result of issuing a command to the session.

    - `applied`: False when the command was ignored for the current state.
    - `mode`: the mode the session is in afterwards.
    """

    applied: bool
    mode: GameMode


class GameFSM(StateMachine):
    """Mode guard for a GameSession.

    Only one modal surface is ever open: name setup, a question, the restart
    confirmation or the winner announcement. The board overview is the hub.
    The FSM knows nothing about questions or scores; the session checks those.
    """

    name_setup = State(GameMode.name_setup.value, value=GameMode.name_setup.value, initial=True)
    overview = State(GameMode.overview.value, value=GameMode.overview.value)
    question_pending = State(GameMode.question_pending.value, value=GameMode.question_pending.value)
    question_evaluated = State(GameMode.question_evaluated.value, value=GameMode.question_evaluated.value)
    restart_confirm = State(GameMode.restart_confirm.value, value=GameMode.restart_confirm.value)
    win_announced = State(GameMode.win_announced.value, value=GameMode.win_announced.value)

    names_confirmed = name_setup.to(overview)
    question_opened = overview.to(question_pending)
    answer_submitted = question_pending.to(question_evaluated)
    question_closed = question_evaluated.to(overview)
    winner_revealed = question_evaluated.to(win_announced) | overview.to(win_announced)
    restart_requested = overview.to(restart_confirm)
    restart_cancelled = restart_confirm.to(overview)
    restart_confirmed = restart_confirm.to(name_setup) | win_announced.to(name_setup)

    def __init__(self, mode: GameMode = GameMode.name_setup):
        super().__init__(start_value=mode.value)

    @property
    def mode(self) -> GameMode:
        return GameMode(str(self.current_state.value))
