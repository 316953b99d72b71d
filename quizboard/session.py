from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import redis
from statemachine.exceptions import TransitionNotAllowed

from quizboard.api.models import (
    DEFAULT_PLAYER1_NAME,
    DEFAULT_PLAYER2_NAME,
    ActiveQuestion,
    Category,
    GameMode,
    GameSnapshot,
    GameView,
    PlayerNames,
    PlayerSlot,
    QuestionSpec,
    Scores,
    WinResult,
)
from quizboard.bank.loader import QuestionBank
from quizboard.commands.validators import CommandContext, CommandRejected, pipeline_for_command
from quizboard.fsm import AppliedCommand, GameFSM
from quizboard.store import SnapshotStore


logger = logging.getLogger(__name__)


class GameSession:
    """One two-player game: the board, the scores, whose turn it is, and which modal is open.

    All mutation goes through the command methods. A command that is not valid for the
    current state is ignored and reported with `applied=False`; commands never raise.
    Every applied command that changes the board, scores, active player or names is
    written through to the snapshot store before the method returns. A failed write is
    logged and the in-memory game carries on; the next successful write catches the store up.
    """

    def __init__(self, *, bank: QuestionBank, store: SnapshotStore, snapshot: GameSnapshot | None = None) -> None:
        self.bank = bank
        self.store = store

        if snapshot is not None:
            self._categories = snapshot.categories
            self._scores = snapshot.scores
            self._active_player = snapshot.active_player
            self._player_names = snapshot.player_names
            self.fsm = GameFSM(GameMode.overview)
        else:
            self._reset_game()
            self.fsm = GameFSM(GameMode.name_setup)

        self._active_question: ActiveQuestion | None = None
        self._result: WinResult | None = None

    @classmethod
    def start(cls, *, bank: QuestionBank, store: SnapshotStore) -> "GameSession":
        """Resume the persisted game, or set up a fresh one when there is nothing usable to resume."""

        snapshot = store.load()
        if snapshot is not None:
            logger.info("restored game snapshot from %s", store.key)
        return cls(bank=bank, store=store, snapshot=snapshot)

    # --- read accessors -------------------------------------------------

    @property
    def mode(self) -> GameMode:
        return self.fsm.mode

    @property
    def categories(self) -> list[Category]:
        return self._categories

    @property
    def scores(self) -> Scores:
        return self._scores

    @property
    def active_player(self) -> PlayerSlot:
        return self._active_player

    @property
    def player_names(self) -> PlayerNames:
        return self._player_names

    @property
    def active_question(self) -> ActiveQuestion | None:
        return self._active_question

    @property
    def result(self) -> WinResult | None:
        return self._result

    @property
    def all_answered(self) -> bool:
        return all(q.answered for c in self._categories for q in c.questions)

    @property
    def winner(self) -> PlayerSlot | None:
        if not self.all_answered or self._scores.player1 == self._scores.player2:
            return None
        return PlayerSlot.player1 if self._scores.player1 > self._scores.player2 else PlayerSlot.player2

    def question_at(self, category_index: int, question_index: int) -> QuestionSpec | None:
        if not 0 <= category_index < len(self._categories):
            return None
        questions = self._categories[category_index].questions
        if not 0 <= question_index < len(questions):
            return None
        return questions[question_index]

    def current_question(self) -> QuestionSpec | None:
        if self._active_question is None:
            return None
        return self.question_at(self._active_question.category_index, self._active_question.question_index)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            categories=[c.model_copy(deep=True) for c in self._categories],
            scores=self._scores.model_copy(),
            active_player=self._active_player,
            player_names=self._player_names.model_copy(),
        )

    def view(self) -> GameView:
        snap = self.snapshot()
        return GameView(
            mode=self.mode,
            categories=snap.categories,
            scores=snap.scores,
            active_player=snap.active_player,
            player_names=snap.player_names,
            active_question=self._active_question.model_copy() if self._active_question else None,
            all_answered=self.all_answered,
            winner=self.winner,
            result=self._result,
        )

    # --- commands -------------------------------------------------------

    def confirm_names(self, name1: str, name2: str) -> AppliedCommand:
        def apply() -> None:
            self._player_names = PlayerNames(
                player1=(name1 or "").strip() or DEFAULT_PLAYER1_NAME,
                player2=(name2 or "").strip() or DEFAULT_PLAYER2_NAME,
            )

        return self._run("confirm_names", "names_confirmed", apply, persist=True)

    def open_question(self, category_index: int, question_index: int) -> AppliedCommand:
        def apply() -> None:
            self._active_question = ActiveQuestion(category_index=category_index, question_index=question_index)

        args = {"category_index": category_index, "question_index": question_index}
        return self._run("open_question", "question_opened", apply, args=args)

    def submit_answer(self, value: int) -> AppliedCommand:
        def apply() -> None:
            active = self._active_question
            question = self.current_question()
            if active is None or question is None:
                return

            correct = question.payload.is_correct(value)
            active.selection = value
            active.correct = correct
            active.evaluated = True
            # Attempted exactly once, right or wrong.
            question.answered = True
            if correct:
                self._scores.award(self._active_player, question.point_value)

        return self._run("submit_answer", "answer_submitted", apply, args={"value": value}, persist=True)

    def close_question(self) -> AppliedCommand:
        def apply() -> None:
            # The turn passes every question, whatever the outcome.
            self._active_player = self._active_player.other
            self._active_question = None

        return self._run("close_question", "question_closed", apply, persist=True)

    def reveal_winner(self) -> AppliedCommand:
        def apply() -> None:
            winner = self.winner
            self._result = WinResult(winner.value) if winner is not None else WinResult.tie
            self._active_question = None

        return self._run("reveal_winner", "winner_revealed", apply)

    def request_restart(self) -> AppliedCommand:
        return self._run("request_restart", "restart_requested", lambda: None)

    def cancel_restart(self) -> AppliedCommand:
        return self._run("cancel_restart", "restart_cancelled", lambda: None)

    def confirm_restart(self) -> AppliedCommand:
        def apply() -> None:
            self._write_through(self.store.clear)
            self._reset_game()
            self._active_question = None
            self._result = None
            logger.info("game restarted from a fresh board (%s)", self.bank.source)

        return self._run("confirm_restart", "restart_confirmed", apply)

    # --- internals ------------------------------------------------------

    def _reset_game(self) -> None:
        self._categories = self.bank.build_board()
        self._scores = Scores()
        self._active_player = PlayerSlot.player1
        self._player_names = PlayerNames()

    def _write_through(self, write: Callable[[], None]) -> None:
        # Writes are fire-and-forget: a store outage is logged, the game keeps going in memory.
        try:
            write()
        except redis.RedisError:
            logger.exception("snapshot write to %s failed", self.store.key)

    def _run(
        self,
        command: str,
        event: str,
        apply: Callable[[], None],
        *,
        args: dict[str, Any] | None = None,
        persist: bool = False,
    ) -> AppliedCommand:
        ctx = CommandContext(command=command, args=args or {})
        try:
            pipeline_for_command(command).validate(ctx=ctx, session=self)
            self.fsm.send(event)
        except (CommandRejected, TransitionNotAllowed) as e:
            logger.debug("ignored %s: %s", command, e)
            return AppliedCommand(applied=False, mode=self.mode)

        apply()
        if persist:
            self._write_through(lambda: self.store.save(self.snapshot()))

        logger.info("applied %s -> %s", command, self.mode.value)
        return AppliedCommand(applied=True, mode=self.mode)
