from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from quizboard.api.models import GameMode

if TYPE_CHECKING:
    from quizboard.session import GameSession


class CommandRejected(ValueError):
    """A command's precondition does not hold; the session turns this into a no-op."""


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    command: str
    args: dict[str, Any] = field(default_factory=dict)


class CommandValidator(ABC):
    """A small, composable precondition check for an incoming command."""

    @abstractmethod
    def validate(self, *, ctx: CommandContext, session: GameSession) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ModeValidator(CommandValidator):
    allowed_modes: frozenset[GameMode]

    def validate(self, *, ctx: CommandContext, session: GameSession) -> None:
        if session.mode not in self.allowed_modes:
            allowed = ",".join(sorted(m.value for m in self.allowed_modes))
            raise CommandRejected(f"Command '{ctx.command}' not allowed in mode '{session.mode.value}' (allowed: {allowed})")


@dataclass(frozen=True, slots=True)
class PlayableQuestionValidator(CommandValidator):
    """The targeted cell must exist and hold a question nobody has attempted yet."""

    def validate(self, *, ctx: CommandContext, session: GameSession) -> None:
        ci = ctx.args.get("category_index")
        qi = ctx.args.get("question_index")
        if not all(isinstance(i, int) and not isinstance(i, bool) for i in (ci, qi)):
            raise CommandRejected("category_index and question_index are required")

        question = session.question_at(ci, qi)
        if question is None:
            raise CommandRejected(f"No question at ({ci}, {qi})")
        if not question.playable:
            raise CommandRejected(f"Question at ({ci}, {qi}) is not playable")


@dataclass(frozen=True, slots=True)
class AnswerDomainValidator(CommandValidator):
    """The submitted value must be one of the open question's options, or a rating on its scale."""

    def validate(self, *, ctx: CommandContext, session: GameSession) -> None:
        question = session.current_question()
        if question is None:
            raise CommandRejected("No question is open")

        value = ctx.args.get("value")
        if not isinstance(value, int) or isinstance(value, bool) or not question.payload.accepts(value):
            raise CommandRejected(f"Answer {value!r} is outside the question's answer domain")


@dataclass(frozen=True, slots=True)
class BoardCompleteValidator(CommandValidator):
    def validate(self, *, ctx: CommandContext, session: GameSession) -> None:
        if not session.all_answered:
            raise CommandRejected("Not every question has been answered yet")


@dataclass(frozen=True, slots=True)
class CommandPipeline:
    validators: tuple[CommandValidator, ...]

    def validate(self, *, ctx: CommandContext, session: GameSession) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, session=session)


DEFAULT_COMMAND_PIPELINES: dict[str, CommandPipeline] = {
    "confirm_names": CommandPipeline(validators=(ModeValidator(frozenset({GameMode.name_setup})),)),
    "open_question": CommandPipeline(
        validators=(
            ModeValidator(frozenset({GameMode.overview})),
            PlayableQuestionValidator(),
        )
    ),
    "submit_answer": CommandPipeline(
        validators=(
            ModeValidator(frozenset({GameMode.question_pending})),
            AnswerDomainValidator(),
        )
    ),
    "close_question": CommandPipeline(validators=(ModeValidator(frozenset({GameMode.question_evaluated})),)),
    "reveal_winner": CommandPipeline(
        validators=(
            ModeValidator(frozenset({GameMode.question_evaluated, GameMode.overview})),
            BoardCompleteValidator(),
        )
    ),
    "request_restart": CommandPipeline(validators=(ModeValidator(frozenset({GameMode.overview})),)),
    "cancel_restart": CommandPipeline(validators=(ModeValidator(frozenset({GameMode.restart_confirm})),)),
    "confirm_restart": CommandPipeline(
        validators=(ModeValidator(frozenset({GameMode.restart_confirm, GameMode.win_announced})),)
    ),
}


def pipeline_for_command(command: str) -> CommandPipeline:
    pipe = DEFAULT_COMMAND_PIPELINES.get(command)
    if pipe is None:
        raise ValueError(f"Unknown command: {command}")
    return pipe
