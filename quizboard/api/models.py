from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator


BOARD_CATEGORY_COUNT = 5
POINT_VALUES = (1, 2, 3, 4, 5)
SCALE_MIN = 1
SCALE_MAX = 10

DEFAULT_PLAYER1_NAME = "Player 1"
DEFAULT_PLAYER2_NAME = "Player 2"


class PlayerSlot(StrEnum):
    player1 = "player1"
    player2 = "player2"

    @property
    def other(self) -> "PlayerSlot":
        return PlayerSlot.player2 if self is PlayerSlot.player1 else PlayerSlot.player1


class GameMode(StrEnum):
    name_setup = "name_setup"
    overview = "overview"
    question_pending = "question_pending"
    question_evaluated = "question_evaluated"
    restart_confirm = "restart_confirm"
    win_announced = "win_announced"


class WinResult(StrEnum):
    player1 = "player1"
    player2 = "player2"
    tie = "tie"


class MediaKind(StrEnum):
    image = "image"
    video = "video"


class Media(BaseModel):
    kind: MediaKind
    locator: str


class ChoicePayload(BaseModel):
    kind: Literal["choice"] = "choice"
    options: list[str] = Field(..., min_length=1)
    correct_index: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _index_within_options(self) -> "ChoicePayload":
        if self.correct_index >= len(self.options):
            raise ValueError("correct_index must point at one of the options")
        return self

    def accepts(self, value: int) -> bool:
        return 0 <= value < len(self.options)

    def is_correct(self, value: int) -> bool:
        return value == self.correct_index


class ScalePayload(BaseModel):
    kind: Literal["scale"] = "scale"
    media: Media
    correct_value: int = Field(..., ge=SCALE_MIN, le=SCALE_MAX)
    label: str = f"Rate it from {SCALE_MIN} to {SCALE_MAX}"

    def accepts(self, value: int) -> bool:
        return SCALE_MIN <= value <= SCALE_MAX

    def is_correct(self, value: int) -> bool:
        # Exact match only; there is no "close enough" tolerance.
        return value == self.correct_value


class DisabledPayload(BaseModel):
    kind: Literal["disabled"] = "disabled"
    options: list[str] = Field(default_factory=lambda: ["-", "-", "-", "-"])
    correct_index: int = -1

    def accepts(self, value: int) -> bool:
        return False

    def is_correct(self, value: int) -> bool:
        return False


QuestionPayload = Annotated[ChoicePayload | ScalePayload | DisabledPayload, Field(discriminator="kind")]


class QuestionSpec(BaseModel):
    prompt: str
    point_value: int = Field(..., ge=min(POINT_VALUES), le=max(POINT_VALUES))
    answered: bool = False
    payload: QuestionPayload

    @model_validator(mode="after")
    def _placeholders_start_answered(self) -> "QuestionSpec":
        if isinstance(self.payload, DisabledPayload):
            self.answered = True
        return self

    @property
    def playable(self) -> bool:
        return not self.answered and not isinstance(self.payload, DisabledPayload)


class Category(BaseModel):
    name: str
    questions: list[QuestionSpec] = Field(default_factory=list)

    def question_for(self, point_value: int) -> QuestionSpec | None:
        return next((q for q in self.questions if q.point_value == point_value), None)


class Scores(BaseModel):
    player1: int = Field(0, ge=0)
    player2: int = Field(0, ge=0)

    def get(self, slot: PlayerSlot) -> int:
        return self.player1 if slot is PlayerSlot.player1 else self.player2

    def award(self, slot: PlayerSlot, points: int) -> None:
        if points <= 0:
            return
        if slot is PlayerSlot.player1:
            self.player1 += points
        else:
            self.player2 += points


class PlayerNames(BaseModel):
    player1: str = DEFAULT_PLAYER1_NAME
    player2: str = DEFAULT_PLAYER2_NAME


class GameSnapshot(BaseModel):
    """Durable projection of a game.

    The open question and the current modal are deliberately absent: a restored game
    always lands on the overview.
    """

    categories: list[Category]
    scores: Scores = Field(default_factory=Scores)
    active_player: PlayerSlot = PlayerSlot.player1
    player_names: PlayerNames = Field(default_factory=PlayerNames)

    @model_validator(mode="after")
    def _board_shape(self) -> "GameSnapshot":
        if len(self.categories) != BOARD_CATEGORY_COUNT:
            raise ValueError(f"a board has exactly {BOARD_CATEGORY_COUNT} categories")
        for c in self.categories:
            values = [q.point_value for q in c.questions]
            if values != sorted(set(values)):
                raise ValueError(f"category {c.name!r} needs unique point values in ascending order")
        return self


class ActiveQuestion(BaseModel):
    category_index: int
    question_index: int
    selection: int | None = None
    evaluated: bool = False
    correct: bool | None = None


class GameView(BaseModel):
    """Everything a presentation layer needs to render one frame."""

    mode: GameMode
    categories: list[Category]
    scores: Scores
    active_player: PlayerSlot
    player_names: PlayerNames
    active_question: ActiveQuestion | None = None
    all_answered: bool
    winner: PlayerSlot | None = None
    result: WinResult | None = None


class ConfirmNamesRequest(BaseModel):
    player1: str = Field("", max_length=200)
    player2: str = Field("", max_length=200)


class SubmitAnswerRequest(BaseModel):
    value: int


class CommandResponse(BaseModel):
    applied: bool
    game: GameView
