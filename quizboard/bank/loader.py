from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quizboard.api.models import (
    BOARD_CATEGORY_COUNT,
    POINT_VALUES,
    Category,
    ChoicePayload,
    DisabledPayload,
    Media,
    QuestionSpec,
    ScalePayload,
)


logger = logging.getLogger(__name__)

PLACEHOLDER_PROMPT = "Special question (coming soon)"
SCALE_PROMPT = "How would you rate this?"


class QuestionBankLoadError(RuntimeError):
    pass


def _as_int(value: Any, default: int = 0) -> int:
    # bool is an int subclass; a JSON `true` is not a point value.
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _prompt_of(record: dict[str, Any]) -> str | None:
    for field in ("question", "prompt"):
        text = record.get(field)
        if isinstance(text, str) and text.strip():
            return text.strip()
    return None


def _placeholder(record: dict[str, Any], point_value: int) -> QuestionSpec:
    return QuestionSpec(
        prompt=_prompt_of(record) or PLACEHOLDER_PROMPT,
        point_value=point_value,
        answered=True,
        payload=DisabledPayload(),
    )


def classify_question(record: Any) -> QuestionSpec | None:
    """Turn one raw question record into a QuestionSpec.

    Priority: an options list makes a choice question, a media reference makes a scale
    question, anything else becomes a disabled placeholder. A record whose declared
    payload does not validate also degrades to a placeholder.

    Returns None when the record has no usable grid slot (point value outside 1..5).
    """

    if not isinstance(record, dict):
        record = {}

    point_value = _as_int(record.get("pointValue"))
    if point_value not in POINT_VALUES:
        return None

    answers = record.get("answers")
    media = record.get("media")

    try:
        if isinstance(answers, list) and answers:
            return QuestionSpec(
                prompt=_prompt_of(record) or "",
                point_value=point_value,
                payload=ChoicePayload(
                    options=answers,
                    correct_index=_as_int(record.get("correctAnswer"), default=-1),
                ),
            )
        if isinstance(media, dict):
            return QuestionSpec(
                prompt=_prompt_of(record) or SCALE_PROMPT,
                point_value=point_value,
                payload=ScalePayload(
                    media=Media(kind=media.get("type"), locator=media.get("path") or ""),
                    correct_value=_as_int(record.get("correctAnswer"), default=-1),
                ),
            )
    except ValidationError as e:
        logger.warning("malformed question record at point value %s, using placeholder: %s", point_value, e.errors())

    return _placeholder(record, point_value)


def normalize_category(raw: Any, *, position: int) -> Category:
    if not isinstance(raw, dict):
        raw = {}

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        name = f"Category {position}"

    records = raw.get("questions")
    if not isinstance(records, list):
        records = []

    by_value: dict[int, QuestionSpec] = {}
    for record in records:
        q = classify_question(record)
        if q is None:
            logger.debug("category %r: dropping question without a grid slot", name)
            continue
        if q.point_value in by_value:
            logger.debug("category %r: duplicate point value %s, keeping the first", name, q.point_value)
            continue
        by_value[q.point_value] = q

    return Category(name=name, questions=[by_value[v] for v in sorted(by_value)])


def normalize_categories(raw: Any) -> list[Category]:
    """Build the board columns from a raw dataset.

    Only the first five entries are used; a shorter dataset is padded with empty
    columns. Pure: every call returns new objects for the same input.
    """

    entries = list(raw) if isinstance(raw, list) else []
    entries = entries[:BOARD_CATEGORY_COUNT]
    entries.extend({} for _ in range(BOARD_CATEGORY_COUNT - len(entries)))
    return [normalize_category(entry, position=i) for i, entry in enumerate(entries, start=1)]


@dataclass(frozen=True, slots=True)
class QuestionBank:
    """Raw dataset plus the normalization that turns it into a fresh board.

    The raw entries are kept as a JSON string so that nobody can mutate them between
    restarts.
    """

    raw_json: str
    source: str

    @staticmethod
    def from_raw(raw: Any, *, source: str = "<memory>") -> "QuestionBank":
        return QuestionBank(raw_json=json.dumps(raw), source=source)

    @property
    def raw(self) -> Any:
        return json.loads(self.raw_json)

    def build_board(self) -> list[Category]:
        return normalize_categories(self.raw)


def _read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise QuestionBankLoadError(f"Question bank not found: {path}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise QuestionBankLoadError(f"Question bank is not valid JSON: {path}") from e


def load_question_bank_file(path: Path) -> QuestionBank:
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise QuestionBankLoadError(f"Question bank must be a JSON list of categories: {path}")
    return QuestionBank.from_raw(raw, source=str(path))


def _fallback_question_bank() -> QuestionBank:
    """Small built-in dataset for tests/CI and for running without assets."""

    categories = []
    for c in range(1, BOARD_CATEGORY_COUNT + 1):
        questions: list[dict[str, Any]] = []
        for pv in POINT_VALUES:
            questions.append(
                {
                    "question": f"Sample question {c}.{pv}",
                    "answers": ["A", "B", "C", "D"],
                    "correctAnswer": (c + pv) % 4,
                    "pointValue": pv,
                }
            )
        categories.append({"name": f"Sample {c}", "questions": questions})

    # The last column shows off the other question shapes.
    categories[-1]["questions"][3] = {
        "media": {"type": "image", "path": "media/sample.jpg"},
        "correctAnswer": 7,
        "pointValue": 4,
    }
    categories[-1]["questions"][4] = {"prompt": "Bonus round", "pointValue": 5}

    return QuestionBank.from_raw(categories, source="<fallback>")


def load_question_bank(*, root: Path) -> QuestionBank:
    env_path = os.getenv("QUIZBOARD_BANK_PATH", "").strip()
    path = Path(env_path) if env_path else root / "assets" / "questions.json"

    # Default behavior: fall back to the built-in dataset when the file is missing.
    # Force strict behavior by setting QUIZBOARD_STRICT_BANK=1.
    strict = os.getenv("QUIZBOARD_STRICT_BANK", "").strip().lower() in {"1", "true", "yes"}

    try:
        return load_question_bank_file(path)
    except QuestionBankLoadError:
        if strict:
            raise
        logger.warning("question bank unavailable at %s, using the built-in dataset", path)
        return _fallback_question_bank()
