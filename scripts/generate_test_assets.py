"""Generate an obfuscated question bank fixture under `tests/assets/`.

Contract
- Input: the real bank at `<repo>/assets/questions.json`.
- Output: `<repo>/tests/assets/questions.json`.
- Preserves:
  - category order and names (tests address columns by name)
  - every record's shape: which keys exist, point values, option counts,
    correct answers, media kinds
  - a few sentinel prompts referenced by tests
- Obfuscates:
  - prompts, option text and media paths

Usage:
    python scripts/generate_test_assets.py

This script is deterministic and does not import the game code, so a malformed
record stays malformed in the fixture.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


KEEP_PROMPTS = frozenset({"Rate the painting", "Geography 1?", "Music 1?", "No slot?"})


def _stable_token(prefix: str, i: int) -> str:
    return f"{prefix}-{i:04d}"


def _obfuscate_record(record: Any, *, idx: int) -> Any:
    if not isinstance(record, dict):
        return record

    out = dict(record)
    for field in ("question", "prompt"):
        text = out.get(field)
        if isinstance(text, str) and text not in KEEP_PROMPTS:
            out[field] = _stable_token("Question", idx)

    answers = out.get("answers")
    if isinstance(answers, list):
        out["answers"] = [
            _stable_token("Answer", n) if isinstance(a, str) else a for n, a in enumerate(answers, start=1)
        ]

    media = out.get("media")
    if isinstance(media, dict) and isinstance(media.get("path"), str):
        suffix = Path(media["path"]).suffix
        out["media"] = {**media, "path": f"media/{_stable_token('media', idx)}{suffix}"}

    return out


def obfuscate_bank(raw: list[Any]) -> list[Any]:
    out: list[Any] = []
    counter = 0
    for category in raw:
        if not isinstance(category, dict):
            out.append(category)
            continue

        records = category.get("questions")
        if isinstance(records, list):
            new_records = []
            for record in records:
                counter += 1
                new_records.append(_obfuscate_record(record, idx=counter))
            category = {**category, "questions": new_records}
        out.append(category)
    return out


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src = repo_root / "assets" / "questions.json"
    dst = repo_root / "tests" / "assets" / "questions.json"

    if not src.exists():
        raise FileNotFoundError(f"Missing source bank: {src}")

    raw = json.loads(src.read_text(encoding="utf-8-sig"))
    if not isinstance(raw, list):
        raise ValueError(f"Unexpected root in {src}: expected a list of categories")

    dst.parent.mkdir(parents=True, exist_ok=True)
    dst.write_text(json.dumps(obfuscate_bank(raw), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


if __name__ == "__main__":
    main()
