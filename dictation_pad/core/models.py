"""Value types for fragments, previews, and notes, plus batch parsing.

WHY: The recognition source, the accumulator, the note store, and the
HTTP/CLI surfaces all pass the same few shapes around. Typed, frozen
dataclasses make those shapes explicit and keep snapshots immutable.

HOW: Three dataclasses:
  Fragment      — one unit of recognized speech with a finality flag
  PreviewResult — what a batch produced: display text + authoritative text
  Note          — an immutable saved snapshot with its creation time
Raw JSON batches (CLI input, HTTP bodies) are checked with jsonschema
against schemas/fragment_batch.json and converted with
fragments_from_dicts().

RULES:
- All three types are frozen; nothing downstream mutates them
- Fragment.index is informational; order of arrival is what counts
- Note.created_at is formatted once at creation and never recomputed
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import jsonschema

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "fragment_batch.json"


@dataclass(frozen=True)
class Fragment:
    """One unit of recognized speech for a position in the result stream.

    RULES:
    - text: raw recognized words, untrimmed (interim text is used as-is)
    - is_final: True once the engine promises not to revise it
    - index: the engine's result position; never used for re-ordering
    """

    text: str
    is_final: bool
    index: int = 0


@dataclass(frozen=True)
class PreviewResult:
    """Outcome of applying one fragment batch.

    RULES:
    - display_text: authoritative text plus any interim tail, normalized
    - authoritative_text: the committed transcript after the batch
    - interim_text: the raw interim tail shown in the preview ("" if none)
    """

    display_text: str
    authoritative_text: str
    interim_text: str = ""

    @property
    def has_interim(self) -> bool:
        return bool(self.interim_text.strip())


@dataclass(frozen=True)
class Note:
    """An immutable snapshot of the pad text.

    RULES:
    - text: trimmed, never empty
    - created_at: display string, e.g. "14:05"
    - saved_at: the raw timestamp the display string was made from
    """

    text: str
    created_at: str
    saved_at: datetime


def _load_schema() -> dict[str, Any]:
    """Load the fragment batch JSON schema from disk.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def validate_batch(batch: Any) -> None:
    """Check a decoded JSON batch against the fragment batch schema.

    Raises:
        jsonschema.ValidationError: If the batch is not a list of
            ``{"text": str, "is_final": bool, "index": int}`` objects.
    """
    jsonschema.validate(instance=batch, schema=_get_schema())


def fragments_from_dicts(items: list[dict[str, Any]]) -> list[Fragment]:
    """Convert JSON-shaped fragment dicts into Fragment objects.

    WHY: The CLI reads batches as JSON Lines and the HTTP layer receives
    them as request bodies. Both end up as plain dicts that the
    accumulator should not have to know about.

    HOW: One Fragment per dict, in the same order. A missing index
    defaults to the dict's position in the batch.

    RULES:
    - Order is preserved exactly; nothing is sorted or de-duplicated
    - Callers validate shape first (validate_batch or pydantic)
    """
    return [
        Fragment(
            text=item["text"],
            is_final=bool(item["is_final"]),
            index=int(item.get("index", position)),
        )
        for position, item in enumerate(items)
    ]
