"""In-memory collection of saved transcript snapshots.

WHY: Users dictate several things in a session and want to keep each
one before clearing the pad. Notes are plain immutable copies, so
later dictation can never change a note that was already saved.

HOW: NoteStore keeps a list with the most recent note at index 0.
save() trims and validates, then inserts at the head; delete() and
get() work by position in the current order.

RULES:
- Notes are never updated; "editing" is send-to-pad + a fresh save
- save() of empty/blank text raises EmptyTextError, nothing changes
- delete()/get() outside 0 <= index < count raise NoteIndexError,
  nothing changes (negative indexes are not wrapped)
- No upper bound on the number of notes
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List

from dictation_pad.config import NOTE_TIME_FORMAT
from dictation_pad.core.models import Note

logger = logging.getLogger(__name__)


class EmptyTextError(ValueError):
    """Raised when saving a note with no text after trimming."""


class NoteIndexError(IndexError):
    """Raised when a note position is stale or out of range."""


def format_note_count(count: int) -> str:
    """Label for the notes header: "1 note", "0 notes", "3 notes"."""
    return "1 note" if count == 1 else "{} notes".format(count)


class NoteStore:
    """Ordered notes, most recently saved first.

    Args:
        clock: Returns the current time; injectable for tests.
        time_format: strftime pattern for Note.created_at.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        time_format: str = NOTE_TIME_FORMAT,
    ) -> None:
        self._notes: List[Note] = []
        self._clock = clock
        self._time_format = time_format

    def save(self, text: str) -> Note:
        """Snapshot ``text`` as a new note at the head of the collection.

        Raises:
            EmptyTextError: If ``text`` is empty or whitespace only.
        """
        trimmed = text.strip()
        if not trimmed:
            raise EmptyTextError("Nothing to save: text is empty")

        now = self._clock()
        note = Note(
            text=trimmed,
            created_at=now.strftime(self._time_format),
            saved_at=now,
        )
        self._notes.insert(0, note)
        logger.debug("Saved note (%d chars), %d total", len(trimmed), len(self._notes))
        return note

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._notes):
            raise NoteIndexError(
                "Note index {} out of range (have {})".format(index, len(self._notes))
            )

    def get(self, index: int) -> Note:
        """Return the note at ``index`` (0 = most recent)."""
        self._check_index(index)
        return self._notes[index]

    def delete(self, index: int) -> Note:
        """Remove and return the note at ``index``.

        Raises:
            NoteIndexError: If ``index`` is out of range.
        """
        self._check_index(index)
        note = self._notes.pop(index)
        logger.debug("Deleted note %d, %d left", index, len(self._notes))
        return note

    def list(self) -> List[Note]:
        """All notes, most recent first (a copy)."""
        return list(self._notes)

    def count(self) -> int:
        return len(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __repr__(self) -> str:
        return "NoteStore({})".format(format_note_count(len(self._notes)))
