"""Dictation session: recognition lifecycle and user actions on one pad.

WHY: The accumulator and note store are pure state holders. Something
has to react to the recognition source starting, delivering results,
stopping, or failing, and to the user's buttons (save, delete, send to
pad, clear), in the same way every surface (HTTP API, CLI) expects.

HOW: DictationSession owns one TranscriptAccumulator and one NoteStore.
The engine's start/result/end/error events become plain method calls
driven by whoever runs the event loop. A RecognitionState enum and a
status message mirror what the pad shows next to the text box.

RULES:
- start() seeds the pad from the displayed text, so manual edits survive
- Batches are applied only while listening; others are dropped
- stop() runs the accumulator's final normalization pass
- fail() never touches the transcript, it only records the message
- Lifecycle calls in the wrong state are no-ops returning False
- Not thread-safe: callers serialize access (the server holds a lock)
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, List, Optional

from dictation_pad.config import DICTATION_LANGUAGE
from dictation_pad.core.accumulator import TranscriptAccumulator
from dictation_pad.core.models import Fragment, Note, PreviewResult
from dictation_pad.core.notes import EmptyTextError, NoteStore, format_note_count

logger = logging.getLogger(__name__)

MSG_NOTHING_TO_SAVE = "Nothing to save. Speak or type something first."
MSG_NOTE_SAVED = "Note saved ✔"
MSG_UNAVAILABLE = "Speech recognition is not available on this device."


class RecognitionState(str, enum.Enum):
    """Where the recognition source is in its lifecycle.

    HOW: Inherits from str so values serialize cleanly to JSON.

    RULES:
    - idle: not recording; start() is allowed
    - listening: recording; result batches are applied
    - unavailable: no recognition engine; start() is refused
    """

    IDLE = "idle"
    LISTENING = "listening"
    UNAVAILABLE = "unavailable"


class DictationSession:
    """One pad: transcript, notes, recognition state, and status message."""

    def __init__(
        self,
        initial_text: str = "",
        language: str = DICTATION_LANGUAGE,
        notes: Optional[NoteStore] = None,
    ) -> None:
        self.accumulator = TranscriptAccumulator(initial_text)
        self.notes = notes if notes is not None else NoteStore()
        self.language = language
        self.state = RecognitionState.IDLE
        self.message = ""

    # ------------------------------------------------------------------
    # Recognition lifecycle
    # ------------------------------------------------------------------

    @property
    def is_listening(self) -> bool:
        return self.state is RecognitionState.LISTENING

    def start(self, displayed_text: Optional[str] = None) -> bool:
        """Begin recording, keeping whatever the pad currently shows.

        Args:
            displayed_text: The pad contents as the user sees them (they
                may have typed into it). Defaults to the last display text.

        Returns:
            True if recording started, False if already listening or the
            engine is unavailable.
        """
        if self.state is not RecognitionState.IDLE:
            logger.info("start() ignored in state %s", self.state.value)
            return False

        if displayed_text is None:
            displayed_text = self.accumulator.display_text
        self.accumulator.seed(displayed_text)
        self.state = RecognitionState.LISTENING
        self.message = ""
        logger.info("Recognition started (%s)", self.language)
        return True

    def handle_batch(self, fragments: Iterable[Fragment]) -> PreviewResult:
        """Apply one result batch from the recognition source."""
        if not self.is_listening:
            batch = list(fragments)
            logger.warning(
                "Dropped batch of %d fragment(s) while %s",
                len(batch),
                self.state.value,
            )
            return PreviewResult(
                display_text=self.accumulator.display_text,
                authoritative_text=self.accumulator.authoritative_text,
            )
        return self.accumulator.apply_batch(fragments)

    def stop(self) -> bool:
        """End recording after a final normalization pass."""
        if not self.is_listening:
            return False
        self.accumulator.finalize()
        self.state = RecognitionState.IDLE
        logger.info("Recognition stopped")
        return True

    def fail(self, error: Optional[str] = None) -> None:
        """Record an engine-level error and stop expecting results."""
        detail = (error or "").strip() or "unknown"
        self.message = "Error: {}".format(detail)
        if self.state is RecognitionState.LISTENING:
            self.state = RecognitionState.IDLE
        logger.warning("Recognition error: %s", detail)

    def mark_unavailable(self) -> None:
        """The recognition engine is missing; refuse to start from now on."""
        self.state = RecognitionState.UNAVAILABLE
        self.message = MSG_UNAVAILABLE

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self.accumulator.reset()
        self.message = ""

    def save_note(self, text: Optional[str] = None) -> Note:
        """Save the pad as a note.

        Args:
            text: The pad contents as shown to the user. Defaults to the
                authoritative transcript.

        Raises:
            EmptyTextError: If there is nothing to save. The session
                message is set before the error propagates.
        """
        if text is None:
            text = self.accumulator.authoritative_text
        try:
            note = self.notes.save(text)
        except EmptyTextError:
            self.message = MSG_NOTHING_TO_SAVE
            raise
        self.message = MSG_NOTE_SAVED
        return note

    def delete_note(self, index: int) -> Note:
        return self.notes.delete(index)

    def send_note_to_pad(self, index: int) -> Note:
        """Replace the pad with a saved note's text."""
        note = self.notes.get(index)
        self.accumulator.seed(note.text)
        return note

    def list_notes(self) -> List[Note]:
        return self.notes.list()

    @property
    def note_count_label(self) -> str:
        return format_note_count(self.notes.count())

    def __repr__(self) -> str:
        return "DictationSession({}, {})".format(self.state.value, self.note_count_label)
