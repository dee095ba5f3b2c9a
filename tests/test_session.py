"""Unit tests for DictationSession.

WHY: The session is where engine events and button presses meet the
transcript. Getting the order wrong (seeding after the first batch,
applying batches after an error) breaks the pad in ways the core
tests can't see.

HOW: Each test drives a fresh session through a short sequence of
lifecycle calls and user actions and checks transcript, state, and the
status message.

RULES:
- Sessions use the fixed-clock NoteStore fixture
- Wrong-state lifecycle calls must return False and change nothing
"""

import pytest

from dictation_pad.config import DICTATION_LANGUAGE
from dictation_pad.core.models import Fragment
from dictation_pad.core.notes import EmptyTextError, NoteIndexError
from dictation_pad.session import (
    MSG_NOTE_SAVED,
    MSG_NOTHING_TO_SAVE,
    DictationSession,
    RecognitionState,
)


def _final(text):
    return Fragment(text=text, is_final=True)


def _interim(text):
    return Fragment(text=text, is_final=False)


class TestLifecycle:
    """start / handle_batch / stop / fail."""

    def test_new_session_is_idle(self, session):
        assert session.state is RecognitionState.IDLE
        assert session.message == ""

    def test_start_adopts_displayed_text(self, session):
        assert session.start("my own notes")
        session.handle_batch([_final("more")])
        assert session.accumulator.authoritative_text == "My own notes more"
        assert session.is_listening

    def test_start_without_text_keeps_last_display(self, session):
        session.start()
        session.handle_batch([_final("hello"), _interim("there")])
        session.stop()
        session.start()
        assert session.accumulator.authoritative_text == "Hello there"

    def test_start_twice_is_refused(self, session):
        session.start("a")
        assert session.start("b") is False
        assert session.accumulator.authoritative_text == "A"

    def test_start_clears_message(self, session):
        session.fail("network")
        session.start()
        assert session.message == ""

    def test_batch_while_idle_is_dropped(self, session):
        result = session.handle_batch([_final("ignored")])
        assert session.accumulator.authoritative_text == ""
        assert result.display_text == ""

    def test_stop_runs_final_pass(self, session):
        session.start()
        session.handle_batch([_final("hello period how")])
        assert session.stop()
        assert session.state is RecognitionState.IDLE
        assert session.accumulator.authoritative_text == "Hello. How"

    def test_stop_when_idle_is_refused(self, session):
        assert session.stop() is False

    def test_batches_after_stop_are_dropped(self, session):
        session.start()
        session.stop()
        session.handle_batch([_final("late")])
        assert session.accumulator.authoritative_text == ""

    def test_fail_leaves_transcript_untouched(self, session):
        session.start()
        session.handle_batch([_final("hello"), _interim("wor")])
        session.fail("network")
        assert session.message == "Error: network"
        assert session.state is RecognitionState.IDLE
        assert session.accumulator.authoritative_text == "Hello"

    def test_fail_without_detail(self, session):
        session.fail("  ")
        assert session.message == "Error: unknown"

    def test_unavailable_engine_refuses_start(self, session):
        session.mark_unavailable()
        assert session.start("text") is False
        assert session.state is RecognitionState.UNAVAILABLE
        assert session.message


class TestUserActions:
    """clear / save / delete / send to pad."""

    def test_clear(self, session):
        session.start("something")
        session.fail("x")
        session.clear()
        assert session.accumulator.display_text == ""
        assert session.message == ""

    def test_save_empty_sets_message_and_raises(self, session):
        with pytest.raises(EmptyTextError):
            session.save_note()
        assert session.message == MSG_NOTHING_TO_SAVE
        assert session.notes.count() == 0

    def test_save_defaults_to_authoritative_text(self, session):
        session.start()
        session.handle_batch([_final("hello"), _interim("there")])
        note = session.save_note()
        assert note.text == "Hello"
        assert session.message == MSG_NOTE_SAVED

    def test_save_explicit_pad_text(self, session):
        note = session.save_note("  typed by hand ")
        assert note.text == "typed by hand"

    def test_send_note_to_pad_then_dictate(self, session):
        session.save_note("Restored text.")
        session.clear()
        session.send_note_to_pad(0)
        session.start()
        session.handle_batch([_final("great")])
        assert session.accumulator.authoritative_text == "Restored text. Great"
        assert session.notes.get(0).text == "Restored text."

    def test_send_stale_note_index(self, session):
        with pytest.raises(NoteIndexError):
            session.send_note_to_pad(0)

    def test_delete_note(self, session):
        session.save_note("A")
        session.save_note("B")
        session.delete_note(0)
        assert [n.text for n in session.list_notes()] == ["A"]

    def test_note_count_label(self, session):
        assert session.note_count_label == "0 notes"
        session.save_note("A")
        assert session.note_count_label == "1 note"

    def test_language_defaults_from_config(self):
        assert DictationSession().language == DICTATION_LANGUAGE
