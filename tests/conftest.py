"""Shared test fixtures for the dictation_pad test suite.

WHY: Most test modules need the same small building blocks: fragments,
a fresh accumulator, a note store with a controllable clock, and a
recorded batch stream that exercises finals, interims, and spoken
punctuation together.

HOW: Pytest fixtures build fresh objects for every test. The fixed clock
returns a known datetime so note timestamps are deterministic.

RULES:
- Every fixture returns a new object; no state is shared between tests
- RECORDED_BATCHES mirrors what a browser engine emits for one utterance
"""

from datetime import datetime
from typing import Any, Dict, List

import pytest

from dictation_pad.core.accumulator import TranscriptAccumulator
from dictation_pad.core.notes import NoteStore
from dictation_pad.session import DictationSession


# ---------------------------------------------------------------------------
# A recorded utterance: "hello comma how are you question mark"
# ---------------------------------------------------------------------------

RECORDED_BATCHES: List[List[Dict[str, Any]]] = [
    [{"text": "hello", "is_final": False, "index": 0}],
    [{"text": "hello comma how", "is_final": False, "index": 0}],
    [{"text": "hello comma", "is_final": True, "index": 0},
     {"text": " how are", "is_final": False, "index": 1}],
    [{"text": " how are you question mark", "is_final": True, "index": 1}],
]

RECORDED_TRANSCRIPT = "Hello, how are you?"

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 30)


@pytest.fixture
def accumulator():
    return TranscriptAccumulator()


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def note_store(fixed_clock):
    return NoteStore(clock=fixed_clock, time_format="%H:%M")


@pytest.fixture
def session(note_store):
    return DictationSession(notes=note_store)


@pytest.fixture
def recorded_batches():
    return [list(batch) for batch in RECORDED_BATCHES]


@pytest.fixture
def recorded_transcript():
    return RECORDED_TRANSCRIPT
