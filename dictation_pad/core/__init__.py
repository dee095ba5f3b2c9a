"""Core transcript state machine and text normalization.

WHY: The core package contains the only logic with real invariants —
ordering of interim vs. final results, idempotent re-formatting, and
capitalization across sentence boundaries. Everything else (session
lifecycle, HTTP, CLI) is wiring around it.

HOW: models.py defines the value types, normalizer.py the pure text
pipeline, accumulator.py the authoritative/preview text logic, and
notes.py the saved-snapshot collection.

RULES:
- No I/O and no threads in this package
- normalizer.py depends on nothing; accumulator.py depends only on it
- notes.py never reaches back into the accumulator
"""

from dictation_pad.core.accumulator import TranscriptAccumulator
from dictation_pad.core.models import Fragment, Note, PreviewResult
from dictation_pad.core.normalizer import normalize
from dictation_pad.core.notes import EmptyTextError, NoteIndexError, NoteStore

__all__ = [
    "EmptyTextError",
    "Fragment",
    "Note",
    "NoteIndexError",
    "NoteStore",
    "PreviewResult",
    "TranscriptAccumulator",
    "normalize",
]
