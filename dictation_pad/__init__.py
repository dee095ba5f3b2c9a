"""Dictation Pad — live transcript accumulator with saved notes.

WHY: Speech recognition engines deliver a stream of small, revisable
fragments. A dictation pad needs one coherent, readable text buffer built
from them, with spoken punctuation ("comma", "new line") turned into real
punctuation, plus a way to keep snapshots of that buffer as notes.

HOW: Three-stage pipeline — normalize (pure text rules), accumulate
(final vs. interim fragment handling), store (immutable note snapshots).
A DictationSession wires them to the recognition lifecycle; the HTTP API
and CLI are thin surfaces over a session.

RULES:
- The authoritative text is always already normalized
- Interim fragments are preview-only and never committed
- Notes are immutable value copies, most recent first
"""

__version__ = "0.1.0"
