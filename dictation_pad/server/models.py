"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint pair (request + response) has its own model. Core
dataclasses are converted with small from_* helpers so response models
never expose internal objects directly.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- FragmentModel matches schemas/fragment_batch.json field for field
- RecognitionState is imported from dictation_pad.session (single source of truth)
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from dictation_pad.core.models import Fragment, Note, PreviewResult
from dictation_pad.session import DictationSession, RecognitionState


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CreateSessionRequest(BaseModel):
    """Optional starting text for a new pad."""

    text: str = Field(default="", description="Initial pad text (normalized on creation).")


class StartRequest(BaseModel):
    """Sent when the user presses the microphone button.

    RULES:
    - displayed_text is what the pad shows right now, including edits
    - Omitted → the session keeps its last display text
    """

    displayed_text: Optional[str] = Field(
        default=None,
        description="Current pad contents to resume dictation after.",
    )


class ErrorReport(BaseModel):
    """Engine-level error forwarded by the renderer."""

    error: Optional[str] = Field(default=None, description="Engine error code or message.")


class FragmentModel(BaseModel):
    """One recognition result fragment."""

    text: str = Field(description="Raw recognized words.")
    is_final: bool = Field(description="True when the engine will not revise this fragment.")
    index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Result position in the engine's sequence (informational).",
    )


class BatchRequest(BaseModel):
    """A batch of fragments in arrival order."""

    fragments: List[FragmentModel] = Field(description="Fragments in arrival order.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "fragments": [
                    {"text": "hello comma", "is_final": True, "index": 0},
                    {"text": "how are", "is_final": False, "index": 1},
                ]
            }
        ]
    }}

    def to_fragments(self) -> List[Fragment]:
        return [
            Fragment(
                text=item.text,
                is_final=item.is_final,
                index=item.index if item.index is not None else position,
            )
            for position, item in enumerate(self.fragments)
        ]


class SaveNoteRequest(BaseModel):
    """Save the pad as a note.

    RULES:
    - text omitted → the session's authoritative transcript is saved
    """

    text: Optional[str] = Field(default=None, description="Pad contents as shown to the user.")


class NormalizeRequest(BaseModel):
    text: str = Field(description="Text to normalize.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SessionResponse(BaseModel):
    """Everything a renderer needs to draw one pad.

    RULES:
    - message is the status/error line ("" when nothing to say)
    - note_count_label is ready to display ("1 note", "3 notes")
    """

    id: str = Field(description="Unique session identifier (UUID hex).")
    state: RecognitionState = Field(description="Recognition lifecycle state.")
    language: str = Field(description="Recognition language tag.")
    display_text: str = Field(description="Text to show in the pad.")
    authoritative_text: str = Field(description="Committed, normalized transcript.")
    message: str = Field(description="Status or error message for the user.")
    note_count: int = Field(description="Number of saved notes.")
    note_count_label: str = Field(description="Human-readable note count.")

    @classmethod
    def from_session(cls, session_id: str, session: DictationSession) -> "SessionResponse":
        return cls(
            id=session_id,
            state=session.state,
            language=session.language,
            display_text=session.accumulator.display_text,
            authoritative_text=session.accumulator.authoritative_text,
            message=session.message,
            note_count=session.notes.count(),
            note_count_label=session.note_count_label,
        )


class PreviewResponse(BaseModel):
    """Result of applying one batch."""

    display_text: str = Field(description="Authoritative text plus interim preview.")
    authoritative_text: str = Field(description="Committed, normalized transcript.")
    interim_text: str = Field(description="Raw interim tail shown in the preview.")
    applied: bool = Field(description="False when the batch was dropped (not listening).")

    @classmethod
    def from_preview(cls, preview: PreviewResult, applied: bool) -> "PreviewResponse":
        return cls(
            display_text=preview.display_text,
            authoritative_text=preview.authoritative_text,
            interim_text=preview.interim_text,
            applied=applied,
        )


class NoteResponse(BaseModel):
    index: int = Field(description="Position in the list (0 = most recent).")
    text: str = Field(description="Saved text.")
    created_at: str = Field(description="Display time of creation, e.g. '14:05'.")
    saved_at: float = Field(description="Creation timestamp (Unix epoch seconds).")

    @classmethod
    def from_note(cls, index: int, note: Note) -> "NoteResponse":
        return cls(
            index=index,
            text=note.text,
            created_at=note.created_at,
            saved_at=note.saved_at.timestamp(),
        )


class NoteListResponse(BaseModel):
    notes: List[NoteResponse] = Field(description="Notes, most recent first.")
    count: int = Field(description="Number of notes.")
    label: str = Field(description="Human-readable note count.")


class NormalizeResponse(BaseModel):
    text: str = Field(description="Normalized text.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    sessions: int = Field(description="Number of active sessions.")
