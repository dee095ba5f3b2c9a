"""FastAPI application exposing dictation sessions to a renderer.

WHY: The pad's text box and notes list live in a browser or desktop UI
that talks to the recognition engine. That UI needs somewhere to send
result batches and button presses, and to read back what to display.
FastAPI provides request validation, OpenAPI docs, and a thread pool.

HOW: One FastAPI app exposes session endpoints grouped by tags. Every
call on a session goes through ``session_store.use(id)``, which holds
that session's lock, so batches and user actions on one pad are applied
strictly one at a time in arrival order. A periodic task started in the
app lifespan expires idle sessions.

RULES:
- All endpoints have OpenAPI descriptions and consistent ErrorResponse bodies
- 404 unknown session or stale note index, 400 empty save,
  409 lifecycle action in the wrong state, 429 too many sessions
- Endpoints are plain ``def`` so FastAPI runs them in its thread pool;
  the per-session lock is what keeps the core single-writer
- The session store is a module-level singleton
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Iterator, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from dictation_pad import __version__
from dictation_pad.config import API_HOST, API_PORT, LOG_FORMAT, LOG_LEVEL
from dictation_pad.core.normalizer import normalize
from dictation_pad.core.notes import EmptyTextError, NoteIndexError
from dictation_pad.server.models import (
    BatchRequest,
    CreateSessionRequest,
    ErrorReport,
    ErrorResponse,
    HealthResponse,
    NormalizeRequest,
    NormalizeResponse,
    NoteListResponse,
    NoteResponse,
    PreviewResponse,
    SaveNoteRequest,
    SessionResponse,
    StartRequest,
)
from dictation_pad.server.sessions import SessionNotFoundError, SessionStore
from dictation_pad.session import DictationSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

session_store = SessionStore()

CLEANUP_INTERVAL_SECONDS = 300


async def _periodic_cleanup() -> None:
    """Expire idle sessions every 5 minutes."""
    while True:
        await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
        session_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start periodic cleanup on startup, cancel on shutdown."""
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="Dictation Pad API",
    description=(
        "Live transcript accumulator for speech recognition results. "
        "Create a session, forward result batches from the recognition "
        "engine, and read back the text to display. Saved notes are kept "
        "in memory for the session."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session not found"}}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextmanager
def _open_session(session_id: str) -> Iterator[DictationSession]:
    """Hold a session's lock, turning an unknown ID into a 404."""
    try:
        with session_store.use(session_id) as session:
            yield session
    except SessionNotFoundError:
        raise HTTPException(
            status_code=404, detail="Session not found: {}".format(session_id)
        ) from None


def _notes_response(session: DictationSession) -> NoteListResponse:
    notes = session.list_notes()
    return NoteListResponse(
        notes=[NoteResponse.from_note(i, note) for i, note in enumerate(notes)],
        count=len(notes),
        label=session.note_count_label,
    )


# ---------------------------------------------------------------------------
# Endpoints: Sessions
# ---------------------------------------------------------------------------


@app.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=201,
    tags=["sessions"],
    summary="Create a dictation session",
    description=(
        "Create a new, idle pad. Optional text seeds the pad and is "
        "normalized immediately."
    ),
    responses={
        429: {"model": ErrorResponse, "description": "Too many sessions"},
    },
)
def create_session(body: Optional[CreateSessionRequest] = None) -> SessionResponse:
    text = body.text if body is not None else ""
    try:
        entry = session_store.create(initial_text=text)
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))
    return SessionResponse.from_session(entry.id, entry.session)


@app.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    tags=["sessions"],
    summary="Get the pad state",
    description="Display text, transcript, recognition state, message, and note count.",
    responses=_NOT_FOUND,
)
def get_session(session_id: str) -> SessionResponse:
    with _open_session(session_id) as session:
        return SessionResponse.from_session(session_id, session)


@app.delete(
    "/sessions/{session_id}",
    status_code=204,
    tags=["sessions"],
    summary="Delete a session",
    description="Discard the pad and all of its notes.",
    responses=_NOT_FOUND,
)
def delete_session(session_id: str) -> Response:
    if not session_store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found: {}".format(session_id))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Recognition lifecycle
# ---------------------------------------------------------------------------


@app.post(
    "/sessions/{session_id}/start",
    response_model=SessionResponse,
    tags=["recognition"],
    summary="Recognition started",
    description=(
        "Call when the recognition engine starts. The pad adopts the "
        "displayed text as its baseline so dictation appends after any "
        "manual edits."
    ),
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Already listening or unavailable"},
    },
)
def start_recognition(session_id: str, body: Optional[StartRequest] = None) -> SessionResponse:
    displayed_text = body.displayed_text if body is not None else None
    with _open_session(session_id) as session:
        if not session.start(displayed_text):
            raise HTTPException(
                status_code=409,
                detail="Cannot start recognition (current state: {}).".format(
                    session.state.value
                ),
            )
        return SessionResponse.from_session(session_id, session)


@app.post(
    "/sessions/{session_id}/batches",
    response_model=PreviewResponse,
    tags=["recognition"],
    summary="Apply a batch of recognition results",
    description=(
        "Final fragments are committed to the transcript; interim fragments "
        "only appear in display_text. Batches sent while not listening are "
        "ignored and reported with applied=false."
    ),
    responses=_NOT_FOUND,
)
def apply_batch(session_id: str, body: BatchRequest) -> PreviewResponse:
    with _open_session(session_id) as session:
        applied = session.is_listening
        preview = session.handle_batch(body.to_fragments())
        return PreviewResponse.from_preview(preview, applied=applied)


@app.post(
    "/sessions/{session_id}/stop",
    response_model=SessionResponse,
    tags=["recognition"],
    summary="Recognition stopped",
    description="Call when the engine ends. Runs a final normalization pass.",
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Not listening"},
    },
)
def stop_recognition(session_id: str) -> SessionResponse:
    with _open_session(session_id) as session:
        if not session.stop():
            raise HTTPException(
                status_code=409,
                detail="Not listening (current state: {}).".format(session.state.value),
            )
        return SessionResponse.from_session(session_id, session)


@app.post(
    "/sessions/{session_id}/error",
    response_model=SessionResponse,
    tags=["recognition"],
    summary="Recognition failed",
    description=(
        "Forward an engine error. The transcript is left untouched and the "
        "session stops listening."
    ),
    responses=_NOT_FOUND,
)
def report_error(session_id: str, body: Optional[ErrorReport] = None) -> SessionResponse:
    with _open_session(session_id) as session:
        session.fail(body.error if body is not None else None)
        return SessionResponse.from_session(session_id, session)


@app.post(
    "/sessions/{session_id}/clear",
    response_model=SessionResponse,
    tags=["sessions"],
    summary="Clear the pad",
    description="Empty the transcript. Notes are kept.",
    responses=_NOT_FOUND,
)
def clear_pad(session_id: str) -> SessionResponse:
    with _open_session(session_id) as session:
        session.clear()
        return SessionResponse.from_session(session_id, session)


# ---------------------------------------------------------------------------
# Endpoints: Notes
# ---------------------------------------------------------------------------


@app.get(
    "/sessions/{session_id}/notes",
    response_model=NoteListResponse,
    tags=["notes"],
    summary="List saved notes",
    description="Notes are returned most recent first.",
    responses=_NOT_FOUND,
)
def list_notes(session_id: str) -> NoteListResponse:
    with _open_session(session_id) as session:
        return _notes_response(session)


@app.post(
    "/sessions/{session_id}/notes",
    response_model=NoteResponse,
    status_code=201,
    tags=["notes"],
    summary="Save the pad as a note",
    description=(
        "Saves the given text (the pad as shown) or, when omitted, the "
        "committed transcript. The new note goes to the top of the list."
    ),
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Nothing to save"},
    },
)
def save_note(session_id: str, body: Optional[SaveNoteRequest] = None) -> NoteResponse:
    text = body.text if body is not None else None
    with _open_session(session_id) as session:
        try:
            note = session.save_note(text)
        except EmptyTextError:
            raise HTTPException(status_code=400, detail=session.message)
        return NoteResponse.from_note(0, note)


@app.delete(
    "/sessions/{session_id}/notes/{index}",
    status_code=204,
    tags=["notes"],
    summary="Delete a note",
    description="Remove the note at the given position (0 = most recent).",
    responses={404: {"model": ErrorResponse, "description": "Session or note not found"}},
)
def delete_note(session_id: str, index: int) -> Response:
    with _open_session(session_id) as session:
        try:
            session.delete_note(index)
        except NoteIndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
    return Response(status_code=204)


@app.post(
    "/sessions/{session_id}/notes/{index}/send",
    response_model=SessionResponse,
    tags=["notes"],
    summary="Send a note back to the pad",
    description="Replace the pad with the note's text. The note itself is unchanged.",
    responses={404: {"model": ErrorResponse, "description": "Session or note not found"}},
)
def send_note_to_pad(session_id: str, index: int) -> SessionResponse:
    with _open_session(session_id) as session:
        try:
            session.send_note_to_pad(index)
        except NoteIndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return SessionResponse.from_session(session_id, session)


# ---------------------------------------------------------------------------
# Endpoints: Utilities
# ---------------------------------------------------------------------------


@app.post(
    "/normalize",
    response_model=NormalizeResponse,
    tags=["utilities"],
    summary="Normalize text",
    description=(
        "Rewrite spoken punctuation, fix spacing, and capitalize sentences "
        "without touching any session."
    ),
)
def normalize_text(body: NormalizeRequest) -> NormalizeResponse:
    return NormalizeResponse(text=normalize(body.text))


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, sessions=len(session_store))


def run_api(host: str = API_HOST, port: int = API_PORT) -> None:
    """Entry point for the dictation-pad-api console script."""
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    logger.info("Serving Dictation Pad API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
