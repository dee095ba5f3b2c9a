"""In-memory registry of dictation sessions with TTL cleanup.

WHY: The HTTP API serves several pads at once, each driven by its own
renderer. Requests run on a thread pool, but a DictationSession is
single-writer: two batches applied at the same time would interleave
and corrupt the transcript. The registry hands out sessions together
with a lock that serializes every call on one pad.

HOW: Two pieces work together:
  SessionEntry — dataclass with the session, its lock, and timestamps
  SessionStore — thread-safe dict-based store with create/get/list/
                 delete and TTL cleanup of idle sessions
Callers use ``with store.use(session_id) as session:`` which takes the
session's lock and bumps its last-used time.

RULES:
- The store's own lock guards only the dict; per-session locks guard pads
- Session IDs are UUID4 hex strings generated at creation time
- Sessions unused for longer than the TTL are removed, unless listening
- create() refuses to go past max_sessions (ValueError)
- TTL and max_sessions default to SESSION_TTL_SECONDS and MAX_SESSIONS
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from dictation_pad.config import MAX_SESSIONS, SESSION_TTL_SECONDS
from dictation_pad.session import DictationSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised by SessionStore.use() for unknown session IDs."""


@dataclass
class SessionEntry:
    """A registered session and its bookkeeping.

    RULES:
    - id: UUID4 hex string, unique and immutable after creation
    - lock: held for the duration of every call on the session
    - created_at / last_used_at: epoch timestamps
    """

    id: str
    session: DictationSession
    created_at: float
    last_used_at: float
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionStore:
    """Thread-safe in-memory store for dictation sessions.

    RULES:
    - All public methods that touch the dict acquire self._lock
    - get() returns None for missing IDs (no exceptions)
    - use() raises SessionNotFoundError for missing IDs
    - delete() returns False for missing IDs
    """

    def __init__(
        self,
        ttl_seconds: int = SESSION_TTL_SECONDS,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        self._entries: Dict[str, SessionEntry] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions

    def create(self, initial_text: str = "") -> SessionEntry:
        """Register a new idle session, optionally seeded with text."""
        with self._lock:
            if len(self._entries) >= self.max_sessions:
                raise ValueError(
                    "Maximum number of sessions ({}) reached".format(self.max_sessions)
                )
            session_id = uuid.uuid4().hex
            now = time.time()
            entry = SessionEntry(
                id=session_id,
                session=DictationSession(initial_text=initial_text),
                created_at=now,
                last_used_at=now,
            )
            self._entries[session_id] = entry

        logger.info("Created session %s", session_id)
        return entry

    def get(self, session_id: str) -> Optional[SessionEntry]:
        with self._lock:
            return self._entries.get(session_id)

    def list(self) -> List[SessionEntry]:
        """Snapshot of all entries, oldest first."""
        with self._lock:
            return sorted(self._entries.values(), key=lambda e: e.created_at)

    @contextmanager
    def use(self, session_id: str) -> Iterator[DictationSession]:
        """Hold a session's lock for the duration of the ``with`` block.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        entry = self.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        with entry.lock:
            entry.last_used_at = time.time()
            yield entry.session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            entry = self._entries.pop(session_id, None)
        if entry is None:
            return False
        logger.info("Deleted session %s", session_id)
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """Remove sessions unused for longer than the TTL.

        RULES:
        - TTL is measured from last_used_at, not created_at
        - Sessions that are still listening are kept
        - Returns the count of removed sessions
        """
        now = time.time()
        expired: List[SessionEntry] = []

        with self._lock:
            for session_id, entry in list(self._entries.items()):
                if entry.session.is_listening:
                    continue
                if now - entry.last_used_at > self._ttl_seconds:
                    expired.append(self._entries.pop(session_id))

        for entry in expired:
            logger.info(
                "Expired session %s (unused for %.0fs)", entry.id, now - entry.last_used_at
            )
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
