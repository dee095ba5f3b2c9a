"""Authoritative transcript and interim preview from fragment batches.

WHY: Recognition engines revise what they hear. Interim results change
or vanish, final results never change. The pad must show the latest
guess immediately but only ever commit text the engine has settled,
otherwise a revised interim would leave garbage in the transcript.

HOW: TranscriptAccumulator keeps one piece of durable state, the
authoritative text, which is always stored normalized. apply_batch()
appends each final fragment and re-normalizes the whole string, then
builds a preview by normalizing authoritative text + interim tail into
a separate display string.

RULES:
- Final fragments are trimmed; empty ones are skipped
- One space separates appended text (none when the pad is empty)
- The whole text is re-normalized after every final fragment, because
  spacing and capitalization depend on the previous fragment's ending
- Interim text is preview-only: never written to authoritative text
- Fragments are processed in arrival order, index is not re-validated
- No operation raises for any input
"""

from __future__ import annotations

import logging
from typing import Iterable

from dictation_pad.core.models import Fragment, PreviewResult
from dictation_pad.core.normalizer import normalize

logger = logging.getLogger(__name__)


def _join(base: str, tail: str) -> str:
    return base + " " + tail if base else tail


class TranscriptAccumulator:
    """Owns the authoritative transcript and produces display previews.

    Simple API:
        acc = TranscriptAccumulator()
        acc.apply_batch([Fragment("hello comma", is_final=True)])
        acc.apply_batch([Fragment("how are", is_final=False)])
        acc.display_text        # "Hello, how are"
        acc.authoritative_text  # "Hello,"
    """

    def __init__(self, initial_text: str = "") -> None:
        self._authoritative = normalize(initial_text)
        self._display = self._authoritative

    @property
    def authoritative_text(self) -> str:
        """The committed, normalized transcript."""
        return self._authoritative

    @property
    def display_text(self) -> str:
        """The last preview produced (authoritative text if no interim)."""
        return self._display

    def apply_batch(self, fragments: Iterable[Fragment]) -> PreviewResult:
        """Commit final fragments and preview the interim tail.

        Args:
            fragments: One batch from the recognition source, in arrival
                order. Usually zero or more finals then at most one interim.

        Returns:
            PreviewResult with the display text for rendering and the
            (possibly unchanged) authoritative text.
        """
        interim_parts: list[str] = []
        committed = 0

        for fragment in fragments:
            if fragment.is_final:
                text = fragment.text.strip()
                if not text:
                    continue
                self._authoritative = normalize(_join(self._authoritative, text))
                committed += 1
            else:
                # Several interim results in one batch are shown back to back.
                interim_parts.append(fragment.text)

        # The raw tail goes into the preview; leading breaks must survive.
        interim = "".join(interim_parts)
        if interim.strip():
            self._display = normalize(_join(self._authoritative, interim))
        else:
            self._display = self._authoritative

        logger.debug(
            "apply_batch: committed %d final fragment(s), interim %d chars",
            committed,
            len(interim),
        )
        return PreviewResult(
            display_text=self._display,
            authoritative_text=self._authoritative,
            interim_text=interim,
        )

    def reset(self) -> None:
        """Clear the transcript (the pad's "clear" action)."""
        self._authoritative = ""
        self._display = ""

    def seed(self, text: str) -> str:
        """Adopt ``text`` as the new authoritative baseline.

        Used when recording starts (keep whatever the pad shows, including
        manual edits) and when a saved note is sent back to the pad.

        Returns:
            The normalized text now held as authoritative.
        """
        self._authoritative = normalize(text)
        self._display = self._authoritative
        logger.debug("seed: %d chars", len(self._authoritative))
        return self._authoritative

    def finalize(self) -> str:
        """Run the stop-signal normalization pass and return the transcript.

        The display text is left as it is, so an interim preview that was
        on screen when recognition stopped stays visible.
        """
        self._authoritative = normalize(self._authoritative)
        return self._authoritative

    def __repr__(self) -> str:
        return "TranscriptAccumulator({} chars)".format(len(self._authoritative))
