"""Unit tests for the transcript accumulator.

WHY: The accumulator decides what is committed and what is only
previewed. If interim text ever leaked into the authoritative text, a
revised or dropped guess from the engine would stay in the transcript
for good.

HOW: Tests are organized by concern:
  - TestInterimPreview: interim text shows up but is never committed
  - TestFinalCommit: finals append, re-normalize, and skip blanks
  - TestOrdering: arrival order wins over fragment index
  - TestSeedResetFinalize: the non-batch operations
  - TestRecordedStream: a realistic multi-batch utterance

RULES:
- Each test builds its own accumulator (fixture or constructor)
- The normalized-invariant is checked after every batch where it matters
"""

from dictation_pad.core.accumulator import TranscriptAccumulator
from dictation_pad.core.models import Fragment, fragments_from_dicts
from dictation_pad.core.normalizer import normalize


def _final(text, index=0):
    return Fragment(text=text, is_final=True, index=index)


def _interim(text, index=0):
    return Fragment(text=text, is_final=False, index=index)


class TestInterimPreview:
    """Interim fragments are preview-only."""

    def test_interim_never_commits(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_interim("there")])
        assert result.display_text == "Hello there"
        assert result.authoritative_text == "Hello"
        assert acc.authoritative_text == "Hello"
        assert result.has_interim

    def test_interim_on_empty_pad_has_no_leading_space(self, accumulator):
        result = accumulator.apply_batch([_interim("hi there")])
        assert result.display_text == "Hi there"
        assert accumulator.authoritative_text == ""

    def test_interim_is_normalized_in_preview(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_interim("comma how are")])
        assert result.display_text == "Hello, how are"
        assert acc.authoritative_text == "Hello"

    def test_several_interims_are_concatenated(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_interim("how", 1), _interim(" are", 2)])
        assert result.display_text == "Hello how are"
        assert result.interim_text == "how are"

    def test_interim_tail_is_used_raw(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_interim(" there")])
        assert result.display_text == "Hello  there"
        assert result.interim_text == " there"

    def test_interim_leading_line_break_is_kept(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_interim("\nthere")])
        assert result.display_text == "Hello\nthere"
        assert acc.authoritative_text == "Hello"

    def test_whitespace_only_interim_is_no_preview(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_interim("  ")])
        assert result.display_text == "Hello"

    def test_no_interim_display_equals_authoritative(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_final("world")])
        assert result.display_text == result.authoritative_text == "Hello world"
        assert not result.has_interim

    def test_empty_batch_keeps_text(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([])
        assert result.display_text == "Hello"
        assert result.authoritative_text == "Hello"

    def test_revised_interim_leaves_no_trace(self, accumulator):
        accumulator.apply_batch([_interim("helo wrld")])
        result = accumulator.apply_batch([_final("hello world")])
        assert result.authoritative_text == "Hello world"
        assert result.display_text == "Hello world"

    def test_dropped_interim_clears_preview(self):
        acc = TranscriptAccumulator("Hello")
        acc.apply_batch([_interim("um")])
        assert acc.display_text == "Hello um"
        acc.apply_batch([])
        assert acc.display_text == "Hello"


class TestFinalCommit:
    """Final fragments append and re-normalize the whole transcript."""

    def test_cumulative_normalization(self):
        acc = TranscriptAccumulator("Hello")
        result = acc.apply_batch([_final("comma how are you question mark")])
        assert result.authoritative_text == "Hello, how are you?"

    def test_final_text_is_trimmed(self, accumulator):
        accumulator.apply_batch([_final("   hello   ")])
        accumulator.apply_batch([_final("  world ")])
        assert accumulator.authoritative_text == "Hello world"

    def test_blank_final_is_skipped(self):
        acc = TranscriptAccumulator("Hello")
        acc.apply_batch([_final("   ")])
        assert acc.authoritative_text == "Hello"

    def test_capitalization_depends_on_previous_fragment(self, accumulator):
        accumulator.apply_batch([_final("hello period"), _final("this is great")])
        assert accumulator.authoritative_text == "Hello. This is great"

    def test_final_then_interim_in_one_batch(self, accumulator):
        result = accumulator.apply_batch([_final("hello comma", 0), _interim("how", 1)])
        assert result.authoritative_text == "Hello,"
        assert result.display_text == "Hello, how"

    def test_authoritative_text_stays_normalized(self, accumulator):
        for text in ["so period", "new line next", "a ,b", "what question mark"]:
            accumulator.apply_batch([_final(text)])
            assert normalize(accumulator.authoritative_text) == accumulator.authoritative_text


class TestOrdering:
    """Fragments are processed in arrival order, not by index."""

    def test_out_of_order_indexes_are_trusted(self, accumulator):
        accumulator.apply_batch([_final("b", 5), _final("a", 1)])
        assert accumulator.authoritative_text == "B a"

    def test_batches_build_on_each_other(self, accumulator):
        accumulator.apply_batch([_final("one")])
        accumulator.apply_batch([_final("two")])
        accumulator.apply_batch([_final("three period")])
        assert accumulator.authoritative_text == "One two three."


class TestSeedResetFinalize:
    """Non-batch operations on the authoritative text."""

    def test_seed_resets_baseline(self, accumulator):
        accumulator.apply_batch([_final("something else")])
        accumulator.seed("Restored text.")
        accumulator.apply_batch([_final("great")])
        assert accumulator.authoritative_text == "Restored text. Great"

    def test_seed_normalizes(self, accumulator):
        assert accumulator.seed("hello comma world") == "Hello, world"
        assert accumulator.display_text == "Hello, world"

    def test_initial_text_is_normalized(self):
        assert TranscriptAccumulator("hi ,there").authoritative_text == "Hi, there"

    def test_reset_clears(self, accumulator):
        accumulator.apply_batch([_final("hello"), _interim("there")])
        accumulator.reset()
        assert accumulator.authoritative_text == ""
        assert accumulator.display_text == ""

    def test_finalize_is_idempotent(self, accumulator):
        accumulator.apply_batch([_final("hello period how are you")])
        before = accumulator.authoritative_text
        assert accumulator.finalize() == before
        assert accumulator.finalize() == before

    def test_finalize_keeps_preview_on_screen(self, accumulator):
        accumulator.apply_batch([_final("hello"), _interim("there")])
        accumulator.finalize()
        assert accumulator.display_text == "Hello there"
        assert accumulator.authoritative_text == "Hello"


class TestRecordedStream:
    """A realistic utterance delivered over several batches."""

    def test_recorded_batches(self, accumulator, recorded_batches, recorded_transcript):
        displays = []
        for batch in recorded_batches:
            result = accumulator.apply_batch(fragments_from_dicts(batch))
            displays.append(result.display_text)

        assert displays[0] == "Hello"
        assert displays[1] == "Hello, how"
        assert accumulator.authoritative_text == recorded_transcript
        assert displays[-1] == recorded_transcript
