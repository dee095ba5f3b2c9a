"""Spoken-punctuation rewriting, spacing, and sentence capitalization.

WHY: People dictating say "comma" and "new line" out loud, and recognition
engines return lowercase words with stray spaces. The pad must show real
punctuation with normal spacing and capitalized sentences, and it must be
able to re-run that clean-up over the whole transcript every time a new
fragment lands without drifting.

HOW: normalize() runs six steps in a fixed order:
  1. substitute_keywords      — "comma" → ",", "new line" → line break, ...
  2. fix_punctuation_spacing  — drop spaces before , . ! ? ...
  3.                             ... and add one space after them
  4. trim_lines               — strip each line, keep blank lines
  5. capitalize_sentences     — upper-case the first letter of sentences
  6. outer strip()
Each step is a module-level function so it can be tested on its own.

RULES:
- Pure and total: every str input returns a str, "" returns ""
- Idempotent: normalize(normalize(x)) == normalize(x)
- Keywords match whole words only, case-insensitively, every occurrence
- Multi-word keywords allow horizontal whitespace between words, never
  a line break (so a rewritten "new line" can't re-match on a second pass)
- Line breaks after punctuation are left alone
- Only lowercase letters are capitalized; anything else stays as is
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# Spoken keyword → replacement. Keys are lowercase, words separated by one
# space; matching tolerates any run of horizontal whitespace between words.
SPOKEN_PUNCTUATION: dict[str, str] = {
    "comma": ",",
    "period": ".",
    "full stop": ".",
    "question mark": "?",
    "exclamation mark": "!",
    "exclamation point": "!",
    "new line": "\n",
    "newline": "\n",
}

# Whitespace that is not a line break.
_HSPACE = r"[^\S\r\n]"


def _keyword_pattern(keywords: dict[str, str]) -> re.Pattern[str]:
    # Longest first so "exclamation point" wins over any shorter prefix.
    alternatives = [
        (_HSPACE + "+").join(re.escape(word) for word in key.split())
        for key in sorted(keywords, key=len, reverse=True)
    ]
    return re.compile(r"\b(?:{})\b".format("|".join(alternatives)), re.IGNORECASE)


_KEYWORD_RE = _keyword_pattern(SPOKEN_PUNCTUATION)
_SPACE_BEFORE_PUNCT_RE = re.compile(_HSPACE + r"+(?=[,.!?])")
_NO_SPACE_AFTER_PUNCT_RE = re.compile(r"([,.!?])(?=\S)")
_SENTENCE_START_RE = re.compile(r"(^\s*|[.!?]\s+)(\w)")


def substitute_keywords(text: str) -> str:
    """Replace spoken punctuation keywords with their symbols.

    The surrounding spaces are kept; fix_punctuation_spacing() cleans
    them up afterwards ("hello comma world" → "hello , world").
    """

    def _replace(match: re.Match[str]) -> str:
        key = " ".join(match.group(0).lower().split())
        return SPOKEN_PUNCTUATION[key]

    return _KEYWORD_RE.sub(_replace, text)


def fix_punctuation_spacing(text: str) -> str:
    """Remove horizontal space before , . ! ? and ensure one space after.

    RULES:
    - "word ," → "word,"   (tabs and other non-line-break spaces too)
    - "word,next" → "word, next"
    - "word.\\nnext" is untouched; no space is forced before a line break
    """
    text = _SPACE_BEFORE_PUNCT_RE.sub("", text)
    return _NO_SPACE_AFTER_PUNCT_RE.sub(r"\1 ", text)


def trim_lines(text: str) -> str:
    """Strip leading/trailing whitespace from every line independently."""
    return "\n".join(line.strip() for line in text.split("\n"))


def capitalize_sentences(text: str) -> str:
    """Upper-case the first letter of the text and of every sentence.

    A sentence starts at the beginning of the text (after any leading
    whitespace) and after ". ", "! " or "? " (any whitespace, including
    line breaks). Characters that are not lowercase letters are left
    unchanged.
    """

    def _upper(match: re.Match[str]) -> str:
        char = match.group(2)
        if char.islower():
            char = char.upper()
        return match.group(1) + char

    return _SENTENCE_START_RE.sub(_upper, text)


def normalize(text: str) -> str:
    """Run the full normalization pipeline over ``text``.

    Args:
        text: Raw or previously normalized transcript text.

    Returns:
        The normalized text. Normalizing the result again is a no-op.
    """
    if not text:
        return ""

    result = substitute_keywords(text)
    result = fix_punctuation_spacing(result)
    result = trim_lines(result)
    result = capitalize_sentences(result)
    result = result.strip()

    logger.debug("normalize: %d chars in, %d chars out", len(text), len(result))
    return result
