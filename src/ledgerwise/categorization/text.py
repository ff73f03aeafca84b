"""Text canonicalization shared by every matcher.

All comparisons between descriptions, keywords and signatures go through
``normalize`` first so Hebrew and Latin statement text compare on the same
footing regardless of case, niqqud, punctuation or spacing.
"""

from __future__ import annotations

import re

# Hebrew cantillation marks and niqqud (U+0591..U+05C7).
_HEBREW_MARKS = re.compile(r"[\u0591-\u05C7]")
# ASCII quotes, backtick, Hebrew geresh and gershayim.
_QUOTES = re.compile(r"[\"'`\u05F3\u05F4]")
# Anything that is not a Unicode letter, digit or whitespace.
_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Canonicalize a raw description.

    Lowercases, strips Hebrew diacritics and quote punctuation, replaces every
    other non letter/digit character with a space and collapses whitespace.
    Total and idempotent: ``normalize(normalize(x)) == normalize(x)``.
    """
    if not text:
        return ""
    value = text.lower()
    value = _HEBREW_MARKS.sub("", value)
    value = _QUOTES.sub("", value)
    value = _NON_WORD.sub(" ", value)
    value = _WHITESPACE.sub(" ", value)
    return value.strip()


def tokenize(text: str | None) -> list[str]:
    """Split normalized text on whitespace."""
    normalized = normalize(text)
    return normalized.split(" ") if normalized else []


def compact(text: str | None) -> str:
    """Normalized text with all internal whitespace removed."""
    return _WHITESPACE.sub("", normalize(text))
