"""Strip text that would corrupt the exchange log or break shell quoting."""

from __future__ import annotations

from .labels import ALL_LABELS

_LINE_BREAKS = ("\r", "\n")
_QUOTES = ("'", '"')


def sanitize(text: str) -> str:
    """Return *text* with line breaks, quotes and delimiter labels removed.

    Each ``\\r`` and ``\\n`` becomes a single space, quote characters are
    dropped, and label strings are removed until none remain (removing one
    occurrence can splice the surrounding text into a new one).
    """
    for ch in _LINE_BREAKS:
        text = text.replace(ch, " ")
    for ch in _QUOTES:
        text = text.replace(ch, "")

    while any(label in text for label in ALL_LABELS):
        for label in ALL_LABELS:
            text = text.replace(label, "")
    return text
