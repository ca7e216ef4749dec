"""String helpers for labels and recognized text."""

from __future__ import annotations

import re
from typing import Iterable

_NON_ALNUM_PATTERN = re.compile(r"[^a-zA-Z0-9ąęćłńóśźżĄĘĆŁŃÓŚŹŻ]")

MIN_LINE_ALNUM = 2
MIN_LINE_ALNUM_RATIO = 0.3
MIN_TEXT_LENGTH = 3


def unique(values: Iterable[str]) -> list[str]:
    """Return ``values`` without duplicates, keeping first-seen order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def capitalize_first(text: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def clean_ocr_text(text: str) -> str:
    """Drop OCR noise lines and return the remaining text.

    A line survives when it holds at least two letters or digits and those make
    up at least 30% of the trimmed line. Results shorter than three characters
    are treated as no text at all.
    """
    kept: list[str] = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue
        alnum = _NON_ALNUM_PATTERN.sub("", trimmed)
        if len(alnum) >= MIN_LINE_ALNUM and len(alnum) / len(trimmed) >= MIN_LINE_ALNUM_RATIO:
            kept.append(trimmed)
    cleaned = "\n".join(kept).strip()
    return cleaned if len(cleaned) >= MIN_TEXT_LENGTH else ""
