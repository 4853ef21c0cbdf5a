"""Text helpers for values scraped from the dependents page."""

import html
import re

_NON_DIGITS = re.compile(r"\D")
_COUNT_NOISE = re.compile(r"[\s,]")


def decode_text(text: str | None) -> str:
    """Decode HTML entities and strip surrounding whitespace.

    Returns an empty string for None.
    """
    if text is None:
        return ""
    return html.unescape(text).strip()


def parse_count(text: str | None) -> int | None:
    """Parse a star or fork label such as ``"\\n  1,234\\n"``.

    Whitespace (including newlines) and thousands separators are removed
    before parsing. Returns None when what remains is not a non-negative
    integer.
    """
    cleaned = _COUNT_NOISE.sub("", decode_text(text))
    try:
        value = int(cleaned)
    except ValueError:
        return None
    return value if value >= 0 else None


def parse_labelled_count(text: str | None) -> int | None:
    """Parse a count with adornment, e.g. ``"1,234 Repositories"`` -> 1234.

    Every non-digit character is dropped. Returns None when no digits remain.
    """
    digits = _NON_DIGITS.sub("", decode_text(text))
    if not digits:
        return None
    return int(digits)
