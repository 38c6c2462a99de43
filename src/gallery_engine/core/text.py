"""Accent- and case-insensitive text matching."""

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def simplify_text(text: str | None) -> str:
    """Fold text for searching.

    - Strips accents (NFD decomposition, combining marks dropped)
    - Lowercases
    - Removes all whitespace
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE_RE.sub("", stripped.lower())


def smart_includes(target: str | None, query: str | None) -> bool:
    """Check whether the simplified ``query`` occurs in the simplified ``target``."""
    return simplify_text(query) in simplify_text(target)
