"""Text normalization helpers."""

import re
import unicodedata


def strip_accents(text: str) -> str:
    """Remove combining diacritics ("Farmácia" -> "Farmacia")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(text: str) -> str:
    """Lowercase, accent-free, whitespace-collapsed form used for name lookups."""
    return collapse_whitespace(strip_accents(text).lower())


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
