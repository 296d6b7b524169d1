"""
Text normalization helpers shared by matching, search and import.
"""

from __future__ import annotations

import re
from typing import Any

_NON_ALNUM = re.compile(r"[\W_]+", re.UNICODE)


def cell_text(value: Any) -> str:
    """Stringify a spreadsheet or JSON value, mapping None/NaN to ''."""
    if value is None:
        return ""
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def compact_name(name: Any) -> str:
    """Lowercase a name and drop all whitespace ("Ravi  Kumar" -> "ravikumar")."""
    return "".join(cell_text(name).lower().split())


def house_key(house_no: Any) -> str:
    """Natural key form of a house number: trimmed and lowercased."""
    return cell_text(house_no).lower()


def normalize_header(header: Any) -> str:
    """Header form used for alias lookup: lowercase, no spaces or punctuation."""
    return _NON_ALNUM.sub("", cell_text(header).lower())


def contains_term(haystack: Any, term: str) -> bool:
    """Case-insensitive substring test."""
    return term.lower() in cell_text(haystack).lower()
