"""
Utility functions for the BLO Register application.
"""

from .dates import (
    AgeBreakdown,
    parse_date,
    calculate_age,
    precise_age,
    excel_serial_to_iso,
    normalize_date,
)

from .text import (
    cell_text,
    compact_name,
    house_key,
    normalize_header,
    contains_term,
)

__all__ = [
    # Date utilities
    "AgeBreakdown",
    "parse_date",
    "calculate_age",
    "precise_age",
    "excel_serial_to_iso",
    "normalize_date",

    # Text utilities
    "cell_text",
    "compact_name",
    "house_key",
    "normalize_header",
    "contains_term",
]
