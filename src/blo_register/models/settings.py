"""
Officer profile used on reports.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from typing import Any

from ..utils.text import cell_text

# Python attribute -> serialized key
_KEYS = {
    "officer_name": "bloName",
    "designation": "bloDesignation",
    "address": "bloAddress",
    "mobile": "bloMobile",
    "constituency": "assemblyConstituency",
    "part": "part",
}


@dataclass
class OfficerSettings:
    """
    The single process-wide record describing the officer and jurisdiction.

    Edited in place; no history is kept.
    """
    officer_name: str = "BLO Name"
    designation: str = ""
    address: str = ""
    mobile: str = ""
    constituency: str = "Constituency"
    part: str = ""  # part number and name, e.g. "244 - Sulur"

    def to_dict(self) -> dict[str, Any]:
        return {_KEYS[k]: v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OfficerSettings":
        return cls().merged_with(data)

    def merged_with(self, data: dict[str, Any]) -> "OfficerSettings":
        """
        Overlay a partial serialized settings dict onto these settings.

        Keys that are absent keep their current value; unknown keys
        (such as the retired sync credentials) are ignored.
        """
        changes = {
            attr: cell_text(data[key])
            for attr, key in _KEYS.items()
            if key in data and data[key] is not None
        }
        return replace(self, **changes)
