"""
Enumerations shared by census and electoral records.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> "Gender":
        """Normalize by first letter: 'M' -> Male, 'F' -> Female, else Other."""
        if isinstance(value, Gender):
            return value
        text = str(value or "").strip().upper()
        if text.startswith("M"):
            return cls.MALE
        if text.startswith("F"):
            return cls.FEMALE
        return cls.OTHER


class RecordStatus(str, Enum):
    """
    Lifecycle status of a member or voter.

    A flat set, not a workflow: any status may follow any other.
    """
    ACTIVE = "Active"
    EXPIRED = "Expired"
    SHIFTED = "Shifted"
    DUPLICATE = "Duplicate"

    @classmethod
    def parse(cls, value: Any, strict: bool = False) -> "RecordStatus":
        """
        Case-insensitive lookup by label.

        Unknown values fall back to Active unless strict is set, in which
        case ValueError is raised.
        """
        if isinstance(value, RecordStatus):
            return value
        text = str(value or "").strip().lower()
        for status in cls:
            if status.value.lower() == text:
                return status
        if strict:
            labels = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown status {value!r} (expected one of: {labels})")
        return cls.ACTIVE
