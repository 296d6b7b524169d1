"""
Voter data models.

Represents entries of the official electoral roll as tracked by the BLO.
A voter may carry a weak reference (linked_member_id) to the census
member believed to be the same person; the member may since have been
deleted, so the reference is never assumed to resolve.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Any

from .enums import Gender, RecordStatus
from .household import new_id
from ..utils.text import cell_text


def parse_optional_int(value: Any) -> Optional[int]:
    """Lenient integer parse: '12', 12.0 and ' 7 ' parse; '', None and 'abc' give None."""
    text = cell_text(value)
    if not text:
        return None
    match = re.match(r"^[+-]?\d+", text)
    if not match:
        return None
    return int(match.group(0))


@dataclass
class Voter:
    """
    An elector on the roll.

    house_no is free text matched heuristically against census house
    numbers; it is not a foreign key.
    """

    id: str = field(default_factory=lambda: new_id("v"))
    epic_no: str = ""
    name: str = ""
    gender: Gender = Gender.OTHER
    age: int = 0
    house_no: str = ""

    # Roll grouping metadata
    section: Optional[str] = None
    section_number: Optional[int] = None
    part_no: Optional[int] = None
    part_serial_no: Optional[int] = None

    status: RecordStatus = RecordStatus.ACTIVE
    linked_member_id: Optional[str] = None

    dob: Optional[str] = None
    relation_type: Optional[str] = None
    relation_name: Optional[str] = None

    def __post_init__(self):
        """Clean data after initialization."""
        self.epic_no = cell_text(self.epic_no).upper()
        self.name = cell_text(self.name)
        self.house_no = cell_text(self.house_no)
        self.gender = Gender.parse(self.gender)
        self.status = RecordStatus.parse(self.status)
        self.age = parse_optional_int(self.age) or 0
        self.linked_member_id = cell_text(self.linked_member_id) or None

    @property
    def is_linked(self) -> bool:
        return bool(self.linked_member_id)

    @property
    def epic_valid(self) -> bool:
        return self.validate_epic(self.epic_no)

    @staticmethod
    def validate_epic(epic: str) -> bool:
        """
        Validate EPIC number format.

        Indian EPIC format: 3 letters followed by 7 digits (e.g., ABC1234567).
        Placeholder EPICs are still accepted as records; this is informational.
        """
        if not epic:
            return False
        return bool(re.fullmatch(r"[A-Z]{3}\d{7}", epic.upper()))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used by backups and storage."""
        data: dict[str, Any] = {
            "id": self.id,
            "epicNo": self.epic_no,
            "name": self.name,
            "gender": self.gender.value,
            "age": self.age,
            "houseNo": self.house_no,
            "status": self.status.value,
        }
        optional = {
            "section": self.section,
            "sectionNumber": self.section_number,
            "linkedMemberId": self.linked_member_id,
            "dob": self.dob,
            "relationType": self.relation_type,
            "relationName": self.relation_name,
            "partNo": self.part_no,
            "partSerialNo": self.part_serial_no,
        }
        data.update({k: v for k, v in optional.items() if v not in (None, "")})
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Voter":
        """Create Voter from dictionary."""
        return cls(
            id=cell_text(data.get("id")) or new_id("v"),
            epic_no=data.get("epicNo", ""),
            name=data.get("name", ""),
            gender=data.get("gender", ""),
            age=data.get("age", 0),
            house_no=data.get("houseNo", ""),
            section=cell_text(data.get("section")) or None,
            section_number=parse_optional_int(data.get("sectionNumber")),
            part_no=parse_optional_int(data.get("partNo")),
            part_serial_no=parse_optional_int(data.get("partSerialNo")),
            status=data.get("status", RecordStatus.ACTIVE),
            linked_member_id=data.get("linkedMemberId"),
            dob=cell_text(data.get("dob")) or None,
            relation_type=cell_text(data.get("relationType")) or None,
            relation_name=cell_text(data.get("relationName")) or None,
        )
