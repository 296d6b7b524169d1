"""
Census data models.

A Household is a residence identified by its house number; its Members
are kept in display order. Exactly one member is the head of family
(HOF), who alone carries the Aadhaar and phone contact fields.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional, List, Any

from .enums import Gender, RecordStatus
from ..utils.text import cell_text


def new_id(prefix: str) -> str:
    """Generate a stable record identifier such as 'm_3f2a9c1b0d4e'."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _optional_text(value: Any) -> Optional[str]:
    text = cell_text(value)
    return text or None


@dataclass
class Member:
    """A person belonging to a household."""

    id: str = field(default_factory=lambda: new_id("m"))
    name: str = ""
    dob: str = ""  # ISO date, "" when unknown
    gender: Gender = Gender.OTHER
    is_hof: bool = False

    # Only meaningful for the head of family
    aadhaar: Optional[str] = None
    phone: Optional[str] = None

    status: RecordStatus = RecordStatus.ACTIVE

    def __post_init__(self):
        self.name = cell_text(self.name)
        self.dob = cell_text(self.dob)
        self.gender = Gender.parse(self.gender)
        self.status = RecordStatus.parse(self.status)
        self.aadhaar = _optional_text(self.aadhaar)
        self.phone = _optional_text(self.phone)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used by backups and storage."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "dob": self.dob,
            "gender": self.gender.value,
            "isHof": self.is_hof,
            "status": self.status.value,
        }
        if self.aadhaar:
            data["aadhar"] = self.aadhaar
        if self.phone:
            data["phone"] = self.phone
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Member":
        """Create Member from dictionary (missing fields take defaults)."""
        return cls(
            id=cell_text(data.get("id")) or new_id("m"),
            name=data.get("name", ""),
            dob=data.get("dob", ""),
            gender=data.get("gender", ""),
            is_hof=bool(data.get("isHof", data.get("is_hof", False))),
            aadhaar=data.get("aadhar", data.get("aadhaar")),
            phone=data.get("phone"),
            status=data.get("status", RecordStatus.ACTIVE),
        )


@dataclass
class Household:
    """A residence record containing one or more members."""

    id: str = field(default_factory=lambda: new_id("h"))
    house_no: str = ""
    address: str = ""
    members: List[Member] = field(default_factory=list)

    def __post_init__(self):
        self.house_no = cell_text(self.house_no)
        self.address = cell_text(self.address)

    @property
    def head_of_family(self) -> Optional[Member]:
        return next((m for m in self.members if m.is_hof), None)

    def get_member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def normalize_head_of_family(self) -> None:
        """
        Enforce the single-HOF invariant in place.

        The first flagged member stays head of family and any later flags
        are cleared; with no flag at all the first member is promoted.
        """
        if not self.members:
            return
        hof_index = next((i for i, m in enumerate(self.members) if m.is_hof), 0)
        for i, member in enumerate(self.members):
            member.is_hof = i == hof_index

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "houseNo": self.house_no,
            "address": self.address,
            "members": [m.to_dict() for m in self.members],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Household":
        members = data.get("members") or []
        return cls(
            id=cell_text(data.get("id")) or new_id("h"),
            house_no=data.get("houseNo", data.get("house_no", "")),
            address=data.get("address", ""),
            members=[Member.from_dict(m) for m in members if isinstance(m, dict)],
        )


@dataclass(frozen=True)
class MemberRef:
    """
    A member annotated with its household context.

    Produced by flattening households; used for link suggestions and for
    report rows that need the house number and HOF contact.
    """
    member: Member
    household_id: str
    house_no: str
    hof_name: str = ""
    hof_phone: Optional[str] = None

    @property
    def id(self) -> str:
        return self.member.id

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def contact_phone(self) -> str:
        return self.member.phone or self.hof_phone or ""


def flatten_members(households: List[Household]) -> List[MemberRef]:
    """Flatten households into MemberRefs, household order then member order."""
    refs: List[MemberRef] = []
    for household in households:
        hof = household.head_of_family
        for member in household.members:
            refs.append(MemberRef(
                member=member,
                household_id=household.id,
                house_no=household.house_no,
                hof_name=hof.name if hof else "",
                hof_phone=hof.phone if hof else None,
            ))
    return refs
