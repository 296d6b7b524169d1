"""
Data models for the BLO Register application.

These models represent the census and electoral roll records and are
designed to serialize to the camelCase JSON used by backups.
"""

from .enums import Gender, RecordStatus
from .household import Member, Household, MemberRef, flatten_members, new_id
from .voter import Voter, parse_optional_int
from .settings import OfficerSettings

__all__ = [
    # Shared enums
    "Gender",
    "RecordStatus",

    # Census models
    "Member",
    "Household",
    "MemberRef",
    "flatten_members",
    "new_id",

    # Electoral roll models
    "Voter",
    "parse_optional_int",

    # Officer profile
    "OfficerSettings",
]
