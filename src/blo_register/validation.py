"""
Validation rules for interactive household and member edits.

These guard single submissions (add/update) and raise ValidationError.
Bulk imports and backup restores do not pass through here; they degrade
gracefully and only normalize the head-of-family invariant.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

from .exceptions import ValidationError
from .models import Household, Member
from .utils.dates import calculate_age, parse_date
from .utils.text import house_key

MIN_HOF_AGE = 18
AADHAAR_DIGITS = 12
PHONE_DIGITS = 10


def validate_identifiers(member: Member) -> None:
    """Aadhaar must be 12 digits and phone 10 digits when present."""
    if member.aadhaar and not re.fullmatch(rf"\d{{{AADHAAR_DIGITS}}}", member.aadhaar):
        raise ValidationError(
            "Aadhaar must be 12 digits",
            field_name="aadhar", field_value=member.aadhaar, expected="12 digits",
        )
    if member.phone and not re.fullmatch(rf"\d{{{PHONE_DIGITS}}}", member.phone):
        raise ValidationError(
            "Phone must be 10 digits",
            field_name="phone", field_value=member.phone, expected="10 digits",
        )


def validate_member(member: Member, today: Optional[date] = None) -> None:
    """Name and a parseable date of birth are required for every member."""
    if not member.name:
        raise ValidationError("Member name is required", field_name="name")
    if not member.dob:
        raise ValidationError("Member date of birth is required", field_name="dob")
    if parse_date(member.dob) is None:
        raise ValidationError(
            "Member date of birth is not a valid date",
            field_name="dob", field_value=member.dob, expected="YYYY-MM-DD",
        )
    if member.is_hof:
        validate_head_of_family(member, today)


def validate_head_of_family(member: Member, today: Optional[date] = None) -> None:
    age = calculate_age(member.dob, today)
    if age is None or age < MIN_HOF_AGE:
        raise ValidationError(
            "Head of Family must be at least 18 years old",
            field_name="dob", field_value=member.dob, expected=f">= {MIN_HOF_AGE} years",
        )
    validate_identifiers(member)


def validate_unique_house_no(household: Household, others: Iterable[Household]) -> None:
    key = house_key(household.house_no)
    for other in others:
        if other.id != household.id and house_key(other.house_no) == key:
            raise ValidationError(
                "This House Number already exists",
                field_name="houseNo", field_value=household.house_no,
            )


def validate_household(
    household: Household,
    others: Iterable[Household] = (),
    today: Optional[date] = None,
) -> None:
    """
    Validate a household submission.

    Args:
        household: Household being added or updated
        others: Existing households (house number must be unique among them)
        today: Reference date for the HOF age check
    """
    if not household.house_no:
        raise ValidationError("House No is required", field_name="houseNo")

    validate_unique_house_no(household, others)

    hofs = [m for m in household.members if m.is_hof]
    if len(hofs) != 1:
        raise ValidationError(
            "A household must have exactly one Head of Family",
            field_name="isHof", field_value=len(hofs), expected="1",
        )

    for member in household.members:
        validate_member(member, today)
