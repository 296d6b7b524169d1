"""
Excel export of the census and the voter roll.

Column names match the importer's aliases so exported files can be
imported again.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from ..logger import get_logger
from ..models import Household, Voter

logger = get_logger(__name__)

CENSUS_COLUMNS = [
    "House No", "Address", "Member Name", "DOB", "Gender", "Is HOF", "Aadhar", "Phone", "Status",
]

VOTER_COLUMNS = [
    "EPIC No", "Name", "Gender", "Age", "House No", "Section", "Section Number",
    "Part No", "Part Serial No", "Status", "Linked Member ID",
]

CENSUS_SHEET = "Census Data"
VOTER_SHEET = "Voter List"


def census_frame(households: List[Household]) -> pd.DataFrame:
    """One row per member, flattened with its household's fields."""
    rows = [
        {
            "House No": h.house_no,
            "Address": h.address,
            "Member Name": m.name,
            "DOB": m.dob,
            "Gender": m.gender.value,
            "Is HOF": "Yes" if m.is_hof else "No",
            "Aadhar": m.aadhaar or "",
            "Phone": m.phone or "",
            "Status": m.status.value,
        }
        for h in households
        for m in h.members
    ]
    return pd.DataFrame(rows, columns=CENSUS_COLUMNS)


def voter_frame(voters: List[Voter]) -> pd.DataFrame:
    rows = [
        {
            "EPIC No": v.epic_no,
            "Name": v.name,
            "Gender": v.gender.value,
            "Age": v.age,
            "House No": v.house_no,
            "Section": v.section or "",
            "Section Number": v.section_number if v.section_number is not None else "",
            "Part No": v.part_no if v.part_no is not None else "",
            "Part Serial No": v.part_serial_no if v.part_serial_no is not None else "",
            "Status": v.status.value,
            "Linked Member ID": v.linked_member_id or "",
        }
        for v in voters
    ]
    return pd.DataFrame(rows, columns=VOTER_COLUMNS)


def _write(df: pd.DataFrame, path: Path, sheet_name: str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False, encoding="utf-8")
    else:
        df.to_excel(path, sheet_name=sheet_name, index=False, engine="openpyxl")
    logger.info(f"Exported {len(df)} row(s) to {path}")
    return path


def export_census(households: List[Household], path: Path) -> Path:
    """Write the census sheet (.xlsx, or .csv by suffix)."""
    return _write(census_frame(households), path, CENSUS_SHEET)


def export_voters(voters: List[Voter], path: Path) -> Path:
    """Write the voter list sheet (.xlsx, or .csv by suffix)."""
    return _write(voter_frame(voters), path, VOTER_SHEET)
