"""
Census and voter spreadsheet import.

Reads the first worksheet of an Excel workbook (or a CSV file) and turns
loosely-structured rows into Household or Voter records:

- Headers are matched against a fixed alias table after normalization
  (lowercase, spaces and punctuation removed); unknown columns are ignored.
- Date cells may be real dates, Excel serial numbers or date strings.
- Sparse rows degrade to default values; only an unreadable file raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict, Any, Iterable

import pandas as pd

from ..exceptions import ImportParseError
from ..logger import get_logger
from ..models import Gender, Household, Member, RecordStatus, Voter, new_id, parse_optional_int
from ..persistence.repository import HouseholdRepository, VoterRepository
from ..utils.dates import calculate_age, normalize_date
from ..utils.text import cell_text, house_key, normalize_header

logger = get_logger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}

CENSUS_ALIASES: Dict[str, List[str]] = {
    "house_no": ["houseno", "housenumber"],
    "address": ["address"],
    "name": ["membername", "name", "fullname"],
    "dob": ["dob", "dateofbirth"],
    "gender": ["gender", "sex"],
    "is_hof": ["ishof", "hof"],
    "aadhaar": ["aadhar", "aadhaar", "aadharno", "aadhaarno"],
    "phone": ["phone", "mobile", "phoneno", "mobileno"],
}

VOTER_ALIASES: Dict[str, List[str]] = {
    "epic_no": ["epicno", "epic"],
    "first_name": ["firstname"],
    "last_name": ["lastname"],
    "name": ["name", "fullname", "membername"],
    "gender": ["gender", "sex"],
    "age": ["age"],
    "dob": ["dob", "dateofbirth"],
    "relation_type": ["rlntype", "relationtype"],
    "relation_name": ["rlnname", "relationname", "rln"],
    "house_no": ["houseno", "address"],
    "section": ["section"],
    "section_number": ["sectionno", "sectionnumber"],
    "part_no": ["partno"],
    "part_serial_no": ["partserialno", "slnoinpart", "serialno"],
}

TRUTHY = {"yes", "true", "y", "1"}


class ImportMode(str, Enum):
    """How imported records combine with the existing collection."""
    MERGE = "merge"
    REPLACE = "replace"


@dataclass
class CensusImport:
    households: List[Household] = field(default_factory=list)
    dropped_rows: int = 0  # rows without a house number

    @property
    def member_count(self) -> int:
        return sum(len(h.members) for h in self.households)


@dataclass
class VoterImport:
    voters: List[Voter] = field(default_factory=list)

    @property
    def invalid_epic_count(self) -> int:
        """Voters whose EPIC number is not 3 letters + 7 digits."""
        return sum(1 for v in self.voters if not v.epic_valid)


def read_first_sheet(source: Path) -> List[Dict[str, Any]]:
    """
    Read rows of the first worksheet as dicts keyed by header.

    Args:
        source: .xlsx/.xls workbook or .csv file

    Returns:
        One dict per row; empty cells are ""

    Raises:
        ImportParseError: If the file cannot be read as a spreadsheet
    """
    path = Path(source)
    if not path.exists():
        raise ImportParseError(f"File not found: {path}", file_path=str(path))

    try:
        if path.suffix.lower() == ".csv":
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(path, sheet_name=0, dtype=object)
    except Exception as e:
        raise ImportParseError(
            "Failed to parse the file. Please ensure it is a valid Excel file",
            file_path=str(path),
            reason=str(e),
        ) from e

    df = df.astype(object).where(pd.notna(df), "")
    df.columns = [cell_text(c) for c in df.columns]
    rows = df.to_dict(orient="records")
    logger.debug(f"Read {len(rows)} row(s) from {path.name}")
    return rows


def _header_map(rows: List[Dict[str, Any]], aliases: Dict[str, List[str]]) -> Dict[str, str]:
    """Map each field to the first file header matching one of its aliases."""
    if not rows:
        return {}
    by_normalized: Dict[str, str] = {}
    for header in rows[0].keys():
        by_normalized.setdefault(normalize_header(header), header)

    mapping = {}
    for field_name, candidates in aliases.items():
        for alias in candidates:
            if alias in by_normalized:
                mapping[field_name] = by_normalized[alias]
                break
    return mapping


def _get(row: Dict[str, Any], headers: Dict[str, str], field_name: str) -> Any:
    header = headers.get(field_name)
    return row.get(header, "") if header else ""


def parse_census_rows(rows: List[Dict[str, Any]]) -> CensusImport:
    """
    Group census rows into households by house number.

    Rows without a house number are dropped and counted. Every resulting
    household has exactly one head of family: the first flagged member,
    or the first member when none is flagged.
    """
    headers = _header_map(rows, CENSUS_ALIASES)
    result = CensusImport()
    by_house: Dict[str, Household] = {}

    for row in rows:
        house_no = cell_text(_get(row, headers, "house_no"))
        if not house_no:
            result.dropped_rows += 1
            continue

        member = Member(
            id=new_id("m"),
            name=cell_text(_get(row, headers, "name")) or "Unnamed",
            dob=normalize_date(_get(row, headers, "dob")),
            gender=Gender.parse(_get(row, headers, "gender")),
            is_hof=cell_text(_get(row, headers, "is_hof")).lower() in TRUTHY,
            aadhaar=_get(row, headers, "aadhaar"),
            phone=_get(row, headers, "phone"),
            status=RecordStatus.ACTIVE,
        )

        key = house_key(house_no)
        household = by_house.get(key)
        if household is None:
            household = Household(house_no=house_no, address=_get(row, headers, "address"))
            by_house[key] = household
            result.households.append(household)
        household.members.append(member)

    for household in result.households:
        household.normalize_head_of_family()

    if result.dropped_rows:
        logger.warning(f"Dropped {result.dropped_rows} census row(s) without a House No")
    return result


def parse_voter_rows(rows: List[Dict[str, Any]], today: Optional[date] = None) -> VoterImport:
    """
    Convert roll rows into voters.

    Name comes from a Name column, else First + Last name, else
    "Unnamed". Age comes from an integer Age column, else from the date
    of birth, else 0.
    """
    headers = _header_map(rows, VOTER_ALIASES)
    result = VoterImport()

    for row in rows:
        name = cell_text(_get(row, headers, "name"))
        if not name:
            first = cell_text(_get(row, headers, "first_name"))
            last = cell_text(_get(row, headers, "last_name"))
            name = f"{first} {last}".strip()

        dob = normalize_date(_get(row, headers, "dob")) or None

        age = parse_optional_int(_get(row, headers, "age"))
        if age is None and dob:
            age = calculate_age(dob, today)

        result.voters.append(Voter(
            id=new_id("v"),
            epic_no=cell_text(_get(row, headers, "epic_no")),
            name=name or "Unnamed",
            gender=Gender.parse(_get(row, headers, "gender")),
            age=age or 0,
            house_no=cell_text(_get(row, headers, "house_no")),
            section=cell_text(_get(row, headers, "section")) or None,
            section_number=parse_optional_int(_get(row, headers, "section_number")),
            part_no=parse_optional_int(_get(row, headers, "part_no")),
            part_serial_no=parse_optional_int(_get(row, headers, "part_serial_no")),
            status=RecordStatus.ACTIVE,
            linked_member_id=None,
            dob=dob,
            relation_type=cell_text(_get(row, headers, "relation_type")) or None,
            relation_name=cell_text(_get(row, headers, "relation_name")) or None,
        ))

    return result


def load_census(source: Path) -> CensusImport:
    return parse_census_rows(read_first_sheet(source))


def load_voters(source: Path, today: Optional[date] = None) -> VoterImport:
    return parse_voter_rows(read_first_sheet(source), today)


def apply_census_import(
    repo: HouseholdRepository,
    households: Iterable[Household],
    mode: ImportMode = ImportMode.MERGE,
) -> int:
    """
    Apply parsed households to the repository.

    Returns:
        Number of households in the import (REPLACE) or newly added (MERGE)
    """
    households = list(households)
    mode = ImportMode(mode)
    if mode is ImportMode.REPLACE:
        repo.replace_all(households)
        count = len(households)
    else:
        count = repo.merge(households)
    logger.info(f"Census import ({mode.value}): {count} household(s)")
    return count


def apply_voter_import(
    repo: VoterRepository,
    voters: Iterable[Voter],
    mode: ImportMode = ImportMode.MERGE,
) -> int:
    """Apply parsed voters: REPLACE swaps the roll, MERGE appends."""
    voters = list(voters)
    mode = ImportMode(mode)
    if mode is ImportMode.REPLACE:
        repo.replace_all(voters)
        count = len(voters)
    else:
        count = repo.merge(voters)
    logger.info(f"Voter import ({mode.value}): {count} voter(s)")
    return count
