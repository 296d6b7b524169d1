"""
JSON backup and restore.

Backup shape:
    {"bloInfo": {...settings...}, "households": [...], "voters": [...]}

Restore also accepts:
- "settings" as an alternate key to "bloInfo"
- a legacy household shape where the head of family is a separate
  "headOfFamily" object (and the house number may be "houseNumber")

Shape detection happens here, before any business logic sees the data;
the engines only ever receive canonical Household records.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Any, Union

from ..exceptions import BackupFormatError
from ..models import Household, Member, Voter, OfficerSettings
from ..utils.text import cell_text

BACKUP_SECTIONS = ("households", "voters", "bloInfo", "settings")


def _present(value: Any) -> bool:
    """A section counts as present when set, even to an empty list."""
    return value is not None and value != "" and value is not False and value != 0


@dataclass
class RestoredBackup:
    """
    Decoded backup content.

    A section is None when the backup did not carry it; such sections
    are left untouched on restore.
    """
    households: Optional[List[Household]] = None
    voters: Optional[List[Voter]] = None
    settings: Optional[dict[str, Any]] = None  # partial, overlaid on current settings

    @property
    def is_empty(self) -> bool:
        return not self.households and not self.voters and not self.settings


def build_backup(
    settings: OfficerSettings,
    households: List[Household],
    voters: List[Voter],
) -> dict[str, Any]:
    """Build the backup document."""
    return {
        "bloInfo": settings.to_dict(),
        "households": [h.to_dict() for h in households],
        "voters": [v.to_dict() for v in voters],
    }


def write_backup(
    path: Path,
    settings: OfficerSettings,
    households: List[Household],
    voters: List[Voter],
) -> Path:
    """Write the backup document as UTF-8 JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(build_backup(settings, households, voters), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path


def _decode_legacy_household(data: dict[str, Any]) -> Household:
    hof = Member.from_dict({**data["headOfFamily"], "isHof": True})
    others = []
    for raw in data.get("members") or []:
        if not isinstance(raw, dict) or cell_text(raw.get("id")) == hof.id:
            continue
        others.append(Member.from_dict({**raw, "isHof": False}))
    return Household(
        id=cell_text(data.get("id")) or Household().id,
        house_no=data.get("houseNumber") or data.get("houseNo") or "",
        address=data.get("address", ""),
        members=[hof, *others],
    )


def decode_household(data: dict[str, Any]) -> Household:
    """
    Decode one household from either backup shape.

    The legacy shape is recognized by a "headOfFamily" object. Both
    shapes come out with exactly one head of family (when non-empty).
    """
    if isinstance(data.get("headOfFamily"), dict):
        household = _decode_legacy_household(data)
    else:
        household = Household.from_dict(data)
    household.normalize_head_of_family()
    return household


def parse_backup(
    payload: Union[str, bytes, dict[str, Any]],
    file_path: Optional[str] = None,
) -> RestoredBackup:
    """
    Decode a backup payload.

    Args:
        payload: JSON text/bytes or an already-parsed object
        file_path: Source file, for error details

    Returns:
        RestoredBackup with the sections that were present

    Raises:
        BackupFormatError: not JSON, not an object, or no known section
    """
    data: Any = payload
    if isinstance(payload, (str, bytes)):
        if not payload.strip():
            raise BackupFormatError("Backup file appears to be empty", file_path=file_path)
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise BackupFormatError(
                f"Restore failed. The file is not a valid JSON backup file ({e})",
                file_path=file_path,
            ) from e

    if not isinstance(data, dict) or not any(_present(data.get(key)) for key in BACKUP_SECTIONS):
        raise BackupFormatError(
            "Invalid backup file. Please select a valid BLO Register JSON backup",
            file_path=file_path,
        )

    restored = RestoredBackup()

    if isinstance(data.get("households"), list):
        restored.households = [decode_household(h) for h in data["households"] if isinstance(h, dict)]

    if isinstance(data.get("voters"), list):
        restored.voters = [Voter.from_dict(v) for v in data["voters"] if isinstance(v, dict)]

    settings = data.get("bloInfo") or data.get("settings")
    if isinstance(settings, dict):
        restored.settings = settings

    return restored


def read_backup(path: Path) -> RestoredBackup:
    """Read and decode a backup file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BackupFormatError(
            f"Error reading file. Please ensure it is a valid backup file ({e})",
            file_path=str(path),
        ) from e
    return parse_backup(text, file_path=str(path))
