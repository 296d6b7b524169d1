"""
JSON file-based storage implementation.

Persists the three collections of the application as JSON files:
- <data_dir>/households.json
- <data_dir>/voters.json
- <data_dir>/settings.json

Writes are best-effort: a failed write is logged and reported as False,
never raised, so the in-memory state stays authoritative for the session
even when it diverges from disk until the next successful write.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, List, Any

from ..exceptions import StorageError
from ..logger import get_logger
from ..models import Household, Voter, OfficerSettings

logger = get_logger(__name__)

HOUSEHOLDS_FILE = "households.json"
VOTERS_FILE = "voters.json"
SETTINGS_FILE = "settings.json"


class JSONStore:
    """
    JSON file-based storage for households, voters and officer settings.
    """

    def __init__(self, data_dir: Path):
        """
        Initialize JSON store.

        Args:
            data_dir: Directory holding the JSON files
        """
        self.data_dir = Path(data_dir)

    def _path(self, filename: str) -> Path:
        return self.data_dir / filename

    def _read_json(self, filename: str) -> Optional[Any]:
        """
        Read a JSON file.

        Returns None if the file is missing or unreadable; an unreadable
        file is logged and treated as empty rather than aborting startup.
        """
        path = self._path(filename)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            error = StorageError(f"Could not load {filename}: {e}", file_path=str(path), operation="load")
            logger.error(str(error))
            return None

    def _write_json(self, filename: str, data: Any) -> bool:
        """Write a JSON file; log and return False on failure."""
        path = self._path(filename)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps(data, ensure_ascii=False, indent=2),
                encoding="utf-8"
            )
        except (OSError, TypeError, ValueError) as e:
            error = StorageError(f"Could not save {filename}: {e}", file_path=str(path), operation="save")
            logger.error(str(error))
            return False
        logger.debug(f"Saved {path}")
        return True

    def load_households(self) -> List[Household]:
        data = self._read_json(HOUSEHOLDS_FILE)
        if not isinstance(data, list):
            return []
        return [Household.from_dict(h) for h in data if isinstance(h, dict)]

    def save_households(self, households: List[Household]) -> bool:
        return self._write_json(HOUSEHOLDS_FILE, [h.to_dict() for h in households])

    def load_voters(self) -> List[Voter]:
        data = self._read_json(VOTERS_FILE)
        if not isinstance(data, list):
            return []
        return [Voter.from_dict(v) for v in data if isinstance(v, dict)]

    def save_voters(self, voters: List[Voter]) -> bool:
        return self._write_json(VOTERS_FILE, [v.to_dict() for v in voters])

    def load_settings(self) -> OfficerSettings:
        data = self._read_json(SETTINGS_FILE)
        if not isinstance(data, dict):
            return OfficerSettings()
        return OfficerSettings.from_dict(data)

    def save_settings(self, settings: OfficerSettings) -> bool:
        return self._write_json(SETTINGS_FILE, settings.to_dict())

    def exists(self) -> bool:
        """Check if any collection has been persisted yet."""
        return any(
            self._path(name).exists()
            for name in (HOUSEHOLDS_FILE, VOTERS_FILE, SETTINGS_FILE)
        )
