"""
Data persistence layer.

Provides the repository interfaces the engines depend on, the local
JSON file store, and JSON backup/restore.
"""

from .json_store import JSONStore
from .repository import (
    HouseholdRepository,
    VoterRepository,
    InMemoryHouseholdRepository,
    InMemoryVoterRepository,
)
from .backup import (
    RestoredBackup,
    build_backup,
    write_backup,
    parse_backup,
    read_backup,
    decode_household,
)

__all__ = [
    "JSONStore",
    "HouseholdRepository",
    "VoterRepository",
    "InMemoryHouseholdRepository",
    "InMemoryVoterRepository",
    "RestoredBackup",
    "build_backup",
    "write_backup",
    "parse_backup",
    "read_backup",
    "decode_household",
]
