"""
Workspace: the composition root of a BLO Register session.

Loads settings, households and voters from the local JSON store, wires
repositories that write through to it, and builds the engines on top.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from .config import Config, get_config
from .logger import get_logger
from .models import OfficerSettings
from .persistence import (
    JSONStore,
    InMemoryHouseholdRepository,
    InMemoryVoterRepository,
    RestoredBackup,
    write_backup,
)
from .services import (
    DashboardStats,
    DataAssistant,
    ReconciliationEngine,
    RegisterReport,
    dashboard,
    register_report,
)

logger = get_logger(__name__)


@dataclass
class RestoreSummary:
    """What a restore replaced; None means the section was absent."""
    households: Optional[int] = None
    voters: Optional[int] = None
    settings_restored: bool = False


class Workspace:
    """
    A loaded data directory and the services bound to it.

    Attributes:
        config: Application configuration
        store: JSON file store (None for a purely in-memory workspace)
        households: Household repository
        voters: Voter repository
        settings: Officer settings
        reconciliation: Reconciliation engine over both repositories
    """

    def __init__(
        self,
        config: Config,
        store: Optional[JSONStore] = None,
        households: Optional[InMemoryHouseholdRepository] = None,
        voters: Optional[InMemoryVoterRepository] = None,
        settings: Optional[OfficerSettings] = None,
    ):
        self.config = config
        self.store = store
        self.households = households or InMemoryHouseholdRepository(store=store)
        self.voters = voters or InMemoryVoterRepository(store=store)
        self.settings = settings or OfficerSettings()
        self.reconciliation = ReconciliationEngine(self.households, self.voters)

    @classmethod
    def open(cls, config: Optional[Config] = None) -> "Workspace":
        """Load the workspace stored in config.data_dir."""
        config = config or get_config()
        store = JSONStore(config.data_dir)

        households = store.load_households()
        voters = store.load_voters()
        settings = store.load_settings()
        logger.debug(
            f"Opened workspace {config.data_dir}: "
            f"{len(households)} household(s), {len(voters)} voter(s)"
        )

        return cls(
            config=config,
            store=store,
            households=InMemoryHouseholdRepository(households, store=store),
            voters=InMemoryVoterRepository(voters, store=store),
            settings=settings,
        )

    def save_settings(self, settings: OfficerSettings) -> bool:
        self.settings = settings
        if self.store is None:
            return True
        return self.store.save_settings(settings)

    def clear_all(self) -> None:
        """Delete all households and voters and reset settings to defaults."""
        self.households.clear()
        self.voters.clear()
        self.save_settings(OfficerSettings())
        logger.warning("All census data, voter lists and settings have been cleared")

    def restore(self, restored: RestoredBackup) -> RestoreSummary:
        return restore_backup(self, restored)

    def backup(self, path: Path) -> Path:
        return write_backup(path, self.settings, self.households.list_all(), self.voters.list_all())

    def dashboard(self, today: Optional[date] = None) -> DashboardStats:
        return dashboard(self.households.list_all(), self.voters.list_all(), today)

    def register_report(self, today: Optional[date] = None) -> RegisterReport:
        return register_report(self.settings, self.households.list_all(), self.voters.list_all(), today)

    def assistant(self, client=None) -> DataAssistant:
        return DataAssistant(self.config.assistant, client=client)


def restore_backup(workspace: Workspace, restored: RestoredBackup) -> RestoreSummary:
    """
    Apply a decoded backup.

    Sections present in the backup replace the current ones; settings
    are overlaid on the current settings. Absent sections are untouched.
    """
    summary = RestoreSummary()

    if restored.households is not None:
        workspace.households.replace_all(restored.households)
        summary.households = len(restored.households)

    if restored.voters is not None:
        workspace.voters.replace_all(restored.voters)
        summary.voters = len(restored.voters)

    if restored.settings is not None:
        workspace.save_settings(workspace.settings.merged_with(restored.settings))
        summary.settings_restored = True

    logger.info(
        f"Restored backup: households={summary.households}, voters={summary.voters}, "
        f"settings={summary.settings_restored}"
    )
    return summary
