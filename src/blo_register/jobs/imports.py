"""
Jobs that bring data into the workspace: spreadsheet imports and
backup restore. Parsing completes before anything is applied, so a
failed run leaves the workspace untouched.
"""

from __future__ import annotations

from pathlib import Path

from ..importers import ImportMode, apply_census_import, apply_voter_import, load_census, load_voters
from ..persistence import read_backup
from .base import BaseJob, JobContext


class _FileJob(BaseJob):
    def __init__(self, context: JobContext, source: Path):
        super().__init__(context)
        self.source = Path(source)

    def validate(self) -> bool:
        if not self.source.is_file():
            return self.fail(f"File not found: {self.source}")
        return True


class CensusImportJob(_FileJob):
    """
    Import a census spreadsheet.

    result: number of households imported (REPLACE) or added (MERGE)
    """

    name = "CensusImportJob"

    def __init__(self, context: JobContext, source: Path, mode: ImportMode = ImportMode.MERGE):
        super().__init__(context, source)
        self.mode = ImportMode(mode)
        self.dropped_rows = 0

    def process(self) -> bool:
        parsed = load_census(self.source)
        self.dropped_rows = parsed.dropped_rows
        self.log_info(
            "Parsed census file",
            households=len(parsed.households),
            members=parsed.member_count,
            dropped=parsed.dropped_rows,
        )
        self.result = apply_census_import(self.workspace.households, parsed.households, self.mode)
        return True


class VoterImportJob(_FileJob):
    """
    Import a voter roll spreadsheet.

    result: number of voters imported
    """

    name = "VoterImportJob"

    def __init__(self, context: JobContext, source: Path, mode: ImportMode = ImportMode.MERGE):
        super().__init__(context, source)
        self.mode = ImportMode(mode)

    def process(self) -> bool:
        parsed = load_voters(self.source, self.context.reference_date())
        self.log_info("Parsed voter file", voters=len(parsed.voters), invalid_epic=parsed.invalid_epic_count)
        self.result = apply_voter_import(self.workspace.voters, parsed.voters, self.mode)
        return True


class RestoreJob(_FileJob):
    """
    Restore a JSON backup.

    result: RestoreSummary
    """

    name = "RestoreJob"

    def process(self) -> bool:
        restored = read_backup(self.source)
        if restored.is_empty:
            self.log_warning("Backup file did not contain any data to restore")
        self.result = self.workspace.restore(restored)
        return True
