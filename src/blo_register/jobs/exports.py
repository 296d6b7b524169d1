"""
Jobs that write files out of the workspace.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..exporters import export_census, export_voters, write_register_pdf
from .base import BaseJob, JobContext


class _ExportJob(BaseJob):
    """An export to `path`, defaulting to <exports_dir>/<default_filename>."""

    default_filename: str = "export"

    def __init__(self, context: JobContext, path: Optional[Path] = None):
        super().__init__(context)
        self.path = Path(path) if path else self.config.get_export_path(self.default_filename)


class CensusExportJob(_ExportJob):
    name = "CensusExportJob"
    default_filename = "census_data_export.xlsx"

    def process(self) -> bool:
        self.result = export_census(self.workspace.households.list_all(), self.path)
        return True


class VoterExportJob(_ExportJob):
    name = "VoterExportJob"
    default_filename = "voter_list_export.xlsx"

    def process(self) -> bool:
        self.result = export_voters(self.workspace.voters.list_all(), self.path)
        return True


class RegisterExportJob(_ExportJob):
    """Compute the register report, then render it to PDF."""

    name = "RegisterExportJob"
    default_filename = "BLO_Register_Report.pdf"

    def process(self) -> bool:
        report = self.workspace.register_report(self.context.reference_date())
        self.log_debug(
            "Register computed",
            prospective=len(report.prospective),
            unregistered=len(report.unregistered),
            marked=len(report.marked),
        )
        self.result = write_register_pdf(report, self.path, self.config.report)
        return True


class BackupJob(_ExportJob):
    name = "BackupJob"

    def __init__(self, context: JobContext, path: Optional[Path] = None):
        if path is None:
            self.default_filename = f"blo_backup_{context.reference_date():%Y-%m-%d}.json"
        super().__init__(context, path)

    def process(self) -> bool:
        self.result = self.workspace.backup(self.path)
        return True
