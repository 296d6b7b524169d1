"""
Operator-level jobs: imports, exports, backup and restore.
"""

from .base import BaseJob, JobContext
from .imports import CensusImportJob, VoterImportJob, RestoreJob
from .exports import CensusExportJob, VoterExportJob, RegisterExportJob, BackupJob

__all__ = [
    "BaseJob",
    "JobContext",
    "CensusImportJob",
    "VoterImportJob",
    "RestoreJob",
    "CensusExportJob",
    "VoterExportJob",
    "RegisterExportJob",
    "BackupJob",
]
