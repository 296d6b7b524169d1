import json

from blo_register.importers import ImportMode
from blo_register.jobs import (
    BackupJob,
    CensusExportJob,
    CensusImportJob,
    JobContext,
    RegisterExportJob,
    RestoreJob,
    VoterExportJob,
    VoterImportJob,
)
from blo_register.models import OfficerSettings
from blo_register.persistence import JSONStore
from blo_register.workspace import Workspace


def test_workspace_persists_and_reopens(workspace, config):
    reopened = Workspace.open(config)

    assert [h.house_no for h in reopened.households.list_all()] == ["23", "7"]
    assert len(reopened.voters.list_all()) == 3
    assert reopened.settings.officer_name == "K. Latha"


def test_clear_all(workspace, config):
    workspace.clear_all()

    reopened = Workspace.open(config)
    assert reopened.households.list_all() == []
    assert reopened.voters.list_all() == []
    assert reopened.settings == OfficerSettings()


def test_export_jobs_default_to_exports_dir(workspace, config, today):
    context = JobContext(workspace, today)

    for job_cls, filename in (
        (CensusExportJob, "census_data_export.xlsx"),
        (VoterExportJob, "voter_list_export.xlsx"),
        (RegisterExportJob, "BLO_Register_Report.pdf"),
        (BackupJob, "blo_backup_2024-06-15.json"),
    ):
        job = job_cls(context)
        assert job.run(), job.error
        assert job.result == config.exports_dir / filename
        assert job.result.exists()


def test_census_import_job_round_trip(workspace, tmp_path, today):
    context = JobContext(workspace, today)
    export = CensusExportJob(context, tmp_path / "census.xlsx")
    assert export.run()

    job = CensusImportJob(context, export.result, ImportMode.REPLACE)
    assert job.run(), job.error
    assert job.result == 2
    assert job.dropped_rows == 0
    assert [h.house_no for h in workspace.households.list_all()] == ["23", "7"]


def test_voter_import_job_merges(workspace, tmp_path, today):
    path = tmp_path / "roll.csv"
    path.write_text("EPIC No,Name,Gender,Age,House No\nDEF1111111,Kumar,M,50,12\n", encoding="utf-8")

    job = VoterImportJob(JobContext(workspace, today), path, ImportMode.MERGE)

    assert job.run(), job.error
    assert job.result == 1
    assert len(workspace.voters.list_all()) == 4


def test_import_job_missing_file_fails(workspace, tmp_path):
    job = CensusImportJob(JobContext(workspace), tmp_path / "nope.xlsx")

    assert not job.run()
    assert "File not found" in job.error


def test_import_job_unreadable_file_applies_nothing(workspace, tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"garbage")
    job = CensusImportJob(JobContext(workspace), path, ImportMode.REPLACE)

    assert not job.run()
    assert job.error
    assert len(workspace.households.list_all()) == 2


def test_backup_and_restore_jobs(workspace, config, tmp_path, today):
    context = JobContext(workspace, today)
    backup = BackupJob(context, tmp_path / "backup.json")
    assert backup.run()

    workspace.clear_all()
    restore = RestoreJob(context, backup.result)

    assert restore.run(), restore.error
    assert restore.result.households == 2
    assert restore.result.voters == 3
    assert restore.result.settings_restored
    assert workspace.settings.officer_name == "K. Latha"

    store = JSONStore(config.data_dir)
    assert len(store.load_households()) == 2


def test_restore_only_replaces_present_sections(workspace, tmp_path):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"voters": []}), encoding="utf-8")

    job = RestoreJob(JobContext(workspace), path)

    assert job.run()
    assert job.result.households is None
    assert workspace.voters.list_all() == []
    assert len(workspace.households.list_all()) == 2
    assert workspace.settings.officer_name == "K. Latha"


def test_restore_invalid_backup_applies_nothing(workspace, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"unknown": 1}', encoding="utf-8")

    job = RestoreJob(JobContext(workspace), path)

    assert not job.run()
    assert "Invalid backup file" in job.error
    assert len(workspace.voters.list_all()) == 3
