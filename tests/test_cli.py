import pytest

from blo_register.cli import main
from blo_register.config import reset_config
from blo_register.models import Gender, Household, Member, Voter
from blo_register.persistence import JSONStore


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("BLO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("BLO_EXPORTS_DIR", str(tmp_path / "exports"))
    reset_config()
    store = JSONStore(tmp_path / "data")
    store.save_households([
        Household(id="h1", house_no="23", members=[
            Member(id="m1", name="Ravi Kumar", dob="1984-01-10", gender=Gender.MALE, is_hof=True),
        ]),
    ])
    store.save_voters([
        Voter(id="v1", epic_no="ABC1234567", name="Ravi Kumar", gender=Gender.MALE, age=40, house_no="23"),
    ])
    yield tmp_path / "data"
    reset_config()


pytestmark = pytest.mark.regression


def test_stats(data_dir):
    assert main(["--today", "2024-06-15", "stats"]) == 0


def test_listings(data_dir):
    assert main(["households", "--search", "ravi"]) == 0
    assert main(["voters", "--status", "Active", "--grouped"]) == 0


def test_autolink_then_status_sync(data_dir):
    assert main(["autolink"]) == 0
    assert JSONStore(data_dir).load_voters()[0].linked_member_id == "m1"

    assert main(["status", "v1", "Shifted"]) == 0
    member = JSONStore(data_dir).load_households()[0].members[0]
    assert member.status.value == "Shifted"


def test_suggest_and_link(data_dir):
    assert main(["--today", "2024-06-15", "suggest", "v1"]) == 0
    assert main(["link", "v1", "m1", "--copy-details"]) == 0
    assert JSONStore(data_dir).load_voters()[0].linked_member_id == "m1"


def test_unknown_voter_exits_non_zero(data_dir):
    assert main(["suggest", "missing"]) == 1


def test_exports_and_backup(data_dir, tmp_path):
    assert main(["export-census", "-o", str(tmp_path / "c.xlsx")]) == 0
    assert main(["export-voters", "-o", str(tmp_path / "v.xlsx")]) == 0
    assert main(["--today", "2024-06-15", "register", "-o", str(tmp_path / "r.pdf")]) == 0
    assert main(["backup", "-o", str(tmp_path / "b.json")]) == 0
    assert (tmp_path / "r.pdf").exists()

    assert main(["clear", "--yes"]) == 0
    assert JSONStore(data_dir).load_voters() == []

    assert main(["restore", str(tmp_path / "b.json")]) == 0
    assert len(JSONStore(data_dir).load_voters()) == 1


def test_import_with_mode(data_dir, tmp_path):
    census = tmp_path / "census.csv"
    census.write_text("House No,Member Name,DOB,Gender\n24,Lakshmi,1970-01-01,F\n,Orphan,,M\n", encoding="utf-8")

    assert main(["import-census", str(census), "--mode", "merge"]) == 0
    assert [h.house_no for h in JSONStore(data_dir).load_households()] == ["23", "24"]

    assert main(["import-census", str(census), "--mode", "replace"]) == 0
    assert [h.house_no for h in JSONStore(data_dir).load_households()] == ["24"]


def test_bad_import_file_exits_non_zero(data_dir, tmp_path):
    assert main(["import-voters", str(tmp_path / "missing.xlsx")]) == 1


def test_clear_requires_confirmation(data_dir):
    assert main(["clear"]) == 1
    assert len(JSONStore(data_dir).load_voters()) == 1


def test_ask_without_key_prints_fallback(data_dir, monkeypatch, capsys):
    monkeypatch.setenv("AI_API_KEY", "")
    reset_config()
    assert main(["ask", "How many voters?"]) == 0
    assert "Sorry, I encountered an error" in capsys.readouterr().out
