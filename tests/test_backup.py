import json

import pytest

from blo_register.exceptions import BackupFormatError
from blo_register.models import OfficerSettings
from blo_register.persistence import build_backup, parse_backup, read_backup, write_backup


def test_backup_shape(households, voters):
    data = build_backup(OfficerSettings(officer_name="K. Latha"), households, voters)

    assert set(data) == {"bloInfo", "households", "voters"}
    assert data["bloInfo"]["bloName"] == "K. Latha"
    assert data["households"][0]["houseNo"] == "23"


def test_backup_round_trip(tmp_path, households, voters):
    voters[0].linked_member_id = "m_ravi"
    settings = OfficerSettings(officer_name="K. Latha", part="244")
    path = write_backup(tmp_path / "backup.json", settings, households, voters)

    restored = read_backup(path)

    assert restored.households == households
    assert restored.voters == voters
    assert OfficerSettings().merged_with(restored.settings) == settings


def test_legacy_head_of_family_shape():
    payload = {
        "households": [
            {
                "id": "h1",
                "houseNumber": "5",
                "address": "Old Town",
                "headOfFamily": {"id": "m1", "name": "Lakshmi", "dob": "1970-01-01", "gender": "Female",
                                 "phone": "9000000000"},
                "members": [
                    {"id": "m1", "name": "Lakshmi", "dob": "1970-01-01", "gender": "Female"},
                    {"id": "m2", "name": "Kalai", "dob": "1995-01-01", "gender": "Female", "isHof": True},
                ],
            }
        ]
    }
    restored = parse_backup(payload)

    h = restored.households[0]
    assert h.house_no == "5"
    assert [m.id for m in h.members] == ["m1", "m2"]
    assert [m.is_hof for m in h.members] == [True, False]
    assert h.head_of_family.phone == "9000000000"
    assert restored.voters is None
    assert restored.settings is None


def test_current_shape_normalized_to_one_hof():
    payload = {"households": [{"houseNo": "1", "members": [{"name": "A"}, {"name": "B"}]}]}
    h = parse_backup(json.dumps(payload)).households[0]
    assert [m.is_hof for m in h.members] == [True, False]


def test_settings_alternate_key():
    restored = parse_backup({"settings": {"bloName": "Officer"}})
    assert restored.settings == {"bloName": "Officer"}


def test_empty_sections_are_still_valid():
    restored = parse_backup('{"households": [], "voters": []}')
    assert restored.households == []
    assert restored.voters == []
    assert restored.is_empty


@pytest.mark.parametrize("payload", [
    "",
    "not json",
    "[1, 2, 3]",
    '{"something": "else"}',
    "null",
])
def test_invalid_backups_rejected(payload):
    with pytest.raises(BackupFormatError):
        parse_backup(payload)


def test_unreadable_backup_file(tmp_path):
    with pytest.raises(BackupFormatError):
        read_backup(tmp_path / "missing.json")
