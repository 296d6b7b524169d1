from blo_register.models import (
    Gender,
    Household,
    Member,
    OfficerSettings,
    RecordStatus,
    Voter,
    flatten_members,
    parse_optional_int,
)


def test_gender_parse_by_first_letter():
    assert Gender.parse("male") is Gender.MALE
    assert Gender.parse(" F ") is Gender.FEMALE
    assert Gender.parse("Transgender") is Gender.OTHER
    assert Gender.parse(None) is Gender.OTHER


def test_status_parse():
    assert RecordStatus.parse("shifted") is RecordStatus.SHIFTED
    assert RecordStatus.parse("bogus") is RecordStatus.ACTIVE


def test_member_serialized_keys():
    m = Member(id="m1", name=" Ravi ", dob="1984-01-10", gender="M", is_hof=True, aadhaar="123412341234")
    data = m.to_dict()
    assert data == {
        "id": "m1",
        "name": "Ravi",
        "dob": "1984-01-10",
        "gender": "Male",
        "isHof": True,
        "status": "Active",
        "aadhar": "123412341234",
    }
    assert Member.from_dict(data) == m


def test_household_round_trip(households):
    for h in households:
        assert Household.from_dict(h.to_dict()) == h


def test_normalize_head_of_family_keeps_first_flagged():
    h = Household(house_no="1", members=[
        Member(name="A"), Member(name="B", is_hof=True), Member(name="C", is_hof=True),
    ])
    h.normalize_head_of_family()
    assert [m.is_hof for m in h.members] == [False, True, False]


def test_normalize_head_of_family_promotes_first():
    h = Household(house_no="1", members=[Member(name="A"), Member(name="B")])
    h.normalize_head_of_family()
    assert h.head_of_family.name == "A"


def test_flatten_members_carries_household_context(households):
    refs = flatten_members(households)
    assert [r.id for r in refs] == ["m_ravi", "m_sita", "m_anil", "m_meena", "m_raju"]
    sita = refs[1]
    assert sita.house_no == "23"
    assert sita.hof_name == "Ravi Kumar"
    assert sita.contact_phone == "9876543210"


def test_voter_round_trip_omits_empty_optionals():
    v = Voter(id="v1", epic_no="abc1234567", name="Ravi", gender="Male", age="41", house_no="23", part_serial_no=12)
    data = v.to_dict()
    assert data["epicNo"] == "ABC1234567"
    assert data["age"] == 41
    assert data["partSerialNo"] == 12
    assert "linkedMemberId" not in data
    assert Voter.from_dict(data) == v


def test_epic_validation():
    assert Voter.validate_epic("ABC1234567")
    assert not Voter.validate_epic("PENDING")
    assert Voter(epic_no="PENDING").epic_no == "PENDING"


def test_parse_optional_int():
    assert parse_optional_int("12") == 12
    assert parse_optional_int(7.0) == 7
    assert parse_optional_int("41 yrs") == 41
    assert parse_optional_int("") is None
    assert parse_optional_int("abc") is None


def test_settings_defaults_and_merge():
    s = OfficerSettings()
    assert s.to_dict()["bloName"] == "BLO Name"
    assert s.to_dict()["assemblyConstituency"] == "Constituency"

    merged = s.merged_with({"bloName": "K. Latha", "syncId": "old", "part": "244"})
    assert merged.officer_name == "K. Latha"
    assert merged.part == "244"
    assert merged.constituency == "Constituency"
