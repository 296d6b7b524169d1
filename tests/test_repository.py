import pytest

from blo_register.exceptions import RecordNotFoundError, ValidationError
from blo_register.models import Gender, Household, Member, RecordStatus, Voter
from blo_register.persistence import InMemoryHouseholdRepository, InMemoryVoterRepository, JSONStore
from blo_register.validation import validate_household


def new_household(house_no="42", hof_dob="1980-01-01", **hof_fields):
    return Household(
        house_no=house_no,
        members=[Member(name="Head", dob=hof_dob, gender=Gender.MALE, is_hof=True, **hof_fields)],
    )


def test_add_rejects_duplicate_house_number(household_repo, today):
    with pytest.raises(ValidationError) as exc:
        household_repo.add(new_household(house_no=" 23 "), today)
    assert exc.value.field_name == "houseNo"


def test_add_rejects_underage_hof(household_repo, today):
    with pytest.raises(ValidationError) as exc:
        household_repo.add(new_household(hof_dob="2010-01-01"), today)
    assert exc.value.field_name == "dob"


@pytest.mark.parametrize("field,value", [("aadhaar", "1234"), ("phone", "98765")])
def test_add_rejects_bad_identifier_lengths(household_repo, today, field, value):
    with pytest.raises(ValidationError):
        household_repo.add(new_household(**{field: value}), today)


def test_household_requires_exactly_one_hof(today):
    h = new_household()
    h.members.append(Member(name="Other", dob="1985-01-01", is_hof=True))
    with pytest.raises(ValidationError):
        validate_household(h, [], today)


def test_add_and_update(household_repo, today):
    h = household_repo.add(new_household(), today)
    assert household_repo.get_by_house_no("42") is h

    h.address = "New Colony"
    household_repo.update(h, today)
    assert household_repo.get(h.id).address == "New Colony"


def test_update_unknown_household_raises(household_repo, today):
    with pytest.raises(RecordNotFoundError):
        household_repo.update(new_household(), today)


def test_update_may_keep_own_house_number(household_repo, households, today):
    h = households[0]
    h.address = "Changed"
    household_repo.update(h, today)


def test_hof_cannot_be_deleted(household_repo):
    with pytest.raises(ValidationError):
        household_repo.delete_member("h_23", "m_ravi")
    assert household_repo.delete_member("h_23", "m_sita") is True
    assert household_repo.delete_member("h_23", "missing") is False


def test_add_member_rejects_second_hof(household_repo, today):
    with pytest.raises(ValidationError):
        household_repo.add_member("h_23", Member(name="X", dob="1970-01-01", is_hof=True), today)


def test_update_member_keeps_hof_flag(household_repo, today):
    edited = Member(id="m_ravi", name="Ravi K", dob="1984-01-10", gender=Gender.MALE, is_hof=False)
    household_repo.update_member("h_23", edited, today)
    assert household_repo.get("h_23").head_of_family.name == "Ravi K"


def test_find_member_tolerates_dangling(household_repo):
    assert household_repo.find_member("m_sita").house_no == "23"
    assert household_repo.find_member("m_gone") is None
    assert household_repo.find_member(None) is None


def test_search_by_house_or_member_name(household_repo):
    assert [h.id for h in household_repo.search("meena")] == ["h_7"]
    assert [h.id for h in household_repo.search("23")] == ["h_23"]
    assert len(household_repo.search("")) == 2


def test_merge_folds_members_into_existing_house(household_repo):
    incoming = [
        Household(house_no="23", members=[Member(name="New Baby", dob="2024-01-01", is_hof=True)]),
        Household(house_no="100", members=[Member(name="A"), Member(name="B")]),
    ]
    added = household_repo.merge(incoming)

    assert added == 1
    h23 = household_repo.get_by_house_no("23")
    assert [m.name for m in h23.members][-1] == "New Baby"
    assert [m.name for m in h23.members if m.is_hof] == ["Ravi Kumar"]
    assert household_repo.get_by_house_no("100").head_of_family.name == "A"


def test_voter_filter_and_counts(voter_repo):
    assert [v.id for v in voter_repo.filter(term="abc76")] == ["v_meena"]
    assert [v.id for v in voter_repo.filter(status=RecordStatus.EXPIRED)] == ["v_gone"]
    counts = voter_repo.status_counts()
    assert counts[RecordStatus.ACTIVE] == 2
    assert counts[RecordStatus.SHIFTED] == 0


def test_voter_update_unknown_raises(voter_repo):
    with pytest.raises(RecordNotFoundError):
        voter_repo.update(Voter(id="nope"))


def test_voter_link_and_linked_ids(voter_repo):
    voter_repo.set_link("v_ravi", "m_ravi")
    assert voter_repo.linked_member_ids() == {"m_ravi"}
    voter_repo.set_link("v_ravi", "")
    assert voter_repo.linked_member_ids() == set()


def test_json_store_write_through(tmp_path, households, voters):
    store = JSONStore(tmp_path / "data")
    repo = InMemoryHouseholdRepository(store=store)
    repo.replace_all(households)
    InMemoryVoterRepository(voters, store=store).merge([])

    assert store.exists()
    assert store.load_households() == households
    assert store.load_voters() == voters


def test_json_store_unreadable_file_loads_empty(tmp_path):
    store = JSONStore(tmp_path)
    (tmp_path / "households.json").write_text("{not json", encoding="utf-8")
    assert store.load_households() == []


def test_json_store_write_failure_is_swallowed(tmp_path, households):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = JSONStore(blocker)
    repo = InMemoryHouseholdRepository(store=store)

    repo.replace_all(households)

    assert store.save_households(households) is False
    assert len(repo.list_all()) == 2
