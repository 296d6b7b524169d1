import copy

import pytest

from blo_register.exceptions import RecordNotFoundError
from blo_register.models import Gender, Household, Member, RecordStatus, Voter, flatten_members
from blo_register.services import ReconciliationEngine, auto_link, suggest_links


@pytest.fixture
def engine(household_repo, voter_repo):
    return ReconciliationEngine(household_repo, voter_repo)


def test_ravi_kumar_ranked_first(households, voters, today):
    suggestions = suggest_links(voters[0], flatten_members(households), today)

    assert suggestions[0].member.name == "Ravi Kumar"
    assert suggestions[0].score >= 10


def test_suggestions_filtered_sorted_and_truncated(today):
    members = [
        Member(name=f"Person {i}", dob="1990-01-01") for i in range(8)
    ]
    household = Household(house_no="5", members=members)
    voter = Voter(name="Nobody", age=34, house_no="5")

    suggestions = suggest_links(voter, flatten_members([household]), today)

    assert len(suggestions) == 5
    # Equal scores keep member order
    assert [s.member.name for s in suggestions] == [f"Person {i}" for i in range(5)]
    assert all(s.score == 7 for s in suggestions)


def test_suggestions_exclude_zero_scores(households, today):
    voter = Voter(name="Unknown Stranger", age=5, house_no="404")
    assert suggest_links(voter, flatten_members(households), today) == []


def test_suggest_does_not_mutate(households, voters, today):
    before_h = copy.deepcopy(households)
    before_v = copy.deepcopy(voters)
    suggest_links(voters[0], flatten_members(households), today)
    assert households == before_h
    assert voters == before_v


def test_auto_link_matches_house_name_and_gender(households, voters):
    before = copy.deepcopy(households)
    result = auto_link(voters, households)

    assert result.linked_count == 2
    linked = {v.id: v.linked_member_id for v in result.voters}
    assert linked == {"v_ravi": "m_ravi", "v_meena": "m_meena", "v_gone": None}
    # Inputs untouched
    assert all(v.linked_member_id is None for v in voters)
    assert households == before


def test_auto_link_skips_linked_voters(households, voters):
    voters[0].linked_member_id = "m_sita"
    result = auto_link(voters, households)

    assert result.voters[0] is voters[0]
    assert result.voters[0].linked_member_id == "m_sita"
    assert result.linked_count == 1


def test_auto_link_requires_gender_match(households):
    voter = Voter(name="Ravi Kumar", gender=Gender.FEMALE, house_no="23")
    assert auto_link([voter], households).linked_count == 0


def test_auto_link_never_links_two_voters_to_one_member(households):
    twins = [
        Voter(id="a", name="Ravi Kumar", gender=Gender.MALE, house_no="23"),
        Voter(id="b", name="RAVI KUMAR", gender=Gender.MALE, house_no=" 23 "),
    ]
    result = auto_link(twins, households)

    assert result.linked_count == 1
    assert [v.linked_member_id for v in result.voters] == ["m_ravi", None]


def test_auto_link_zero_matches_is_not_an_error(households):
    result = auto_link([], households)
    assert result.linked_count == 0
    assert result.voters == []


def test_engine_auto_link_stores_result(engine, voter_repo):
    assert engine.auto_link() == 2
    assert voter_repo.get("v_ravi").linked_member_id == "m_ravi"
    assert engine.auto_link() == 0


def test_link_overwrites_without_house_check(engine, voter_repo):
    engine.link_voter_to_member("v_gone", "m_sita")
    engine.link_voter_to_member("v_gone", "m_meena")
    voter = voter_repo.get("v_gone")
    assert voter.linked_member_id == "m_meena"
    assert voter.house_no == "99"


def test_link_copies_member_details(engine, voter_repo, today):
    engine.link_voter_to_member("v_gone", "m_sita", copy_member_details=True, today=today)
    voter = voter_repo.get("v_gone")
    assert voter.name == "Sita Kumar"
    assert voter.gender is Gender.FEMALE
    assert voter.age == 36
    assert voter.house_no == "23"


def test_link_unknown_voter_raises(engine):
    with pytest.raises(RecordNotFoundError):
        engine.link_voter_to_member("missing", "m_ravi")


def test_status_syncs_linked_member(engine, household_repo):
    engine.link_voter_to_member("v_ravi", "m_ravi")
    change = engine.set_voter_status("v_ravi", RecordStatus.SHIFTED)

    assert change.member_synced
    assert change.previous_status is RecordStatus.ACTIVE
    assert household_repo.find_member("m_ravi").member.status is RecordStatus.SHIFTED


def test_status_with_dangling_link_changes_voter_only(engine, household_repo, voter_repo):
    engine.link_voter_to_member("v_ravi", "m_sita")
    household_repo.delete_member("h_23", "m_sita")

    change = engine.set_voter_status("v_ravi", RecordStatus.EXPIRED)

    assert not change.member_synced
    assert voter_repo.get("v_ravi").status is RecordStatus.EXPIRED
    assert household_repo.find_member("m_ravi").member.status is RecordStatus.ACTIVE


def test_any_status_transition_allowed(engine, voter_repo):
    for status in (RecordStatus.DUPLICATE, RecordStatus.ACTIVE, RecordStatus.EXPIRED, RecordStatus.SHIFTED):
        engine.set_voter_status("v_meena", status)
        assert voter_repo.get("v_meena").status is status
