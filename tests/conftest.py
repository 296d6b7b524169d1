import os
from datetime import date

import pytest

# Keep test runs from writing log files into the project tree
os.environ.setdefault("LOG_TO_FILE", "0")

from blo_register.config import Config, reset_config
from blo_register.models import Gender, Household, Member, OfficerSettings, RecordStatus, Voter
from blo_register.persistence import InMemoryHouseholdRepository, InMemoryVoterRepository
from blo_register.workspace import Workspace

TODAY = date(2024, 6, 15)


def make_member(name, dob, gender=Gender.MALE, is_hof=False, **kwargs):
    return Member(name=name, dob=dob, gender=gender, is_hof=is_hof, **kwargs)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def households():
    """
    House 23: Ravi Kumar (HOF, 40), Sita Kumar (36), Anil Kumar (17 today)
    House 7:  Meena Devi (HOF, 73), Raju (unknown DOB)
    """
    return [
        Household(
            id="h_23",
            house_no="23",
            address="Temple Street",
            members=[
                make_member("Ravi Kumar", "1984-01-10", is_hof=True, phone="9876543210", id="m_ravi"),
                make_member("Sita Kumar", "1988-03-05", Gender.FEMALE, id="m_sita"),
                make_member("Anil Kumar", "2007-06-15", id="m_anil"),
            ],
        ),
        Household(
            id="h_7",
            house_no="7",
            address="Market Road",
            members=[
                make_member("Meena Devi", "1950-12-01", Gender.FEMALE, is_hof=True, id="m_meena"),
                make_member("Raju", "", id="m_raju"),
            ],
        ),
    ]


@pytest.fixture
def voters():
    return [
        Voter(id="v_ravi", epic_no="ABC1234567", name="ravi kumar", gender=Gender.MALE, age=41, house_no="23"),
        Voter(id="v_meena", epic_no="ABC7654321", name="Meena Devi", gender=Gender.FEMALE, age=73, house_no="7"),
        Voter(
            id="v_gone",
            epic_no="XYZ0000001",
            name="Gopal",
            gender=Gender.MALE,
            age=30,
            house_no="99",
            status=RecordStatus.EXPIRED,
        ),
    ]


@pytest.fixture
def household_repo(households):
    return InMemoryHouseholdRepository(households)


@pytest.fixture
def voter_repo(voters):
    return InMemoryVoterRepository(voters)


@pytest.fixture
def config(tmp_path):
    reset_config()
    cfg = Config(
        base_dir=tmp_path,
        data_dir=tmp_path / "data",
        exports_dir=tmp_path / "exports",
        logs_dir=tmp_path / "logs",
        log_to_file=False,
    )
    yield cfg
    reset_config()


@pytest.fixture
def workspace(config, households, voters):
    ws = Workspace.open(config)
    ws.households.replace_all(households)
    ws.voters.replace_all(voters)
    ws.save_settings(OfficerSettings(officer_name="K. Latha", constituency="Sulur", part="244 - Sulur"))
    return ws
