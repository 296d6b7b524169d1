"""
Dashboard and register aggregation.

Everything here is a pure function of the household and voter lists and
is recomputed on every call. `today` can be passed to every function
that depends on age so results are reproducible.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Dict, Tuple, Any

from ..models import Gender, Household, MemberRef, OfficerSettings, RecordStatus, Voter, flatten_members
from ..utils.dates import AgeBreakdown, calculate_age, precise_age

PROSPECTIVE_AGE = 17
ADULT_AGE = 18

# (label, min age, max age); None means no upper bound
COHORT_BANDS: List[Tuple[str, int, Optional[int]]] = [
    ("0-17", 0, 17),
    ("18-19", 18, 19),
    ("20-29", 20, 29),
    ("30-39", 30, 39),
    ("40-49", 40, 49),
    ("50-59", 50, 59),
    ("60-69", 60, 69),
    ("70-79", 70, 79),
    ("80+", 80, None),
]


@dataclass
class PopulationStats:
    households: int = 0
    population: int = 0
    male: int = 0
    female: int = 0


@dataclass
class ElectorStats:
    total: int = 0
    male: int = 0
    female: int = 0
    by_status: Dict[RecordStatus, int] = field(default_factory=lambda: {s: 0 for s in RecordStatus})

    @property
    def marked(self) -> int:
        """Electors whose status is not Active."""
        return self.total - self.by_status[RecordStatus.ACTIVE]


@dataclass(frozen=True)
class ProspectiveVoter:
    """A 17-year-old member, with contact details for follow-up."""
    ref: MemberRef
    age: AgeBreakdown

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def house_no(self) -> str:
        return self.ref.house_no

    @property
    def hof_name(self) -> str:
        return self.ref.hof_name or "N/A"

    @property
    def contact_phone(self) -> str:
        return self.ref.contact_phone


@dataclass(frozen=True)
class CohortRow:
    """One age band of the cohort statement; percentages are 2-decimal strings."""
    band: str
    population: int
    population_pct: str
    electors: int
    elector_pct: str
    registration_pct: str


@dataclass
class DashboardStats:
    population: PopulationStats
    electors: ElectorStats
    ep_ratio: int
    gender_ratio: int
    prospective: List[ProspectiveVoter]
    unregistered_count: int

    @property
    def marked_count(self) -> int:
        return self.electors.marked

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalHouseholds": self.population.households,
            "totalPopulation": self.population.population,
            "maleCount": self.population.male,
            "femaleCount": self.population.female,
            "totalElectors": self.electors.total,
            "maleElectors": self.electors.male,
            "femaleElectors": self.electors.female,
            "statusCounts": {s.value: n for s, n in self.electors.by_status.items()},
            "markedVoters": self.marked_count,
            "prospectiveVoters": len(self.prospective),
            "unregisteredAdults": self.unregistered_count,
            "epRatio": self.ep_ratio,
            "genderRatio": self.gender_ratio,
        }


@dataclass
class RegisterReport:
    """Everything the PDF register renders, computed up front."""
    settings: OfficerSettings
    generated_on: date
    population: PopulationStats
    electors: ElectorStats
    ep_ratio: int
    gender_ratio: int
    cohorts: List[CohortRow]
    prospective: List[ProspectiveVoter]
    unregistered: List[MemberRef]
    unregistered_ages: Dict[str, int]
    marked: List[Voter]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _pct(part: int, whole: int) -> str:
    if whole <= 0:
        return "0.00"
    return f"{part / whole * 100:.2f}"


def _member_age(ref: MemberRef, today: Optional[date]) -> Optional[int]:
    return calculate_age(ref.member.dob, today)


def population_stats(households: List[Household]) -> PopulationStats:
    stats = PopulationStats(households=len(households))
    for household in households:
        for member in household.members:
            stats.population += 1
            if member.gender == Gender.MALE:
                stats.male += 1
            elif member.gender == Gender.FEMALE:
                stats.female += 1
    return stats


def elector_stats(voters: List[Voter]) -> ElectorStats:
    stats = ElectorStats(total=len(voters))
    for voter in voters:
        if voter.gender == Gender.MALE:
            stats.male += 1
        elif voter.gender == Gender.FEMALE:
            stats.female += 1
        stats.by_status[voter.status] += 1
    return stats


def ep_ratio(electors: int, population: int) -> int:
    """Electors per 1000 population; 0 when there is no population."""
    if population <= 0:
        return 0
    return _round_half_up(electors / population * 1000)


def gender_ratio(female: int, male: int) -> int:
    """Female electors per 1000 male electors; 0 when there are no male electors."""
    if male <= 0:
        return 0
    return _round_half_up(female / male * 1000)


def prospective_voters(households: List[Household], today: Optional[date] = None) -> List[ProspectiveVoter]:
    """
    Members aged exactly 17.

    Args:
        households: Census households
        today: Reference date (default: date.today())

    Returns:
        ProspectiveVoter entries in household then member order
    """
    result = []
    for ref in flatten_members(households):
        if _member_age(ref, today) == PROSPECTIVE_AGE:
            result.append(ProspectiveVoter(ref=ref, age=precise_age(ref.member.dob, today)))
    return result


def unregistered_adults(
    households: List[Household],
    voters: List[Voter],
    today: Optional[date] = None,
) -> List[MemberRef]:
    """Members aged 18 or over that no voter links to."""
    linked = {v.linked_member_id for v in voters if v.linked_member_id}
    result = []
    for ref in flatten_members(households):
        age = _member_age(ref, today)
        if age is not None and age >= ADULT_AGE and ref.id not in linked:
            result.append(ref)
    return result


def marked_voters(voters: List[Voter]) -> List[Voter]:
    """Voters flagged Expired, Shifted or Duplicate."""
    return [v for v in voters if v.status != RecordStatus.ACTIVE]


def _band_index(age: int) -> int:
    for i, (_, _low, high) in enumerate(COHORT_BANDS):
        if high is None or age <= high:
            return i
    return len(COHORT_BANDS) - 1


def age_cohorts(
    households: List[Household],
    voters: List[Voter],
    today: Optional[date] = None,
) -> List[CohortRow]:
    """
    Statement-1 age cohort table.

    Members are banded by calendar age (unknown date of birth counts as
    0), electors by their stated age. Percentages use the total
    population, the total electors and the band population as
    denominators; any zero denominator gives "0.00".
    """
    population = [0] * len(COHORT_BANDS)
    electors = [0] * len(COHORT_BANDS)

    for ref in flatten_members(households):
        age = _member_age(ref, today)
        population[_band_index(age if age is not None else 0)] += 1

    for voter in voters:
        electors[_band_index(voter.age)] += 1

    total_population = sum(population)
    total_electors = len(voters)

    return [
        CohortRow(
            band=label,
            population=population[i],
            population_pct=_pct(population[i], total_population),
            electors=electors[i],
            elector_pct=_pct(electors[i], total_electors),
            registration_pct=_pct(electors[i], population[i]),
        )
        for i, (label, _low, _high) in enumerate(COHORT_BANDS)
    ]


def dashboard(
    households: List[Household],
    voters: List[Voter],
    today: Optional[date] = None,
) -> DashboardStats:
    population = population_stats(households)
    electors = elector_stats(voters)
    return DashboardStats(
        population=population,
        electors=electors,
        ep_ratio=ep_ratio(electors.total, population.population),
        gender_ratio=gender_ratio(electors.female, electors.male),
        prospective=prospective_voters(households, today),
        unregistered_count=len(unregistered_adults(households, voters, today)),
    )


def register_report(
    settings: OfficerSettings,
    households: List[Household],
    voters: List[Voter],
    today: Optional[date] = None,
) -> RegisterReport:
    """Compute every section of the BLO register."""
    today = today or date.today()
    population = population_stats(households)
    electors = elector_stats(voters)
    unregistered = unregistered_adults(households, voters, today)

    return RegisterReport(
        settings=settings,
        generated_on=today,
        population=population,
        electors=electors,
        ep_ratio=ep_ratio(electors.total, population.population),
        gender_ratio=gender_ratio(electors.female, electors.male),
        cohorts=age_cohorts(households, voters, today),
        prospective=prospective_voters(households, today),
        unregistered=unregistered,
        unregistered_ages={ref.id: _member_age(ref, today) for ref in unregistered},
        marked=marked_voters(voters),
    )


def natural_key(text: str) -> List[Any]:
    """Sort key comparing digit runs numerically ('House 2' < 'House 10')."""
    return [(0, int(part), "") if part.isdigit() else (1, 0, part.lower()) for part in re.split(r"(\d+)", text)]


def group_voters(voters: List[Voter]) -> Dict[str, Dict[str, List[Voter]]]:
    """
    Group the roll by section, then by house number.

    Sections fall back to "Section N" and then "Uncategorized"; houses
    fall back to "Unassigned House". Keys are in natural order and each
    house lists voters by part serial number, then name.
    """
    groups: Dict[str, Dict[str, List[Voter]]] = {}
    for voter in voters:
        if voter.section:
            section = voter.section
        elif voter.section_number:
            section = f"Section {voter.section_number}"
        else:
            section = "Uncategorized"
        house = voter.house_no or "Unassigned House"
        groups.setdefault(section, {}).setdefault(house, []).append(voter)

    ordered: Dict[str, Dict[str, List[Voter]]] = {}
    for section in sorted(groups, key=natural_key):
        houses = groups[section]
        ordered[section] = {
            house: sorted(houses[house], key=lambda v: (v.part_serial_no or 0, v.name.lower()))
            for house in sorted(houses, key=natural_key)
        }
    return ordered
