"""
Voter-to-census reconciliation.

Links electoral roll entries to the census members that denote the same
person, and keeps the status of both sides in step once linked.

- suggest_links(): ranked, additive-score candidates for one voter
- auto_link(): exact house + name + gender matching for unlinked voters
- ReconciliationEngine: the same operations bound to the repositories,
  plus manual linking and status transitions with member sync
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, List, Dict, Iterable

from ..logger import get_logger
from ..models import Household, MemberRef, RecordStatus, Voter
from ..persistence.repository import HouseholdRepository, VoterRepository
from ..utils.dates import calculate_age
from ..utils.text import compact_name, house_key

logger = get_logger(__name__)

HOUSE_MATCH_POINTS = 5
NAME_MATCH_POINTS = 3
AGE_MATCH_POINTS = 2
AGE_TOLERANCE_YEARS = 2
MAX_SUGGESTIONS = 5


@dataclass(frozen=True)
class LinkSuggestion:
    """A candidate member for a voter, with its match score."""
    member: MemberRef
    score: int


@dataclass
class AutoLinkResult:
    """Voters after auto-linking and the number of links made."""
    voters: List[Voter]
    linked_count: int


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a voter status transition."""
    voter: Voter
    previous_status: RecordStatus
    member_synced: bool


def score_member(voter: Voter, ref: MemberRef, today: Optional[date] = None) -> int:
    """
    Additive match score of a census member against a voter.

    +5 same house number, +3 one compact name contains the other,
    +2 calendar age within two years of the voter's stated age.
    """
    score = 0

    voter_house = house_key(voter.house_no)
    if voter_house and house_key(ref.house_no) == voter_house:
        score += HOUSE_MATCH_POINTS

    voter_name = compact_name(voter.name)
    member_name = compact_name(ref.name)
    if voter_name and member_name and (voter_name in member_name or member_name in voter_name):
        score += NAME_MATCH_POINTS

    member_age = calculate_age(ref.member.dob, today)
    if member_age is not None and abs(member_age - voter.age) <= AGE_TOLERANCE_YEARS:
        score += AGE_MATCH_POINTS

    return score


def suggest_links(
    voter: Voter,
    members: Iterable[MemberRef],
    today: Optional[date] = None,
    limit: int = MAX_SUGGESTIONS,
) -> List[LinkSuggestion]:
    """
    Rank census members as link candidates for a voter.

    Args:
        voter: Voter to match
        members: Flattened members (each carrying its house number)
        today: Reference date for ages
        limit: Maximum number of suggestions

    Returns:
        Suggestions with score > 0, best first (ties keep input order)
    """
    scored = [LinkSuggestion(member=ref, score=score_member(voter, ref, today)) for ref in members]
    ranked = sorted((s for s in scored if s.score > 0), key=lambda s: s.score, reverse=True)
    return ranked[:limit]


def auto_link(voters: List[Voter], households: List[Household]) -> AutoLinkResult:
    """
    Link unlinked voters whose household, name and gender match exactly.

    For each voter without a link, the household with the same house
    number is searched in member order for a member with the same compact
    name and gender. Members already claimed by a link (existing, or made
    earlier in this run) are skipped. Linked voters are passed through
    untouched; newly linked voters are returned as new objects.
    """
    by_house: Dict[str, Household] = {}
    for household in households:
        by_house.setdefault(house_key(household.house_no), household)

    claimed = {v.linked_member_id for v in voters if v.linked_member_id}
    result: List[Voter] = []
    linked = 0

    for voter in voters:
        if voter.is_linked:
            result.append(voter)
            continue

        name = compact_name(voter.name)
        household = by_house.get(house_key(voter.house_no)) if voter.house_no else None
        match = None
        if household is not None and name:
            match = next(
                (
                    m for m in household.members
                    if m.id not in claimed
                    and compact_name(m.name) == name
                    and m.gender == voter.gender
                ),
                None,
            )

        if match is None:
            result.append(voter)
            continue

        claimed.add(match.id)
        result.append(replace(voter, linked_member_id=match.id))
        linked += 1

    return AutoLinkResult(voters=result, linked_count=linked)


class ReconciliationEngine:
    """
    Reconciliation operations bound to the household and voter repositories.
    """

    def __init__(self, households: HouseholdRepository, voters: VoterRepository):
        self.households = households
        self.voters = voters

    def resolve_link(self, voter: Voter) -> Optional[MemberRef]:
        """The linked member, or None if unlinked or dangling."""
        return self.households.find_member(voter.linked_member_id)

    def suggest_for(self, voter_id: str, today: Optional[date] = None) -> List[LinkSuggestion]:
        voter = self.voters.require(voter_id)
        return suggest_links(voter, self.households.members(), today)

    def auto_link(self) -> int:
        """
        Auto-link all unlinked voters and store the result.

        Returns:
            Number of voters newly linked (0 is not an error)
        """
        result = auto_link(self.voters.list_all(), self.households.list_all())
        if result.linked_count:
            self.voters.replace_all(result.voters)
        logger.info(f"Auto-link: {result.linked_count} voter(s) linked")
        return result.linked_count

    def link_voter_to_member(
        self,
        voter_id: str,
        member_id: str,
        copy_member_details: bool = False,
        today: Optional[date] = None,
    ) -> Voter:
        """
        Link a voter to a member chosen by the operator.

        Any existing link is overwritten and the house number is not
        checked. With copy_member_details, the voter takes the member's
        name, gender, age and house number when the member resolves.
        """
        voter = self.voters.require(voter_id)
        voter.linked_member_id = member_id

        if copy_member_details:
            ref = self.households.find_member(member_id)
            if ref is None:
                logger.warning(f"Member {member_id} not found; voter {voter_id} linked without copying details")
            else:
                age = calculate_age(ref.member.dob, today)
                voter.name = ref.name
                voter.gender = ref.member.gender
                voter.age = age if age is not None else voter.age
                voter.house_no = ref.house_no

        logger.debug(f"Linked voter {voter_id} -> member {member_id}")
        return self.voters.update(voter)

    def set_voter_status(self, voter_id: str, status: RecordStatus) -> StatusChange:
        """
        Change a voter's status and mirror it onto the linked member.

        A dangling link changes the voter only.
        """
        status = RecordStatus.parse(status, strict=True)
        previous = self.voters.require(voter_id).status
        voter = self.voters.set_status(voter_id, status)

        synced = False
        ref = self.resolve_link(voter)
        if ref is not None and ref.member.status != status:
            synced = self.households.set_member_status(ref.id, status)
        elif voter.linked_member_id and ref is None:
            logger.debug(f"Voter {voter_id} links to missing member {voter.linked_member_id}; status not synced")

        return StatusChange(voter=voter, previous_status=previous, member_synced=synced)
