"""
Repository pattern for census and electoral roll data.

Defines the abstract interfaces the engines depend on and in-memory
implementations that optionally write through to a JSONStore after
every mutation. The engines receive repositories by injection, which
keeps them testable with plain fixture data.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List, Dict, Set, TYPE_CHECKING

from ..exceptions import RecordNotFoundError, ValidationError
from ..models import Household, Member, MemberRef, RecordStatus, Voter, flatten_members
from ..utils.text import contains_term, house_key
from ..validation import validate_household, validate_member

if TYPE_CHECKING:
    from .json_store import JSONStore


class HouseholdRepository(ABC):
    """
    Abstract repository for households and their members.
    """

    @abstractmethod
    def list_all(self) -> List[Household]:
        """Return all households in insertion order."""
        pass

    @abstractmethod
    def get(self, household_id: str) -> Optional[Household]:
        pass

    @abstractmethod
    def add(self, household: Household, today: Optional[date] = None) -> Household:
        """
        Add a validated household.

        Raises:
            ValidationError: duplicate house number, HOF rules, etc.
        """
        pass

    @abstractmethod
    def update(self, household: Household, today: Optional[date] = None) -> Household:
        pass

    @abstractmethod
    def delete(self, household_id: str) -> bool:
        """
        Delete a household with all its members.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def add_member(self, household_id: str, member: Member, today: Optional[date] = None) -> Member:
        pass

    @abstractmethod
    def update_member(self, household_id: str, member: Member, today: Optional[date] = None) -> Member:
        pass

    @abstractmethod
    def delete_member(self, household_id: str, member_id: str) -> bool:
        pass

    @abstractmethod
    def replace_all(self, households: List[Household]) -> None:
        pass

    @abstractmethod
    def merge(self, households: List[Household]) -> int:
        """
        Merge households into the collection.

        Returns:
            Number of households added (folded ones are not counted)
        """
        pass

    @abstractmethod
    def set_member_status(self, member_id: str, status: RecordStatus) -> bool:
        pass

    def clear(self) -> None:
        self.replace_all([])

    def get_by_house_no(self, house_no: str) -> Optional[Household]:
        """Find a household by house number (trimmed, case-insensitive)."""
        key = house_key(house_no)
        if not key:
            return None
        return next((h for h in self.list_all() if house_key(h.house_no) == key), None)

    def members(self) -> List[MemberRef]:
        return flatten_members(self.list_all())

    def find_member(self, member_id: Optional[str]) -> Optional[MemberRef]:
        """
        Resolve a weak member reference.

        Returns None when the id is empty or the member no longer exists.
        """
        if not member_id:
            return None
        return next((ref for ref in self.members() if ref.id == member_id), None)

    def search(self, term: str) -> List[Household]:
        """Households whose house number or any member name contains term."""
        term = (term or "").strip()
        if not term:
            return self.list_all()
        return [
            h for h in self.list_all()
            if contains_term(h.house_no, term) or any(contains_term(m.name, term) for m in h.members)
        ]


class VoterRepository(ABC):
    """
    Abstract repository for electoral roll entries.
    """

    @abstractmethod
    def list_all(self) -> List[Voter]:
        pass

    @abstractmethod
    def get(self, voter_id: str) -> Optional[Voter]:
        pass

    @abstractmethod
    def add(self, voter: Voter) -> Voter:
        pass

    @abstractmethod
    def update(self, voter: Voter) -> Voter:
        pass

    @abstractmethod
    def replace_all(self, voters: List[Voter]) -> None:
        pass

    @abstractmethod
    def merge(self, voters: List[Voter]) -> int:
        """Append voters; returns the number appended."""
        pass

    def clear(self) -> None:
        self.replace_all([])

    def require(self, voter_id: str) -> Voter:
        voter = self.get(voter_id)
        if voter is None:
            raise RecordNotFoundError("Voter", voter_id)
        return voter

    def set_status(self, voter_id: str, status: RecordStatus) -> Voter:
        voter = self.require(voter_id)
        voter.status = RecordStatus.parse(status, strict=True)
        return self.update(voter)

    def set_link(self, voter_id: str, member_id: Optional[str]) -> Voter:
        voter = self.require(voter_id)
        voter.linked_member_id = member_id or None
        return self.update(voter)

    def linked_member_ids(self) -> Set[str]:
        return {v.linked_member_id for v in self.list_all() if v.linked_member_id}

    def filter(self, status: Optional[RecordStatus] = None, term: Optional[str] = None) -> List[Voter]:
        """
        Voters matching a status and a search term.

        The term is matched case-insensitively against name, EPIC number
        and house number.
        """
        term = (term or "").strip()
        result = []
        for voter in self.list_all():
            if status is not None and voter.status != status:
                continue
            if term and not (
                contains_term(voter.name, term)
                or contains_term(voter.epic_no, term)
                or contains_term(voter.house_no, term)
            ):
                continue
            result.append(voter)
        return result

    def status_counts(self) -> Dict[RecordStatus, int]:
        counts = {status: 0 for status in RecordStatus}
        for voter in self.list_all():
            counts[voter.status] += 1
        return counts


class InMemoryHouseholdRepository(HouseholdRepository):
    """
    List-backed household repository.

    When a JSONStore is given, every mutation is written through; write
    failures are logged by the store and do not roll back memory.
    """

    def __init__(
        self,
        households: Optional[List[Household]] = None,
        store: Optional["JSONStore"] = None,
    ):
        self._households: List[Household] = list(households or [])
        self.store = store

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save_households(self._households)

    def _require(self, household_id: str) -> Household:
        household = self.get(household_id)
        if household is None:
            raise RecordNotFoundError("Household", household_id)
        return household

    def list_all(self) -> List[Household]:
        return list(self._households)

    def get(self, household_id: str) -> Optional[Household]:
        return next((h for h in self._households if h.id == household_id), None)

    def add(self, household: Household, today: Optional[date] = None) -> Household:
        validate_household(household, self._households, today)
        self._households.append(household)
        self._persist()
        return household

    def update(self, household: Household, today: Optional[date] = None) -> Household:
        current = self._require(household.id)
        validate_household(household, self._households, today)
        self._households[self._households.index(current)] = household
        self._persist()
        return household

    def delete(self, household_id: str) -> bool:
        household = self.get(household_id)
        if household is None:
            return False
        self._households.remove(household)
        self._persist()
        return True

    def add_member(self, household_id: str, member: Member, today: Optional[date] = None) -> Member:
        household = self._require(household_id)
        if member.is_hof and household.head_of_family is not None:
            raise ValidationError(
                "Household already has a Head of Family",
                field_name="isHof", field_value=household.house_no,
            )
        validate_member(member, today)
        household.members.append(member)
        self._persist()
        return member

    def update_member(self, household_id: str, member: Member, today: Optional[date] = None) -> Member:
        household = self._require(household_id)
        current = household.get_member(member.id)
        if current is None:
            raise RecordNotFoundError("Member", member.id)
        # The HOF flag is not changed through member edits
        member.is_hof = current.is_hof
        validate_member(member, today)
        household.members[household.members.index(current)] = member
        self._persist()
        return member

    def delete_member(self, household_id: str, member_id: str) -> bool:
        household = self._require(household_id)
        member = household.get_member(member_id)
        if member is None:
            return False
        if member.is_hof:
            raise ValidationError(
                "The Head of Family cannot be deleted; delete the household instead",
                field_name="isHof", field_value=member_id,
            )
        household.members.remove(member)
        self._persist()
        return True

    def set_member_status(self, member_id: str, status: RecordStatus) -> bool:
        for household in self._households:
            member = household.get_member(member_id)
            if member is not None:
                member.status = RecordStatus.parse(status)
                self._persist()
                return True
        return False

    def replace_all(self, households: List[Household]) -> None:
        self._households = list(households)
        self._persist()

    def merge(self, households: List[Household]) -> int:
        """
        Merge imported households.

        A household whose house number is new is appended. One whose
        house number already exists has its members appended to the
        existing household as non-HOF members, so house numbers stay
        unique and each household keeps a single head of family.
        """
        added = 0
        for incoming in households:
            existing = self.get_by_house_no(incoming.house_no)
            if existing is None:
                incoming.normalize_head_of_family()
                self._households.append(incoming)
                added += 1
                continue
            known_ids = {m.id for m in existing.members}
            for member in incoming.members:
                if member.id in known_ids:
                    continue
                member.is_hof = False
                existing.members.append(member)
            existing.normalize_head_of_family()
        self._persist()
        return added


class InMemoryVoterRepository(VoterRepository):
    """
    List-backed voter repository with optional JSONStore write-through.
    """

    def __init__(
        self,
        voters: Optional[List[Voter]] = None,
        store: Optional["JSONStore"] = None,
    ):
        self._voters: List[Voter] = list(voters or [])
        self.store = store

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save_voters(self._voters)

    def list_all(self) -> List[Voter]:
        return list(self._voters)

    def get(self, voter_id: str) -> Optional[Voter]:
        return next((v for v in self._voters if v.id == voter_id), None)

    def add(self, voter: Voter) -> Voter:
        self._voters.append(voter)
        self._persist()
        return voter

    def update(self, voter: Voter) -> Voter:
        for i, current in enumerate(self._voters):
            if current.id == voter.id:
                self._voters[i] = voter
                self._persist()
                return voter
        raise RecordNotFoundError("Voter", voter.id)

    def replace_all(self, voters: List[Voter]) -> None:
        self._voters = list(voters)
        self._persist()

    def merge(self, voters: List[Voter]) -> int:
        self._voters.extend(voters)
        self._persist()
        return len(voters)
