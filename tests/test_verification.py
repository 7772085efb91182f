import pytest
from pymongo.errors import DuplicateKeyError

from pollbooth.errors import AlreadyVoted, DatabaseError, IdentityMismatch, NotRegistered
from pollbooth.services.voting_service import normalize_registration_number

from tests.conftest import BrokenCollection


@pytest.mark.parametrize("reg_number", ["BSC-999", "XYZ", "", "   "])
def test_unknown_registration_is_refused(service, backend, reg_number):
    with pytest.raises(NotRegistered):
        service.verify_voter(reg_number, "Jane Doe")
    assert backend.voters.count_documents({}) == 0


def test_registration_number_is_normalized_before_lookup_and_storage(service, backend):
    voter = service.verify_voter("  bsc-001 ", "Jane Doe")

    assert voter.registration_number == "BSC-001"
    assert voter.full_name == "Jane Doe"
    assert voter.has_voted is False
    assert backend.voters.find_one({"registration_number": "BSC-001"}) is not None


def test_normalize_registration_number():
    assert normalize_registration_number(" ab-12\n") == "AB-12"
    assert normalize_registration_number(None) == ""


def test_identity_must_match_roll_name(service, backend):
    with pytest.raises(IdentityMismatch):
        service.verify_voter("BSC-001", "John Smith")
    assert backend.voters.count_documents({}) == 0


def test_identity_comparison_ignores_case_and_spacing(service):
    voter = service.verify_voter("BSC-003", "  mary   WANJIRU ")
    assert voter.full_name == "Mary Wanjiru"


def test_second_verification_resumes_existing_voter(service, backend):
    service.verify_voter("BSC-002", "John Smith")
    voter = service.verify_voter("bsc-002", "john smith")

    assert voter.registration_number == "BSC-002"
    assert backend.voters.count_documents({"registration_number": "BSC-002"}) == 1


def test_voter_who_has_voted_is_refused_without_new_vote(service, backend):
    service.verify_voter("BSC-001", "Jane Doe")
    backend.voters.update_one({"registration_number": "BSC-001"}, {"$set": {"has_voted": True}})

    with pytest.raises(AlreadyVoted):
        service.verify_voter("BSC-001", "Jane Doe")
    assert backend.physical_votes.count_documents({}) == 0
    assert backend.voters.find_one({"registration_number": "BSC-001"})["has_voted"] is True


def test_backend_failure_is_wrapped(service, backend):
    backend.registrations = BrokenCollection()

    with pytest.raises(DatabaseError) as excinfo:
        service.verify_voter("BSC-001", "Jane Doe")
    assert "look up registration" in str(excinfo.value)


class VotersLosingUpsertRace:
    """Upsert fails as if another booth created the row first."""

    def __init__(self, voters):
        self._voters = voters

    def __getattr__(self, name):
        return getattr(self._voters, name)

    def find_one_and_update(self, *args, **kwargs):
        self._voters.insert_one({"registration_number": "BSC-002", "full_name": "John Smith", "has_voted": False})
        raise DuplicateKeyError("E11000 duplicate key error collection: voters")


def test_lost_upsert_race_resumes_existing_voter(service, backend):
    backend.voters = VotersLosingUpsertRace(backend.voters)

    voter = service.verify_voter("BSC-002", "John Smith")

    assert voter.registration_number == "BSC-002"
    assert voter.full_name == "John Smith"
    assert backend.voters.count_documents({"registration_number": "BSC-002"}) == 1
