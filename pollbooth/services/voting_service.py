import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, List, NamedTuple, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from pollbooth.ballot import Ballot
from pollbooth.config import DEADLINE_SETTING_KEY, PLACEHOLDER_PHOTO_URL
from pollbooth.database.connection import Backend
from pollbooth.errors import (
    AlreadyVoted,
    CriticalInconsistency,
    DatabaseError,
    IdentityMismatch,
    IncompleteBallot,
    NotRegistered,
    VotingClosed,
)
from pollbooth.models.election_model import Candidate
from pollbooth.models.results_model import ResultsStats
from pollbooth.models.vote_model import VoteRecord
from pollbooth.models.voter_model import Voter
from pollbooth.tally import tally_votes

logger = logging.getLogger(__name__)


def normalize_registration_number(value: str) -> str:
    return (value or "").strip().upper()


def normalize_name(value: str) -> str:
    return " ".join((value or "").split()).casefold()


def parse_deadline(value) -> Optional[datetime]:
    """Accept a stored datetime or an ISO-8601 string; naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class BoothData(NamedTuple):
    candidates: List[Candidate]
    deadline: Optional[datetime]
    live_vote_count: int
    voting_ended: bool


class VotingService:
    """Verification, vote recording and results against one election backend."""

    def __init__(self, backend: Backend, clock: Optional[Callable[[], datetime]] = None):
        self.backend = backend
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # --- Verification ---

    def verify_voter(self, registration_number: str, identity: str) -> Voter:
        """Check the roll and the voter's status; create or resume the voter.

        Raises NotRegistered, IdentityMismatch, AlreadyVoted or DatabaseError.
        """
        reg = normalize_registration_number(registration_number)
        if not reg:
            raise NotRegistered(reg)

        try:
            registration = self.backend.registrations.find_one({"registration_number": reg})
        except PyMongoError as e:
            raise DatabaseError("look up registration", e)
        if registration is None:
            logger.info(f"Verification refused: {reg} not on the roll")
            raise NotRegistered(reg)

        student_name = registration.get("student_name", "")
        if normalize_name(identity) != normalize_name(student_name):
            logger.info(f"Verification refused: identity mismatch for {reg}")
            raise IdentityMismatch(reg)

        voter = self._create_or_resume_voter(reg, student_name)
        if voter.get("has_voted"):
            logger.info(f"Verification refused: {reg} has already voted")
            raise AlreadyVoted(reg)

        logger.info(f"Voter {reg} verified")
        return Voter(
            registration_number=voter["registration_number"],
            full_name=voter.get("full_name", student_name),
            has_voted=False,
        )

    def _create_or_resume_voter(self, reg: str, full_name: str) -> dict:
        try:
            return self.backend.voters.find_one_and_update(
                {"registration_number": reg},
                {"$setOnInsert": {"full_name": full_name, "has_voted": False}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # Lost an upsert race for the same number; the row exists now
            pass
        except PyMongoError as e:
            raise DatabaseError("register voter", e)

        try:
            return self.backend.voters.find_one({"registration_number": reg})
        except PyMongoError as e:
            raise DatabaseError("register voter", e)

    # --- Booth data ---

    def fetch_candidates(self) -> List[Candidate]:
        try:
            rows = list(self.backend.candidates.find({}).sort([("position", 1), ("name", 1)]))
        except PyMongoError as e:
            raise DatabaseError("load candidates", e)
        return [
            Candidate(
                id=row.get("id"),
                name=row["name"],
                position=row["position"],
                photo_url=row.get("photo_url") or PLACEHOLDER_PHOTO_URL,
            )
            for row in rows
        ]

    def fetch_deadline(self) -> Optional[datetime]:
        try:
            setting = self.backend.settings.find_one({"key": DEADLINE_SETTING_KEY})
        except PyMongoError as e:
            logger.warning(f"Could not read voting deadline: {e}")
            return None
        if not setting:
            return None
        try:
            return parse_deadline(setting.get("value"))
        except ValueError:
            logger.warning(f"Ignoring unparsable voting deadline: {setting.get('value')!r}")
            return None

    def live_vote_count(self) -> int:
        try:
            return self.backend.physical_votes.count_documents({})
        except PyMongoError as e:
            logger.error(f"Error fetching vote count: {e}")
            return 0

    def is_past_deadline(self, deadline: Optional[datetime]) -> bool:
        return deadline is not None and self._clock() > deadline

    def load_booth(self) -> BoothData:
        """Fetch candidates, deadline and live count side by side."""
        with ThreadPoolExecutor(max_workers=3) as executor:
            candidates = executor.submit(self.fetch_candidates)
            deadline = executor.submit(self.fetch_deadline)
            count = executor.submit(self.live_vote_count)
            fetched_deadline = deadline.result()
            return BoothData(
                candidates=candidates.result(),
                deadline=fetched_deadline,
                live_vote_count=count.result(),
                voting_ended=self.is_past_deadline(fetched_deadline),
            )

    # --- Submission ---

    def submit_physical_vote(self, ballot: Ballot, registration_number: str, operator: str) -> VoteRecord:
        """Record a complete ballot and mark the voter as having voted.

        The insert is guarded by the unique ``voter_reg_number`` index, so of
        two submissions racing for one voter only the first lands. If the
        voter flag cannot be set afterwards the vote stays recorded and
        CriticalInconsistency is raised.
        """
        if not ballot.is_complete:
            raise IncompleteBallot(ballot.missing_positions)

        reg = normalize_registration_number(registration_number)
        deadline = self.fetch_deadline()
        if self.is_past_deadline(deadline):
            raise VotingClosed(deadline)

        try:
            voter = self.backend.voters.find_one({"registration_number": reg})
        except PyMongoError as e:
            raise DatabaseError("look up voter", e)
        if voter is None:
            raise NotRegistered(reg)
        if voter.get("has_voted"):
            raise AlreadyVoted(reg)

        record = VoteRecord(
            votes=ballot.selections,
            voter_reg_number=reg,
            admin_operator=operator,
            vote_type="physical",
            created_at=self._clock(),
        )
        try:
            self.backend.physical_votes.insert_one(record.model_dump())
        except DuplicateKeyError:
            logger.warning(f"Duplicate ballot for {reg} rejected")
            raise AlreadyVoted(reg)
        except PyMongoError as e:
            raise DatabaseError("record vote", e)

        try:
            result = self.backend.voters.update_one(
                {"registration_number": reg, "has_voted": False},
                {"$set": {"has_voted": True}},
            )
        except PyMongoError as e:
            logger.error(f"CRITICAL: Vote for {reg} recorded, but failed to mark as voted: {e}")
            raise CriticalInconsistency(reg, e)
        if result.matched_count == 0:
            logger.error(f"CRITICAL: Vote for {reg} recorded, but voter was already marked or missing")
            raise CriticalInconsistency(reg, "voter already marked or missing")

        logger.info(f"Physical vote recorded for {reg} by {operator}")
        return record

    # --- Results ---

    def fetch_results(self) -> ResultsStats:
        candidates = self.fetch_candidates()
        try:
            physical = list(self.backend.physical_votes.find({}, {"votes": 1, "_id": 0}))
            online = list(self.backend.online_votes.find({}, {"votes": 1, "_id": 0}))
        except PyMongoError as e:
            raise DatabaseError("load votes", e)
        return tally_votes(candidates, physical + online)
