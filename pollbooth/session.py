"""Booth state machine.

One operator session at a polling station, from director login through
verifying a student, filling the ballot and submitting it. Transitions
happen only through named events; anything else raises InvalidTransition.
"""
import logging
from enum import Enum
from typing import List, Optional

from pollbooth.ballot import Ballot
from pollbooth.crud import login_director
from pollbooth.errors import AuthenticationFailed, InvalidTransition
from pollbooth.models.vote_model import VoteRecord
from pollbooth.models.voter_model import Voter
from pollbooth.services.voting_service import BoothData, VotingService

logger = logging.getLogger(__name__)


class BoothState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    ADMIN_AUTHENTICATED = "waiting for a voter"
    VOTER_VERIFIED = "voter verified"
    VOTING = "voting"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class BoothEvent(Enum):
    LOGIN = "log in"
    VERIFY_VOTER = "verify a voter"
    OPEN_BALLOT = "open the ballot"
    SELECT = "select a candidate"
    SUBMIT = "submit a ballot"
    CANCEL = "cancel"
    RESET = "reset"
    LOGOUT = "log out"


TRANSITIONS = {
    (BoothState.UNAUTHENTICATED, BoothEvent.LOGIN): BoothState.ADMIN_AUTHENTICATED,
    (BoothState.ADMIN_AUTHENTICATED, BoothEvent.VERIFY_VOTER): BoothState.VOTER_VERIFIED,
    (BoothState.VOTER_VERIFIED, BoothEvent.OPEN_BALLOT): BoothState.VOTING,
    (BoothState.VOTER_VERIFIED, BoothEvent.CANCEL): BoothState.CANCELLED,
    (BoothState.VOTING, BoothEvent.SELECT): BoothState.VOTING,
    (BoothState.VOTING, BoothEvent.SUBMIT): BoothState.SUBMITTED,
    (BoothState.VOTING, BoothEvent.CANCEL): BoothState.CANCELLED,
    (BoothState.SUBMITTED, BoothEvent.RESET): BoothState.ADMIN_AUTHENTICATED,
    (BoothState.CANCELLED, BoothEvent.RESET): BoothState.ADMIN_AUTHENTICATED,
}


def next_state(state: BoothState, event: BoothEvent) -> BoothState:
    if event is BoothEvent.LOGOUT:
        return BoothState.UNAUTHENTICATED
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(state, event)


class BoothSession:
    """Drives a VotingService through the booth states for one operator."""

    def __init__(self, service: VotingService):
        self.service = service
        self.state = BoothState.UNAUTHENTICATED
        self.history: List[BoothState] = [self.state]
        self.operator: Optional[str] = None
        self.voter: Optional[Voter] = None
        self.booth: Optional[BoothData] = None
        self.ballot: Optional[Ballot] = None

    def _check(self, event: BoothEvent) -> None:
        next_state(self.state, event)

    def _fire(self, event: BoothEvent) -> None:
        self.state = next_state(self.state, event)
        self.history.append(self.state)
        logger.debug(f"Booth {event.name} -> {self.state.name}")

    def _reset(self) -> None:
        self._fire(BoothEvent.RESET)
        self.voter = None
        self.booth = None
        self.ballot = None

    def login(self, username: str, password: str) -> str:
        self._check(BoothEvent.LOGIN)
        director, error = login_director(self.service.backend, username, password)
        if error:
            raise AuthenticationFailed(error)
        self.operator = director["username"]
        self._fire(BoothEvent.LOGIN)
        return self.operator

    def start_voting(self, registration_number: str, identity: str) -> Voter:
        self._check(BoothEvent.VERIFY_VOTER)
        self.voter = self.service.verify_voter(registration_number, identity)
        self._fire(BoothEvent.VERIFY_VOTER)
        return self.voter

    def open_ballot(self) -> Ballot:
        self._check(BoothEvent.OPEN_BALLOT)
        self.booth = self.service.load_booth()
        self.ballot = Ballot(self.booth.candidates)
        self._fire(BoothEvent.OPEN_BALLOT)
        return self.ballot

    def select(self, position: str, candidate_name: str) -> None:
        self._check(BoothEvent.SELECT)
        self.ballot.select(position, candidate_name)

    def submit(self) -> VoteRecord:
        # A failed submission leaves the booth in VOTING for a manual retry
        self._check(BoothEvent.SUBMIT)
        record = self.service.submit_physical_vote(
            self.ballot, self.voter.registration_number, self.operator
        )
        self._fire(BoothEvent.SUBMIT)
        self._reset()
        return record

    def cancel(self) -> None:
        self._fire(BoothEvent.CANCEL)
        self._reset()

    def logout(self) -> None:
        self._fire(BoothEvent.LOGOUT)
        self.operator = None
        self.voter = None
        self.booth = None
        self.ballot = None
