from fastapi import APIRouter, Depends

from pollbooth.ballot import Ballot, group_by_position
from pollbooth.dependencies import get_operator, get_voting_service
from pollbooth.errors import VotingError
from pollbooth.models.voter_model import Voter
from pollbooth.routes.errors import to_http_exception
from pollbooth.schemas import BoothOut, CastVoteRequest, VerifyVoterRequest
from pollbooth.services.voting_service import VotingService

vote_router = APIRouter(prefix="/vote", tags=["Vote"])


@vote_router.post("/verify", response_model=Voter)
def verify_voter(
    request: VerifyVoterRequest,
    operator: str = Depends(get_operator),
    service: VotingService = Depends(get_voting_service),
):
    """
    Checks the student against the official roll and starts (or resumes)
    their voting session. Fails if they have already voted.
    """
    try:
        return service.verify_voter(request.registration_number, request.identity)
    except VotingError as e:
        raise to_http_exception(e)


@vote_router.get("/booth", response_model=BoothOut)
def load_booth(
    operator: str = Depends(get_operator),
    service: VotingService = Depends(get_voting_service),
):
    try:
        booth = service.load_booth()
    except VotingError as e:
        raise to_http_exception(e)
    return BoothOut(
        positions=group_by_position(booth.candidates),
        deadline=booth.deadline,
        voting_ended=booth.voting_ended,
        live_vote_count=booth.live_vote_count,
    )


@vote_router.post("/cast")
def cast_vote(
    request: CastVoteRequest,
    operator: str = Depends(get_operator),
    service: VotingService = Depends(get_voting_service),
):
    """
    Records a physical vote entered by the logged-in operator.
    Every position needs exactly one selection.
    """
    try:
        ballot = Ballot.from_selections(service.fetch_candidates(), request.votes)
        record = service.submit_physical_vote(ballot, request.registration_number, operator)
    except VotingError as e:
        raise to_http_exception(e)

    return {
        "message": "Vote submitted successfully!",
        "voter_reg_number": record.voter_reg_number,
        "votes": record.votes,
    }


@vote_router.get("/count")
def live_vote_count(service: VotingService = Depends(get_voting_service)):
    return {"count": service.live_vote_count()}
