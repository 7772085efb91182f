from fastapi import APIRouter, Depends

from pollbooth.ballot import group_by_position
from pollbooth.dependencies import get_voting_service
from pollbooth.errors import VotingError
from pollbooth.routes.errors import to_http_exception
from pollbooth.schemas import BallotOut
from pollbooth.services.voting_service import VotingService

router = APIRouter(prefix="/election", tags=["Election"])


@router.get("/candidates", response_model=BallotOut)
def get_candidates(service: VotingService = Depends(get_voting_service)):
    try:
        candidates = service.fetch_candidates()
    except VotingError as e:
        raise to_http_exception(e)
    return BallotOut(positions=group_by_position(candidates))


@router.get("/deadline")
def get_deadline(service: VotingService = Depends(get_voting_service)):
    deadline = service.fetch_deadline()
    return {
        "deadline": deadline.isoformat() if deadline else None,
        "voting_ended": service.is_past_deadline(deadline),
    }
