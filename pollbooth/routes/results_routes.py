from fastapi import APIRouter, Depends

from pollbooth.config import RESULTS_REFRESH_SECONDS
from pollbooth.dependencies import get_voting_service
from pollbooth.errors import VotingError
from pollbooth.routes.errors import to_http_exception
from pollbooth.schemas import ResultsOut
from pollbooth.services.voting_service import VotingService

router = APIRouter(prefix="/results", tags=["Results"])


@router.get("", response_model=ResultsOut)
def get_results(service: VotingService = Depends(get_voting_service)):
    try:
        stats = service.fetch_results()
    except VotingError as e:
        raise to_http_exception(e)
    return ResultsOut(refresh_seconds=RESULTS_REFRESH_SECONDS, **stats.model_dump())
