from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pollbooth.database.connection import Backend
from pollbooth.security import decode_access_token
from pollbooth.services.voting_service import VotingService

bearer_scheme = HTTPBearer(auto_error=False)


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_voting_service(backend: Backend = Depends(get_backend)) -> VotingService:
    return VotingService(backend)


def get_operator(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    """Username of the logged-in director issuing the request."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Admin login required.")
    username = decode_access_token(credentials.credentials)
    if not username:
        raise HTTPException(status_code=401, detail="Session expired or invalid. Please log in again.")
    return username
