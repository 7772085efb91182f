from fastapi import HTTPException

from pollbooth.errors import (
    AlreadyVoted,
    CriticalInconsistency,
    DatabaseError,
    IdentityMismatch,
    IncompleteBallot,
    InvalidSelection,
    NotRegistered,
    VotingClosed,
    VotingError,
)

STATUS_CODES = {
    NotRegistered: 404,
    IdentityMismatch: 403,
    AlreadyVoted: 409,
    IncompleteBallot: 422,
    InvalidSelection: 422,
    VotingClosed: 403,
    DatabaseError: 503,
    CriticalInconsistency: 500,
}


def to_http_exception(error: VotingError) -> HTTPException:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
