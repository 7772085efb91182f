from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pollbooth.models.election_model import Candidate
from pollbooth.models.results_model import ResultsStats


class DirectorCreate(BaseModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class DirectorOut(BaseModel):
    id: str  # this will store MongoDB _id as string
    username: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class VerifyVoterRequest(BaseModel):
    registration_number: str = Field(..., min_length=1)
    identity: str = Field(..., min_length=1, description="Student name as it appears on the roll")


class CastVoteRequest(BaseModel):
    registration_number: str = Field(..., min_length=1)
    votes: Dict[str, str]


class BallotOut(BaseModel):
    positions: Dict[str, List[Candidate]]


class BoothOut(BallotOut):
    deadline: Optional[datetime] = None
    voting_ended: bool
    live_vote_count: int


class ResultsOut(ResultsStats):
    refresh_seconds: int
