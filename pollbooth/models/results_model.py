from typing import Dict, List

from pydantic import BaseModel


class CandidateResult(BaseModel):
    candidate: str
    votes: int
    percentage: float


class ResultsStats(BaseModel):
    total_voters: int
    results_by_position: Dict[str, List[CandidateResult]]
