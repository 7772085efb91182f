from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel

# position -> candidate name, e.g. {"President": "John Doe"}
VotePayload = Dict[str, str]


class VoteRecord(BaseModel):
    votes: VotePayload
    voter_reg_number: str
    admin_operator: str
    vote_type: Literal["physical", "online"] = "physical"
    created_at: Optional[datetime] = None
