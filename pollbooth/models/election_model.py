from pydantic import BaseModel, Field
from typing import Optional


class Registration(BaseModel):
    registration_number: str = Field(..., examples=["BSC-CS-2021-014"])
    student_name: str


class Candidate(BaseModel):
    id: Optional[int] = None
    name: str
    position: str = Field(..., examples=["President"])
    photo_url: Optional[str] = None  # placeholder filled in on read
