from pydantic import BaseModel


class Voter(BaseModel):
    registration_number: str
    full_name: str
    has_voted: bool = False
