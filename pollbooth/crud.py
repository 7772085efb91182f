import logging

from pymongo.errors import DuplicateKeyError

from pollbooth.database.connection import Backend
from pollbooth.schemas import DirectorCreate, DirectorOut
from pollbooth.security import hash_password, verify_password

logger = logging.getLogger(__name__)


# Create a new director with hashed password
def create_director(backend: Backend, data: DirectorCreate):
    director = data.model_dump()
    director["hashed_password"] = hash_password(director.pop("password"))
    try:
        result = backend.directors.insert_one(director)
    except DuplicateKeyError:
        logger.error(f"Director {data.username} already exists.")
        return None
    return DirectorOut(id=str(result.inserted_id), username=data.username)


# Login director
def login_director(backend: Backend, username: str, password: str):
    director = backend.directors.find_one({"username": username})
    if not director:
        return None, "Invalid admin credentials"

    hashed = director.get("hashed_password")
    if not hashed or not verify_password(password, hashed):
        return None, "Invalid admin credentials"

    return director, None
