"""Hash any director passwords still stored in plaintext.

Older rows keep the password in a ``password`` field; this moves it to
``hashed_password`` as a bcrypt hash.

    python -m pollbooth.hash_director_passwords
"""
import logging

from pollbooth.database.connection import Backend, connect
from pollbooth.security import hash_password, looks_hashed

logger = logging.getLogger(__name__)


def hash_existing_passwords(backend: Backend) -> int:
    migrated = 0
    for director in backend.directors.find({"password": {"$exists": True}}):
        password = director["password"]
        hashed = password if looks_hashed(password) else hash_password(password)
        backend.directors.update_one(
            {"_id": director["_id"]},
            {"$set": {"hashed_password": hashed}, "$unset": {"password": ""}},
        )
        logger.info(f"Hashed password for director {director.get('username')}")
        migrated += 1
    return migrated


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    count = hash_existing_passwords(connect())
    print(f"Migrated {count} director password(s).")
