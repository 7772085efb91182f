import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from pollbooth.config import MONGO_DB, MONGO_URI

logger = logging.getLogger(__name__)

REGISTRATIONS_COLLECTION_NAME = "registrations"
VOTERS_COLLECTION_NAME = "voters"
CANDIDATES_COLLECTION_NAME = "candidates"
PHYSICAL_VOTES_COLLECTION_NAME = "physical_votes"
ONLINE_VOTES_COLLECTION_NAME = "votes"
SETTINGS_COLLECTION_NAME = "settings"
DIRECTORS_COLLECTION_NAME = "directors"


class Backend:
    """Named collections of one election database.

    Built explicitly and handed to whatever needs it; nothing in the
    package reaches for a module-level client.
    """

    def __init__(self, db: Database):
        self.db = db
        self.registrations = db[REGISTRATIONS_COLLECTION_NAME]
        self.voters = db[VOTERS_COLLECTION_NAME]
        self.candidates = db[CANDIDATES_COLLECTION_NAME]
        self.physical_votes = db[PHYSICAL_VOTES_COLLECTION_NAME]
        self.online_votes = db[ONLINE_VOTES_COLLECTION_NAME]
        self.settings = db[SETTINGS_COLLECTION_NAME]
        self.directors = db[DIRECTORS_COLLECTION_NAME]

    def ensure_indexes(self) -> None:
        # One voter row and one physical ballot per registration number
        self.voters.create_index("registration_number", unique=True)
        self.physical_votes.create_index("voter_reg_number", unique=True)
        self.directors.create_index("username", unique=True)
        self.registrations.create_index("registration_number")
        self.candidates.create_index([("position", ASCENDING), ("name", ASCENDING)])
        self.settings.create_index("key", unique=True)
        logger.info(f"Indexes ensured on database: {self.db.name}")


def connect(uri: Optional[str] = None, db_name: Optional[str] = None) -> Backend:
    """Open a client for ``uri`` and wrap database ``db_name``.

    pymongo connects lazily, so this does not touch the network.
    """
    client = MongoClient(uri or MONGO_URI)
    return Backend(client[db_name or MONGO_DB])
