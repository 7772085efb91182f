from datetime import datetime, timezone

import mongomock
import pytest
from pymongo.errors import PyMongoError

from pollbooth.crud import create_director
from pollbooth.database.connection import Backend
from pollbooth.schemas import DirectorCreate
from pollbooth.services.voting_service import VotingService

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)

REGISTRATIONS = [
    {"registration_number": "BSC-001", "student_name": "Jane Doe"},
    {"registration_number": "BSC-002", "student_name": "John Smith"},
    {"registration_number": "BSC-003", "student_name": "Mary Wanjiru"},
]

CANDIDATES = [
    {"id": 1, "name": "Brian Otieno", "position": "President", "photo_url": "https://example.org/brian.jpg"},
    {"id": 2, "name": "Alice Mwangi", "position": "President", "photo_url": ""},
    {"id": 3, "name": "Carol Njeri", "position": "Secretary", "photo_url": "https://example.org/carol.jpg"},
    {"id": 4, "name": "David Kamau", "position": "Secretary", "photo_url": None},
]

FULL_BALLOT = {"President": "Alice Mwangi", "Secretary": "Carol Njeri"}


class BrokenCollection:
    """Stands in for a collection whose every call fails; remembers the calls."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            self.calls.append(name)
            raise PyMongoError(f"{name} unavailable")
        return fail


@pytest.fixture
def backend():
    client = mongomock.MongoClient()
    backend = Backend(client["test_election"])
    backend.ensure_indexes()
    backend.registrations.insert_many([dict(r) for r in REGISTRATIONS])
    backend.candidates.insert_many([dict(c) for c in CANDIDATES])
    return backend


@pytest.fixture
def service(backend):
    return VotingService(backend, clock=lambda: NOW)


@pytest.fixture
def director(backend):
    create_director(backend, DirectorCreate(username="returning_officer", password="s3cret-pass"))
    return {"username": "returning_officer", "password": "s3cret-pass"}


def set_deadline(backend, value):
    backend.settings.update_one(
        {"key": "voting_deadline"}, {"$set": {"value": value}}, upsert=True
    )
