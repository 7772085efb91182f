import pytest

from pollbooth.ballot import Ballot, group_by_position
from pollbooth.errors import InvalidSelection
from pollbooth.models.election_model import Candidate

CANDIDATES = [
    Candidate(name="Alice", position="President"),
    Candidate(name="Carol", position="Secretary"),
    Candidate(name="Brian", position="President"),
]


def test_group_by_position_keeps_first_seen_order():
    grouped = group_by_position(CANDIDATES)

    assert list(grouped) == ["President", "Secretary"]
    assert [c.name for c in grouped["President"]] == ["Alice", "Brian"]


def test_one_choice_per_position():
    ballot = Ballot(CANDIDATES)
    ballot.select("President", "Alice")
    ballot.select("President", "Brian")

    assert ballot.selections == {"President": "Brian"}
    assert not ballot.is_complete
    assert ballot.missing_positions == ["Secretary"]
    assert ballot.progress == 50.0


def test_complete_ballot():
    ballot = Ballot.from_selections(CANDIDATES, {"President": "Alice", "Secretary": "Carol"})

    assert ballot.is_complete
    assert ballot.missing_positions == []
    assert ballot.progress == 100.0


def test_clear_reopens_position():
    ballot = Ballot.from_selections(CANDIDATES, {"President": "Alice", "Secretary": "Carol"})
    ballot.clear("Secretary")

    assert not ballot.is_complete


@pytest.mark.parametrize("position, name", [
    ("Treasurer", "Alice"),
    ("Secretary", "Alice"),
])
def test_selection_outside_the_ballot_is_refused(position, name):
    ballot = Ballot(CANDIDATES)
    with pytest.raises(InvalidSelection):
        ballot.select(position, name)


def test_selections_are_a_copy():
    ballot = Ballot(CANDIDATES)
    ballot.select("President", "Alice")
    ballot.selections["Secretary"] = "Carol"

    assert ballot.selections == {"President": "Alice"}


def test_empty_ballot_has_no_progress():
    ballot = Ballot([])
    assert ballot.positions == []
    assert ballot.progress == 0.0
