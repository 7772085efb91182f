"""Ballot presentation.

Candidates are grouped by position and each position takes exactly one
choice. Everything here works on candidates that were already fetched.
"""
from typing import Dict, Iterable, List, Mapping

from pollbooth.errors import InvalidSelection
from pollbooth.models.election_model import Candidate
from pollbooth.models.vote_model import VotePayload


def group_by_position(candidates: Iterable[Candidate]) -> Dict[str, List[Candidate]]:
    """Map each position to its candidates, positions in first-seen order."""
    grouped: Dict[str, List[Candidate]] = {}
    for candidate in candidates:
        grouped.setdefault(candidate.position, []).append(candidate)
    return grouped


class Ballot:
    def __init__(self, candidates: Iterable[Candidate]):
        self._by_position = group_by_position(candidates)
        self._selected: VotePayload = {}

    @classmethod
    def from_selections(cls, candidates: Iterable[Candidate], votes: Mapping[str, str]) -> "Ballot":
        ballot = cls(candidates)
        for position, candidate_name in votes.items():
            ballot.select(position, candidate_name)
        return ballot

    @property
    def positions(self) -> List[str]:
        return list(self._by_position)

    def candidates_for(self, position: str) -> List[Candidate]:
        return list(self._by_position.get(position, []))

    def select(self, position: str, candidate_name: str) -> None:
        if position not in self._by_position:
            raise InvalidSelection(f"Unknown position: {position}")
        names = [c.name for c in self._by_position[position]]
        if candidate_name not in names:
            raise InvalidSelection(f"{candidate_name} is not standing for {position}.")
        self._selected[position] = candidate_name

    def clear(self, position: str) -> None:
        self._selected.pop(position, None)

    @property
    def selections(self) -> VotePayload:
        return dict(self._selected)

    @property
    def missing_positions(self) -> List[str]:
        return [p for p in self._by_position if p not in self._selected]

    @property
    def is_complete(self) -> bool:
        return len(self._selected) == len(self._by_position)

    @property
    def progress(self) -> float:
        if not self._by_position:
            return 0.0
        return len(self._selected) / len(self._by_position) * 100
