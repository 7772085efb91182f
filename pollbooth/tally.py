from typing import Dict, Iterable, List, Mapping

from pollbooth.models.election_model import Candidate
from pollbooth.models.results_model import CandidateResult, ResultsStats


def tally_votes(candidates: Iterable[Candidate], vote_records: Iterable[Mapping]) -> ResultsStats:
    """Count every record's choice per position.

    ``vote_records`` are raw rows from either channel; only their ``votes``
    mapping is read. Choices naming no known candidate are skipped, but the
    record still counts toward ``total_voters``.
    """
    candidates = list(candidates)
    records = list(vote_records)

    counts: Dict[str, Dict[str, int]] = {}
    for candidate in candidates:
        counts.setdefault(candidate.position, {})[candidate.name] = 0

    for record in records:
        choices = record.get("votes")
        if not isinstance(choices, Mapping):
            continue
        for position, position_counts in counts.items():
            name = choices.get(position)
            if isinstance(name, str) and name in position_counts:
                position_counts[name] += 1

    results_by_position: Dict[str, List[CandidateResult]] = {}
    for position, position_counts in counts.items():
        total = sum(position_counts.values())
        rows = [
            CandidateResult(
                candidate=name,
                votes=votes,
                percentage=round(votes / total * 100, 1) if total > 0 else 0.0,
            )
            for name, votes in position_counts.items()
        ]
        # sorted() is stable, so ties keep candidate order
        results_by_position[position] = sorted(rows, key=lambda r: r.votes, reverse=True)

    return ResultsStats(total_voters=len(records), results_by_position=results_by_position)
