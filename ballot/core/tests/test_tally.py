"""Tests for tally winner selection."""

from __future__ import annotations

import random

from ballot.core.domain.models import Proposal
from ballot.core.engine.tally import select_winner


def _proposals(*counts: int) -> list[Proposal]:
    return [Proposal(description=f"P{i}", vote_count=c) for i, c in enumerate(counts)]


def test_highest_vote_count_wins() -> None:
    assert select_winner(_proposals(0, 1, 3, 2)) == 2


def test_tie_resolves_to_lowest_index() -> None:
    assert select_winner(_proposals(0, 2, 2, 1)) == 1
    assert select_winner(_proposals(0, 1, 3, 3, 3)) == 2


def test_no_votes_selects_genesis() -> None:
    assert select_winner(_proposals(0, 0, 0)) == 0


def test_empty_sequence_selects_zero() -> None:
    assert select_winner([]) == 0


def test_matches_lowest_index_of_maximum_for_random_counts() -> None:
    rng = random.Random(7)
    for _ in range(200):
        counts = [0] + [rng.randint(0, 4) for _ in range(rng.randint(0, 8))]
        best = max(counts)
        assert select_winner(_proposals(*counts)) == counts.index(best)
