"""Deterministic tally over proposal vote counts."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..domain.models import Proposal


def select_winner(proposals: Sequence[Proposal]) -> int:
    """Return the index of the highest vote count; ties resolve to the lowest index.

    numpy.argmax returns the first occurrence of the maximum, which is exactly the
    lowest-index-wins policy. An empty sequence yields 0 (GENESIS position).
    """
    if not proposals:
        return 0
    counts = np.fromiter((p.vote_count for p in proposals), dtype=np.int64, count=len(proposals))
    return int(np.argmax(counts))
