"""DTO definitions for ballot scenario input.

Responsibilities:
  - Define stable, typed structures for a ballot run (voters, proposals, votes).
Must not:
  - Implement workflow rules; the engine enforces those at run time.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class ProposalSpec:
    voter: str
    description: str


@dataclass(frozen=True)
class VoteSpec:
    voter: str
    proposal_id: int


@dataclass(frozen=True)
class BallotConfig:
    administrator: str
    voters: list[str] = field(default_factory=list)
    proposals: list[ProposalSpec] = field(default_factory=list)
    votes: list[VoteSpec] = field(default_factory=list)
    ballot_id: Optional[str] = None

    def validate(self) -> None:
        if not self.administrator.strip():
            raise ValueError("administrator must be non-empty")
        object.__setattr__(self, "administrator", self.administrator.strip())

        if self.ballot_id is not None and not self.ballot_id.strip():
            raise ValueError("ballot_id must be non-empty when given")

        cleaned = []
        for v in self.voters:
            stripped = v.strip()
            if not stripped:
                raise ValueError("voters contain empty value")
            cleaned.append(stripped)
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("voters contain duplicates")
        object.__setattr__(self, "voters", cleaned)

        proposals = []
        for p in self.proposals:
            voter = p.voter.strip()
            if not voter:
                raise ValueError("proposal voter must be non-empty")
            proposals.append(replace(p, voter=voter))
        object.__setattr__(self, "proposals", proposals)

        votes = []
        for vote in self.votes:
            voter = vote.voter.strip()
            if not voter:
                raise ValueError("vote voter must be non-empty")
            if vote.proposal_id < 0:
                raise ValueError("vote proposal_id must be >= 0")
            votes.append(replace(vote, voter=voter))
        object.__setattr__(self, "votes", votes)
