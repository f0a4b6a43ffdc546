"""Domain models for ballot records and notifications.

Responsibilities:
  - Define data carriers for voters, proposals, engine snapshots and notifications.

Inputs/Outputs:
  - Notifications are published by the engine and persisted by the journal.

Invariants:
  - Models must be deterministic containers with no behavior.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .enums import WorkflowStatus

GENESIS_DESCRIPTION = "GENESIS"


@dataclass(frozen=True)
class Voter:
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = 0


@dataclass(frozen=True)
class Proposal:
    description: str
    vote_count: int = 0


@dataclass(frozen=True)
class VoterRegistered:
    voter_address: str


@dataclass(frozen=True)
class ProposalRegistered:
    proposal_id: int


@dataclass(frozen=True)
class Voted:
    voter: str
    proposal_id: int


@dataclass(frozen=True)
class WorkflowStatusChange:
    previous_status: WorkflowStatus
    new_status: WorkflowStatus


@dataclass(frozen=True)
class OwnershipTransferred:
    previous_owner: str
    new_owner: str


BallotEvent = Union[
    VoterRegistered,
    ProposalRegistered,
    Voted,
    WorkflowStatusChange,
    OwnershipTransferred,
]


@dataclass(frozen=True)
class BallotSnapshot:
    administrator: str
    status: WorkflowStatus
    voters: dict[str, Voter] = field(default_factory=dict)
    proposals: list[Proposal] = field(default_factory=list)
    winning_proposal_id: int = 0
