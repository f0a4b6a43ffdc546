"""Ballot engine: workflow state machine over voters and proposals.

Responsibilities:
  - Hold the voter registry, proposal list, workflow status and winner.
  - Apply guards before any mutation; advance status one step at a time.
  - Publish one notification per accepted mutation to subscribed sinks.

Inputs/Outputs:
  - Inputs: caller identity plus command arguments.
  - Outputs: notifications to sinks; BallotError on rejection.

Invariants:
  - All commands are serialized by a single lock.
  - A rejected command leaves state exactly as it was.
  - Index 0 of the proposal list is GENESIS once proposal registration opens.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Union

from ..domain.enums import WorkflowStatus
from ..domain.models import (
    GENESIS_DESCRIPTION,
    BallotEvent,
    BallotSnapshot,
    OwnershipTransferred,
    Proposal,
    ProposalRegistered,
    Voted,
    Voter,
    VoterRegistered,
    WorkflowStatusChange,
)
from ..domain.transition_graph import NEXT_STATUS
from ..ports.event_sink import EventSink
from . import guards
from .tally import select_winner

_DEBUG_FN: Callable[[str], None] | None = None

Subscriber = Union[EventSink, Callable[[BallotEvent], None]]


def set_engine_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


def _debug(msg: str) -> None:
    if _DEBUG_FN is not None:
        _DEBUG_FN(msg)


class BallotEngine:
    def __init__(self, administrator: str) -> None:
        guards.require_identity(administrator).raise_if_blocked()
        self._lock = threading.RLock()
        self._owner = administrator
        self._status = WorkflowStatus.REGISTERING_VOTERS
        self._voters: dict[str, Voter] = {}
        self._proposals: list[Proposal] = []
        self._winning_proposal_id = 0
        self._sinks: list[Callable[[BallotEvent], None]] = []

    # --- observers ---

    def subscribe(self, sink: Subscriber) -> None:
        publish = getattr(sink, "publish", None)
        callback = publish if callable(publish) else sink
        if not callable(callback):
            raise TypeError("sink must be callable or expose publish(event)")
        with self._lock:
            self._sinks.append(callback)

    def _emit(self, event: BallotEvent) -> None:
        _debug(f"EVENT {event}")
        for sink in list(self._sinks):
            sink(event)

    def _check(self, command: str, result: guards.GuardResult) -> None:
        if not result.allowed and result.kind is not None:
            _debug(f"REJECT command={command} kind={result.kind.value} status={self._status.value}")
        result.raise_if_blocked()

    # --- free reads ---

    @property
    def owner(self) -> str:
        with self._lock:
            return self._owner

    @property
    def workflow_status(self) -> WorkflowStatus:
        with self._lock:
            return self._status

    @property
    def winning_proposal_id(self) -> int:
        with self._lock:
            return self._winning_proposal_id

    @property
    def proposal_count(self) -> int:
        with self._lock:
            return len(self._proposals)

    # --- voter-scoped reads ---

    def get_voter(self, caller: str, identity: str) -> Voter:
        with self._lock:
            self._check("get_voter", guards.require_voter(self._voters, caller))
            return self._voters.get(identity, Voter())

    def get_one_proposal(self, caller: str, index: int) -> Proposal:
        with self._lock:
            self._check(
                "get_one_proposal",
                guards.first_blocked(
                    guards.require_voter(self._voters, caller),
                    guards.require_proposal_index(len(self._proposals), index),
                ),
            )
            return self._proposals[index]

    # --- registration ---

    def add_voter(self, caller: str, identity: str) -> None:
        with self._lock:
            self._check(
                "add_voter",
                guards.first_blocked(
                    guards.require_owner(self._owner, caller),
                    guards.require_command_phase("add_voter", self._status),
                    guards.require_identity(identity),
                    guards.require_not_registered(self._voters, identity),
                ),
            )
            with self._atomic():
                self._voters[identity] = Voter(is_registered=True)
                _debug(f"ACCEPT command=add_voter identity={identity}")
                self._emit(VoterRegistered(voter_address=identity))

    def add_proposal(self, caller: str, description: str) -> int:
        with self._lock:
            self._check(
                "add_proposal",
                guards.first_blocked(
                    guards.require_voter(self._voters, caller),
                    guards.require_command_phase("add_proposal", self._status),
                    guards.require_description(description),
                ),
            )
            with self._atomic():
                self._proposals.append(Proposal(description=description))
                proposal_id = len(self._proposals) - 1
                _debug(f"ACCEPT command=add_proposal caller={caller} proposal_id={proposal_id}")
                self._emit(ProposalRegistered(proposal_id=proposal_id))
            return proposal_id

    # --- voting ---

    def set_vote(self, caller: str, proposal_id: int) -> None:
        with self._lock:
            self._check(
                "set_vote",
                guards.first_blocked(
                    guards.require_voter(self._voters, caller),
                    guards.require_command_phase("set_vote", self._status),
                    guards.require_not_voted(self._voters.get(caller, Voter())),
                    guards.require_proposal_index(len(self._proposals), proposal_id),
                ),
            )
            with self._atomic():
                target = self._proposals[proposal_id]
                self._proposals[proposal_id] = Proposal(
                    description=target.description,
                    vote_count=target.vote_count + 1,
                )
                self._voters[caller] = Voter(
                    is_registered=True,
                    has_voted=True,
                    voted_proposal_id=proposal_id,
                )
                _debug(f"ACCEPT command=set_vote caller={caller} proposal_id={proposal_id}")
                self._emit(Voted(voter=caller, proposal_id=proposal_id))

    # --- workflow transitions ---

    def start_proposals_registering(self, caller: str) -> None:
        self._advance("start_proposals_registering", caller)

    def end_proposals_registering(self, caller: str) -> None:
        self._advance("end_proposals_registering", caller)

    def start_voting_session(self, caller: str) -> None:
        self._advance("start_voting_session", caller)

    def end_voting_session(self, caller: str) -> None:
        self._advance("end_voting_session", caller)

    def tally_votes(self, caller: str) -> None:
        self._advance("tally_votes", caller)

    def _advance(self, operation: str, caller: str) -> None:
        with self._lock:
            self._check(
                operation,
                guards.first_blocked(
                    guards.require_owner(self._owner, caller),
                    guards.require_transition(operation, self._status),
                ),
            )
            previous = self._status
            new_status = NEXT_STATUS[previous]
            with self._atomic():
                if new_status == WorkflowStatus.PROPOSALS_REGISTRATION_STARTED:
                    self._proposals.append(Proposal(description=GENESIS_DESCRIPTION))
                elif new_status == WorkflowStatus.VOTES_TALLIED:
                    self._winning_proposal_id = select_winner(self._proposals)
                self._status = new_status
                _debug(f"ACCEPT command={operation} status={previous.value}->{new_status.value}")
                self._emit(WorkflowStatusChange(previous_status=previous, new_status=new_status))

    # --- ownership ---

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._lock:
            self._check(
                "transfer_ownership",
                guards.first_blocked(
                    guards.require_owner(self._owner, caller),
                    guards.require_identity(new_owner),
                ),
            )
            previous = self._owner
            with self._atomic():
                self._owner = new_owner
                _debug(f"ACCEPT command=transfer_ownership owner={previous}->{new_owner}")
                self._emit(OwnershipTransferred(previous_owner=previous, new_owner=new_owner))

    # --- atomic commands ---

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        # Mutation and notification succeed together or state is rewound.
        before = self.snapshot()
        try:
            yield
        except Exception:
            self._load(before)
            _debug("REWIND notification delivery failed; state restored")
            raise

    def _load(self, snapshot: BallotSnapshot) -> None:
        self._owner = snapshot.administrator
        self._status = snapshot.status
        self._voters = dict(snapshot.voters)
        self._proposals = list(snapshot.proposals)
        self._winning_proposal_id = snapshot.winning_proposal_id

    def reset_to(self, snapshot: BallotSnapshot) -> None:
        """Replace the whole state with a validated snapshot; subscribers are kept."""
        _validate_snapshot(snapshot)
        guards.require_identity(snapshot.administrator).raise_if_blocked()
        with self._lock:
            self._load(snapshot)

    # --- snapshots ---

    def snapshot(self) -> BallotSnapshot:
        with self._lock:
            return BallotSnapshot(
                administrator=self._owner,
                status=self._status,
                voters=dict(self._voters),
                proposals=list(self._proposals),
                winning_proposal_id=self._winning_proposal_id,
            )

    @classmethod
    def restore(cls, snapshot: BallotSnapshot) -> "BallotEngine":
        _validate_snapshot(snapshot)
        engine = cls(snapshot.administrator)
        engine._status = snapshot.status
        engine._voters = dict(snapshot.voters)
        engine._proposals = list(snapshot.proposals)
        engine._winning_proposal_id = snapshot.winning_proposal_id
        return engine


def _validate_snapshot(snapshot: BallotSnapshot) -> None:
    proposals = snapshot.proposals
    genesis_opened = snapshot.status != WorkflowStatus.REGISTERING_VOTERS
    if genesis_opened:
        if not proposals or proposals[0].description != GENESIS_DESCRIPTION:
            raise ValueError("snapshot proposals must start with GENESIS once registration opened")
    elif proposals:
        raise ValueError("snapshot has proposals before proposal registration opened")

    voted = 0
    for identity, voter in snapshot.voters.items():
        if not identity:
            raise ValueError("snapshot contains an empty voter identity")
        if voter.has_voted:
            if not voter.is_registered:
                raise ValueError(f"voter {identity} voted without registration")
            if voter.voted_proposal_id < 0 or voter.voted_proposal_id >= len(proposals):
                raise ValueError(f"voter {identity} voted for unknown proposal {voter.voted_proposal_id}")
            voted += 1

    total = sum(p.vote_count for p in proposals)
    if total != voted:
        raise ValueError(f"vote counts ({total}) do not match voters who voted ({voted})")
    if snapshot.winning_proposal_id != 0 and snapshot.status != WorkflowStatus.VOTES_TALLIED:
        raise ValueError("winning proposal set before tally")
    if snapshot.winning_proposal_id < 0 or (proposals and snapshot.winning_proposal_id >= len(proposals)):
        raise ValueError(f"winning proposal {snapshot.winning_proposal_id} out of range")
