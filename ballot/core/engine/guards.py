"""Precondition guards for ballot commands.

Responsibilities:
  - Enforce ownership, voter membership and workflow phase per command.
  - Provide an error kind and message when blocking a command.

Inputs/Outputs:
  - Inputs: current engine facts (owner, voters, status) and the caller.
  - Outputs: GuardResult with allowed flag, kind and message.

Invariants:
  - Must be deterministic and side-effect free; guards never mutate state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..domain.enums import ErrorKind, WorkflowStatus, error_message
from ..domain.errors import BallotError
from ..domain.models import Voter
from ..domain.transition_graph import COMMAND_PHASES, NEXT_STATUS, TRANSITION_OPERATIONS


@dataclass
class GuardResult:
    allowed: bool
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    def raise_if_blocked(self) -> None:
        if self.allowed:
            return
        assert self.kind is not None
        raise BallotError(self.kind, self.message)


_ALLOWED = GuardResult(allowed=True)


def _blocked(kind: ErrorKind, message: Optional[str] = None) -> GuardResult:
    return GuardResult(
        allowed=False,
        kind=kind,
        message=message if message is not None else error_message(kind),
    )


def require_owner(owner: str, caller: str) -> GuardResult:
    if caller != owner:
        return _blocked(ErrorKind.NOT_OWNER)
    return _ALLOWED


def require_voter(voters: Mapping[str, Voter], caller: str) -> GuardResult:
    voter = voters.get(caller)
    if voter is None or not voter.is_registered:
        return _blocked(ErrorKind.NOT_VOTER)
    return _ALLOWED


def require_identity(identity: object) -> GuardResult:
    if not isinstance(identity, str) or not identity.strip():
        return _blocked(ErrorKind.INVALID_IDENTITY)
    return _ALLOWED


def require_command_phase(command: str, current: WorkflowStatus) -> GuardResult:
    required, message = COMMAND_PHASES[command]
    if current != required:
        return _blocked(ErrorKind.WRONG_STATUS, message)
    return _ALLOWED


def require_transition(operation: str, current: WorkflowStatus) -> GuardResult:
    required, message = TRANSITION_OPERATIONS[operation]
    if current != required or current not in NEXT_STATUS:
        return _blocked(ErrorKind.WRONG_STATUS, message)
    return _ALLOWED


def require_proposal_index(proposal_count: int, index: object) -> GuardResult:
    # bool is an int subclass; a flag is never a valid index.
    if isinstance(index, bool) or not isinstance(index, int):
        return _blocked(ErrorKind.PROPOSAL_NOT_FOUND)
    if index < 0 or index >= proposal_count:
        return _blocked(ErrorKind.PROPOSAL_NOT_FOUND)
    return _ALLOWED


def first_blocked(*results: GuardResult) -> GuardResult:
    for result in results:
        if not result.allowed:
            return result
    return _ALLOWED


def require_not_registered(voters: Mapping[str, Voter], identity: str) -> GuardResult:
    if voters.get(identity, Voter()).is_registered:
        return _blocked(ErrorKind.ALREADY_REGISTERED)
    return _ALLOWED


def require_not_voted(voter: Voter) -> GuardResult:
    if voter.has_voted:
        return _blocked(ErrorKind.ALREADY_VOTED)
    return _ALLOWED


def require_description(description: object) -> GuardResult:
    if not isinstance(description, str) or description == "":
        return _blocked(ErrorKind.EMPTY_DESCRIPTION)
    return _ALLOWED
