"""Allowed workflow transitions for the ballot state machine.

Responsibilities:
  - Define the single legal next status per current status.
  - Name the operation that performs each step and its phase-mismatch message.

Invariants:
  - Forward only; no status regresses or skips a step.
  - Must remain stable for auditability; changes require coordinated migration.
"""

from __future__ import annotations

from .enums import WORKFLOW_ORDER, WorkflowStatus

NEXT_STATUS: dict[WorkflowStatus, WorkflowStatus] = {
    current: following for current, following in zip(WORKFLOW_ORDER, WORKFLOW_ORDER[1:])
}

# operation -> (required status, phase-mismatch message)
TRANSITION_OPERATIONS: dict[str, tuple[WorkflowStatus, str]] = {
    "start_proposals_registering": (
        WorkflowStatus.REGISTERING_VOTERS,
        "Registering proposals cant be started now",
    ),
    "end_proposals_registering": (
        WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
        "Registering proposals havent started yet",
    ),
    "start_voting_session": (
        WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
        "Registering proposals phase is not finished",
    ),
    "end_voting_session": (
        WorkflowStatus.VOTING_SESSION_STARTED,
        "Voting session havent started yet",
    ),
    "tally_votes": (
        WorkflowStatus.VOTING_SESSION_ENDED,
        "Current status is not voting session ended",
    ),
}

# Phase requirements of the non-transition mutations.
COMMAND_PHASES: dict[str, tuple[WorkflowStatus, str]] = {
    "add_voter": (
        WorkflowStatus.REGISTERING_VOTERS,
        "Voters registration is not open yet",
    ),
    "add_proposal": (
        WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
        "Proposals are not allowed yet",
    ),
    "set_vote": (
        WorkflowStatus.VOTING_SESSION_STARTED,
        "Voting session havent started yet",
    ),
}


def is_allowed(current: WorkflowStatus, proposed: WorkflowStatus) -> bool:
    return NEXT_STATUS.get(current) == proposed
