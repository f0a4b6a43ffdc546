"""Domain enums for the ballot workflow and its rejections.

Responsibilities:
  - Define WorkflowStatus identifiers persisted in the ballot journal.
  - Define ErrorKind discriminants with stable categories and default messages.

Invariants:
  - Enum values must remain stable for persistence and audits.
  - ERROR_METADATA must be complete and deterministic.
"""

from __future__ import annotations

from enum import Enum


class WorkflowStatus(Enum):
    REGISTERING_VOTERS = "RegisteringVoters"
    PROPOSALS_REGISTRATION_STARTED = "ProposalsRegistrationStarted"
    PROPOSALS_REGISTRATION_ENDED = "ProposalsRegistrationEnded"
    VOTING_SESSION_STARTED = "VotingSessionStarted"
    VOTING_SESSION_ENDED = "VotingSessionEnded"
    VOTES_TALLIED = "VotesTallied"

    @property
    def ordinal(self) -> int:
        return WORKFLOW_ORDER.index(self)


# Lifecycle order; ordinal is the value carried by status-change notifications.
WORKFLOW_ORDER: tuple[WorkflowStatus, ...] = (
    WorkflowStatus.REGISTERING_VOTERS,
    WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
    WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
    WorkflowStatus.VOTING_SESSION_STARTED,
    WorkflowStatus.VOTING_SESSION_ENDED,
    WorkflowStatus.VOTES_TALLIED,
)


class ErrorCategory(Enum):
    AUTHORIZATION = "AUTHORIZATION"
    STATE = "STATE"
    DOMAIN = "DOMAIN"


class ErrorKind(Enum):
    NOT_OWNER = "NOT_OWNER"
    NOT_VOTER = "NOT_VOTER"
    WRONG_STATUS = "WRONG_STATUS"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    ALREADY_VOTED = "ALREADY_VOTED"
    PROPOSAL_NOT_FOUND = "PROPOSAL_NOT_FOUND"
    EMPTY_DESCRIPTION = "EMPTY_DESCRIPTION"
    INVALID_IDENTITY = "INVALID_IDENTITY"


# Caller-facing metadata keyed by error kind. WRONG_STATUS messages are per operation.
ERROR_METADATA: dict[ErrorKind, dict[str, object]] = {
    ErrorKind.NOT_OWNER: {
        "category": ErrorCategory.AUTHORIZATION,
        "message": "Ownable: caller is not the owner",
    },
    ErrorKind.NOT_VOTER: {
        "category": ErrorCategory.AUTHORIZATION,
        "message": "You're not a voter",
    },
    ErrorKind.WRONG_STATUS: {
        "category": ErrorCategory.STATE,
        "message": "Operation not allowed in the current workflow status",
    },
    ErrorKind.ALREADY_REGISTERED: {
        "category": ErrorCategory.DOMAIN,
        "message": "Already registered",
    },
    ErrorKind.ALREADY_VOTED: {
        "category": ErrorCategory.DOMAIN,
        "message": "You have already voted",
    },
    ErrorKind.PROPOSAL_NOT_FOUND: {
        "category": ErrorCategory.DOMAIN,
        "message": "Proposal not found",
    },
    ErrorKind.EMPTY_DESCRIPTION: {
        "category": ErrorCategory.DOMAIN,
        "message": "Proposal description must not be empty",
    },
    ErrorKind.INVALID_IDENTITY: {
        "category": ErrorCategory.DOMAIN,
        "message": "Identity must be a non-empty string",
    },
}


def error_category(kind: ErrorKind) -> ErrorCategory:
    category = ERROR_METADATA[kind]["category"]
    assert isinstance(category, ErrorCategory)
    return category


def error_message(kind: ErrorKind) -> str:
    return str(ERROR_METADATA[kind]["message"])


def status_from_persisted(label: str) -> WorkflowStatus | None:
    if not label:
        return None
    try:
        return WorkflowStatus(label)
    except ValueError:
        return None


_missing = [kind for kind in ErrorKind if kind not in ERROR_METADATA]
if _missing:
    raise RuntimeError(f"Missing ERROR_METADATA for: {[m.value for m in _missing]}")

_extra = [k for k in ERROR_METADATA.keys() if k not in set(ErrorKind)]
if _extra:
    raise RuntimeError(f"Extra ERROR_METADATA keys: {[e.value for e in _extra]}")
