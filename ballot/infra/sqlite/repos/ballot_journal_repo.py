"""SQLite repository for ballot snapshots and notification history.

Responsibilities:
  - Insert the ballot row, upsert voter/proposal rows, append events deterministically.
Must not:
  - Decide workflow rules; persistence only.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import asdict
from typing import Iterable

from ballot.core.domain.enums import WorkflowStatus
from ballot.core.domain.models import (
    BallotEvent,
    BallotSnapshot,
    OwnershipTransferred,
    ProposalRegistered,
    Voted,
    VoterRegistered,
    WorkflowStatusChange,
)

EVENT_TYPES: dict[str, type] = {
    "VoterRegistered": VoterRegistered,
    "ProposalRegistered": ProposalRegistered,
    "Voted": Voted,
    "WorkflowStatusChange": WorkflowStatusChange,
    "OwnershipTransferred": OwnershipTransferred,
}


def _compact_json(payload: object) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, sort_keys=True)


def event_to_payload(event: BallotEvent) -> tuple[str, str]:
    event_type = type(event).__name__
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unsupported event type: {event_type}")
    if isinstance(event, WorkflowStatusChange):
        payload: dict[str, object] = {
            "previous_status": event.previous_status.value,
            "new_status": event.new_status.value,
            "previous_ordinal": event.previous_status.ordinal,
            "new_ordinal": event.new_status.ordinal,
        }
    else:
        payload = asdict(event)
    return event_type, _compact_json(payload)


def event_from_payload(event_type: str, payload_json: str) -> BallotEvent:
    cls = EVENT_TYPES.get(event_type)
    if cls is None:
        raise ValueError(f"Unknown event type in journal: {event_type}")
    payload = json.loads(payload_json)
    if not isinstance(payload, dict):
        raise ValueError(f"Event payload must be a JSON object: {payload_json}")
    if cls is WorkflowStatusChange:
        return WorkflowStatusChange(
            previous_status=WorkflowStatus(payload["previous_status"]),
            new_status=WorkflowStatus(payload["new_status"]),
        )
    return cls(**payload)


class BallotJournalRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert_ballot(
        self,
        ballot_id: str,
        created_at: str,
        engine_version: str,
        snapshot: BallotSnapshot,
    ) -> None:
        self._conn.execute(
            """
            INSERT INTO ballot (
                ballot_id,
                created_at,
                engine_version,
                administrator,
                status,
                winning_proposal_id
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                ballot_id,
                created_at,
                engine_version,
                snapshot.administrator,
                snapshot.status.value,
                snapshot.winning_proposal_id,
            ),
        )

    def save_snapshot(self, ballot_id: str, snapshot: BallotSnapshot) -> None:
        cursor = self._conn.execute(
            """
            UPDATE ballot
            SET administrator=?, status=?, winning_proposal_id=?
            WHERE ballot_id=?
            """,
            (
                snapshot.administrator,
                snapshot.status.value,
                snapshot.winning_proposal_id,
                ballot_id,
            ),
        )
        if cursor.rowcount == 0:
            raise ValueError(f"Unknown ballot_id: {ballot_id}")

        self._conn.executemany(
            """
            INSERT INTO ballot_voter (
                ballot_id,
                identity,
                is_registered,
                has_voted,
                voted_proposal_id
            ) VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(ballot_id, identity) DO UPDATE SET
                is_registered=excluded.is_registered,
                has_voted=excluded.has_voted,
                voted_proposal_id=excluded.voted_proposal_id
            """,
            [
                (
                    ballot_id,
                    identity,
                    int(voter.is_registered),
                    int(voter.has_voted),
                    voter.voted_proposal_id,
                )
                for identity, voter in sorted(snapshot.voters.items())
            ],
        )
        self._conn.executemany(
            """
            INSERT INTO ballot_proposal (
                ballot_id,
                proposal_id,
                description,
                vote_count
            ) VALUES (?, ?, ?, ?)
            ON CONFLICT(ballot_id, proposal_id) DO UPDATE SET
                description=excluded.description,
                vote_count=excluded.vote_count
            """,
            [
                (ballot_id, index, proposal.description, proposal.vote_count)
                for index, proposal in enumerate(snapshot.proposals)
            ],
        )

    def append_events(self, ballot_id: str, events: Iterable[BallotEvent]) -> int:
        row = self._conn.execute(
            "SELECT COALESCE(MAX(seq), 0) FROM ballot_event WHERE ballot_id=?",
            (ballot_id,),
        ).fetchone()
        seq = int(row[0])
        written = 0
        for event in events:
            seq += 1
            event_type, payload_json = event_to_payload(event)
            self._conn.execute(
                """
                INSERT INTO ballot_event (ballot_id, seq, event_type, payload_json)
                VALUES (?, ?, ?, ?)
                """,
                (ballot_id, seq, event_type, payload_json),
            )
            written += 1
        return written
