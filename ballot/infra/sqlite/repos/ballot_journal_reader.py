"""SQLite reader for journaled ballots."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import List, Optional

from ballot.core.domain.enums import status_from_persisted
from ballot.core.domain.models import BallotEvent, BallotSnapshot, Proposal, Voter
from ballot.infra.sqlite.repos.ballot_journal_repo import event_from_payload


@dataclass(frozen=True)
class BallotHeader:
    ballot_id: str
    created_at: str
    engine_version: str


class BallotJournalReader:
    """Reads snapshots and events back from the journal.

    Ordering contract: proposals ordered by index, voters by identity, events by seq.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def list_ballots(self) -> List[BallotHeader]:
        rows = self._conn.execute(
            "SELECT ballot_id, created_at, engine_version FROM ballot ORDER BY created_at, ballot_id"
        ).fetchall()
        return [BallotHeader(ballot_id=r[0], created_at=r[1], engine_version=r[2]) for r in rows]

    def load_snapshot(self, ballot_id: str) -> Optional[BallotSnapshot]:
        row = self._conn.execute(
            """
            SELECT administrator, status, winning_proposal_id
            FROM ballot
            WHERE ballot_id=?
            """,
            (ballot_id,),
        ).fetchone()
        if row is None:
            return None
        status = status_from_persisted(row[1])
        if status is None:
            raise ValueError(f"Unknown workflow status in journal: {row[1]!r}")

        voters = {
            r[0]: Voter(
                is_registered=bool(r[1]),
                has_voted=bool(r[2]),
                voted_proposal_id=int(r[3]),
            )
            for r in self._conn.execute(
                """
                SELECT identity, is_registered, has_voted, voted_proposal_id
                FROM ballot_voter
                WHERE ballot_id=?
                ORDER BY identity
                """,
                (ballot_id,),
            ).fetchall()
        }

        proposals: List[Proposal] = []
        for expected_index, r in enumerate(
            self._conn.execute(
                """
                SELECT proposal_id, description, vote_count
                FROM ballot_proposal
                WHERE ballot_id=?
                ORDER BY proposal_id
                """,
                (ballot_id,),
            ).fetchall()
        ):
            if int(r[0]) != expected_index:
                raise ValueError(f"Proposal sequence has a gap at index {expected_index}")
            proposals.append(Proposal(description=r[1], vote_count=int(r[2])))

        return BallotSnapshot(
            administrator=row[0],
            status=status,
            voters=voters,
            proposals=proposals,
            winning_proposal_id=int(row[2]),
        )

    def list_events(self, ballot_id: str, limit: Optional[int] = None) -> List[BallotEvent]:
        sql = """
            SELECT event_type, payload_json
            FROM ballot_event
            WHERE ballot_id=?
            ORDER BY seq
        """
        params: tuple = (ballot_id,)
        if limit is not None:
            if limit <= 0:
                return []
            sql += " LIMIT ?"
            params = (ballot_id, limit)
        rows = self._conn.execute(sql, params).fetchall()
        return [event_from_payload(r[0], r[1]) for r in rows]
