from __future__ import annotations

import datetime
import sqlite3
import uuid
from typing import Callable, Optional, TypeVar

from ballot.core.domain.models import BallotEvent, Proposal, Voter
from ballot.core.engine.ballot_engine import BallotEngine
from ballot.infra.sqlite.repos.ballot_journal_reader import BallotJournalReader
from ballot.infra.sqlite.repos.ballot_journal_repo import BallotJournalRepo

from .dto import BallotConfig

ENGINE_VERSION = "1"

T = TypeVar("T")


class BallotApplication:
    """Runs engine commands and journals each accepted one in a single transaction."""

    def __init__(self, conn: sqlite3.Connection, ballot_id: str, engine: BallotEngine) -> None:
        self._conn = conn
        self._ballot_id = ballot_id
        self._engine = engine
        self._repo = BallotJournalRepo(conn)
        self._pending: list[BallotEvent] = []
        engine.subscribe(self._pending.append)

    @classmethod
    def create(
        cls,
        conn: sqlite3.Connection,
        administrator: str,
        ballot_id: Optional[str] = None,
        engine_version: str = ENGINE_VERSION,
    ) -> "BallotApplication":
        engine = BallotEngine(administrator)
        ballot_id = ballot_id or str(uuid.uuid4())
        created_at = datetime.datetime.now(datetime.timezone.utc).isoformat()

        conn.execute("BEGIN")
        try:
            BallotJournalRepo(conn).insert_ballot(
                ballot_id,
                created_at,
                engine_version,
                engine.snapshot(),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        return cls(conn, ballot_id, engine)

    @classmethod
    def load(cls, conn: sqlite3.Connection, ballot_id: str) -> "BallotApplication":
        snapshot = BallotJournalReader(conn).load_snapshot(ballot_id)
        if snapshot is None:
            raise ValueError(f"Unknown ballot_id: {ballot_id}")
        return cls(conn, ballot_id, BallotEngine.restore(snapshot))

    @property
    def ballot_id(self) -> str:
        return self._ballot_id

    @property
    def engine(self) -> BallotEngine:
        return self._engine

    def _run(self, command: Callable[[], T]) -> T:
        self._pending.clear()
        before = self._engine.snapshot()
        self._conn.execute("BEGIN")
        try:
            result = command()
            if self._pending:
                self._repo.append_events(self._ballot_id, self._pending)
                self._repo.save_snapshot(self._ballot_id, self._engine.snapshot())
            self._conn.commit()
            return result
        except Exception:
            self._conn.rollback()
            self._engine.reset_to(before)
            raise
        finally:
            self._pending.clear()

    def add_voter(self, caller: str, identity: str) -> None:
        self._run(lambda: self._engine.add_voter(caller, identity))

    def add_proposal(self, caller: str, description: str) -> int:
        return self._run(lambda: self._engine.add_proposal(caller, description))

    def set_vote(self, caller: str, proposal_id: int) -> None:
        self._run(lambda: self._engine.set_vote(caller, proposal_id))

    def start_proposals_registering(self, caller: str) -> None:
        self._run(lambda: self._engine.start_proposals_registering(caller))

    def end_proposals_registering(self, caller: str) -> None:
        self._run(lambda: self._engine.end_proposals_registering(caller))

    def start_voting_session(self, caller: str) -> None:
        self._run(lambda: self._engine.start_voting_session(caller))

    def end_voting_session(self, caller: str) -> None:
        self._run(lambda: self._engine.end_voting_session(caller))

    def tally_votes(self, caller: str) -> None:
        self._run(lambda: self._engine.tally_votes(caller))

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._run(lambda: self._engine.transfer_ownership(caller, new_owner))

    def get_voter(self, caller: str, identity: str) -> Voter:
        return self._engine.get_voter(caller, identity)

    def get_one_proposal(self, caller: str, index: int) -> Proposal:
        return self._engine.get_one_proposal(caller, index)

    def run_config(self, config: BallotConfig) -> int:
        """Drive the whole workflow from a scenario; returns the winning proposal id."""
        admin = self._engine.owner
        for identity in config.voters:
            self.add_voter(admin, identity)
        self.start_proposals_registering(admin)
        for proposal in config.proposals:
            self.add_proposal(proposal.voter, proposal.description)
        self.end_proposals_registering(admin)
        self.start_voting_session(admin)
        for vote in config.votes:
            self.set_vote(vote.voter, vote.proposal_id)
        self.end_voting_session(admin)
        self.tally_votes(admin)
        return self._engine.winning_proposal_id
