"""Lightweight CLI smoke test entry point for end-to-end sanity checks.

Purpose:
  - Run the three-voter reference ballot against a fresh journal and reload it.
Inputs:
  - Optional --db path (default ballot_smoke.db, recreated on each run).
Outputs:
  - Printed status to stdout; non-zero exit if the journal disagrees with the engine.
Example:
  - python3 -m ballot.cli.smoke_test
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from ballot.app_api.dto import BallotConfig, ProposalSpec, VoteSpec
from ballot.app_api.facade import BallotApplication
from ballot.infra.sqlite.db import get_connection
from ballot.infra.sqlite.migrator import apply_migrations
from ballot.infra.sqlite.repos.ballot_journal_reader import BallotJournalReader

SMOKE_CONFIG = BallotConfig(
    administrator="owner",
    voters=["voter1", "voter2", "voter3"],
    proposals=[
        ProposalSpec(voter="voter1", description="Proposal1 for test"),
        ProposalSpec(voter="voter2", description="Proposal2 for test"),
    ],
    votes=[
        VoteSpec(voter="voter1", proposal_id=2),
        VoteSpec(voter="voter2", proposal_id=2),
    ],
    ballot_id="smoke",
)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Ballot engine smoke test")
    parser.add_argument("--db", default="ballot_smoke.db", help="Journal SQLite path (recreated)")
    args = parser.parse_args(argv)

    db_file = Path(args.db)
    if db_file.exists():
        db_file.unlink()
    conn = get_connection(args.db)
    try:
        apply_migrations(conn)
        app = BallotApplication.create(conn, SMOKE_CONFIG.administrator, ballot_id=SMOKE_CONFIG.ballot_id)
        winner = app.run_config(SMOKE_CONFIG)
        print(f"OK ballot_id={app.ballot_id} winning_proposal_id={winner}")

        reader = BallotJournalReader(conn)
        events = reader.list_events(app.ballot_id)
        reloaded = BallotApplication.load(conn, app.ballot_id)
        print(f"events={len(events)} status={reloaded.engine.workflow_status.value}")
        if reloaded.engine.snapshot() != app.engine.snapshot():
            raise SystemExit("ERROR: reloaded snapshot differs from engine state")
        print("OK reload matches engine state")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
