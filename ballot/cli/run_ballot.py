"""Run a complete ballot scenario against a SQLite journal.

Purpose:
  - Register voters, collect proposals, collect votes and tally, journaling every step.
Inputs:
  - --config scenario JSON (administrator, voters, proposals, votes) and --db path.
Outputs:
  - SUMMARY lines to stdout; exit code 2 on config errors or rejected commands.
Example:
  - python3 -m ballot.cli.run_ballot --config ballot.json --db ballot.db
"""

from __future__ import annotations

import argparse
import sqlite3
from typing import Optional, Sequence

from ballot.app_api.ballot_config import load_ballot_config
from ballot.app_api.facade import BallotApplication
from ballot.cli._debug_utils import _dbg, _debug_enabled
from ballot.core.domain.errors import BallotError
from ballot.core.engine.ballot_engine import set_engine_debug
from ballot.infra.sqlite.db import get_connection
from ballot.infra.sqlite.migrator import apply_migrations


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a ballot scenario and store it to the journal")
    parser.add_argument("--config", required=True, help="Ballot scenario JSON path")
    parser.add_argument("--db", required=True, help="Journal SQLite database path")
    parser.add_argument("--debug", action="store_true", help="Print engine debug lines")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    try:
        config = load_ballot_config(args.config)
    except ValueError as exc:
        print("SUMMARY status=ERROR message=BALLOT_CONFIG_INVALID")
        _dbg(args, str(exc))
        raise SystemExit(2)

    conn = get_connection(args.db)
    if _debug_enabled(args):
        set_engine_debug(lambda msg: _dbg(args, msg))
    try:
        for name in apply_migrations(conn):
            _dbg(args, f"migration applied {name}")
        try:
            app = BallotApplication.create(conn, config.administrator, ballot_id=config.ballot_id)
        except sqlite3.IntegrityError:
            print(f"SUMMARY status=ERROR message=BALLOT_ID_EXISTS ballot_id={config.ballot_id}")
            raise SystemExit(2)

        print(f"SUMMARY ballot_id={app.ballot_id}")
        try:
            winner = app.run_config(config)
        except BallotError as exc:
            print(f"SUMMARY status=ERROR kind={exc.kind.value} message={exc.message}")
            print(f"SUMMARY workflow_status={app.engine.workflow_status.value}")
            raise SystemExit(2)

        snapshot = app.engine.snapshot()
        voted = sum(1 for v in snapshot.voters.values() if v.has_voted)
        print(f"SUMMARY workflow_status={snapshot.status.value}")
        print(f"SUMMARY voters={len(snapshot.voters)} voted={voted}")
        print(f"SUMMARY proposals={len(snapshot.proposals)}")
        print(f"SUMMARY winning_proposal_id={winner}")
        print(f"SUMMARY winning_description={snapshot.proposals[winner].description}")
    finally:
        set_engine_debug(None)
        conn.close()


if __name__ == "__main__":
    main()
