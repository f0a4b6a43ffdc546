"""Read-only report of journaled ballots.

Purpose:
  - List ballots in a journal, or print one ballot's proposals, winner and events.
Inputs:
  - --db journal path, optional --ballot-id, --events and --limit.
Outputs:
  - Printed report to stdout.
Example:
  - python3 -m ballot.cli.show_ballot --db ballot.db --ballot-id demo --events
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from ballot.cli._debug_utils import _effective_limit
from ballot.infra.sqlite.db_readonly import get_readonly_connection
from ballot.infra.sqlite.repos.ballot_journal_reader import BallotJournalReader


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show ballots stored in a journal database")
    parser.add_argument("--db", required=True, help="Journal SQLite database path")
    parser.add_argument("--ballot-id", default=None, help="Ballot to show; lists ballots when omitted")
    parser.add_argument("--events", action="store_true", help="Print the notification history")
    parser.add_argument("--limit", type=int, default=0, help="Max events to print (0 = all)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.limit < 0:
        raise SystemExit("ERROR: --limit must be >= 0")

    try:
        conn = get_readonly_connection(args.db)
    except ValueError as exc:
        raise SystemExit(f"ERROR: {exc}")
    try:
        reader = BallotJournalReader(conn)
        if args.ballot_id is None:
            headers = reader.list_ballots()
            for header in headers:
                print(f"{header.ballot_id} created_at={header.created_at} engine_version={header.engine_version}")
            print(f"ballots={len(headers)}")
            return

        snapshot = reader.load_snapshot(args.ballot_id)
        if snapshot is None:
            raise SystemExit(f"ERROR: unknown ballot_id {args.ballot_id}")

        print(f"ballot_id={args.ballot_id}")
        print(f"administrator={snapshot.administrator}")
        print(f"workflow_status={snapshot.status.value}")
        voted = sum(1 for v in snapshot.voters.values() if v.has_voted)
        print(f"voters={len(snapshot.voters)} voted={voted}")
        for index, proposal in enumerate(snapshot.proposals):
            print(f"  proposal {index} votes={proposal.vote_count} description={proposal.description}")
        print(f"winning_proposal_id={snapshot.winning_proposal_id}")

        if args.events:
            events = reader.list_events(args.ballot_id)
            shown = events[: _effective_limit(args, events)]
            for seq, event in enumerate(shown, start=1):
                print(f"  event {seq} {event}")
            print(f"events={len(events)} shown={len(shown)}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
