"""Tests for voting, tally and ballot invariants."""

from __future__ import annotations

import pytest

from ballot.core.domain.enums import ErrorKind, WorkflowStatus
from ballot.core.domain.errors import BallotError
from ballot.core.domain.models import Voted, Voter
from ballot.core.engine.ballot_engine import BallotEngine

OWNER = "owner"
VOTER1 = "voter1"
VOTER2 = "voter2"
VOTER3 = "voter3"
OUTSIDER = "voter_not_registered"


def _engine_with_proposals() -> BallotEngine:
    engine = BallotEngine(OWNER)
    for voter in (VOTER1, VOTER2, VOTER3):
        engine.add_voter(OWNER, voter)
    engine.start_proposals_registering(OWNER)
    engine.add_proposal(VOTER1, "Proposal1 for test")
    engine.add_proposal(VOTER2, "Proposal2 for test")
    engine.end_proposals_registering(OWNER)
    return engine


def _assert_vote_invariants(engine: BallotEngine) -> None:
    snapshot = engine.snapshot()
    voted = [v for v in snapshot.voters.values() if v.has_voted]
    assert sum(p.vote_count for p in snapshot.proposals) == len(voted)
    for voter in voted:
        assert 0 <= voter.voted_proposal_id < len(snapshot.proposals)


def test_add_a_vote() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER1, 2)

    proposal = engine.get_one_proposal(VOTER1, 2)
    assert proposal.description == "Proposal2 for test"
    assert proposal.vote_count == 1
    _assert_vote_invariants(engine)


def test_vote_before_session_started_fails() -> None:
    engine = _engine_with_proposals()
    with pytest.raises(BallotError) as excinfo:
        engine.set_vote(VOTER1, 2)
    assert excinfo.value.kind == ErrorKind.WRONG_STATUS
    assert excinfo.value.message == "Voting session havent started yet"


def test_vote_after_session_ended_fails() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.end_voting_session(OWNER)
    with pytest.raises(BallotError) as excinfo:
        engine.set_vote(VOTER1, 1)
    assert excinfo.value.kind == ErrorKind.WRONG_STATUS


def test_second_vote_fails_and_counts_unchanged() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER1, 2)
    before = engine.snapshot()

    for proposal_id in (1, 2, 6):
        with pytest.raises(BallotError) as excinfo:
            engine.set_vote(VOTER1, proposal_id)
        assert excinfo.value.kind == ErrorKind.ALREADY_VOTED
        assert excinfo.value.message == "You have already voted"
    assert engine.snapshot() == before


def test_non_voter_cannot_vote() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    with pytest.raises(BallotError) as excinfo:
        engine.set_vote(OUTSIDER, 1)
    assert excinfo.value.kind == ErrorKind.NOT_VOTER


def test_vote_for_unknown_proposal_fails_without_mutation() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    before = engine.snapshot()
    with pytest.raises(BallotError) as excinfo:
        engine.set_vote(VOTER1, 6)
    assert excinfo.value.kind == ErrorKind.PROPOSAL_NOT_FOUND
    assert excinfo.value.message == "Proposal not found"
    assert engine.snapshot() == before
    assert engine.get_voter(VOTER1, VOTER1) == Voter(is_registered=True)


def test_vote_emits_voted_event() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    events: list = []
    engine.subscribe(events.append)
    engine.set_vote(VOTER1, 1)
    assert events == [Voted(voter=VOTER1, proposal_id=1)]


def test_voter_record_updated_after_vote() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER1, 2)
    assert engine.get_voter(VOTER1, VOTER1) == Voter(
        is_registered=True,
        has_voted=True,
        voted_proposal_id=2,
    )


def test_vote_for_genesis_is_accepted() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER3, 0)
    assert engine.get_one_proposal(VOTER3, 0).vote_count == 1


def test_winning_proposal_is_set() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER1, 2)
    engine.set_vote(VOTER2, 2)
    engine.end_voting_session(OWNER)
    engine.tally_votes(OWNER)

    assert engine.workflow_status == WorkflowStatus.VOTES_TALLIED
    assert engine.winning_proposal_id == 2
    _assert_vote_invariants(engine)


def test_tie_is_won_by_lowest_index() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER1, 2)
    engine.set_vote(VOTER2, 1)
    engine.end_voting_session(OWNER)
    engine.tally_votes(OWNER)
    assert engine.winning_proposal_id == 1


def test_winner_not_set_before_tally() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)
    engine.set_vote(VOTER1, 2)
    engine.end_voting_session(OWNER)
    assert engine.winning_proposal_id == 0


def test_sink_object_with_publish_receives_events() -> None:
    engine = _engine_with_proposals()

    class _Sink:
        def __init__(self) -> None:
            self.seen: list = []

        def publish(self, event) -> None:
            self.seen.append(event)

    sink = _Sink()
    engine.subscribe(sink)
    engine.start_voting_session(OWNER)
    assert len(sink.seen) == 1
    assert engine.workflow_status == WorkflowStatus.VOTING_SESSION_STARTED


def test_subscribe_rejects_non_callable() -> None:
    engine = BallotEngine(OWNER)
    with pytest.raises(TypeError):
        engine.subscribe(object())


def test_failed_notification_leaves_vote_uncounted() -> None:
    engine = _engine_with_proposals()
    engine.start_voting_session(OWNER)

    def failing_sink(event) -> None:
        raise RuntimeError("sink down")

    engine.subscribe(failing_sink)
    with pytest.raises(RuntimeError):
        engine.set_vote(VOTER1, 2)

    assert engine.get_one_proposal(VOTER1, 2).vote_count == 0
    assert engine.get_voter(VOTER1, VOTER1) == Voter(is_registered=True)
    _assert_vote_invariants(engine)
