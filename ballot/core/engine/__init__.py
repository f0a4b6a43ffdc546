"""Ballot workflow engine.

Responsibilities:
  - Provide the BallotEngine actor, its precondition guards and the tally.
  - Must not touch persistence; notifications leave through subscribed sinks.
"""
