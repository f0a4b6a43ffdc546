from __future__ import annotations

from typing import Protocol

from ballot.core.domain.models import BallotEvent


class EventSink(Protocol):
    def publish(self, event: BallotEvent) -> None:
        ...
