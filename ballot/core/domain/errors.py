"""Rejection type raised by the ballot engine."""

from __future__ import annotations

from typing import Optional

from .enums import ErrorCategory, ErrorKind, error_category, error_message


class BallotError(Exception):
    """A precondition rejection; callers branch on `kind`, never on `message`."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        self.message = message if message is not None else error_message(kind)
        super().__init__(self.message)

    @property
    def category(self) -> ErrorCategory:
        return error_category(self.kind)

    def __repr__(self) -> str:
        return f"BallotError(kind={self.kind.value}, message={self.message!r})"
