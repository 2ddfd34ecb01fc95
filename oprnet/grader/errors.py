"""Error kinds raised while turning a ledger entry into a graded record.

Both kinds are terminal for the single entry being processed. Callers
drop the entry and move on; retrying reproduces the same error because
ledger data is immutable.
"""

from __future__ import annotations


class GraderError(Exception):
    """Base class for per-entry failures. Carries a human-readable reason."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class DecodeError(GraderError):
    """The content payload does not parse into the expected record shape."""


class ValidationError(GraderError):
    """The payload parses but breaks a protocol rule."""


__all__ = ["DecodeError", "GraderError", "ValidationError"]
