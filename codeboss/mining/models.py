"""Data models for mining requests.

Contains:
- FailureReason: Why a mining request produced no message
- MiningJob: A self-describing request for the remote search program
- MiningOutcome: Result of a mining request
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureReason(Enum):
    """Why a mining request failed."""

    INSUFFICIENT_ENTROPY = "insufficient entropy"
    SEARCH_EXHAUSTED = "search exhausted"
    SESSION_ERROR = "session error"


@dataclass(frozen=True)
class MiningJob:
    """Everything the remote search needs to rebuild the commit object."""

    template: str
    tree_hash: str
    parent_hash: str
    author: str  # "Name <email>"
    timestamp: int
    timezone: str  # "+HHMM" / "-HHMM"
    target: str

    def to_args(self) -> list[str]:
        """Positional arguments for the search program, in order."""
        return [
            self.template,
            self.tree_hash,
            self.parent_hash,
            self.author,
            str(self.timestamp),
            self.timezone,
            self.target,
        ]


@dataclass(frozen=True)
class MiningOutcome:
    """Result of a mining request: a winning message or a failure reason."""

    success: bool
    message: Optional[str] = None
    winning_hash: Optional[str] = None
    reason: Optional[FailureReason] = None
    detail: str = ""

    @classmethod
    def found(cls, message: str, winning_hash: Optional[str] = None) -> "MiningOutcome":
        return cls(success=True, message=message, winning_hash=winning_hash)

    @classmethod
    def failed(cls, reason: FailureReason, detail: str = "") -> "MiningOutcome":
        return cls(success=False, reason=reason, detail=detail)
