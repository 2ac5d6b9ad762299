"""Mining-related exception classes.

Contains:
- SessionError: The remote compute session could not be reached or started
- MiningError: A mining request finished without a usable message
"""

from codeboss.exceptions import CodebossError
from codeboss.mining.models import FailureReason, MiningOutcome


class SessionError(CodebossError):
    """Raised when the remote session is unavailable."""

    pass


class MiningError(CodebossError):
    """Raised when a mining request fails; carries the outcome."""

    def __init__(self, outcome: MiningOutcome):
        reason = outcome.reason.value if outcome.reason else "unknown"
        message = f"Mining failed ({reason})"
        if outcome.detail:
            message += f":\n{outcome.detail}"
        super().__init__(message)
        self.outcome = outcome

    @property
    def reason(self) -> FailureReason:
        return self.outcome.reason
