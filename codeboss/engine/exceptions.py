"""Rewrite engine exception classes.

Contains:
- MissingSavedTemplateError: No template given and none saved for a commit
- LostCommitError: A pending commit could not be found again after a rewrite
"""

from codeboss.exceptions import CodebossError, PreconditionError


class MissingSavedTemplateError(PreconditionError):
    """Raised when a commit needs a saved template and has none."""

    pass


class LostCommitError(CodebossError):
    """Raised when a pending commit's identity no longer matches any commit."""

    pass
