"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- ReplayConflictError: Raised when a commit cannot be replayed onto a new base
"""


class GitError(Exception):
    """Custom exception for git-related errors.

    The captured output of the failing command is kept so callers can report
    it verbatim.
    """

    def __init__(self, message: str, stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr


class ReplayConflictError(GitError):
    """Raised when replaying a commit onto a new base fails."""

    pass
