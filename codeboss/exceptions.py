"""Exception classes shared across codeboss.

Contains:
- CodebossError: Base exception for all codeboss errors
- PreconditionError: Repository state does not allow the requested operation
- MalformedTemplateError: A message template cannot be parsed
- InsufficientEntropyError: A template has too few variants for the target
"""


class CodebossError(Exception):
    """Base exception for codeboss errors."""

    pass


class PreconditionError(CodebossError):
    """Raised when the repository is not in a state the operation requires."""

    pass


class MalformedTemplateError(CodebossError):
    """Raised when a message template cannot be parsed."""

    pass


class InsufficientEntropyError(CodebossError):
    """Raised when a template is rejected by admission control.

    The assessment that caused the rejection is kept on the exception so the
    caller can explain the numbers.
    """

    def __init__(self, assessment, message: str = "Not enough entropy"):
        super().__init__(message)
        self.assessment = assessment
