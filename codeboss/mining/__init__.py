"""Mining request protocol for codeboss.

This package hands vanity-hash jobs to the remote search program:
- models: FailureReason, MiningJob, MiningOutcome
- exceptions: MiningError, SessionError
- digest: commit_header, commit_digest
- session: GcloudSession, InstanceStatus, RemoteResult
- protocol: MiningClient, build_remote_command, interpret_output
"""

from codeboss.mining.models import (
    FailureReason,
    MiningJob,
    MiningOutcome,
)
from codeboss.mining.exceptions import (
    MiningError,
    SessionError,
)
from codeboss.mining.digest import (
    commit_digest,
    commit_header,
)
from codeboss.mining.session import (
    GcloudSession,
    InstanceStatus,
    RemoteResult,
)
from codeboss.mining.protocol import (
    MiningClient,
    build_remote_command,
    interpret_output,
)


__all__ = [
    "FailureReason",
    "MiningJob",
    "MiningOutcome",
    "MiningError",
    "SessionError",
    "commit_digest",
    "commit_header",
    "GcloudSession",
    "InstanceStatus",
    "RemoteResult",
    "MiningClient",
    "build_remote_command",
    "interpret_output",
]
