"""Mining request protocol.

A job is dispatched as a single shell command line; the search program's
combined output is the whole response contract:
- any "not enough entropy" marker means the remote side rejected the template
- a line starting with "Found in" means success, and the last line of stdout
  is the winning message ("Hash: <hex>" optionally names the commit id)
- no "Found in" line plus the "Exhausted all variations" marker means every
  variant was tried without a hit
- anything else (gcloud errors, ssh failures, a crashed program) is a
  session error

Contains:
- build_remote_command: Render a job as a shell command line
- interpret_output: Turn raw output into a MiningOutcome
- MiningClient: Submits jobs through a GcloudSession
"""

import logging
import re
import shlex

from codeboss.mining.exceptions import SessionError
from codeboss.mining.models import FailureReason, MiningJob, MiningOutcome
from codeboss.mining.session import GcloudSession

logger = logging.getLogger(__name__)

ENTROPY_MARKERS = ("not enough entropy", "error: template has only")
FOUND_PREFIX = "Found in"
EXHAUSTED_MARKER = "exhausted all variations"
_HASH_RE = re.compile(r"^Hash: ([0-9a-f]+)\s*$", re.MULTILINE)


def build_remote_command(job: MiningJob, miner_command: str) -> str:
    """Render a job as a command line with every argument shell-quoted."""
    return " ".join([miner_command] + [shlex.quote(arg) for arg in job.to_args()])


def interpret_output(stdout: str, stderr: str, returncode: int = 0) -> MiningOutcome:
    """Interpret the search program's output.

    Args:
        stdout: Standard output of the remote command.
        stderr: Standard error of the remote command.
        returncode: Exit status of the remote command.

    Returns:
        The outcome. Entropy rejection wins over everything else.
    """
    combined = f"{stdout}\n{stderr}"
    lowered = combined.lower()

    if any(marker in lowered for marker in ENTROPY_MARKERS):
        return MiningOutcome.failed(FailureReason.INSUFFICIENT_ENTROPY, combined.strip())

    if not any(line.startswith(FOUND_PREFIX) for line in combined.splitlines()):
        if EXHAUSTED_MARKER in lowered:
            return MiningOutcome.failed(FailureReason.SEARCH_EXHAUSTED, combined.strip())
        # gcloud reports its own failures with status 1 too
        return MiningOutcome.failed(
            FailureReason.SESSION_ERROR,
            f"Remote command exited with status {returncode}: {combined.strip()}",
        )

    stdout_lines = stdout.rstrip("\r\n").splitlines()
    if not stdout_lines or not stdout_lines[-1].strip():
        return MiningOutcome.failed(FailureReason.SESSION_ERROR, "No message returned")

    match = _HASH_RE.search(combined)
    return MiningOutcome.found(stdout_lines[-1], match.group(1) if match else None)


class MiningClient:
    """Submits mining jobs to the remote session, one at a time."""

    def __init__(self, session: GcloudSession, miner_command: str):
        self.session = session
        self.miner_command = miner_command

    def warm_up(self) -> None:
        """Fire-and-forget request to bring the session up."""
        self.session.warm_up()

    def ensure_ready(self) -> None:
        """Block until the session can take a job."""
        self.session.ensure_running()

    def submit(self, job: MiningJob) -> MiningOutcome:
        """Run a job to completion and interpret its output.

        Transport failures are returned as SESSION_ERROR outcomes, never retried.
        """
        command = build_remote_command(job, self.miner_command)
        logger.debug("Submitting mining job: %s", command)
        try:
            result = self.session.run(command)
        except SessionError as e:
            return MiningOutcome.failed(FailureReason.SESSION_ERROR, str(e))
        return interpret_output(result.stdout, result.stderr, result.returncode)

