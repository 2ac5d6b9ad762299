"""Remote compute session management.

The search program runs on a cloud instance reached through the gcloud CLI.
Contains:
- InstanceStatus: Instance lifecycle states
- RemoteResult: Output of a remote command
- GcloudSession: Status, resume/start, readiness wait, warm-up and remote execution
"""

import logging
import subprocess
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from codeboss.mining.exceptions import SessionError

logger = logging.getLogger(__name__)

# Seconds to wait after resume/start before SSH is usable
SSH_READY_DELAY = 15.0
# Seconds between status checks while the instance is transitioning
POLL_INTERVAL = 5.0


class InstanceStatus(Enum):
    """Instance lifecycle states reported by gcloud."""

    PROVISIONING = "PROVISIONING"
    STAGING = "STAGING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    SUSPENDING = "SUSPENDING"
    SUSPENDED = "SUSPENDED"
    REPAIRING = "REPAIRING"
    TERMINATED = "TERMINATED"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


TRANSITIONAL_STATES = {
    InstanceStatus.PROVISIONING,
    InstanceStatus.STAGING,
    InstanceStatus.STOPPING,
    InstanceStatus.SUSPENDING,
}


@dataclass
class RemoteResult:
    """Captured output of a command run in the session."""

    stdout: str
    stderr: str
    returncode: int


def _silent(message: str) -> None:
    pass


class GcloudSession:
    """A single compute instance that runs one mining job at a time."""

    def __init__(
        self,
        instance: str,
        zone: str,
        echo: Callable[[str], None] = _silent,
        poll_interval: float = POLL_INTERVAL,
        ssh_ready_delay: float = SSH_READY_DELAY,
    ):
        self.instance = instance
        self.zone = zone
        self.echo = echo
        self.poll_interval = poll_interval
        self.ssh_ready_delay = ssh_ready_delay

    def _gcloud(self, args: list[str]) -> subprocess.CompletedProcess:
        cmd = ["gcloud", "compute"] + args
        logger.debug("Running %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise SessionError("gcloud is not installed or not in PATH.")

    def _instance_args(self, action: str) -> list[str]:
        return ["instances", action, self.instance, f"--zone={self.zone}"]

    def status(self) -> InstanceStatus:
        """Current instance status; NOT_FOUND if it cannot be described."""
        result = self._gcloud(self._instance_args("describe") + ["--format=get(status)"])
        if result.returncode != 0:
            return InstanceStatus.NOT_FOUND
        try:
            return InstanceStatus(result.stdout.strip())
        except ValueError:
            return InstanceStatus.UNKNOWN

    def _transition(self, action: str, quiet: bool = False) -> None:
        result = self._gcloud(self._instance_args(action) + ["--quiet"])
        if result.returncode != 0:
            raise SessionError(f"Failed to {action} instance {self.instance}: {result.stderr.strip()}")
        if not quiet:
            self.echo("Waiting for SSH...")
        time.sleep(self.ssh_ready_delay)

    def resume(self, quiet: bool = False) -> None:
        """Resume a suspended instance."""
        if not quiet:
            self.echo("Resuming instance...")
        self._transition("resume", quiet)

    def start(self, quiet: bool = False) -> None:
        """Start a stopped instance."""
        if not quiet:
            self.echo("Starting instance...")
        self._transition("start", quiet)

    def wait_for_stable_state(self, quiet: bool = False) -> InstanceStatus:
        """Poll until the instance leaves its transitional states.

        There is no timeout; a stuck instance blocks until interrupted.
        """
        while True:
            status = self.status()
            if status not in TRANSITIONAL_STATES:
                return status
            if not quiet:
                self.echo(f"Instance is {status.value}, waiting...")
            time.sleep(self.poll_interval)

    def ensure_running(self, quiet: bool = False) -> None:
        """Block until the instance is running, resuming or starting it if needed.

        Raises:
            SessionError: If the instance is missing or in an unusable state.
        """
        status = self.wait_for_stable_state(quiet)
        logger.debug("Instance %s is %s", self.instance, status.value)

        if status is InstanceStatus.RUNNING:
            return
        if status is InstanceStatus.SUSPENDED:
            self.resume(quiet)
            return
        if status in (InstanceStatus.STOPPED, InstanceStatus.TERMINATED):
            self.start(quiet)
            return
        raise SessionError(f"Instance not available (status: {status.value})")

    def warm_up(self) -> threading.Thread:
        """Start waking the instance in the background without waiting.

        The thread never reports errors; ensure_running() remains the
        readiness gate.
        """
        thread = threading.Thread(target=self._warm_up, name="codeboss-warm-up", daemon=True)
        thread.start()
        return thread

    def _warm_up(self) -> None:
        try:
            self.ensure_running(quiet=True)
        except Exception as e:
            logger.debug("Warm-up of %s failed: %s", self.instance, e)

    def run(self, command: str) -> RemoteResult:
        """Run a shell command on the instance over SSH.

        Raises:
            SessionError: If gcloud cannot be executed.
        """
        result = self._gcloud(["ssh", self.instance, f"--zone={self.zone}", f"--command={command}"])
        return RemoteResult(stdout=result.stdout or "", stderr=result.stderr or "", returncode=result.returncode)
