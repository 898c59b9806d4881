"""
Git client infrastructure for reposeed.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import os
import re
import subprocess
from pathlib import Path
from typing import List, Optional
import logging

from ..exit_codes import FetchError
from ..progress import NetworkStats, NullProgressSink, ProgressSink

logger = logging.getLogger(__name__)

_COUNTS = r"\s*\d+%\s*\((\d+)/(\d+)\)"
RECEIVING = re.compile(
    r"^(?:Receiving|Unpacking) objects:" + _COUNTS + r"(?:,\s*([\d.]+)\s*(bytes|KiB|MiB|GiB|TiB))?"
)
INDEXING = re.compile(r"^Indexing objects:" + _COUNTS)
RESOLVING = re.compile(r"^Resolving deltas:" + _COUNTS)
CHECKOUT = re.compile(r"^(?:Updating files|Checking out files):" + _COUNTS)

UNIT_BYTES = {
    'bytes': 1,
    'KiB': 1024,
    'MiB': 1024 ** 2,
    'GiB': 1024 ** 3,
    'TiB': 1024 ** 4,
}


class CloneProgressParser:
    """
    Turns ``git clone --progress`` stderr lines into progress sink events.

    git reports counters rather than per-file paths, so checkout events carry
    no path. Lines that are not progress counters are kept as diagnostics.

    Example:
        parser = CloneProgressParser(renderer)
        parser.feed("Receiving objects:  50% (5/10), 1.00 KiB | 1 MiB/s")
    """

    def __init__(self, sink: ProgressSink):
        self.sink = sink
        self.stats = NetworkStats()
        self.diagnostics: List[str] = []

    def feed(self, line: str) -> None:
        """Parse one line (already split on carriage returns and newlines)."""
        line = line.strip()
        if not line:
            return

        match = RECEIVING.match(line)
        if match:
            received, total = int(match.group(1)), int(match.group(2))
            bytes_received = self.stats.bytes_received
            if match.group(3):
                bytes_received = max(
                    bytes_received,
                    int(float(match.group(3)) * UNIT_BYTES[match.group(4)])
                )
            self._network(
                objects_received=received,
                objects_total=total,
                bytes_received=bytes_received,
                # clone output has no separate indexing counter; index-pack keeps pace
                objects_indexed=max(self.stats.objects_indexed, received),
            )
            return

        match = INDEXING.match(line)
        if match:
            self._network(
                objects_indexed=int(match.group(1)),
                objects_total=max(self.stats.objects_total, int(match.group(2))),
            )
            return

        match = RESOLVING.match(line)
        if match:
            self._network(
                deltas_indexed=int(match.group(1)),
                deltas_total=int(match.group(2)),
            )
            return

        match = CHECKOUT.match(line)
        if match:
            self.sink.on_checkout_progress(None, int(match.group(1)), int(match.group(2)))
            return

        self.diagnostics.append(line)

    def _network(self, **changes) -> None:
        values = {
            'objects_received': self.stats.objects_received,
            'objects_total': self.stats.objects_total,
            'bytes_received': self.stats.bytes_received,
            'objects_indexed': self.stats.objects_indexed,
            'deltas_indexed': self.stats.deltas_indexed,
            'deltas_total': self.stats.deltas_total,
        }
        values.update(changes)
        self.stats = NetworkStats(**values)
        self.sink.on_network_progress(self.stats)

    def failure_reason(self) -> str:
        """Best single-line explanation of a failed clone."""
        for line in reversed(self.diagnostics):
            if line.startswith(('fatal:', 'error:')) or 'not found' in line:
                return line
        return self.diagnostics[-1] if self.diagnostics else "git clone failed"


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        client.clone("https://github.com/owner/starter.git", Path("/tmp/Ab3dE9x"),
                     branch="main", sink=TransferProgressRenderer())
    """

    def __init__(self, git: str = "git"):
        """
        Initialize GitClient.

        Args:
            git: git executable to run (default: "git" on PATH)
        """
        self.git = git

    def clone_command(self, location: str, destination: Path,
                      branch: Optional[str] = None) -> List[str]:
        """Build the argument list for a progress-reporting clone."""
        cmd = [self.git, "clone", "--progress"]
        if branch:
            cmd += ["--branch", branch, "--single-branch"]
        cmd += ["--", location, str(destination)]
        return cmd

    def clone(
        self,
        location: str,
        destination: Path,
        branch: Optional[str] = None,
        sink: Optional[ProgressSink] = None,
    ) -> None:
        """
        Clone a repository, streaming progress events to ``sink``.

        Blocks until git exits. Events are delivered on the calling thread.

        Args:
            location: Repository URL
            destination: Path to clone into (created by git)
            branch: Branch to check out; None checks out the remote default
            sink: Progress sink (default: discard events)

        Raises:
            FetchError: If git cannot be started, exits non-zero, or
                ``branch`` names something other than a remote branch
        """
        parser = CloneProgressParser(sink or NullProgressSink())
        cmd = self.clone_command(location, destination, branch)
        env = dict(os.environ, LC_ALL="C")

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            # Universal newlines turn git's carriage-return updates into lines
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=env,
            )
        except OSError as e:
            logger.debug(f"Could not start git: {e}")
            raise FetchError(f"Could not start git: {e}", cause=e) from e

        with process:
            for line in process.stderr:
                parser.feed(line)
            returncode = process.wait()

        if returncode != 0:
            reason = parser.failure_reason()
            logger.debug(f"git clone of {location} failed ({returncode}): {reason}")
            raise FetchError(f"Clone of {location} failed: {reason}")

        # --branch also accepts tags, which leave HEAD detached
        if branch:
            checked_out = self.current_branch(destination)
            if checked_out != branch:
                logger.debug(f"Expected branch {branch} in {destination}, found {checked_out}")
                raise FetchError(f"Clone of {location} failed: remote has no branch {branch}")

        logger.debug(f"Cloned {location} into {destination}")

    def current_branch(self, path: Path) -> Optional[str]:
        """Get current branch name; None when HEAD is detached."""
        cmd = [self.git, "-C", str(path), "symbolic-ref", "-q", "--short", "HEAD"]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            logger.debug(f"Could not run git: {e}")
            return None
        output = result.stdout.strip()
        if result.returncode == 0 and output:
            return output
        return None
