"""
Progress reporting utilities for reposeed.

Provides consistent progress reporting on stderr, keeping stdout clean for
data. Two pieces live here:

- ProgressReporter: one-off status and error messages
- TransferProgressRenderer: the live two-phase clone display, fed by a
  ProgressSink event stream (network transfer and file checkout)
"""

import sys
import os
from dataclasses import dataclass
from typing import Optional, Protocol, TextIO


class ProgressReporter:
    """Handles status reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: bool = True, stream: Optional[TextIO] = None,
                 use_colors: Optional[bool] = None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable non-error output
            stream: Output stream (default: sys.stderr at call time)
            use_colors: Use ANSI colors in output. None = auto-detect
        """
        self.enabled = enabled
        self._stream = stream

        if use_colors is None:
            self.use_colors = self.stream.isatty() and os.environ.get('NO_COLOR') is None
        else:
            self.use_colors = use_colors

        self.colors = {
            'reset': '\033[0m',
            'red': '\033[31m',
        }

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def _colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are enabled."""
        if self.use_colors and color in self.colors:
            return f"{self.colors[color]}{text}{self.colors['reset']}"
        return text

    def __call__(self, message: str):
        """Output a status message if enabled."""
        if self.enabled:
            print(message, file=self.stream, flush=True)

    def error(self, message: str):
        """Always output errors."""
        print(self._colorize(f"ERROR: {message}", 'red'), file=self.stream, flush=True)


@dataclass(frozen=True)
class NetworkStats:
    """Snapshot of network transfer counters carried by one progress event."""
    objects_received: int = 0
    objects_total: int = 0
    bytes_received: int = 0
    objects_indexed: int = 0
    deltas_indexed: int = 0
    deltas_total: int = 0


class ProgressSink(Protocol):
    """Receives clone progress events, synchronously, from the fetch engine."""

    def on_network_progress(self, stats: NetworkStats) -> None:
        ...

    def on_checkout_progress(self, path: Optional[str], completed: int, total: int) -> None:
        ...


class NullProgressSink:
    """Progress sink that discards every event."""

    def on_network_progress(self, stats: NetworkStats) -> None:
        pass

    def on_checkout_progress(self, path: Optional[str], completed: int, total: int) -> None:
        pass


def _percent(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return max(0, min(100, (100 * part) // total))


@dataclass
class TransferState:
    """Accumulated network and checkout progress for one clone."""
    objects_received: int = 0
    objects_total: int = 0
    bytes_received: int = 0
    objects_indexed: int = 0
    deltas_indexed: int = 0
    deltas_total: int = 0
    checkout_path: Optional[str] = None
    checkout_completed: int = 0
    checkout_total: int = 0
    newline_emitted: bool = False

    def apply_network(self, stats: NetworkStats) -> None:
        self.objects_received = stats.objects_received
        self.objects_total = stats.objects_total
        self.bytes_received = stats.bytes_received
        self.objects_indexed = stats.objects_indexed
        self.deltas_indexed = stats.deltas_indexed
        self.deltas_total = stats.deltas_total

    def apply_checkout(self, path: Optional[str], completed: int, total: int) -> None:
        self.checkout_path = path
        self.checkout_completed = completed
        self.checkout_total = total

    @property
    def network_percent(self) -> int:
        return _percent(self.objects_received, self.objects_total)

    @property
    def index_percent(self) -> int:
        return _percent(self.objects_indexed, self.objects_total)

    @property
    def checkout_percent(self) -> int:
        return _percent(self.checkout_completed, self.checkout_total)

    @property
    def network_complete(self) -> bool:
        """True once every announced object has been received."""
        return self.objects_total > 0 and self.objects_received >= self.objects_total


class TransferProgressRenderer:
    """
    Renders clone progress as a two-phase overwriting status display.

    While objects are still arriving, one line shows network, index and
    checkout percentages. When the network phase completes, a single newline
    is written and a second line tracks delta resolution from then on.

    Example:
        renderer = TransferProgressRenderer()
        GitClient().clone(url, staging, sink=renderer)
        renderer.end_line()
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.state = TransferState()
        self._line_open = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def on_network_progress(self, stats: NetworkStats) -> None:
        self.state.apply_network(stats)
        self.render()

    def on_checkout_progress(self, path: Optional[str], completed: int, total: int) -> None:
        self.state.apply_checkout(path, completed, total)
        self.render()

    def render(self) -> None:
        state = self.state
        if state.newline_emitted or state.network_complete:
            if not state.newline_emitted:
                self.stream.write("\n")
                state.newline_emitted = True
            self.stream.write(
                f"Resolving deltas {state.deltas_indexed}/{state.deltas_total}\r"
            )
        else:
            self.stream.write(
                f"net {state.network_percent:3}% ({state.bytes_received // 1024:4} kb, "
                f"{state.objects_received:5}/{state.objects_total:5})  /  "
                f"idx {state.index_percent:3}% ({state.objects_indexed:5}/{state.objects_total:5})  /  "
                f"chk {state.checkout_percent:3}% ({state.checkout_completed:4}/{state.checkout_total:4}) "
                f"{state.checkout_path or ''}\r"
            )
        self._line_open = True
        self.stream.flush()

    def end_line(self) -> None:
        """Terminate the status line currently being overwritten, if any."""
        if self._line_open:
            self.stream.write("\n")
            self.stream.flush()
            self._line_open = False
