"""Run a shell command in a tmux pane and wait for its output and exit code.

tmx.execute
~~~~~~~~~~~

:func:`execute` types a marker-wrapped command into the pane (see
:mod:`tmx.markers`) and polls the pane until the markers show up.

Each poll is one *tick*: captures are taken at growing scrollback depths
(:data:`tmx.constants.EXPANSION_LEVELS`). A tick stops early once a capture
lacks the end marker, since a deeper capture cannot show a marker the command
has not printed yet. When the end marker is there but the start marker is not,
the start scrolled past the shallow capture and the tick goes deeper.

The loop is modeled as :class:`ExecutionPoller`, a small state machine over
:class:`PollState`.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import time
import typing as t

from .constants import (
    EXECUTE_TIMEOUT_SECONDS,
    EXPANSION_LEVELS,
    POLL_INTERVAL_SECONDS,
)
from .markers import (
    MarkerPair,
    ParsedOutput,
    generate_markers,
    has_end_marker,
    has_start_marker,
    parse_output,
    wrap_command,
)
from .pane import FULL_HISTORY, capture_pane, send_keys

if t.TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    CaptureFn = Callable[[int | None], str]

logger = logging.getLogger(__name__)

#: Exit code reported when the deadline passed before the command finished
TIMEOUT_EXIT_CODE = -1


@dataclasses.dataclass
class ExecuteResult:
    """Outcome of :func:`execute`.

    Attributes
    ----------
    output : str
        Combined stdout and stderr of the command.
    exit_code : int
        Exit status of the command, or ``-1`` on timeout.
    elapsed : float
        Seconds since the command was sent.
    """

    output: str
    exit_code: int
    elapsed: float

    @property
    def timed_out(self) -> bool:
        """Return True if the command did not finish before the deadline."""
        return self.exit_code == TIMEOUT_EXIT_CODE

    def to_dict(self) -> dict[str, t.Any]:
        """Return result as a JSON-friendly dict."""
        return {
            "output": self.output,
            "exitCode": self.exit_code,
            "elapsed": self.elapsed,
        }


class PollState(enum.Enum):
    """States of :class:`ExecutionPoller`."""

    POLLING = "polling"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"


class ExecutionPoller:
    """Poll captures of a pane until the markers of one command appear.

    Parameters
    ----------
    markers : :class:`tmx.markers.MarkerPair`
        Markers the command was wrapped with.
    capture : callable
        Called with a scrollback depth (``None`` for the whole history),
        returns the captured text.
    timeout : float
        Seconds from construction until the deadline.
    interval : float
        Seconds to sleep between ticks.
    levels : sequence of int or None
        Scrollback depths tried within one tick.
    clock, sleep : callable, optional
        Time source and sleep function, replaceable in tests.

    Examples
    --------
    >>> from tmx.markers import MarkerPair
    >>> m = MarkerPair("__S__", "__E__")
    >>> screens = {100: "__E__:0", 500: "__S__\\nhello\\n__E__:0"}
    >>> poller = ExecutionPoller(m, capture=lambda depth: screens.get(depth, ""),
    ...                          timeout=1)
    >>> poller.tick()
    ParsedOutput(output='hello', exit_code=0)
    """

    def __init__(
        self,
        markers: MarkerPair,
        capture: CaptureFn,
        timeout: float = EXECUTE_TIMEOUT_SECONDS,
        interval: float = POLL_INTERVAL_SECONDS,
        levels: Sequence[int | None] = EXPANSION_LEVELS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.markers = markers
        self.capture = capture
        self.timeout = timeout
        self.interval = interval
        self.levels = tuple(levels)
        self.clock = clock
        self.sleep = sleep

        self.state = PollState.POLLING
        self.parsed: ParsedOutput | None = None
        self.started_at = clock()
        self.deadline = self.started_at + timeout

    @property
    def elapsed(self) -> float:
        """Seconds since the poller was created."""
        return self.clock() - self.started_at

    def tick(self) -> ParsedOutput | None:
        """Capture at escalating depths once, return the parsed result if any."""
        for depth in self.levels:
            captured = self.capture(depth)

            if not has_end_marker(captured, self.markers):
                logger.debug("end marker absent at depth %s, still running", depth)
                return None

            if has_start_marker(captured, self.markers):
                return parse_output(captured, self.markers)

            logger.debug("start marker absent at depth %s, expanding", depth)
        return None

    def final_attempt(self) -> ParsedOutput | None:
        """Try every depth once more after the deadline, for late output."""
        for depth in self.levels:
            parsed = parse_output(self.capture(depth), self.markers)
            if parsed is not None:
                return parsed
        return None

    def step(self) -> PollState:
        """Advance the state machine by one transition."""
        if self.state is not PollState.POLLING:
            return self.state

        if self.clock() >= self.deadline:
            self.parsed = self.final_attempt()
            if self.parsed is not None:
                self.state = PollState.SUCCEEDED
            else:
                logger.debug("timed out after %.1fs", self.elapsed)
                self.state = PollState.TIMED_OUT
            return self.state

        self.parsed = self.tick()
        if self.parsed is not None:
            self.state = PollState.SUCCEEDED
        else:
            self.sleep(self.interval)
        return self.state

    def run(self) -> ExecuteResult:
        """Step until the poller leaves :attr:`PollState.POLLING`."""
        while self.step() is PollState.POLLING:
            pass

        if self.state is PollState.SUCCEEDED and self.parsed is not None:
            return ExecuteResult(
                output=self.parsed.output,
                exit_code=self.parsed.exit_code,
                elapsed=self.elapsed,
            )
        return ExecuteResult(
            output="",
            exit_code=TIMEOUT_EXIT_CODE,
            elapsed=max(self.elapsed, self.timeout),
        )


def execute(
    target: str,
    command: str,
    timeout: float = EXECUTE_TIMEOUT_SECONDS,
    interval: float = POLL_INTERVAL_SECONDS,
    socket_name: str | None = None,
) -> ExecuteResult:
    """Run *command* in the shell of pane *target* and wait for it.

    Parameters
    ----------
    target : str
        ``session[:window[.pane]]``; the pane must run a POSIX-compatible
        shell at its prompt.
    command : str
        Shell command, typed into the pane as-is.
    timeout : float, optional
        Seconds to wait for the command to finish. Default 30.
    interval : float, optional
        Seconds between polls. Default 0.5.
    socket_name : str, optional
        Alternate socket (``tmux -L``).

    Returns
    -------
    :class:`ExecuteResult`
        ``exit_code`` is ``-1`` if the command did not finish in time.

    Raises
    ------
    :exc:`tmx.exc.TransportError`
        tmux failed, e.g. *target* does not exist.

    Notes
    -----
    Two concurrent calls against the same pane type into the same shell and
    interleave; serialize them.
    """
    markers = generate_markers()
    wrapped = wrap_command(command, markers)

    logger.debug("executing in %s: %s", target, command)
    send_keys(target, wrapped, literal=True, socket_name=socket_name)

    def capture(depth: int | None) -> str:
        return capture_pane(
            target,
            lines=FULL_HISTORY if depth is None else depth,
            socket_name=socket_name,
        )

    poller = ExecutionPoller(
        markers,
        capture=capture,
        timeout=timeout,
        interval=interval,
    )
    return poller.run()
