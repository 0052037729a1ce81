"""Wait for pane content to match a pattern or to stop changing.

tmx.waiter
~~~~~~~~~~

Both waiters poll :func:`tmx.pane.capture_pane` until a condition holds or
their deadline passes. A timeout is reported in the result, not raised.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
import re
import time
import typing as t

from .constants import (
    CAPTURE_LINES,
    IDLE_TIME_SECONDS,
    POLL_INTERVAL_SECONDS,
    WAIT_FOR_TEXT_TIMEOUT_SECONDS,
    WAIT_IDLE_TIMEOUT_SECONDS,
)
from .pane import capture_pane

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class WaitResult:
    """Outcome of :func:`wait_for_text`.

    Attributes
    ----------
    matched : bool
        Whether a line matched before the deadline.
    match : str | None
        The first matching line.
    elapsed : float
        Seconds spent waiting.
    last_capture : str
        Most recent capture, useful to diagnose a timeout.

    Examples
    --------
    >>> result = WaitResult(matched=True, match="READY>", elapsed=0.5,
    ...                     last_capture="READY>")
    >>> result.to_dict()["lastCapture"]
    'READY>'
    """

    matched: bool
    match: str | None = None
    elapsed: float = 0.0
    last_capture: str = ""

    def to_dict(self) -> dict[str, t.Any]:
        """Return result as a JSON-friendly dict."""
        return {
            "matched": self.matched,
            "match": self.match,
            "elapsed": self.elapsed,
            "lastCapture": self.last_capture,
        }


@dataclasses.dataclass
class IdleResult:
    """Outcome of :func:`wait_idle`."""

    idle: bool
    elapsed: float = 0.0
    last_capture: str = ""

    def to_dict(self) -> dict[str, t.Any]:
        """Return result as a JSON-friendly dict."""
        return {
            "idle": self.idle,
            "elapsed": self.elapsed,
            "lastCapture": self.last_capture,
        }


def match_line(pattern: re.Pattern[str], content: str) -> str | None:
    """Return the first line of *content* that *pattern* matches.

    Lines are tested one at a time, so ``^`` and ``$`` anchor to a line.

    Examples
    --------
    >>> match_line(re.compile(r"^READY"), "booting\\nREADY> \\n")
    'READY> '
    >>> match_line(re.compile(r"^READY"), "not READY") is None
    True
    """
    for line in content.split("\n"):
        if pattern.search(line):
            return line
    return None


def content_hash(content: str) -> str:
    """Return a digest of *content*, only used to notice changes."""
    return hashlib.md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()


def wait_for_text(
    target: str,
    pattern: str | re.Pattern[str],
    timeout: float = WAIT_FOR_TEXT_TIMEOUT_SECONDS,
    interval: float = POLL_INTERVAL_SECONDS,
    lines: int = CAPTURE_LINES,
    socket_name: str | None = None,
) -> WaitResult:
    """Poll a pane until a line matches *pattern* or *timeout* passes.

    Parameters
    ----------
    target : str
        ``session[:window[.pane]]``
    pattern : str | re.Pattern
        Regular expression, searched in each line separately.
    timeout : float, optional
        Seconds to wait. Default 15.
    interval : float, optional
        Seconds between captures. Default 0.5.
    lines : int, optional
        Scrollback lines to inspect. Default 1000.
    socket_name : str, optional
        Alternate socket (``tmux -L``).

    Returns
    -------
    :class:`WaitResult`

    Raises
    ------
    :exc:`tmx.exc.TransportError`
    :exc:`re.error`
        *pattern* is not a valid regular expression.
    """
    regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)

    start = time.monotonic()
    deadline = start + timeout
    last_capture = ""

    while time.monotonic() < deadline:
        last_capture = capture_pane(target, lines=lines, socket_name=socket_name)

        line = match_line(regex, last_capture)
        if line is not None:
            return WaitResult(
                matched=True,
                match=line,
                elapsed=time.monotonic() - start,
                last_capture=last_capture,
            )

        time.sleep(interval)

    logger.debug("no line matched %r in %s after %.1fs", regex.pattern, target, timeout)
    return WaitResult(
        matched=False,
        elapsed=time.monotonic() - start,
        last_capture=last_capture,
    )


def wait_idle(
    target: str,
    idle_time: float = IDLE_TIME_SECONDS,
    timeout: float = WAIT_IDLE_TIMEOUT_SECONDS,
    interval: float = POLL_INTERVAL_SECONDS,
    lines: int = CAPTURE_LINES,
    socket_name: str | None = None,
) -> IdleResult:
    """Poll a pane until its content is unchanged for *idle_time* seconds.

    Handy when the prompt of the program in the pane is not known.

    Parameters
    ----------
    target : str
        ``session[:window[.pane]]``
    idle_time : float, optional
        Seconds content must stay the same. Default 2.
    timeout : float, optional
        Seconds to wait. Default 30.
    interval : float, optional
        Seconds between captures. Default 0.5.
    lines : int, optional
        Scrollback lines to hash. Default 1000.
    socket_name : str, optional
        Alternate socket (``tmux -L``).

    Returns
    -------
    :class:`IdleResult`
    """
    start = time.monotonic()
    deadline = start + timeout

    last_hash: str | None = None
    last_changed_at = start
    last_capture = ""

    while time.monotonic() < deadline:
        last_capture = capture_pane(target, lines=lines, socket_name=socket_name)
        digest = content_hash(last_capture)
        now = time.monotonic()

        if digest != last_hash:
            last_hash = digest
            last_changed_at = now
        elif now - last_changed_at >= idle_time:
            return IdleResult(
                idle=True,
                elapsed=now - start,
                last_capture=last_capture,
            )

        time.sleep(interval)

    return IdleResult(
        idle=False,
        elapsed=time.monotonic() - start,
        last_capture=last_capture,
    )
