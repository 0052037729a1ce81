"""Sentinel markers delimiting a command's output in pane scrollback.

tmx.markers
~~~~~~~~~~~

A command typed into a shell leaves two copies of every marker in the pane:
the *typed* one, inline with the rest of the command line, and the *echoed*
one, alone on its own line once the shell runs it. :func:`parse_output` only
accepts the echoed copies.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import re
import threading
import time

logger = logging.getLogger(__name__)

START_PREFIX = "__TMUX_EXEC_START_"
END_PREFIX = "__TMUX_EXEC_END_"
MARKER_SUFFIX = "__"

_counter_lock = threading.Lock()
_last_counter = 0


@dataclasses.dataclass(frozen=True)
class MarkerPair:
    """Start and end sentinel for one command.

    Examples
    --------
    >>> MarkerPair(start="__START__", end="__END__")
    MarkerPair(start='__START__', end='__END__')
    """

    start: str
    end: str


@dataclasses.dataclass(frozen=True)
class ParsedOutput:
    """Output and exit code recovered from a capture."""

    output: str
    exit_code: int


def _next_counter() -> int:
    """Return a nanosecond clock reading strictly greater than the last one."""
    global _last_counter
    with _counter_lock:
        _last_counter = max(time.monotonic_ns(), _last_counter + 1)
        return _last_counter


def generate_markers() -> MarkerPair:
    """Return a fresh :class:`MarkerPair`.

    The id combines the process id with a nanosecond counter that never
    repeats within the process, so concurrent calls from several threads get
    distinct markers too.

    Examples
    --------
    >>> a, b = generate_markers(), generate_markers()
    >>> a.start.startswith("__TMUX_EXEC_START_")
    True
    >>> a.end.startswith("__TMUX_EXEC_END_")
    True
    >>> a != b
    True
    """
    unique_id = f"{os.getpid()}_{_next_counter()}"
    markers = MarkerPair(
        start=f"{START_PREFIX}{unique_id}{MARKER_SUFFIX}",
        end=f"{END_PREFIX}{unique_id}{MARKER_SUFFIX}",
    )
    logger.debug("generated markers %s", unique_id)
    return markers


def wrap_command(command: str, markers: MarkerPair) -> str:
    """Wrap *command* so its output and exit status show up between markers.

    The braces group the command, so ``$?`` is the status of the whole
    group even for compound commands. ``2>&1`` folds stderr into the
    captured output. Requires a POSIX-compatible shell in the pane.

    Examples
    --------
    >>> wrap_command("ls -la", MarkerPair("__START__", "__END__"))
    'echo __START__; { ls -la; } 2>&1; echo __END__:$?'
    """
    return f"echo {markers.start}; {{ {command}; }} 2>&1; echo {markers.end}:$?"


def _end_pattern(markers: MarkerPair) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(markers.end)}:(\d+)")


def find_start(captured: str, markers: MarkerPair) -> int | None:
    """Return the offset of the echoed start marker, or None.

    The echoed marker follows a line break. A capture that begins with the
    marker (the typed line scrolled out of the window) also counts.

    Examples
    --------
    >>> m = MarkerPair("__S__", "__E__")
    >>> find_start("$ echo __S__; { true; }\\n__S__\\n", m)
    24
    >>> find_start("__S__\\nout", m)
    0
    >>> find_start("$ echo __S__; { true; }", m) is None
    True
    """
    idx = captured.find(f"\n{markers.start}")
    if idx != -1:
        return idx + 1
    if captured.startswith(markers.start):
        return 0
    return None


def has_start_marker(captured: str, markers: MarkerPair) -> bool:
    """Return True if the echoed start marker is in *captured*."""
    return find_start(captured, markers) is not None


def has_end_marker(captured: str, markers: MarkerPair) -> bool:
    """Return True if the end marker with a numeric exit code is present.

    Examples
    --------
    >>> m = MarkerPair("__S__", "__E__")
    >>> has_end_marker("echo __E__:$?", m)
    False
    >>> has_end_marker("__E__:127", m)
    True
    """
    return _end_pattern(markers).search(captured) is not None


def parse_output(captured: str, markers: MarkerPair) -> ParsedOutput | None:
    """Extract command output and exit code from a pane capture.

    Returns
    -------
    :class:`ParsedOutput` or None
        None while the command has not finished, or while its start marker
        is not part of *captured*.

    Examples
    --------
    >>> m = MarkerPair("__S__", "__E__")
    >>> captured = "\\n".join([
    ...     "$ echo __S__; { echo hi; } 2>&1; echo __E__:$?",
    ...     "__S__",
    ...     "hi",
    ...     "__E__:0",
    ...     "$",
    ... ])
    >>> parse_output(captured, m)
    ParsedOutput(output='hi', exit_code=0)

    Still running:

    >>> parse_output("$ echo __S__; { sleep 9; } 2>&1; echo __E__:$?\\n__S__", m)
    """
    start_idx = find_start(captured, markers)
    if start_idx is None:
        return None

    end_match = _end_pattern(markers).search(captured)
    if end_match is None:
        return None

    output_start = start_idx + len(markers.start)
    if captured[output_start : output_start + 1] == "\n":
        output_start += 1

    output = captured[output_start : end_match.start()]
    if output.endswith("\n"):
        output = output[:-1]

    return ParsedOutput(output=output, exit_code=int(end_match.group(1)))
