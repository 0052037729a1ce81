"""Provide exceptions used by tmx.

tmx.exc
~~~~~~~

Notes
-----
Every exception raised on purpose by tmx inherits from :exc:`TmxException`.
Timeouts are not exceptions: :func:`tmx.execute.execute`,
:func:`tmx.waiter.wait_for_text` and :func:`tmx.waiter.wait_idle` report them
in their result objects.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from tmx.common import TmuxResult


class TmxException(Exception):
    """Base exception for all tmx errors."""


class TmuxCommandNotFound(TmxException):
    """Raised when the tmux binary cannot be found on the system."""

    def __init__(self, *args: object) -> None:
        super().__init__("tmux binary not found in PATH")


class TransportError(TmxException):
    """Raised when tmux exits nonzero.

    Parameters
    ----------
    message : str
        Human readable description, usually tmux's stderr.
    result : :class:`tmx.common.TmuxResult`
        Raw result of the failed tmux invocation.

    Examples
    --------
    >>> from tmx.common import TmuxResult
    >>> result = TmuxResult(
    ...     cmd=["tmux", "kill-session", "-t", "nope"],
    ...     stdout="",
    ...     stderr="can't find session: nope",
    ...     returncode=1,
    ... )
    >>> err = TransportError(result.stderr, result)
    >>> str(err)
    "can't find session: nope"
    >>> err.result.returncode
    1
    """

    def __init__(self, message: str, result: TmuxResult, *args: object) -> None:
        super().__init__(message)
        self.result = result


class BadSessionName(TmxException):
    """Raised if a tmux session name is disallowed (e.g., empty, has colons/periods)."""

    def __init__(
        self,
        reason: str,
        session_name: str | None = None,
        *args: object,
    ) -> None:
        msg = f"Bad session name: {reason}"
        if session_name is not None:
            msg += f" (session name: {session_name})"
        super().__init__(msg)
