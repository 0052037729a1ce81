"""Create, list and kill tmux sessions.

tmx.session
~~~~~~~~~~~

"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import os
import pathlib
import typing as t

from . import exc
from .common import is_benign_error, raise_for_result, run_tmux, tmux

logger = logging.getLogger(__name__)

#: Separator between fields of ``list-sessions -F``
FORMAT_SEPARATOR = "|"

SESSION_FORMATS = (
    "#{session_name}",
    "#{session_attached}",
    "#{session_windows}",
    "#{session_created}",
)


@dataclasses.dataclass
class SessionInfo:
    """One row of ``tmux list-sessions``."""

    name: str
    attached: bool
    windows: int
    created: str

    @classmethod
    def from_line(cls, line: str) -> SessionInfo:
        """Parse a line of :data:`SESSION_FORMATS` output.

        Examples
        --------
        >>> SessionInfo.from_line("work|1|3|0")
        SessionInfo(name='work', attached=True, windows=3, created='1970-01-01T00:00:00+00:00')
        """
        name, attached, windows, epoch = line.rsplit(FORMAT_SEPARATOR, 3)
        created = datetime.datetime.fromtimestamp(int(epoch), tz=datetime.timezone.utc)
        return cls(
            name=name,
            attached=attached not in ("", "0"),
            windows=int(windows),
            created=created.isoformat(),
        )

    def to_dict(self) -> dict[str, t.Any]:
        """Return session as a JSON-friendly dict."""
        return dataclasses.asdict(self)


def session_check_name(session_name: str | None) -> None:
    """Raise exception session name invalid, modeled after tmux function.

    tmux(1) session names may not be empty, or include periods or colons.
    These delimiters are reserved for noting session, window and pane.

    Parameters
    ----------
    session_name : str
        Name of session.

    Raises
    ------
    :exc:`exc.BadSessionName`
        Invalid session name.

    Examples
    --------
    >>> session_check_name("build")
    >>> session_check_name("build.1")
    Traceback (most recent call last):
    ...
    tmx.exc.BadSessionName: Bad session name: contains periods (session name: build.1)
    """
    if session_name is None or len(session_name) == 0:
        raise exc.BadSessionName(reason="empty", session_name=session_name)
    if "." in session_name:
        raise exc.BadSessionName(reason="contains periods", session_name=session_name)
    if ":" in session_name:
        raise exc.BadSessionName(reason="contains colons", session_name=session_name)


def list_sessions(socket_name: str | None = None) -> list[SessionInfo]:
    """Return sessions of the server, empty if no server is running.

    ``$ tmux list-sessions -F ...``
    """
    result = run_tmux(
        "list-sessions",
        "-F",
        FORMAT_SEPARATOR.join(SESSION_FORMATS),
        socket_name=socket_name,
    )
    if not result.ok and is_benign_error(result):
        logger.debug("no sessions on socket %s: %s", socket_name, result.stderr)
        return []
    raise_for_result(result)
    return [SessionInfo.from_line(line) for line in result.stdout.split("\n") if line]


def new_session(
    name: str,
    start_directory: str | pathlib.Path | None = None,
    window_name: str | None = None,
    window_command: str | None = None,
    socket_name: str | None = None,
) -> str:
    """Create a detached session, return its name.

    ``$ tmux new-session -d -s <name> -P -F#{session_name}``

    Parameters
    ----------
    name : str
        Session name.
    start_directory : str or pathlib.Path, optional
        Working directory of the first window.
    window_name : str, optional
        Name of the first window.
    window_command : str, optional
        Command run in the first window instead of the default shell.
    socket_name : str, optional
        Alternate socket (``tmux -L``).

    Raises
    ------
    :exc:`exc.BadSessionName`
    :exc:`exc.TransportError`
        e.g. ``duplicate session``.
    """
    session_check_name(name)

    args: list[str] = ["new-session", "-d", "-s", name, "-P", "-F", "#{session_name}"]
    if window_name:
        args += ["-n", window_name]
    if start_directory:
        args += ["-c", str(pathlib.Path(start_directory).expanduser())]
    if window_command:
        args.append(window_command)

    logger.debug("creating session %s", name)

    # tmux refuses to nest sessions when started from inside one
    env = {k: v for k, v in os.environ.items() if k != "TMUX"}
    return tmux(*args, socket_name=socket_name, env=env)


def kill_session(name: str, socket_name: str | None = None) -> None:
    """Kill a session.

    ``$ tmux kill-session -t <name>``

    Raises
    ------
    :exc:`exc.TransportError`
        The session does not exist, or no server is running.
    """
    tmux("kill-session", "-t", name, socket_name=socket_name)
    logger.debug("killed session %s", name)


def has_session(name: str, socket_name: str | None = None) -> bool:
    """Return True if a session named exactly *name* exists."""
    session_check_name(name)
    return run_tmux("has-session", "-t", f"={name}", socket_name=socket_name).ok
