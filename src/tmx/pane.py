"""Keystrokes and captures for a single tmux pane.

tmx.pane
~~~~~~~~

"""

from __future__ import annotations

import logging
import time
import typing as t

from .common import tmux
from .constants import SEND_KEYS_DELAY_SECONDS

logger = logging.getLogger(__name__)

#: Depth passed to :func:`capture_pane` for the whole scrollback history
FULL_HISTORY: t.Literal["-"] = "-"


def send_keys(
    target: str,
    text: str,
    enter: bool = True,
    delay: float = SEND_KEYS_DELAY_SECONDS,
    literal: bool = True,
    socket_name: str | None = None,
) -> None:
    """Type *text* into a pane, then optionally press Enter.

    ``$ tmux send-keys -t <target> -l -- <text>``, then
    ``$ tmux send-keys -t <target> Enter``.

    Text and Enter go out as two separate commands with *delay* seconds in
    between, so the shell has consumed the text before Enter arrives.

    Parameters
    ----------
    target : str
        ``session[:window[.pane]]``
    text : str
        Text to type.
    enter : bool, optional
        Press Enter afterwards. Default True.
    delay : float, optional
        Seconds between text and Enter. Default 0.1.
    literal : bool, optional
        Send *text* as-is (``-l``) instead of as key names such as ``C-c``.
        Default True.
    socket_name : str, optional
        Alternate socket (``tmux -L``).

    Raises
    ------
    :exc:`tmx.exc.TransportError`
    """
    args = ["send-keys", "-t", target]
    if literal:
        args.append("-l")
    args += ["--", text]

    tmux(*args, socket_name=socket_name)

    if enter:
        time.sleep(delay)
        tmux("send-keys", "-t", target, "Enter", socket_name=socket_name)


def capture_pane(
    target: str,
    lines: int | t.Literal["-"] | None = None,
    join: bool = True,
    socket_name: str | None = None,
) -> str:
    """Return the text of a pane plus *lines* of scrollback.

    ``$ tmux capture-pane -p -J -t <target> -S -<lines>``

    Parameters
    ----------
    target : str
        ``session[:window[.pane]]``
    lines : int or "-", optional
        Scrollback lines above the visible region. ``"-"`` captures the
        whole history. None captures the visible region only.
    join : bool, optional
        Join wrapped lines (``-J``). Default True.
    socket_name : str, optional
        Alternate socket (``tmux -L``).

    Returns
    -------
    str
        Captured text, trailing whitespace removed.
    """
    args = ["capture-pane", "-p", "-t", target]
    if join:
        args.append("-J")
    if lines == FULL_HISTORY:
        args += ["-S", FULL_HISTORY]
    elif lines:
        args += ["-S", f"-{lines}"]

    return tmux(*args, socket_name=socket_name)
