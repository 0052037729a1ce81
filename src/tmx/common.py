"""Run tmux commands.

tmx.common
~~~~~~~~~~

Everything tmx asks of tmux goes through :func:`run_tmux`, which never raises
on a nonzero exit, or :func:`tmux`, which raises :exc:`exc.TransportError`
on any failure.
"""

from __future__ import annotations

import dataclasses
import logging
import shutil
import subprocess
import typing as t

from . import exc
from .constants import BENIGN_ERRORS

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class TmuxResult:
    """Raw outcome of one tmux invocation.

    Attributes
    ----------
    cmd : list[str]
        Full argument vector, tmux binary first.
    stdout : str
        Standard output, trailing whitespace removed.
    stderr : str
        Standard error, trailing whitespace removed.
    returncode : int
        Exit status of tmux.

    Examples
    --------
    >>> result = TmuxResult(cmd=["tmux", "-V"], stdout="tmux 3.4", stderr="",
    ...                     returncode=0)
    >>> result.ok
    True
    """

    cmd: list[str]
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        """Return True if tmux exited with status 0."""
        return self.returncode == 0

    def to_dict(self) -> dict[str, t.Any]:
        """Return result as a JSON-friendly dict."""
        return dataclasses.asdict(self)


def build_cmd(*args: t.Any, socket_name: str | None = None) -> list[str]:
    """Return the argument vector for a tmux invocation.

    Raises
    ------
    :exc:`exc.TmuxCommandNotFound`
        No tmux binary on ``PATH``.
    """
    tmux_bin = shutil.which("tmux")
    if not tmux_bin:
        raise exc.TmuxCommandNotFound

    cmd = [tmux_bin]
    if socket_name:
        cmd += ["-L", socket_name]
    cmd += [str(a) for a in args]
    return cmd


def run_tmux(
    *args: t.Any,
    socket_name: str | None = None,
    env: t.Mapping[str, str] | None = None,
) -> TmuxResult:
    """Run any :term:`tmux(1)` command through :py:mod:`subprocess`.

    A nonzero exit status is returned, not raised.

    Parameters
    ----------
    *args
        tmux sub-command and its arguments, e.g. ``"list-sessions"``.
    socket_name : str, optional
        Alternate socket (``tmux -L``), isolates servers from each other.
    env : mapping, optional
        Environment of the tmux process, inherited when omitted.

    Returns
    -------
    :class:`TmuxResult`

    Examples
    --------
    >>> result = run_tmux("list-sessions", socket_name="tmx_doctest_unused")
    >>> result.returncode != 0
    True
    """
    cmd = build_cmd(*args, socket_name=socket_name)

    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="backslashreplace",
            env=env,
        )
        stdout, stderr = process.communicate()
    except Exception:
        logger.exception("Exception for %s", subprocess.list2cmdline(cmd))
        raise

    result = TmuxResult(
        cmd=cmd,
        stdout=stdout.rstrip(),
        stderr=stderr.rstrip(),
        returncode=process.returncode,
    )

    logger.debug(
        "tmux returned %d for %s",
        result.returncode,
        subprocess.list2cmdline(cmd),
    )
    return result


def is_benign_error(result: TmuxResult) -> bool:
    """Return True if a failed result only means "no sessions to list".

    tmux fails this way when no server listens on the socket, or the server
    has no sessions left. Only listing treats it as an empty answer; any other
    command must not run against a missing server.

    Examples
    --------
    >>> is_benign_error(TmuxResult([], "", "no server running on /tmp/x", 1))
    True
    >>> is_benign_error(TmuxResult([], "", "can't find session: x", 1))
    False
    """
    return any(needle in result.stderr for needle in BENIGN_ERRORS)


def raise_for_result(result: TmuxResult) -> None:
    """Raise :exc:`exc.TransportError` if *result* is a failure."""
    if result.ok:
        return
    msg = result.stderr or f"tmux exited with code {result.returncode}"
    raise exc.TransportError(msg, result)


def tmux(
    *args: t.Any,
    socket_name: str | None = None,
    env: t.Mapping[str, str] | None = None,
) -> str:
    """Run a tmux command, raising on failure.

    Parameters
    ----------
    *args
        tmux sub-command and its arguments.
    socket_name : str, optional
        Alternate socket (``tmux -L``).
    env : mapping, optional
        Environment of the tmux process.

    Returns
    -------
    str
        Standard output.

    Raises
    ------
    :exc:`exc.TransportError`
        tmux exited nonzero, including when no server is running.
    """
    result = run_tmux(*args, socket_name=socket_name, env=env)
    raise_for_result(result)
    return result.stdout
