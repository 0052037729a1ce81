"""Command line interface for tmx.

tmx.cli
~~~~~~~

.. code-block:: console

    $ tmx new-session build
    $ tmx execute build "make -j8" --timeout 600
    $ tmx wait-for-text build "Listening on" --timeout 30
    $ tmx wait-idle build --idle-time 3
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
import typing as t

from . import exc, output
from .__about__ import __version__
from .constants import (
    CAPTURE_LINES,
    EXECUTE_TIMEOUT_SECONDS,
    IDLE_TIME_SECONDS,
    POLL_INTERVAL_SECONDS,
    SEND_KEYS_DELAY_SECONDS,
    WAIT_FOR_TEXT_TIMEOUT_SECONDS,
    WAIT_IDLE_TIMEOUT_SECONDS,
    default_socket_name,
)
from .execute import execute
from .pane import capture_pane, send_keys
from .session import kill_session, list_sessions, new_session
from .waiter import wait_for_text, wait_idle

logger = logging.getLogger(__name__)

TARGET_HELP = "target pane (session[:window[.pane]])"


def _cmd_list_sessions(args: argparse.Namespace) -> int:
    sessions = list_sessions(socket_name=args.socket)
    print(output.format_list(sessions, output.format_session, as_json=args.json))
    return 0


def _cmd_new_session(args: argparse.Namespace) -> int:
    name = new_session(
        args.name,
        start_directory=args.dir,
        window_name=args.window_name,
        socket_name=args.socket,
    )
    print(output.format_session_created(name, as_json=args.json))
    return 0


def _cmd_kill_session(args: argparse.Namespace) -> int:
    kill_session(args.name, socket_name=args.socket)
    print(output.format_session_killed(args.name, as_json=args.json))
    return 0


def _cmd_send_keys(args: argparse.Namespace) -> int:
    send_keys(
        args.target,
        args.text,
        enter=not args.no_enter,
        delay=args.delay,
        literal=not args.keys,
        socket_name=args.socket,
    )
    print(output.format_send_keys(args.target, as_json=args.json))
    return 0


def _cmd_capture_pane(args: argparse.Namespace) -> int:
    content = capture_pane(args.target, lines=args.lines, socket_name=args.socket)
    print(output.format_capture(content, as_json=args.json))
    return 0


def _cmd_execute(args: argparse.Namespace) -> int:
    result = execute(
        args.target,
        args.command,
        timeout=args.timeout,
        interval=args.interval,
        socket_name=args.socket,
    )
    print(output.format_execute(result, as_json=args.json))
    return 0 if result.exit_code == 0 else 1


def _cmd_wait_for_text(args: argparse.Namespace) -> int:
    result = wait_for_text(
        args.target,
        args.pattern,
        timeout=args.timeout,
        interval=args.interval,
        lines=args.lines,
        socket_name=args.socket,
    )
    print(output.format_wait_result(result, as_json=args.json))
    return 0 if result.matched else 1


def _cmd_wait_idle(args: argparse.Namespace) -> int:
    result = wait_idle(
        args.target,
        idle_time=args.idle_time,
        timeout=args.timeout,
        interval=args.interval,
        lines=args.lines,
        socket_name=args.socket,
    )
    print(output.format_wait_idle(result, as_json=args.json))
    return 0 if result.idle else 1


def _add_poll_args(
    parser: argparse.ArgumentParser,
    timeout: float,
    lines: bool = True,
) -> None:
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=timeout,
        help=f"seconds to wait (default: {timeout:g})",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=POLL_INTERVAL_SECONDS,
        help=f"seconds between polls (default: {POLL_INTERVAL_SECONDS:g})",
    )
    if lines:
        parser.add_argument(
            "-S",
            "--lines",
            type=int,
            default=CAPTURE_LINES,
            help=f"scrollback lines to inspect (default: {CAPTURE_LINES})",
        )


def _add_common_args(parser: argparse.ArgumentParser, suppress: bool) -> None:
    # sub-commands only set these when given, so flags before the
    # sub-command are not reset to their defaults
    parser.add_argument(
        "--socket",
        default=argparse.SUPPRESS if suppress else default_socket_name(),
        help="tmux socket name (-L), defaults to $TMX_SOCKET",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="output as JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``tmx``."""
    common = argparse.ArgumentParser(add_help=False)
    _add_common_args(common, suppress=True)

    parser = argparse.ArgumentParser(
        prog="tmx",
        description="tmux wrapper for agents: familiar commands with reliability fixes",
    )
    _add_common_args(parser, suppress=False)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log tmux invocations to stderr",
    )
    subparsers = parser.add_subparsers(dest="subcommand", metavar="<command>")
    subparsers.required = True

    p = subparsers.add_parser("list-sessions", parents=[common], help="list sessions")
    p.set_defaults(func=_cmd_list_sessions)

    p = subparsers.add_parser(
        "new-session",
        parents=[common],
        help="create a detached session",
    )
    p.add_argument("name", help="session name")
    p.add_argument("-c", "--dir", help="starting directory")
    p.add_argument("-n", "--window-name", help="name of the first window")
    p.set_defaults(func=_cmd_new_session)

    p = subparsers.add_parser("kill-session", parents=[common], help="kill a session")
    p.add_argument("name", help="session name")
    p.set_defaults(func=_cmd_kill_session)

    p = subparsers.add_parser(
        "send-keys",
        parents=[common],
        help="type text into a pane",
    )
    p.add_argument("target", help=TARGET_HELP)
    p.add_argument("text", help="text to send")
    p.add_argument("--no-enter", action="store_true", help="do not press Enter")
    p.add_argument(
        "--keys",
        action="store_true",
        help="interpret text as key names (e.g. C-c) instead of literal text",
    )
    p.add_argument(
        "-d",
        "--delay",
        type=float,
        default=SEND_KEYS_DELAY_SECONDS,
        help=f"seconds between text and Enter (default: {SEND_KEYS_DELAY_SECONDS:g})",
    )
    p.set_defaults(func=_cmd_send_keys)

    p = subparsers.add_parser(
        "capture-pane",
        parents=[common],
        help="print pane content",
    )
    p.add_argument("target", help=TARGET_HELP)
    p.add_argument("-S", "--lines", type=int, help="scrollback lines to include")
    p.set_defaults(func=_cmd_capture_pane)

    p = subparsers.add_parser(
        "execute",
        parents=[common],
        help="run a command and capture its output and exit code",
    )
    p.add_argument("target", help=TARGET_HELP)
    p.add_argument("command", help="shell command to run")
    _add_poll_args(p, EXECUTE_TIMEOUT_SECONDS, lines=False)
    p.set_defaults(func=_cmd_execute)

    p = subparsers.add_parser(
        "wait-for-text",
        parents=[common],
        help="wait until a line matches a regex",
    )
    p.add_argument("target", help=TARGET_HELP)
    p.add_argument("pattern", help="regular expression")
    _add_poll_args(p, WAIT_FOR_TEXT_TIMEOUT_SECONDS)
    p.set_defaults(func=_cmd_wait_for_text)

    p = subparsers.add_parser(
        "wait-idle",
        parents=[common],
        help="wait until pane content stops changing",
    )
    p.add_argument("target", help=TARGET_HELP)
    p.add_argument(
        "--idle-time",
        type=float,
        default=IDLE_TIME_SECONDS,
        help=f"seconds content must be stable (default: {IDLE_TIME_SECONDS:g})",
    )
    _add_poll_args(p, WAIT_IDLE_TIMEOUT_SECONDS)
    p.set_defaults(func=_cmd_wait_idle)

    return parser


def main(argv: t.Sequence[str] | None = None) -> int:
    """Entry point of the ``tmx`` command, returns the exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return int(args.func(args))
    except exc.TmxException as e:
        logger.debug("command failed", exc_info=True)
        print(f"tmx: {e}", file=sys.stderr)
        return 1
    except re.error as e:
        print(f"tmx: bad pattern: {e}", file=sys.stderr)
        return 1
