"""Render tmx results as JSON or as short human-readable text."""

from __future__ import annotations

import json
import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .execute import ExecuteResult
    from .session import SessionInfo
    from .waiter import IdleResult, WaitResult

    T = t.TypeVar("T")


def to_json(value: t.Any) -> str:
    """Serialize *value* with two-space indentation."""
    return json.dumps(value, indent=2)


def format_session(session: SessionInfo) -> str:
    """Return one line describing *session*.

    Examples
    --------
    >>> from tmx.session import SessionInfo
    >>> format_session(SessionInfo("work", False, 1, "2026-01-01T00:00:00+00:00"))
    'work (detached, 1 window, created 2026-01-01T00:00:00+00:00)'
    """
    status = "attached" if session.attached else "detached"
    window_label = "window" if session.windows == 1 else "windows"
    return (
        f"{session.name} ({status}, {session.windows} {window_label}, "
        f"created {session.created})"
    )


def format_list(
    items: Sequence[T],
    formatter: Callable[[T], str],
    as_json: bool = False,
) -> str:
    """Return *items* one per line, or as a JSON array."""
    if as_json:
        return to_json([item.to_dict() for item in items])  # type: ignore[attr-defined]
    if not items:
        return "No items found."
    return "\n".join(formatter(item) for item in items)


def format_session_created(name: str, as_json: bool = False) -> str:
    if as_json:
        return to_json({"session": name})
    return f"Created session: {name}"


def format_session_killed(name: str, as_json: bool = False) -> str:
    if as_json:
        return to_json({"session": name, "killed": True})
    return f"Killed session: {name}"


def format_capture(content: str, as_json: bool = False) -> str:
    if as_json:
        return to_json({"content": content})
    return content


def format_send_keys(target: str, as_json: bool = False) -> str:
    if as_json:
        return to_json({"target": target, "sent": True})
    return f"Sent keys to {target}"


def format_execute(result: ExecuteResult, as_json: bool = False) -> str:
    """Return status header and output of an :func:`tmx.execute.execute` call.

    Examples
    --------
    >>> from tmx.execute import ExecuteResult
    >>> print(format_execute(ExecuteResult("hello", 0, 0.31)))
    OK in 0.3s
    hello
    >>> format_execute(ExecuteResult("", -1, 30.0))
    'TIMEOUT in 30.0s'
    >>> format_execute(ExecuteResult("", 2, 0.1))
    'FAILED (exit 2) in 0.1s'
    """
    if as_json:
        return to_json(result.to_dict())

    if result.exit_code == 0:
        status = "OK"
    elif result.timed_out:
        status = "TIMEOUT"
    else:
        status = f"FAILED (exit {result.exit_code})"
    header = f"{status} in {result.elapsed:.1f}s"

    if not result.output:
        return header
    return f"{header}\n{result.output}"


def format_wait_result(result: WaitResult, as_json: bool = False) -> str:
    if as_json:
        return to_json(result.to_dict())
    if result.matched:
        return f"Matched after {result.elapsed:.1f}s: {result.match}"
    return f"Timed out after {result.elapsed:.1f}s. No match found."


def format_wait_idle(result: IdleResult, as_json: bool = False) -> str:
    if as_json:
        return to_json(result.to_dict())
    if result.idle:
        return f"Became idle after {result.elapsed:.1f}s"
    return f"Timed out after {result.elapsed:.1f}s. Pane still active."
