"""Tests for the tmx command line."""

from __future__ import annotations

import json
import typing as t

import pytest

from tmx import cli, exc
from tmx.common import TmuxResult
from tmx.execute import ExecuteResult
from tmx.waiter import IdleResult, WaitResult

if t.TYPE_CHECKING:
    from tmx.session import SessionInfo


def test_parser_defaults() -> None:
    args = cli.create_parser().parse_args(["execute", "build", "make"])

    assert args.target == "build"
    assert args.command == "make"
    assert args.timeout == 30.0
    assert args.interval == 0.5
    assert args.socket is None
    assert args.json is False


def test_parser_global_flags_survive_subcommand() -> None:
    args = cli.create_parser().parse_args(
        ["--socket", "s1", "--json", "wait-idle", "t", "--idle-time", "3"],
    )
    assert args.socket == "s1"
    assert args.json is True
    assert args.idle_time == 3.0


def test_parser_flags_after_subcommand() -> None:
    args = cli.create_parser().parse_args(
        ["wait-for-text", "t", "READY", "--socket", "s2", "--json", "-S", "50"],
    )
    assert args.socket == "s2"
    assert args.json is True
    assert args.lines == 50


def test_parser_socket_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TMX_SOCKET", "from_env")
    args = cli.create_parser().parse_args(["list-sessions"])
    assert args.socket == "from_env"


def test_parser_requires_subcommand(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        cli.create_parser().parse_args([])


def test_execute_exit_status(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    results = iter(
        [ExecuteResult("hello", 0, 0.4), ExecuteResult("nope", 2, 0.1)],
    )
    calls: list[dict[str, t.Any]] = []

    def fake_execute(target: str, command: str, **kwargs: t.Any) -> ExecuteResult:
        calls.append({"target": target, "command": command, **kwargs})
        return next(results)

    monkeypatch.setattr(cli, "execute", fake_execute)

    assert cli.main(["execute", "s", "echo hello", "-t", "5"]) == 0
    assert capsys.readouterr().out == "OK in 0.4s\nhello\n"

    assert cli.main(["--socket", "x", "execute", "s", "ls /nope"]) == 1
    assert "FAILED (exit 2)" in capsys.readouterr().out

    assert calls[0]["timeout"] == 5.0
    assert calls[1]["socket_name"] == "x"


def test_wait_commands_exit_status(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(
        cli,
        "wait_for_text",
        lambda *a, **kw: WaitResult(matched=False, elapsed=1.0, last_capture="x"),
    )
    monkeypatch.setattr(
        cli,
        "wait_idle",
        lambda *a, **kw: IdleResult(idle=True, elapsed=2.0, last_capture="x"),
    )

    assert cli.main(["wait-for-text", "s", "READY"]) == 1
    assert cli.main(["--json", "wait-idle", "s"]) == 0
    out = capsys.readouterr().out
    assert "No match found." in out
    assert '"idle": true' in out


def test_transport_error_reported(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    def failing_list(socket_name: str | None = None) -> list[SessionInfo]:
        result = TmuxResult(["tmux"], "", "server exited unexpectedly", 1)
        raise exc.TransportError(result.stderr, result)

    monkeypatch.setattr(cli, "list_sessions", failing_list)

    assert cli.main(["list-sessions"]) == 1
    assert capsys.readouterr().err == "tmx: server exited unexpectedly\n"


def test_cli_round_trip(socket_name: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--socket", socket_name, "list-sessions"]) == 0
    assert capsys.readouterr().out == "No items found.\n"

    assert cli.main(["--socket", socket_name, "new-session", "tmx_cli"]) == 0
    assert capsys.readouterr().out == "Created session: tmx_cli\n"

    assert cli.main(["--socket", socket_name, "--json", "list-sessions"]) == 0
    sessions = json.loads(capsys.readouterr().out)
    assert [s["name"] for s in sessions] == ["tmx_cli"]

    assert cli.main(["--socket", socket_name, "kill-session", "tmx_cli"]) == 0
    assert capsys.readouterr().out == "Killed session: tmx_cli\n"


def test_bad_pattern_reported(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["wait-for-text", "s", "("]) == 1

    err = capsys.readouterr().err
    assert err.startswith("tmx: bad pattern: ")
    assert "Traceback" not in err


def test_kill_session_no_server(
    socket_name: str,
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert cli.main(["--socket", socket_name, "kill-session", "tmx_absent"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("tmx: ")
