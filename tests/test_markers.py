"""Tests for tmx.markers."""

from __future__ import annotations

import re
import threading
import typing as t

import pytest

from tmx.markers import (
    MarkerPair,
    ParsedOutput,
    generate_markers,
    has_end_marker,
    has_start_marker,
    parse_output,
    wrap_command,
)

MARKERS = MarkerPair(start="__START__", end="__END__")


def test_generate_markers_format() -> None:
    markers = generate_markers()
    assert re.fullmatch(r"__TMUX_EXEC_START_\d+_\d+__", markers.start)
    assert re.fullmatch(r"__TMUX_EXEC_END_\d+_\d+__", markers.end)
    assert markers.start.removeprefix("__TMUX_EXEC_START_") == markers.end.removeprefix(
        "__TMUX_EXEC_END_",
    )


def test_generate_markers_unique() -> None:
    """Rapid successive calls never repeat a marker."""
    markers = [generate_markers() for _ in range(10_000)]
    assert len({m.start for m in markers}) == 10_000
    assert len({m.end for m in markers}) == 10_000


def test_generate_markers_unique_across_threads() -> None:
    results: list[MarkerPair] = []
    lock = threading.Lock()

    def worker() -> None:
        batch = [generate_markers() for _ in range(1_000)]
        with lock:
            results.extend(batch)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({m.start for m in results}) == 8_000


def test_wrap_command() -> None:
    assert (
        wrap_command("ls -la", MARKERS)
        == "echo __START__; { ls -la; } 2>&1; echo __END__:$?"
    )


def test_wrap_command_special_characters() -> None:
    assert (
        wrap_command('echo "hello world" && false || true', MARKERS)
        == 'echo __START__; { echo "hello world" && false || true; } 2>&1; '
        "echo __END__:$?"
    )


def test_wrap_command_deterministic() -> None:
    markers = generate_markers()
    assert wrap_command("make test", markers) == wrap_command("make test", markers)


class ParseFixture(t.NamedTuple):
    """Test fixture for test_parse_output()."""

    test_id: str
    captured: str
    expected: ParsedOutput | None


PARSE_FIXTURES: list[ParseFixture] = [
    ParseFixture(
        test_id="exit_zero_with_typed_line",
        captured="\n".join(
            [
                "$ echo __START__; { echo hello; } 2>&1; echo __END__:$?",
                "__START__",
                "hello",
                "__END__:0",
                "$ ",
            ],
        ),
        expected=ParsedOutput("hello", 0),
    ),
    ParseFixture(
        test_id="nonzero_exit",
        captured="\n".join(
            [
                "__START__",
                "ls: /nonexistent: No such file or directory",
                "__END__:2",
            ],
        ),
        expected=ParsedOutput("ls: /nonexistent: No such file or directory", 2),
    ),
    ParseFixture(
        test_id="multi_line",
        captured="__START__\nline1\nline2\nline3\n__END__:0",
        expected=ParsedOutput("line1\nline2\nline3", 0),
    ),
    ParseFixture(
        test_id="empty_output",
        captured="__START__\n__END__:0",
        expected=ParsedOutput("", 0),
    ),
    ParseFixture(
        test_id="three_digit_exit",
        captured="x\n__START__\nsh: nope: not found\n__END__:127\n$",
        expected=ParsedOutput("sh: nope: not found", 127),
    ),
    ParseFixture(
        test_id="no_markers",
        captured="some random output",
        expected=None,
    ),
    ParseFixture(
        test_id="only_end_marker",
        captured="__END__:0",
        expected=None,
    ),
    ParseFixture(
        test_id="only_typed_line",
        captured="$ echo __START__; { sleep 5; } 2>&1; echo __END__:$?",
        expected=None,
    ),
    ParseFixture(
        test_id="still_running",
        captured="$ echo __START__; { sleep 5; } 2>&1; echo __END__:$?\n__START__\n",
        expected=None,
    ),
]


@pytest.mark.parametrize(
    list(ParseFixture._fields),
    PARSE_FIXTURES,
    ids=[test.test_id for test in PARSE_FIXTURES],
)
def test_parse_output(
    test_id: str,
    captured: str,
    expected: ParsedOutput | None,
) -> None:
    """Verify parse_output()."""
    assert parse_output(captured, MARKERS) == expected


def test_parse_output_distinguishes_typed_start_marker() -> None:
    markers = MarkerPair(start="__START_123__", end="__END_123__")
    captured = "\n".join(
        [
            "$ echo __START_123__; { echo hi; } 2>&1; echo __END_123__:$?",
            "__START_123__",
            "hi",
            "__END_123__:0",
        ],
    )
    assert parse_output(captured, markers) == ParsedOutput("hi", 0)


def test_parse_output_ignores_other_markers() -> None:
    """Markers of an earlier call in the same pane are not mistaken for ours."""
    ours = generate_markers()
    theirs = generate_markers()
    captured = "\n".join(
        [
            theirs.start,
            "old",
            f"{theirs.end}:0",
            ours.start,
            "new",
            f"{ours.end}:1",
        ],
    )
    assert parse_output(captured, ours) == ParsedOutput("new", 1)
    assert parse_output(captured, theirs) == ParsedOutput("old", 0)


def test_parse_output_round_trip() -> None:
    """Output with blank lines and any exit code comes back unchanged."""
    markers = generate_markers()
    output = "first\n\n  indented\n\nlast"
    for code in (0, 1, 42, 255):
        captured = f"$ prompt\n{markers.start}\n{output}\n{markers.end}:{code}\n$"
        assert parse_output(captured, markers) == ParsedOutput(output, code)


def test_has_markers() -> None:
    typed = wrap_command("true", MARKERS)
    assert not has_end_marker(typed, MARKERS)
    assert not has_start_marker(typed, MARKERS)

    echoed = f"{typed}\n__START__\n__END__:0"
    assert has_end_marker(echoed, MARKERS)
    assert has_start_marker(echoed, MARKERS)
