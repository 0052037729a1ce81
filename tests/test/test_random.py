"""Tests for tmx's random test name helpers."""

from __future__ import annotations

from tmx.session import session_check_name
from tmx.test.random import (
    RandomStrSequence,
    get_test_session_name,
    get_test_socket_name,
)


def test_random_str_sequence() -> None:
    rng = RandomStrSequence(characters="abcdefgh")
    for _ in range(5):
        value = next(rng)
        assert len(value) == 8
        assert set(value) == set("abcdefgh")


def test_names_are_valid_and_distinct() -> None:
    names = {get_test_session_name() for _ in range(50)}
    assert len(names) == 50
    for name in names:
        assert name.startswith("tmx_")
        session_check_name(name)

    assert get_test_socket_name() != get_test_socket_name()
