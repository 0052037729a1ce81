"""Conftest.py (root-level).

Fixtures from :mod:`tmx.pytest_plugin` are loaded through its ``pytest11``
entry point; this file only holds settings for tmx's own test suite.
"""

from __future__ import annotations

import pytest

from tmx.constants import SOCKET_ENV_VAR


@pytest.fixture(autouse=True)
def setup_fn(
    monkeypatch: pytest.MonkeyPatch,
    set_home: None,
) -> None:
    """Function-level test configuration fixtures for pytest."""
    monkeypatch.delenv(SOCKET_ENV_VAR, raising=False)
    monkeypatch.delenv("TMUX", raising=False)
