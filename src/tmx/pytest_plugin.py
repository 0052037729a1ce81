"""tmx pytest plugin.

Every test gets its own tmux server (``tmux -L tmx_test<random>``), killed
when the test finishes. Tests using these fixtures are skipped when tmux is
not installed.
"""

from __future__ import annotations

import getpass
import logging
import pathlib
import re
import shutil

import pytest

from tmx.common import run_tmux
from tmx.session import new_session
from tmx.test.constants import (
    RETRY_INTERVAL_SECONDS,
    RETRY_TIMEOUT_SECONDS,
    TEST_PROMPT,
)
from tmx.test.random import get_test_session_name, get_test_socket_name
from tmx.waiter import wait_for_text

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def home_path(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """Temporary `/home/` path."""
    return tmp_path_factory.mktemp("home")


@pytest.fixture(scope="session")
def home_user_name() -> str:
    """Return default username to set for :func:`user_path` fixture."""
    return getpass.getuser()


@pytest.fixture(scope="session")
def user_path(home_path: pathlib.Path, home_user_name: str) -> pathlib.Path:
    """Ensure and return temporary user directory.

    Used by: :func:`config_file`
    """
    p = home_path / home_user_name
    p.mkdir()
    return p


@pytest.fixture(scope="session")
def config_file(user_path: pathlib.Path) -> pathlib.Path:
    """Return fixture for ``.tmux.conf`` configuration.

    - ``history-limit 50000``: keeps long outputs in scrollback

    Note: You will need to set the home directory, see :func:`set_home`.
    """
    c = user_path / ".tmux.conf"
    c.write_text(
        """
set -g history-limit 50000
    """,
        encoding="utf-8",
    )
    return c


@pytest.fixture
def set_home(
    monkeypatch: pytest.MonkeyPatch,
    user_path: pathlib.Path,
    config_file: pathlib.Path,
) -> None:
    """Point ``$HOME`` at :func:`user_path` so tmux reads :func:`config_file`."""
    monkeypatch.setenv("HOME", str(user_path))


@pytest.fixture
def socket_name(request: pytest.FixtureRequest, set_home: None) -> str:
    """Return a fresh tmux socket name, its server is killed after the test.

    >>> def test_example(socket_name: str) -> None:
    ...     from tmx.session import list_sessions
    ...     assert list_sessions(socket_name=socket_name) == []
    """
    if shutil.which("tmux") is None:
        pytest.skip("tmux not installed")

    name = get_test_socket_name()

    def fin() -> None:
        run_tmux("kill-server", socket_name=name)

    request.addfinalizer(fin)
    return name


@pytest.fixture
def session_name(socket_name: str) -> str:
    """Return the name of a new detached session running ``sh``.

    The shell prompt is :data:`tmx.test.constants.TEST_PROMPT`; the fixture
    returns once it is shown.
    """
    env = shutil.which("env")
    assert env is not None, "Cannot find usable `env` in PATH."

    name = new_session(
        get_test_session_name(),
        window_command=f"{env} PROMPT_COMMAND='' PS1='{TEST_PROMPT}' sh",
        socket_name=socket_name,
    )

    ready = wait_for_text(
        name,
        re.escape(TEST_PROMPT),
        timeout=RETRY_TIMEOUT_SECONDS,
        interval=RETRY_INTERVAL_SECONDS,
        socket_name=socket_name,
    )
    if not ready.matched:
        msg = f"prompt {TEST_PROMPT!r} not shown in {name}: {ready.last_capture!r}"
        pytest.fail(msg)
    logger.debug("test session %s ready on socket %s", name, socket_name)
    return name


@pytest.fixture
def pane_target(session_name: str) -> str:
    """Return the target of the only pane in :func:`session_name`."""
    return session_name
