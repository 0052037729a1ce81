"""Default values for tmx operations.

Every default can be overridden per call through keyword arguments.
"""

from __future__ import annotations

import os

#: Environment variable holding the default tmux socket name (``tmux -L``)
SOCKET_ENV_VAR = "TMX_SOCKET"

#: Seconds :func:`tmx.execute.execute` waits for a command to finish
EXECUTE_TIMEOUT_SECONDS = 30.0

#: Seconds :func:`tmx.waiter.wait_for_text` waits for a pattern
WAIT_FOR_TEXT_TIMEOUT_SECONDS = 15.0

#: Seconds :func:`tmx.waiter.wait_idle` waits for content to settle
WAIT_IDLE_TIMEOUT_SECONDS = 30.0

#: Seconds pane content must stay unchanged to count as idle
IDLE_TIME_SECONDS = 2.0

#: Seconds between two captures of a poll loop
POLL_INTERVAL_SECONDS = 0.5

#: Scrollback lines captured by the watchers
CAPTURE_LINES = 1000

#: Seconds between typing text and pressing Enter in :func:`tmx.pane.send_keys`
SEND_KEYS_DELAY_SECONDS = 0.1

#: Scrollback depths tried within one poll tick of :func:`tmx.execute.execute`.
#: ``None`` stands for the whole history.
EXPANSION_LEVELS: tuple[int | None, ...] = (100, 500, 2000, None)

#: Substrings of tmux stderr meaning "nothing to report" rather than failure
BENIGN_ERRORS: tuple[str, ...] = (
    "no server running",
    "no sessions",
    "error connecting",
)


def default_socket_name() -> str | None:
    """Return the socket name from :envvar:`TMX_SOCKET`, if set."""
    return os.getenv(SOCKET_ENV_VAR) or None
