"""tmx, run shell commands in tmux panes as if they were a synchronous channel."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .execute import ExecuteResult, execute
from .markers import MarkerPair, generate_markers, parse_output, wrap_command
from .waiter import IdleResult, WaitResult, wait_for_text, wait_idle

__all__ = (
    "ExecuteResult",
    "IdleResult",
    "MarkerPair",
    "WaitResult",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
    "execute",
    "generate_markers",
    "parse_output",
    "wait_for_text",
    "wait_idle",
    "wrap_command",
)
