"""Metadata for tmx package."""

from __future__ import annotations

__title__ = "tmx"
__package_name__ = "tmx"
__version__ = "0.1.0"
__description__ = "Run shell commands in tmux panes and get their output and exit code"
__email__ = "tmx@example.invalid"
__author__ = "tmx contributors"
__github__ = "https://github.com/tmx-tools/tmx"
__docs__ = "https://github.com/tmx-tools/tmx#readme"
__tracker__ = "https://github.com/tmx-tools/tmx/issues"
__pypi__ = "https://pypi.org/project/tmx/"
__license__ = "MIT"
__copyright__ = "Copyright 2026- tmx contributors"
