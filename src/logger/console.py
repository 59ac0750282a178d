from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from env import get_logging_env


def build_console(force_terminal: bool | None = None) -> Console:
    # stdout so cron / container log collectors pick it up
    return Console(file=sys.stdout, force_terminal=force_terminal, soft_wrap=True)


class ConsoleGateFilter(logging.Filter):
    """
    Drop console output when quiet mode is enabled.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    handler = RichHandler(
        console=build_console(),
        level=level,
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
    )

    # RichHandler renders the level column; the formatter must not repeat it.
    handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(ConsoleGateFilter())
    return handler
