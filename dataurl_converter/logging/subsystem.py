"""Subsystem loggers and console setup."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "dataurl_converter"


class SubsystemLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with the subsystem name."""

    def __init__(self, subsystem: str):
        super().__init__(logging.getLogger(f"{ROOT_LOGGER_NAME}.{subsystem}"), {"subsystem": subsystem})
        self.subsystem = subsystem

    def process(self, msg, kwargs):
        return f"[{self.subsystem}] {msg}", kwargs

    def child(self, name: str) -> "SubsystemLogger":
        return SubsystemLogger(f"{self.subsystem}.{name}")


def create_subsystem_logger(subsystem: str) -> SubsystemLogger:
    return SubsystemLogger(subsystem)


def setup_logging(level: str | int = "INFO", console: Console | None = None) -> logging.Logger:
    """
    Attach a rich console handler to the package root logger.

    Calling it again replaces the previous handler instead of stacking.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    return root
