"""Logging filter that lets through only records of one exact level."""

from __future__ import annotations

import logging

from gossip.common import LEVEL_TEST


class ExactLevelFilter(logging.Filter):
    """Pass only records whose level equals ``level`` exactly."""

    def __init__(self, level: int = LEVEL_TEST, name: str = "") -> None:
        super().__init__(name)
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        """Return True if ``record`` has exactly the configured level."""
        return record.levelno == self.level