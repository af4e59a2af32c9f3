"""tilestack/log_utils.py: console/file logging setup for the CLI.

Library modules only create ``tilestack.<topic>`` loggers; handlers are
installed here, by the application.
"""

from __future__ import annotations

import logging
from typing import Optional

ROOT_LOGGER = "tilestack"


class TopicFormatter(logging.Formatter):
    """Prefixes each line with the level and the logger's topic."""

    COLORS = {
        logging.DEBUG: "\033[38;5;252m",
        logging.INFO: "\033[38;5;111m",
        logging.WARNING: "\033[38;5;229m",
        logging.ERROR: "\033[38;5;210m",
        logging.CRITICAL: "\033[38;5;217m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname[:5]
        if self.use_color:
            level = f"{self.COLORS.get(record.levelno, '')}{level:<5}{self.RESET}"
        topic = record.name.split(".")[-1][:11]
        prefix = f"{level:<5}:{topic:<11}: "
        s = super().format(record)
        return "\n".join(f"{prefix}{line}" for line in s.split("\n"))


def setup_logging(
    level: int | str = logging.INFO,
    color_logs: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the ``tilestack`` logger tree and return its root."""
    root_logger = logging.getLogger(ROOT_LOGGER)
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
        h.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(TopicFormatter(use_color=color_logs))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
        except OSError as e:
            root_logger.error("Could not open log file %s: %s", log_file, e)
        else:
            file_handler.setFormatter(TopicFormatter(use_color=False))
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_file)
    return root_logger
