"""
breed_scraper/logging.py

Run logging for the breed scraper.

main.py calls setup_logging() once per run. Every other module only asks for
a named logger with get_logger(__name__) and never adds handlers.

A run logs to the console (level icon per line, colored on a terminal) and,
unless disabled, to <data_dir>/logs/<mode>_<timestamp>.log next to the
JSON/CSV files it produced.
"""

import logging
import os
import sys
from typing import Optional

from breed_scraper.utils import current_timestamp

LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_SUBDIR = "logs"

# levelname -> (ANSI color, icon)
LEVEL_STYLES = {
    "DEBUG": ("\033[36m", "🐞"),
    "INFO": ("\033[32m", "ℹ️"),
    "WARNING": ("\033[33m", "⚠️"),
    "ERROR": ("\033[31m", "❌"),
    "CRITICAL": ("\033[41m", "🔥"),
}
RESET = "\033[0m"

class ConsoleFormatter(logging.Formatter):
    """Icon-prefixed lines; colored only when the target stream is a terminal."""

    def __init__(self, stream=None):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        isatty = getattr(stream, "isatty", None)
        self.use_color = bool(isatty and isatty())

    def format(self, record):
        color, icon = LEVEL_STYLES.get(record.levelname, ("", ""))
        lines = super().format(record).splitlines()
        if self.use_color:
            return "\n".join(f"{color}{icon} {line}{RESET}" for line in lines)
        return "\n".join(f"{icon} {line}" for line in lines)

def log_file_path(data_dir: str, mode: str) -> str:
    return os.path.join(data_dir, LOG_SUBDIR, f"{mode}_{current_timestamp()}.log")

def setup_logging(mode: str, level: str = "INFO", data_dir: Optional[str] = None, stream=None) -> Optional[str]:
    """
    Replace the root handlers with a console handler and, when data_dir is
    given, a plain file handler.
    Args:
        mode (str): Run mode ("crawl" or "csv"), used as the log file prefix.
        level (str): Level name from --log-level.
        data_dir (str|None): Data directory; None logs to the console only.
        stream: Console stream (default: sys.stdout).
    Returns:
        str|None: Path of the log file, if one was opened.
    """
    stream = stream or sys.stdout
    console = logging.StreamHandler(stream)
    console.setFormatter(ConsoleFormatter(stream))
    handlers = [console]

    log_file = None
    if data_dir:
        log_file = log_file_path(data_dir, mode)
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    return log_file

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
