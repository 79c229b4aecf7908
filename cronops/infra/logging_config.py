"""
Logging setup for cronops.

Console output always; long-running processes (the API server) also write a
per-day log file:

    <log_dir>/cronops_YYYYMMDD_<START_HHMMSS>.log
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

LOGGER_NAME = "cronops"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_PROCESS_START = datetime.now()


class DailyRotatingFileHandler(logging.FileHandler):
    """
    File handler that moves to a new file when the calendar date changes.

    The start-time suffix is fixed for the life of the process, so a restart
    on the same day opens its own file instead of appending to the last one.
    """

    def __init__(self, log_dir: str = "logs", prefix: str = LOGGER_NAME, encoding: str = "utf-8"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self._day = self._today()
        super().__init__(self._path_for(self._day), mode="a", encoding=encoding)

    @staticmethod
    def _today() -> str:
        return datetime.now().strftime("%Y%m%d")

    def _path_for(self, day: str) -> str:
        return str(self.log_dir / f"{self.prefix}_{day}_{_PROCESS_START:%H%M%S}.log")

    def emit(self, record: logging.LogRecord) -> None:
        day = self._today()
        if day != self._day:
            # FileHandler.emit reopens the stream at the new baseFilename
            self.close()
            self._day = day
            self.baseFilename = os.path.abspath(self._path_for(day))
        super().emit(record)


def _resolve_level(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> logging.Logger:
    """
    Configure the package logger and return it.

    Every module logs through logging.getLogger(__name__), so records from
    cronops.* reach the handlers installed here. Calling this again replaces
    the previous handlers.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown -> INFO)
        log_dir: Directory for daily log files; None logs to the console only
    """
    level = _resolve_level(log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # uvicorn configures the root logger; keep records from appearing twice
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        handlers.append(DailyRotatingFileHandler(log_dir=log_dir))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if log_dir is None:
        logger.info(f"Logging started - level: {logging.getLevelName(level)}, console only")
    else:
        logger.info(
            f"Logging started - level: {logging.getLevelName(level)}, "
            f"log file: {handlers[-1].baseFilename}"
        )
    return logger
