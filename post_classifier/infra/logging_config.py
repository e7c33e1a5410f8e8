"""
Logging configuration module.

All module loggers live under the "post_classifier" namespace. setup_logging()
attaches a console handler and, unless disabled, a per-day log file:

    <log_dir>/post_classifier_YYYYMMDD_<START_HHMMSS>.log

Chatty client libraries (openai, httpx, redis) are held at WARNING unless
the project runs at DEBUG.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

LOGGER_NAME = "post_classifier"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

THIRD_PARTY_LOGGERS = ("openai", "httpx", "httpcore", "redis")

# Fixed once per process; only the date part of the file name changes
_PROCESS_START_TIME: Optional[str] = None


def _today() -> str:
    return datetime.now().strftime("%Y%m%d")


class DailyRotatingFileHandler(logging.FileHandler):
    """
    File handler that opens a new file whenever the calendar date changes.

    File name: <log_dir>/<prefix>_YYYYMMDD_<START_HHMMSS>.log
    """

    def __init__(self, log_dir: str = "logs", prefix: str = LOGGER_NAME, encoding: str = "utf-8"):
        global _PROCESS_START_TIME
        if _PROCESS_START_TIME is None:
            _PROCESS_START_TIME = datetime.now().strftime("%H%M%S")

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self._start_hhmmss = _PROCESS_START_TIME
        self._current_date = _today()

        super().__init__(self._path_for(self._current_date), mode="a", encoding=encoding)

    def _path_for(self, date_str: str) -> str:
        return str(self.log_dir / f"{self.prefix}_{date_str}_{self._start_hhmmss}.log")

    def emit(self, record: logging.LogRecord) -> None:
        today = _today()
        if today != self._current_date:
            self.close()
            self.baseFilename = self._path_for(today)
            self._current_date = today
            self.stream = self._open()
        super().emit(record)


def _build_handlers(numeric_level: int, log_dir: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        handlers.append(DailyRotatingFileHandler(log_dir=log_dir))
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> logging.Logger:
    """
    Configure the project logger and return it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        log_dir: Directory for daily log files. None disables file logging.

    Returns:
        logging.Logger: The "post_classifier" logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    # Handlers are attached here only; the root logger would print twice
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handlers = _build_handlers(numeric_level, log_dir)
    for handler in handlers:
        logger.addHandler(handler)

    third_party_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    file_handlers = [h for h in handlers if isinstance(h, DailyRotatingFileHandler)]
    if file_handlers:
        logger.info(f"Logging started - level: {log_level}, file: {file_handlers[0].baseFilename}")
    else:
        logger.info(f"Logging started - level: {log_level}, console only")

    return logger
