"""
Structured JSON logging.

Records are emitted as JSON through python-json-logger. Structured fields are
passed with ``extra=`` and every record carries the current request id.

Usage:
    from nimbiwe.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Entry created", extra={"clientId": "c1", "entryId": entry.id})
"""
import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger import jsonlogger

from nimbiwe.core.config import settings

ROOT_LOGGER_NAME = "nimbiwe"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    return _request_id_var.get()


def set_request_id(request_id: str) -> None:
    _request_id_var.set(request_id)


class RequestIdFilter(logging.Filter):
    """Stamp the current request id on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.requestId = get_request_id()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that normalises timestamp, level and logger name."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        if log_record.get("level"):
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname

        log_record["logger"] = record.name


def setup_logging(level: str | None = None, format_type: str | None = None) -> logging.Logger:
    """
    Configure the application root logger.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL
        format_type: "json" or "text", defaults to settings.LOG_FORMAT

    Returns:
        The configured ``nimbiwe`` logger
    """
    log_level = LOG_LEVELS.get((level or settings.LOG_LEVEL).upper(), logging.INFO)
    format_type = format_type or settings.LOG_FORMAT

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(RequestIdFilter())

    if format_type == "json":
        formatter = CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(requestId)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - [%(requestId)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger under the application root, configuring the root on first use."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logging()

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
