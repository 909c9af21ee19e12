"""
Logging configuration with GELF support for structured request logging.
Extends standard Python logging to include request context automatically.
"""

import logging
import json
import socket
from typing import Optional, Dict
from contextvars import ContextVar

# Context variables for request data
current_request_id: ContextVar[Optional[str]] = ContextVar('current_request_id', default=None)
current_user_id: ContextVar[Optional[str]] = ContextVar('current_user_id', default=None)
current_theme_id: ContextVar[Optional[str]] = ContextVar('current_theme_id', default=None)

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class GELFFormatter(logging.Formatter):
    """Formatter that creates GELF-compatible JSON messages with request context."""

    def __init__(self, facility: str = "portfolio-api"):
        super().__init__()
        self.hostname = socket.gethostname()
        self.facility = facility

    def format(self, record):
        gelf_message = {
            "version": "1.1",
            "host": self.hostname,
            "short_message": record.getMessage(),
            "timestamp": record.created,
            "level": self._level_to_gelf(record.levelno),
            "facility": self.facility,
            "_logger": record.name,
            "_filename": record.filename,
            "_line": record.lineno,
        }

        for key, value in get_request_context().items():
            if value:
                gelf_message[f"_{key}"] = value

        # Extra fields passed via the logging ``extra`` parameter
        for key, value in record.__dict__.items():
            if key.startswith(('theme_', 'user_', 'request_')):
                gelf_message[f"_{key}"] = str(value)

        if record.exc_info:
            gelf_message["_exception"] = self.formatException(record.exc_info)

        return json.dumps(gelf_message)

    def _level_to_gelf(self, level):
        """Convert Python log level to syslog severity."""
        mapping = {
            logging.DEBUG: 7,
            logging.INFO: 6,
            logging.WARNING: 4,
            logging.ERROR: 3,
            logging.CRITICAL: 2
        }
        return mapping.get(level, 6)


class GELFHandler(logging.Handler):
    """Handler that sends GELF messages to Graylog via UDP."""

    def __init__(self, graylog_host: str, graylog_port: int = 12201):
        super().__init__()
        self.graylog_host = graylog_host
        self.graylog_port = graylog_port
        self.setFormatter(GELFFormatter())

    def emit(self, record):
        try:
            payload = self.format(record).encode('utf-8')
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.sendto(payload, (self.graylog_host, self.graylog_port))
        except Exception:
            self.handleError(record)


def set_request_context(
    request_id: str = None,
    user_id: str = None,
    theme_id: str = None
):
    """Set request context for subsequent log messages."""
    if request_id is not None:
        current_request_id.set(request_id)
    if user_id is not None:
        current_user_id.set(user_id)
    if theme_id is not None:
        current_theme_id.set(theme_id)


def clear_request_context():
    current_request_id.set(None)
    current_user_id.set(None)
    current_theme_id.set(None)


def get_request_context() -> Dict[str, Optional[str]]:
    return {
        "request_id": current_request_id.get(),
        "user_id": current_user_id.get(),
        "theme_id": current_theme_id.get(),
    }


class RequestContextLogger:
    """Wrapper around a standard logger that accepts extra fields as keywords."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message, *args, **extra):
        self.logger.debug(message, *args, extra=extra)

    def info(self, message, *args, **extra):
        self.logger.info(message, *args, extra=extra)

    def warning(self, message, *args, **extra):
        self.logger.warning(message, *args, extra=extra)

    def error(self, message, *args, **extra):
        self.logger.error(message, *args, extra=extra)

    def exception(self, message, *args, **extra):
        self.logger.exception(message, *args, extra=extra)


def setup_logging(level: str = "INFO", graylog_host: Optional[str] = None, graylog_port: int = 12201):
    """Install a console handler and, when a Graylog host is given, a GELF handler."""
    root_logger = logging.getLogger()

    if not any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    if graylog_host and not any(isinstance(h, GELFHandler) for h in root_logger.handlers):
        gelf_handler = GELFHandler(graylog_host, graylog_port)
        gelf_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(gelf_handler)

    root_logger.setLevel(level)


def get_logger(name: str) -> RequestContextLogger:
    """Get a request-aware logger instance."""
    return RequestContextLogger(name)
