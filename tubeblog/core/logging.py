"""
Logging configuration using Loguru.

Standard library loggers (uvicorn, httpx, the LLM SDKs) are routed into
Loguru so every line carries the request id set by the HTTP middleware.
"""
import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
    "{extra[request_id]} | {name}:{function}:{line} - {message}"
)

# Chatty third-party loggers: one INFO line per outbound HTTP request
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "groq")


class InterceptHandler(logging.Handler):
    """Handler that redirects standard logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so Loguru reports the real caller
        frame = logging.currentframe()
        depth = 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _add_request_id(record: dict[str, Any]) -> None:
    record["extra"].setdefault("request_id", "N/A")


def setup_logging(level: str = "INFO", log_file: str | None = "logs/app.log") -> None:
    """
    Configure Loguru sinks and intercept standard library logging.

    Args:
        level: Minimum level for every sink.
        log_file: Path of the rotating log file, or None to log to stderr only.
    """
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(0)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.remove()
    logger.configure(patcher=_add_request_id)
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            enqueue=True,
            level=level,
            format=FILE_FORMAT,
        )
