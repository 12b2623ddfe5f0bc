"""
Loguru configuration for the API process.

``init_logging()`` runs once, when the ``audionotes`` package is imported.
Records from the standard ``logging`` module (uvicorn, SQLAlchemy, our own
``logging.getLogger(__name__)`` loggers) are forwarded to loguru, and every
record is stamped with the request it belongs to.
"""

import inspect
import logging
import sys
from contextvars import ContextVar
from typing import Dict

from loguru import logger

from audionotes.core.config.settings import settings
from audionotes.core.project_path import DATA_VOLUME


# Filled in by RequestContextMiddleware for the lifetime of a request.
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")
method_ctx: ContextVar[str] = ContextVar("method", default="-")
path_ctx: ContextVar[str] = ContextVar("path", default="-")
uid_ctx: ContextVar[str] = ContextVar("uid", default="-")

_REQUEST_CONTEXT: Dict[str, ContextVar] = {
    "request_id": request_id_ctx,
    "method": method_ctx,
    "path": path_ctx,
    "uid": uid_ctx,
}

_QUIET_LOGGERS = (
    "asyncio",
    "httpx",
    "httpcore",
    "botocore",
    "boto3",
    "s3transfer",
    "urllib3",
    "openai",
    "sqlalchemy.engine",
)

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "[<cyan>{extra[request_id]}</cyan>] "
    "<blue>{extra[method]}</blue> <magenta>{extra[path]}</magenta> "
    "<yellow>{extra[uid]}</yellow> | "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Hands stdlib records to loguru, keeping the original call site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _add_request_context(record) -> None:
    for name, var in _REQUEST_CONTEXT.items():
        record["extra"].setdefault(name, var.get())


def init_logging() -> None:
    log_dir = DATA_VOLUME / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(patcher=_add_request_context)

    logger.add(
        sys.stdout,
        level=settings.LOG_LEVEL,
        colorize=True,
        format=_CONSOLE_FORMAT,
    )
    # one JSON object per line, request fields under record.extra
    logger.add(
        log_dir / "audionotes.log",
        level="DEBUG" if settings.DEBUG else "INFO",
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        serialize=True,
    )
    logger.add(
        log_dir / "error.log",
        level="ERROR",
        rotation="5 MB",
        retention="14 days",
        compression="zip",
        serialize=True,
        backtrace=True,
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=settings.LOG_LEVEL, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    uvicorn_level = logging.DEBUG if settings.DEBUG else logging.INFO
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(uvicorn_level)

    logger.debug("Logging configured")
