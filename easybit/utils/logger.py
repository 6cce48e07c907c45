import logging
import os
import time
import functools
import contextvars
from logging.handlers import RotatingFileHandler
from typing import Optional

from easybit.core.config import settings

FORMAT = "%(asctime)s | %(levelname)s | %(emoji)s | %(service)s | %(func_name)s → %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "easybit.log"

EMOJIS = {
    "DEBUG": "🐞",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "💥",
}

logger = logging.getLogger("easybit")


class DefaultLogFieldsFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "emoji"):
            record.emoji = EMOJIS.get(record.levelname, "❔")

        if not hasattr(record, "service"):
            record.service = "library"

        if not hasattr(record, "func_name"):
            record.func_name = record.name

        return True


def _handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(FORMAT, datefmt=DATEFMT))
    handler.addFilter(DefaultLogFieldsFilter())
    return handler


def setup_logger(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    (Re)configure the `easybit` logger.

    Previous handlers are closed and removed, so calling this again replaces
    the setup. A rotating file (5 MB x 3) is written under `log_dir` only
    when one is given.
    """
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.setLevel(level.upper())
    logger.addHandler(_handler(logging.StreamHandler()))

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.addHandler(_handler(RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE),
            maxBytes=5_000_000,
            backupCount=3,
            encoding="utf-8",
        )))


setup_logger(settings.LOG_LEVEL, settings.LOG_DIR)


# -------------------------------------------------------------------
#   HELPERS
# -------------------------------------------------------------------
_LOG_DEPTH: contextvars.ContextVar[int] = contextvars.ContextVar("_LOG_DEPTH", default=0)


def _log(level: str, message: str, func_name: str, service="core", indent: int = 0):
    logger.log(
        getattr(logging, level),
        "  " * max(indent, 0) + message,
        extra={
            "emoji": EMOJIS.get(level, "❔"),
            "func_name": func_name,
            "service": service,
        }
    )


def log_service_error(message: str, func_name: str, service="api"):
    _log("ERROR", message, func_name, service)


def log_debug(message: str, func_name: str, service="debug"):
    _log("DEBUG", message, func_name, service)


def log_request(method: str, path: str, func_name: str, status=None, duration_ms=None):
    msg = f"{method} {path}"
    if status: msg += f" | status={status}"
    if duration_ms: msg += f" | {duration_ms:.2f}ms"
    _log("INFO", msg, func_name, "http")


def log_exception(exc: Exception, func_name: str, service="exception"):
    _log("ERROR", f"{type(exc).__name__}: {exc}", func_name, service)


def log_warning(message: str, func_name: str, service="warn"):
    _log("WARNING", message, func_name, service)


# -------------------------------------------------------------------
#   DECORATOR
# -------------------------------------------------------------------

def log_service(fn=None, *, service: str = "client"):
    """
    Wrap a coroutine function with started / completed / failed lines.

    Elapsed time is in milliseconds; nested decorated calls are indented
    one level per depth.

      @log_service
      async def get_account(self): ...

      @log_service(service="orders")
      async def create_order(self, ...): ...
    """

    def decorator(inner_fn):
        name = inner_fn.__name__

        @functools.wraps(inner_fn)
        async def wrapper(*args, **kwargs):
            depth = _LOG_DEPTH.get()
            token = _LOG_DEPTH.set(depth + 1)
            _log("INFO", "started", name, service=service, indent=depth)
            start = time.perf_counter()

            try:
                result = await inner_fn(*args, **kwargs)
            except Exception as exc:
                elapsed = (time.perf_counter() - start) * 1000
                _log("ERROR", f"failed after {elapsed:.2f}ms | {exc}", name, service=service, indent=depth)
                raise
            else:
                elapsed = (time.perf_counter() - start) * 1000
                _log("INFO", f"completed | {elapsed:.2f}ms", name, service=service, indent=depth)
                return result
            finally:
                _LOG_DEPTH.reset(token)

        return wrapper

    if callable(fn):
        return decorator(fn)
    return decorator
