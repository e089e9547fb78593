"""Call logging for the feed transport and the service facade.

Every decorated call writes a CALL line, then either an OK line summarizing
the result (features received, records returned) or a FAIL line naming the
exception. Lines go to ``feed_calls.log`` through the ``metarwatch.calls``
logger, which does not propagate to the root logger.
"""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

CALL_LOGGER_NAME = "metarwatch.calls"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

_LOG_DIR = os.environ.get("METARWATCH_LOG_DIR", os.path.join(os.getcwd(), "logs"))
_LOG_FILE = os.path.join(_LOG_DIR, "feed_calls.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def configure_log_dir(log_dir: str) -> None:
    """Point the call log at ``log_dir``; takes effect for a fresh logger."""
    global _LOG_DIR, _LOG_FILE
    with _logger_lock:
        _LOG_DIR = log_dir
        _LOG_FILE = os.path.join(log_dir, "feed_calls.log")


def _file_handler(path: str) -> logging.Handler:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _get_logger() -> logging.Logger:
    global _logger
    logger = _logger
    if logger is not None:
        return logger

    with _logger_lock:
        if _logger is None:
            calls = logging.getLogger(CALL_LOGGER_NAME)
            calls.setLevel(logging.DEBUG)
            calls.propagate = False
            if not calls.handlers:
                calls.addHandler(_file_handler(_LOG_FILE))
            _logger = calls
        return _logger


def _describe_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # skip 'self'
    parts = [repr(a) for a in args[1:]]
    parts += [f"{k}={v!r}" for k, v in kwargs.items()]
    return ", ".join(parts)


def _count_features(result: Any) -> str:
    features = result.get("features") if isinstance(result, Mapping) else None
    return f"{len(features) if isinstance(features, list) else 0} features"


def _count_records(result: Any) -> str:
    if result is None:
        return "done"
    if isinstance(result, Sequence) and not isinstance(result, str):
        return f"{len(result)} records"
    return type(result).__name__


def _call_logger(label: str, summarize: Callable[[Any], str]) -> Callable[[F], F]:
    prefix = f"{label} " if label else ""

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = _get_logger()
            call = f"{fn.__qualname__}({_describe_args(args, kwargs)})"
            logger.info("%sCALL: %s", prefix, call)

            start = time.monotonic()
            try:
                result = fn(*args, **kwargs)
            except Exception as exc:
                logger.error(
                    "%sFAIL: %s -> %s: %s (%.3fs)",
                    prefix, call, type(exc).__name__, exc, time.monotonic() - start,
                )
                raise
            logger.info(
                "%sOK: %s -> %s (%.3fs)",
                prefix, call, summarize(result), time.monotonic() - start,
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


log_feed_call = _call_logger("", _count_features)
log_feed_call.__doc__ = "Log feed fetches with the number of features received."

log_service_call = _call_logger("SERVICE", _count_records)
log_service_call.__doc__ = "Log client-facing service calls with the number of records returned."
