"""
Logging utilities for the portfolio view aggregator.

Provides named loggers plus decorators that wrap the analytics entry points:

- portfolio_logger:   portfolio operations (selection, aggregation, loading)
- performance_logger: execution timings, warns when a call is slow
- error_logger:       structured error reports

Decorators:
- log_error_handling(severity)              log the exception, then re-raise
- log_performance(threshold_seconds)        time the call
- log_portfolio_operation_decorator(name)   record the operation on completion

Error reports can also be appended as JSON lines to ``<log_dir>/error_YYYY-MM-DD.json``
when ``LOGGING_DEFAULTS["write_json_logs"]`` is enabled.
"""

import functools
import json
import logging
import sys
import time
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from settings import LOGGING_DEFAULTS

_BASE_LOGGER_NAME = "portfolio_view"


def _build_base_logger() -> logging.Logger:
    base = logging.getLogger(_BASE_LOGGER_NAME)
    base.setLevel(getattr(logging, LOGGING_DEFAULTS["level"], logging.INFO))
    # Avoid duplicate handlers on module reload
    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        base.addHandler(handler)
    return base


_base_logger = _build_base_logger()

portfolio_logger = logging.getLogger(f"{_BASE_LOGGER_NAME}.portfolio")
performance_logger = logging.getLogger(f"{_BASE_LOGGER_NAME}.performance")
error_logger = logging.getLogger(f"{_BASE_LOGGER_NAME}.errors")


def _json_default(obj: Any):
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return str(obj)


def _append_json_line(prefix: str, payload: Dict[str, Any]) -> None:
    """Append one JSON record to the dated log file for ``prefix``."""
    log_dir = Path(LOGGING_DEFAULTS["log_dir"])
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / f"{prefix}_{datetime.now():%Y-%m-%d}.json"
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(payload, default=_json_default) + "\n")
    except OSError as e:
        error_logger.warning("Could not write %s log to %s: %s", prefix, log_dir, e)


# ── direct logging helpers ────────────────────────────────────────────

def log_portfolio_operation(
    operation: str,
    portfolio_data: Optional[Dict[str, Any]] = None,
    execution_time: Optional[float] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Record a completed portfolio operation."""
    parts = [f"📊 {operation}"]
    if execution_time is not None:
        parts.append(f"({execution_time * 1000:.1f}ms)")
    if portfolio_data:
        parts.append(json.dumps(portfolio_data, default=_json_default, sort_keys=True))
    if details:
        parts.append(json.dumps(details, default=_json_default, sort_keys=True))
    portfolio_logger.info(" ".join(parts))


def log_performance_metric(
    operation: str,
    execution_time: float,
    threshold: float = 1.0,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Log an execution time; anything above ``threshold`` seconds is a warning."""
    suffix = f" {json.dumps(details, default=_json_default)}" if details else ""
    if execution_time > threshold:
        performance_logger.warning(
            f"🐌 SLOW: {operation} took {execution_time * 1000:.1f}ms "
            f"(threshold {threshold * 1000:.0f}ms){suffix}"
        )
    else:
        performance_logger.debug(f"⚡ {operation} took {execution_time * 1000:.1f}ms{suffix}")


def log_error_json(
    source: str,
    context: Optional[Dict[str, Any]] = None,
    exc: Optional[BaseException] = None,
) -> Dict[str, Any]:
    """
    Log a structured error report and return the payload.

    The payload always goes to ``error_logger``; it is also persisted as a JSON
    line when JSON file logging is enabled.
    """
    payload = {
        "timestamp": datetime.now(),
        "source": source,
        "context": context or {},
        "error_type": type(exc).__name__ if exc is not None else None,
        "error_message": str(exc) if exc is not None else None,
        "traceback": (
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            if exc is not None else None
        ),
    }
    error_logger.error(f"❌ {source}: {payload['error_type']}: {payload['error_message']}")
    if LOGGING_DEFAULTS["write_json_logs"]:
        _append_json_line("error", payload)
    return payload


# ── decorators ────────────────────────────────────────────────────────

def log_error_handling(severity: str = "medium") -> Callable:
    """Log any exception raised by the wrapped function, then re-raise it."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_error_json(
                    source=func.__qualname__,
                    context={"severity": severity, "module": func.__module__},
                    exc=e,
                )
                raise
        return wrapper
    return decorator


def log_performance(threshold_seconds: float = 1.0) -> Callable:
    """Time the wrapped function and report it to ``performance_logger``."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                log_performance_metric(
                    func.__name__, time.perf_counter() - start, threshold=threshold_seconds
                )
        return wrapper
    return decorator


def log_portfolio_operation_decorator(operation: str) -> Callable:
    """Record ``operation`` with its duration each time the wrapped call succeeds."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - start
            portfolio_logger.debug(f"📊 {operation} completed in {elapsed * 1000:.1f}ms")
            return result
        return wrapper
    return decorator
