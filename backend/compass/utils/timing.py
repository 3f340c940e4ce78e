"""Lightweight timing utilities for performance debugging."""
import time
from contextlib import contextmanager
from typing import Optional, Callable
import logging

logger = logging.getLogger(__name__)


def now_ms() -> float:
    """Return current time in milliseconds using high-resolution timer."""
    return time.perf_counter() * 1000


@contextmanager
def time_operation(label: str, log_fn: Optional[Callable[[str], None]] = None, min_ms: float = 0.0):
    """
    Context manager to time an operation and log elapsed time.

    Example:
        with time_operation("score_catalog"):
            ranked = score_all(tools, profile)
    """
    start = now_ms()
    try:
        yield
    finally:
        elapsed = now_ms() - start
        if elapsed >= min_ms:
            (log_fn or logger.debug)(f"{label}: {elapsed:.2f}ms")


def log_elapsed(start_ms: float, label: str, log_fn: Optional[Callable[[str], None]] = None) -> float:
    """
    Log elapsed time since start_ms and return current time (for chaining).

        t = now_ms()
        t = log_elapsed(t, "load_profile")
        t = log_elapsed(t, "generate")
    """
    elapsed = now_ms() - start_ms
    (log_fn or logger.debug)(f"{label}: {elapsed:.2f}ms")
    return now_ms()
