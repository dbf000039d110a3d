"""Decorators shared by the training entry points."""

from collections.abc import Callable
import functools
import logging
import time

log = logging.getLogger(__name__)


def measure_time[**P, R](label: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Log how long each call of the decorated function takes under ``label``.

    The duration is logged even when the call raises.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                if elapsed >= 60:
                    log.info(f"{label} completed in {elapsed / 60:.2f} mins")
                else:
                    log.info(f"{label} completed in {elapsed:.2f} s")

        return wrapper

    return decorator
