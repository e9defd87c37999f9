"""Decorators for the export pipeline.

@timed
------
Measures and logs function execution time at DEBUG level. Warns when a call
takes longer than a second, which for a single flight usually means the
series was not downsampled first.

Example:
    >>> @timed
    ... def build_csv(bundle):
    ...     ...
    >>> build_csv(bundle)
    DEBUG: build_csv took 0.04s

@require_bundle
---------------
Validates the first positional argument (or the ``bundle`` keyword) with
:func:`dronelog.validation.validate_bundle` before the wrapped encoder runs,
so encoders fail before producing any output.

Stacking order: ``@timed`` outermost, ``@require_bundle`` innermost.
"""

import time
import functools
from typing import Callable, Any, TypeVar

from .logger import logger
from .validation import validate_bundle

__all__ = [
    "timed",
    "require_bundle",
]

F = TypeVar("F", bound=Callable[..., Any])

SLOW_CALL_SECONDS = 1.0


def timed(func: F) -> F:
    """Log the execution time of ``func`` and warn when it is slow."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        logger.debug(f"{func.__name__} took {elapsed:.2f}s")
        if elapsed > SLOW_CALL_SECONDS:
            logger.warning(
                f"{func.__name__} took {elapsed:.2f}s (consider downsampling first)"
            )

        return result

    return wrapper


def require_bundle(func: F) -> F:
    """Validate the bundle argument of an encoder before calling it.

    Raises:
        TelemetryShapeError: If the bundle is malformed
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        bundle = args[0] if args else kwargs.get("bundle")
        validate_bundle(bundle)
        return func(*args, **kwargs)

    return wrapper
