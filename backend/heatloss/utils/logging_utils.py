"""
Structured logging helpers

Calculation stages log a start line, a completion line with the elapsed time
and, on failure, the error before it propagates. Structured fields travel in
`extra` so a JSON formatter can pick them up.
"""

import time
import logging
from typing import Dict, Any, Optional, Callable, TypeVar, List
from contextlib import contextmanager
from functools import wraps

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Below this a data quality line is logged as a warning
DATA_QUALITY_WARN_BELOW = 0.8


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


@contextmanager
def log_operation(operation_name: str, context: Dict[str, Any], logger: Optional[logging.Logger] = None):
    """
    Log start, completion and failure of a calculation stage.

    Usage:
        with log_operation("building_heat_loss", {"rooms": 6, "strict": False}):
            results = calculate_building_heat_loss(...)
    """
    log = logger or logging.getLogger(__name__)
    started = time.perf_counter()
    log.info(f"Starting {operation_name}", extra={'operation': operation_name, 'context': context})

    try:
        yield
    except Exception as e:
        elapsed = _elapsed_ms(started)
        log.error(
            f"Failed {operation_name} after {elapsed:.1f}ms: {e}",
            extra={
                'operation': operation_name,
                'context': context,
                'elapsed_ms': elapsed,
                'error_type': type(e).__name__,
            },
        )
        raise

    elapsed = _elapsed_ms(started)
    log.info(
        f"Completed {operation_name} in {elapsed:.1f}ms",
        extra={'operation': operation_name, 'context': context, 'elapsed_ms': elapsed},
    )


def log_with_context(level: str, message: str, context: Dict[str, Any], logger: Optional[logging.Logger] = None):
    """Log `message` at the named level ("debug", "info", "warning", ...) with structured context."""
    log = logger or logging.getLogger(__name__)
    getattr(log, level.lower(), log.info)(message, extra={'context': context})


def timed_operation(operation_name: Optional[str] = None):
    """
    Decorator logging how long a function took.

    Usage:
        @timed_operation("select_radiators_for_building")
        def select_radiators_for_building(results, rooms, flow_temperature, catalog):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = operation_name or func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"[TIMING] {name} failed after {_elapsed_ms(started):.1f}ms: {e}")
                raise
            logger.info(f"[TIMING] {name} completed in {_elapsed_ms(started):.1f}ms")
            return result

        return wrapper
    return decorator


def log_data_quality(data_type: str, quality_score: float,
                     issues: Optional[List[str]] = None,
                     logger: Optional[logging.Logger] = None):
    """
    Log how trustworthy a set of inputs looks.

    Args:
        data_type: What was assessed (payload, building, room)
        quality_score: 0.0-1.0, where 1.0 means nothing was flagged
        issues: Validation messages behind the score
        logger: Logger instance
    """
    issues = issues or []
    level = "info" if quality_score >= DATA_QUALITY_WARN_BELOW else "warning"
    log_with_context(level, f"[DATA_QUALITY] {data_type}: {quality_score:.2f} ({len(issues)} issue(s))", {
        'data_type': data_type,
        'quality_score': quality_score,
        'issues': issues,
    }, logger)
