"""In-process operation counters and the per-operation logging wrapper."""

import logging
from collections import Counter
from contextlib import contextmanager
from threading import Lock

from backend.app.core.errors import CRMError, InternalError

logger = logging.getLogger("backend.app.operations")

_counters: Counter = Counter()
_lock = Lock()


def increment(name: str, value: int = 1) -> None:
    with _lock:
        _counters[name] += value


def get_metrics() -> dict[str, int]:
    with _lock:
        return dict(_counters)


def reset_metrics() -> None:
    with _lock:
        _counters.clear()


@contextmanager
def track_operation(name: str, **context):
    """Count and log one handler invocation.

    Success increments ``Successful<name>``; any exception increments
    ``<name>Error`` and is logged. CRMError propagates unchanged, anything
    else is re-raised as InternalError so the error handlers still shape it.
    """
    extra = {"extra_data": {"operation": name, **context}}
    try:
        yield
    except CRMError as exc:
        increment(f"{name}Error")
        logger.error("%s failed: %s", name, exc.message, extra=extra)
        raise
    except Exception as exc:
        increment(f"{name}Error")
        logger.exception("%s failed: %s", name, str(exc) or type(exc).__name__, extra=extra)
        raise InternalError() from exc
    increment(f"Successful{name}")
    logger.info("%s succeeded", name, extra=extra)
