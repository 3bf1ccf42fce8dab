# src/component_schema/timeouts.py
"""
Bounded-time execution for database calls.

The lifecycle manager and migration runner route every introspector and
variable store call through `run_with_timeout`. A call that overruns
raises OperationTimeoutError in the caller. The worker thread itself
cannot be interrupted and is left to finish in the background.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Optional, TypeVar

from component_schema.errors import OperationTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=4, thread_name_prefix="schema-op"
            )
        return _executor


def run_with_timeout(
    fn: Callable[..., T],
    *args,
    timeout: Optional[float] = None,
    description: str = "",
) -> T:
    """
    Call fn(*args), bounded by `timeout` seconds.

    With timeout=None the call runs inline on the current thread.
    Exceptions raised by fn propagate unchanged.
    """
    if timeout is None:
        return fn(*args)

    future = _get_executor().submit(fn, *args)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        label = description or getattr(fn, "__name__", repr(fn))
        logger.error(f"Operation exceeded {timeout:g}s: {label}")
        raise OperationTimeoutError(label, timeout) from None
