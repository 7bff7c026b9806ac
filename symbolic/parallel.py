"""Fork-join helpers for reductions over large, flat operand lists.

Every helper runs inline while the operand count stays at or below
``config.parallelism``; above it the work is mapped over a shared thread pool
and folded on the calling thread. Tasks that are already running on the pool
never fan out again, so nested reductions cannot starve the pool.
"""

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor

from .config import config

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_local = threading.local()
_executor = None


def executor():
    global _executor
    with _lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="symbolic")
        return _executor


def shutdown():
    """Stop the worker pool; the next parallel call starts a new one."""
    global _executor
    with _lock:
        if _executor is not None:
            _executor.shutdown(wait=True)
            _executor = None


def is_parallel(size):
    return size > config.parallelism and not getattr(_local, "inside", False)


def _task(fn, item):
    _local.inside = True
    try:
        return fn(item)
    finally:
        _local.inside = False


def map_parallel(fn, items):
    items = list(items)
    if not is_parallel(len(items)):
        return [fn(item) for item in items]
    logger.debug(f"map over {len(items)} items on {config.workers} workers")
    return list(executor().map(_task, [fn] * len(items), items))


def sum_parallel(fns, arg, start=0.0):
    """``start + sum(f(arg) for f in fns)``."""
    return start + math.fsum(map_parallel(lambda f: f(arg), fns))


def product_parallel(fns, arg, start=1.0):
    """``start * prod(f(arg) for f in fns)``."""
    return math.prod(map_parallel(lambda f: f(arg), fns), start=start)
