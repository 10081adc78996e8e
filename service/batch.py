"""
Fire-and-wait-all batch runner.

run_all() executes independent calls on a bounded thread pool and returns
their results in submission order. All-or-nothing: the first failure to
complete is re-raised; calls already in flight are left to settle on their
own (nothing is cancelled).

Usage:
    results = run_all([lambda: gen.generate(p, params)] * 3, max_workers=3)
"""

from __future__ import annotations
import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger("Remix")

T = TypeVar("T")


def run_all(calls: Sequence[Callable[[], T]], *, max_workers: Optional[int] = None) -> List[T]:
    if not calls:
        return []
    workers = max(1, min(max_workers or len(calls), len(calls)))
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="remix-batch")
    try:
        futures = [pool.submit(fn) for fn in calls]
        done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
        for f in futures:
            err = f.exception() if f in done else None
            if err is not None:
                logger.warning("batch aborted: %s", err)
                raise err
        return [f.result() for f in futures]
    finally:
        # Don't block on siblings still running after a failure.
        pool.shutdown(wait=False)
