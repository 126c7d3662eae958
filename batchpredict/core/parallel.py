"""Parallel-for over contiguous row partitions."""

from __future__ import annotations

import contextvars
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor, as_completed

from .config import validate_grain_size, validate_n_jobs

__all__ = [
    "parallel_for",
    "partition_rows",
    "resolve_n_jobs",
]

log = logging.getLogger(__name__)


def resolve_n_jobs(n_jobs):
    """Translate an ``n_jobs`` setting into a concrete worker count.

    Parameters
    ----------
    n_jobs : int
        1 = sequential, -1 = all cores, >1 = that many workers.

    Returns
    -------
    int
        Number of workers, at least 1.
    """
    n_jobs = validate_n_jobs(n_jobs)
    if n_jobs == -1:
        return os.cpu_count() or 1
    return n_jobs


def partition_rows(n, grain_size):
    """Split ``[0, n)`` into contiguous ``(start, end)`` ranges.

    Every range holds ``grain_size`` rows except possibly the last, which
    holds the remainder.

    Parameters
    ----------
    n : int
        Number of rows.
    grain_size : int
        Maximum rows per partition.

    Returns
    -------
    list of tuple of int
        Half-open ranges in increasing order. Empty when ``n`` is 0.
    """
    grain_size = validate_grain_size(grain_size)
    if grain_size is None:
        raise ValueError("grain_size must be set to partition rows")
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return [(start, min(start + grain_size, n)) for start in range(0, n, grain_size)]


def parallel_for(n, grain_size, func, n_jobs=1, stop_event=None):
    """Call ``func(start, end)`` for each partition of ``[0, n)``.

    Uses threads rather than processes because each partition works in place
    on shared NumPy buffers, which subprocesses cannot write back to. Each
    partition runs inside its own :func:`contextvars.copy_context` snapshot so
    context-local settings reach the worker threads.

    The first exception raised by ``func`` stops the run: partitions that
    have not started are cancelled, ``stop_event`` is set so running
    partitions can exit early, and the exception is re-raised.

    Parameters
    ----------
    n : int
        Number of rows.
    grain_size : int or None
        Rows per partition. ``None`` splits the rows evenly across the workers.
    func : callable
        Called as ``func(start, end)`` on a half-open row range.
    n_jobs : int
        1 = sequential (default), -1 = all cores, >1 = that many workers.
    stop_event : threading.Event, optional
        Set when a partition fails.
    """
    max_workers = resolve_n_jobs(n_jobs)
    if grain_size is None:
        grain_size = max(1, math.ceil(n / max_workers))
    partitions = partition_rows(n, grain_size)
    if not partitions:
        return

    max_workers = min(max_workers, len(partitions))
    log.debug(
        "Dispatching %d rows as %d partitions of up to %d rows on %d worker(s)",
        n,
        len(partitions),
        grain_size,
        max_workers,
    )

    if max_workers == 1:
        for start, end in partitions:
            try:
                func(start, end)
            except Exception:
                log.error("Partition [%d, %d) failed", start, end)
                if stop_event is not None:
                    stop_event.set()
                raise
        return

    # Each task gets its own snapshot so Context.run() is never called
    # concurrently on the same object (which would raise RuntimeError).
    contexts = [contextvars.copy_context() for _ in partitions]

    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        future_to_range = {
            executor.submit(ctx.run, func, start, end): (start, end)
            for ctx, (start, end) in zip(contexts, partitions, strict=True)
        }
        for future in as_completed(future_to_range):
            exc = future.exception()
            if exc is None:
                continue
            if stop_event is not None:
                stop_event.set()
            for pending in future_to_range:
                pending.cancel()
            start, end = future_to_range[future]
            log.error("Partition [%d, %d) failed; cancelling remaining partitions", start, end)
            raise exc
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
