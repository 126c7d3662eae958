"""Context-local configuration for parallel batch prediction."""

from __future__ import annotations

import contextlib
import numbers
from contextvars import ContextVar
from dataclasses import dataclass

__all__ = [
    "DEFAULT_GRAIN_SIZE",
    "DEFAULT_N_JOBS",
    "ParallelConfig",
    "config_context",
    "get_config",
    "set_config",
]

DEFAULT_N_JOBS = -1
DEFAULT_GRAIN_SIZE = None

_UNSET = object()

_n_jobs: ContextVar[int] = ContextVar("batchpredict_n_jobs", default=DEFAULT_N_JOBS)
_grain_size: ContextVar[int | None] = ContextVar("batchpredict_grain_size", default=DEFAULT_GRAIN_SIZE)


@dataclass(frozen=True)
class ParallelConfig:
    """Parallel execution settings.

    Attributes
    ----------
    n_jobs : int
        1 = sequential, -1 = all cores, >1 = that many workers.
    grain_size : int or None
        Target number of rows per partition. ``None`` splits the rows evenly
        across the workers.
    """

    n_jobs: int = DEFAULT_N_JOBS
    grain_size: int | None = DEFAULT_GRAIN_SIZE


def get_config():
    """Return the active :class:`ParallelConfig`."""
    return ParallelConfig(n_jobs=_n_jobs.get(), grain_size=_grain_size.get())


def set_config(n_jobs=_UNSET, grain_size=_UNSET):
    """Set the active parallel settings for the current context.

    Parameters
    ----------
    n_jobs : int, optional
        Worker count. Left unchanged when omitted.
    grain_size : int or None, optional
        Rows per partition. Left unchanged when omitted.
    """
    if n_jobs is not _UNSET:
        _n_jobs.set(validate_n_jobs(n_jobs))
    if grain_size is not _UNSET:
        _grain_size.set(validate_grain_size(grain_size))


@contextlib.contextmanager
def config_context(n_jobs=_UNSET, grain_size=_UNSET):
    """Context manager that temporarily overrides the parallel settings.

    The previous values are restored when the context exits, even if an
    exception is raised. Worker threads started by
    :func:`~batchpredict.core.parallel.parallel_for` inherit the values set
    here.

    Parameters
    ----------
    n_jobs : int, optional
        Worker count for the duration of the block.
    grain_size : int or None, optional
        Rows per partition for the duration of the block.
    """
    tokens = []
    if n_jobs is not _UNSET:
        tokens.append((_n_jobs, _n_jobs.set(validate_n_jobs(n_jobs))))
    if grain_size is not _UNSET:
        tokens.append((_grain_size, _grain_size.set(validate_grain_size(grain_size))))
    try:
        yield get_config()
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def validate_n_jobs(n_jobs):
    """Check an ``n_jobs`` value and return it as a plain int."""
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, numbers.Integral):
        raise TypeError(f"n_jobs must be an int, got {type(n_jobs).__name__}")
    if n_jobs == 0 or n_jobs < -1:
        raise ValueError(f"n_jobs must be -1 or a positive integer, got {n_jobs}")
    return int(n_jobs)


def validate_grain_size(grain_size):
    """Check a ``grain_size`` value and return it as a plain int or None."""
    if grain_size is None:
        return None
    if isinstance(grain_size, bool) or not isinstance(grain_size, numbers.Integral):
        raise TypeError(f"grain_size must be an int or None, got {type(grain_size).__name__}")
    if grain_size < 1:
        raise ValueError(f"grain_size must be >= 1, got {grain_size}")
    return int(grain_size)
