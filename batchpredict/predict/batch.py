"""Row-wise batch prediction over a matrix."""

from __future__ import annotations

import logging
import numbers
import threading

import numpy as np

from batchpredict.core.config import get_config, validate_grain_size, validate_n_jobs
from batchpredict.core.matrix import RowViewer, as_matrix, new_dense
from batchpredict.core.parallel import parallel_for

from .errors import DimensionMismatch, RowCountMismatch
from .predictors import resolve_factory

__all__ = ["batch_predict"]

log = logging.getLogger(__name__)


def batch_predict(factory, inputs, outputs, input_dim, output_dim, grain_size=None, n_jobs=None):
    """Apply a single-sample predictor to every row of a matrix.

    The rows of ``inputs`` are split into contiguous partitions of about
    ``grain_size`` rows. Each partition obtains its own predictor from
    ``factory`` and fills the matching rows of ``outputs`` in increasing row
    order. Partitions may run concurrently on a thread pool; since every
    partition writes a disjoint set of rows and owns its predictor, the
    result is the same as a sequential pass over all rows.

    When a matrix exposes row views (see
    :class:`~batchpredict.core.matrix.RowViewer`), the predictor reads from
    and writes to the rows directly. Otherwise each row is copied element by
    element into a scratch vector, and for outputs copied back afterwards.
    The output scratch vector is preloaded with the current row, so both
    paths hand the predictor the same values.

    Parameters
    ----------
    factory : BatchPredictor or callable
        Object with a ``new_predictor()`` method, or a zero-argument callable,
        returning a fresh :class:`~batchpredict.predict.predictors.Predictor`.
        Called once per partition, possibly from several threads at once.
    inputs : array_like, Matrix, sparse matrix or DataFrame
        Matrix of shape ``(n_samples, input_dim)``. Never modified; the
        predictor receives its input row as a read-only vector whichever
        access path is used.
    outputs : ndarray, MutableMatrix or None
        Matrix of shape ``(n_samples, output_dim)`` filled in place. If None,
        a zero-initialised float64 array is allocated.
    input_dim : int
        Expected number of input columns.
    output_dim : int
        Expected number of output columns.
    grain_size : int, optional
        Target number of rows per partition. Affects scheduling only. Defaults
        to the active :func:`~batchpredict.core.config.get_config` value;
        when that is also None the rows are split evenly across the workers.
    n_jobs : int, optional
        1 = sequential, -1 = all cores, >1 = that many workers. Defaults to
        the active configuration.

    Returns
    -------
    ndarray or MutableMatrix
        ``outputs`` itself, or the newly allocated array.

    Raises
    ------
    DimensionMismatch
        If the input or output column count differs from ``input_dim`` or
        ``output_dim``.
    RowCountMismatch
        If ``outputs`` does not have one row per input row.

    Notes
    -----
    Shape errors are raised before any predictor is created, leaving
    ``outputs`` untouched. An exception raised by the factory or a predictor
    cancels the partitions that have not started, stops the running ones
    before their next row, and is re-raised as is; ``outputs`` is then only
    partially filled.

    Examples
    --------
    .. ipython::

        In [1]: import numpy as np
           ...: from batchpredict import FunctionBatchPredictor, batch_predict
           ...:
           ...: x = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
           ...: factory = FunctionBatchPredictor(lambda row: [row.sum()])
           ...: batch_predict(factory, x, None, input_dim=2, output_dim=1)
    """
    new_predictor = resolve_factory(factory)
    _check_dim("input_dim", input_dim)
    _check_dim("output_dim", output_dim)

    config = get_config()
    n_jobs = validate_n_jobs(config.n_jobs if n_jobs is None else n_jobs)
    grain_size = validate_grain_size(config.grain_size if grain_size is None else grain_size)

    in_mat = as_matrix(inputs)
    n_samples, n_in = in_mat.dims()
    if n_in != input_dim:
        raise DimensionMismatch(f"Input dimension mismatch: matrix has {n_in} columns, input_dim is {input_dim}")

    if outputs is None:
        outputs = new_dense(n_samples, output_dim)
        out_mat = as_matrix(outputs, writable=True)
    else:
        out_mat = as_matrix(outputs, writable=True)
        n_out, d_out = out_mat.dims()
        if d_out != output_dim:
            raise DimensionMismatch(f"Output dimension mismatch: matrix has {d_out} columns, output_dim is {output_dim}")
        if n_out != n_samples:
            raise RowCountMismatch(f"Row count mismatch: inputs have {n_samples} rows, outputs have {n_out}")

    in_rows = isinstance(in_mat, RowViewer)
    out_rows = isinstance(out_mat, RowViewer)
    log.debug(
        "Predicting %d samples (%d -> %d), input row views: %s, output row views: %s",
        n_samples,
        input_dim,
        output_dim,
        in_rows,
        out_rows,
    )

    stop = threading.Event()

    def predict_range(start, end):
        predictor = new_predictor()
        x_buf = None if in_rows else np.empty(input_dim)
        y_buf = None if out_rows else np.empty(output_dim)
        if x_buf is not None:
            # predictors see the input copy read-only, like input row views
            x_ro = x_buf.view()
            x_ro.flags.writeable = False
        for i in range(start, end):
            if stop.is_set():
                return
            if in_rows:
                x = in_mat.row_view(i)
            else:
                _read_row(in_mat, i, x_buf)
                x = x_ro
            y = out_mat.row_view(i) if out_rows else _read_row(out_mat, i, y_buf)
            predictor.predict(x, y)
            if not out_rows:
                _write_row(out_mat, i, y)

    parallel_for(n_samples, grain_size, predict_range, n_jobs=n_jobs, stop_event=stop)
    return outputs


def _check_dim(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def _read_row(mat, i, buf):
    for j in range(buf.shape[0]):
        buf[j] = mat.at(i, j)
    return buf


def _write_row(mat, i, buf):
    for j, value in enumerate(buf):
        mat.set(i, j, value)
