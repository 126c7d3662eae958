"""Matrix capability layer.

The batch driver only needs coordinate access and dimensions. Types that can
hand out a row as a NumPy vector additionally satisfy :class:`RowViewer`,
which lets the driver skip the elementwise copy. Both paths give identical
results.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
import scipy.sparse as sp

from .dataframe import frame_to_numpy, is_dataframe

__all__ = [
    "DenseMatrix",
    "Matrix",
    "MutableMatrix",
    "RowViewer",
    "SparseMatrix",
    "StridedMatrix",
    "as_matrix",
    "new_dense",
]


@runtime_checkable
class Matrix(Protocol):
    """Read access by coordinate and by dimensions."""

    def dims(self) -> tuple[int, int]:
        """Return ``(n_rows, n_cols)``."""

    def at(self, i: int, j: int) -> float:
        """Return the element at row ``i``, column ``j``."""


@runtime_checkable
class MutableMatrix(Matrix, Protocol):
    """Matrix that can be written element by element."""

    def set(self, i: int, j: int, value: float) -> None:
        """Store ``value`` at row ``i``, column ``j``."""


@runtime_checkable
class RowViewer(Protocol):
    """Matrix that exposes a row as a NumPy vector sharing its memory."""

    def row_view(self, i: int) -> np.ndarray:
        """Return row ``i`` as a 1-D view."""


class StridedMatrix:
    """Elementwise wrapper over a 2-D NumPy array.

    Used for arrays whose rows are not contiguous in memory, e.g. Fortran
    ordered arrays or column slices.
    """

    def __init__(self, array: np.ndarray):
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got {array.ndim} dimension(s)")
        self.array = array

    def dims(self) -> tuple[int, int]:
        return self.array.shape

    def at(self, i: int, j: int) -> float:
        return self.array[i, j]

    def set(self, i: int, j: int, value: float) -> None:
        self.array[i, j] = value

    def __repr__(self):
        n_rows, n_cols = self.dims()
        return f"{type(self).__name__}({n_rows}x{n_cols}, dtype={self.array.dtype})"


class DenseMatrix(StridedMatrix):
    """Wrapper over a 2-D C-contiguous NumPy array with row views.

    Parameters
    ----------
    array : ndarray
        Row-major array. It is wrapped, not copied.
    read_only : bool, default False
        If True, row views are marked non-writable so a predictor cannot
        modify the caller's data through them.
    """

    def __init__(self, array: np.ndarray, read_only: bool = False):
        super().__init__(array)
        if not array.flags.c_contiguous:
            raise ValueError("DenseMatrix requires a C-contiguous array")
        if read_only:
            array = array.view()
            array.flags.writeable = False
            self.array = array

    def row_view(self, i: int) -> np.ndarray:
        return self.array[i]


class SparseMatrix:
    """Read-only wrapper over a SciPy sparse matrix or array.

    Elements are read through a CSR copy, so construction costs one
    conversion and each :meth:`at` call is a binary search in one row.
    """

    def __init__(self, matrix):
        if not sp.issparse(matrix):
            raise TypeError(f"Expected a scipy.sparse matrix, got {type(matrix).__name__}")
        csr = sp.csr_matrix(matrix)
        if not csr.has_sorted_indices:
            csr = csr.sorted_indices()
        self.matrix = csr

    def dims(self) -> tuple[int, int]:
        return self.matrix.shape

    def at(self, i: int, j: int) -> float:
        start, end = self.matrix.indptr[i], self.matrix.indptr[i + 1]
        cols = self.matrix.indices[start:end]
        k = np.searchsorted(cols, j)
        if k < len(cols) and cols[k] == j:
            return self.matrix.data[start + k]
        return 0.0

    def __repr__(self):
        n_rows, n_cols = self.dims()
        return f"{type(self).__name__}({n_rows}x{n_cols}, nnz={self.matrix.nnz})"


def new_dense(n_rows, n_cols):
    """Return a zero-initialised float64 array of shape ``(n_rows, n_cols)``."""
    if n_rows < 0 or n_cols < 0:
        raise ValueError(f"Matrix dimensions must be non-negative, got ({n_rows}, {n_cols})")
    return np.zeros((n_rows, n_cols), dtype=np.float64)


def as_matrix(obj, writable=False):
    """Adapt ``obj`` to the :class:`Matrix` protocol.

    Parameters
    ----------
    obj : Matrix, ndarray, sparse matrix, DataFrame or nested sequence
        Objects already satisfying :class:`Matrix` are returned unchanged.
        NumPy arrays are wrapped without copying; C-contiguous arrays gain
        row views. Sparse matrices and DataFrames are accepted as read-only
        inputs only. Anything else goes through :func:`numpy.asarray`.
    writable : bool, default False
        Whether the result will be written to. Writable results must satisfy
        :class:`MutableMatrix`; NumPy arrays must also be writable and have a
        floating-point dtype.

    Returns
    -------
    Matrix
        The adapted matrix.

    Raises
    ------
    TypeError
        If ``obj`` cannot be adapted, or cannot be written to when
        ``writable`` is True.
    ValueError
        If ``obj`` is not two-dimensional.
    """
    if isinstance(obj, Matrix):
        if writable and not isinstance(obj, MutableMatrix):
            raise TypeError(f"{type(obj).__name__} does not support writes; it has no 'set' method")
        return obj

    if sp.issparse(obj):
        if writable:
            raise TypeError("Sparse matrices cannot be used as outputs")
        return SparseMatrix(obj)

    if is_dataframe(obj):
        if writable:
            raise TypeError("DataFrames cannot be used as outputs; pass a NumPy array instead")
        return DenseMatrix(frame_to_numpy(obj), read_only=True)

    if writable:
        if not isinstance(obj, np.ndarray):
            raise TypeError(f"Outputs must be a NumPy array or a MutableMatrix, got {type(obj).__name__}")
        if not obj.flags.writeable:
            raise TypeError("Output array is read-only")
        if not np.issubdtype(obj.dtype, np.floating):
            raise TypeError(f"Output array must have a floating-point dtype, got {obj.dtype}")
        array = obj
    else:
        array = np.asarray(obj, dtype=np.float64)

    if array.ndim != 2:
        raise ValueError(f"Expected a 2-D matrix, got {array.ndim} dimension(s)")
    if array.flags.c_contiguous:
        return DenseMatrix(array, read_only=not writable)
    return StridedMatrix(array)
