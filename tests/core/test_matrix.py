"""Tests for the matrix capability layer."""

from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse as sp

from batchpredict.core.matrix import (
    DenseMatrix,
    Matrix,
    MutableMatrix,
    RowViewer,
    SparseMatrix,
    StridedMatrix,
    as_matrix,
    new_dense,
)
from tests.helpers import ListMatrix


class TestDenseMatrix:
    def test_dims_and_access(self):
        m = DenseMatrix(np.arange(6, dtype=float).reshape(2, 3))
        assert m.dims() == (2, 3)
        assert m.at(1, 2) == 5.0

    def test_row_view_shares_memory(self):
        array = np.zeros((3, 2))
        m = DenseMatrix(array)
        m.row_view(1)[:] = [7.0, 8.0]
        np.testing.assert_array_equal(array[1], [7.0, 8.0])

    def test_read_only_row_views(self):
        array = np.ones((2, 2))
        m = DenseMatrix(array, read_only=True)
        view = m.row_view(0)
        assert not view.flags.writeable
        with pytest.raises(ValueError):
            view[0] = 3.0
        assert array.flags.writeable

    def test_rejects_fortran_order(self):
        with pytest.raises(ValueError, match="C-contiguous"):
            DenseMatrix(np.asfortranarray(np.ones((3, 2))))

    def test_rejects_non_2d(self):
        with pytest.raises(ValueError, match="2-D"):
            DenseMatrix(np.ones(3))

    def test_satisfies_protocols(self):
        m = DenseMatrix(np.ones((2, 2)))
        assert isinstance(m, Matrix)
        assert isinstance(m, MutableMatrix)
        assert isinstance(m, RowViewer)


class TestStridedMatrix:
    def test_has_no_row_views(self):
        m = StridedMatrix(np.asfortranarray(np.ones((2, 3))))
        assert isinstance(m, MutableMatrix)
        assert not isinstance(m, RowViewer)

    def test_set_writes_through(self):
        array = np.asfortranarray(np.zeros((2, 3)))
        StridedMatrix(array).set(1, 2, 4.5)
        assert array[1, 2] == 4.5


class TestSparseMatrix:
    def test_reads_stored_and_implicit_zeros(self):
        dense = np.array([[0.0, 2.0, 0.0], [1.0, 0.0, 3.0]])
        m = SparseMatrix(sp.csr_matrix(dense))
        assert m.dims() == (2, 3)
        for i in range(2):
            for j in range(3):
                assert m.at(i, j) == dense[i, j]

    def test_accepts_other_formats(self):
        dense = np.array([[1.0, 0.0], [0.0, 2.0], [3.0, 4.0]])
        m = SparseMatrix(sp.coo_array(dense))
        assert [[m.at(i, j) for j in range(2)] for i in range(3)] == dense.tolist()

    def test_unsorted_indices_left_alone(self):
        csr = sp.csr_matrix(
            (np.array([5.0, 6.0]), np.array([2, 0]), np.array([0, 2])),
            shape=(1, 3),
        )
        assert not csr.has_sorted_indices
        m = SparseMatrix(csr)
        assert m.at(0, 0) == 6.0
        assert m.at(0, 2) == 5.0
        assert not csr.has_sorted_indices

    def test_is_read_only(self):
        m = SparseMatrix(sp.eye(2, format="csr"))
        assert isinstance(m, Matrix)
        assert not isinstance(m, MutableMatrix)
        assert not isinstance(m, RowViewer)

    def test_rejects_dense(self):
        with pytest.raises(TypeError, match="scipy.sparse"):
            SparseMatrix(np.eye(2))


class TestAsMatrix:
    def test_passthrough(self):
        m = ListMatrix([[1, 2]])
        assert as_matrix(m) is m
        assert as_matrix(m, writable=True) is m

    def test_c_contiguous_input_gets_read_only_rows(self):
        array = np.ones((3, 2))
        m = as_matrix(array)
        assert isinstance(m, DenseMatrix)
        assert not m.row_view(0).flags.writeable

    def test_writable_output_wraps_without_copy(self):
        array = np.zeros((3, 2))
        m = as_matrix(array, writable=True)
        m.row_view(2)[:] = 1.0
        assert array[2].tolist() == [1.0, 1.0]

    def test_fortran_array_is_strided(self):
        m = as_matrix(np.asfortranarray(np.ones((3, 2))), writable=True)
        assert isinstance(m, StridedMatrix)
        assert not isinstance(m, RowViewer)

    def test_column_slice_is_strided(self):
        base = np.arange(12, dtype=float).reshape(3, 4)
        m = as_matrix(base[:, ::2])
        assert not isinstance(m, RowViewer)
        assert m.at(2, 1) == 10.0

    def test_nested_lists_and_integers(self):
        m = as_matrix([[1, 2], [3, 4]])
        assert m.dims() == (2, 2)
        assert m.row_view(1).dtype == np.float64

    def test_sparse_input(self):
        assert isinstance(as_matrix(sp.eye(3, format="csc")), SparseMatrix)

    def test_sparse_output_rejected(self):
        with pytest.raises(TypeError, match="Sparse"):
            as_matrix(sp.eye(3, format="csr"), writable=True)

    def test_read_only_output_rejected(self):
        array = np.zeros((2, 2))
        array.flags.writeable = False
        with pytest.raises(TypeError, match="read-only"):
            as_matrix(array, writable=True)

    def test_integer_output_rejected(self):
        with pytest.raises(TypeError, match="floating-point"):
            as_matrix(np.zeros((2, 2), dtype=int), writable=True)

    def test_list_output_rejected(self):
        with pytest.raises(TypeError, match="NumPy array"):
            as_matrix([[0.0, 0.0]], writable=True)

    def test_read_only_custom_output_rejected(self):
        with pytest.raises(TypeError, match="does not support writes"):
            as_matrix(SparseMatrix(sp.eye(2, format="csr")), writable=True)

    def test_one_dimensional_rejected(self):
        with pytest.raises(ValueError, match="2-D"):
            as_matrix(np.ones(4))

    def test_float32_output_allowed(self):
        array = np.zeros((2, 2), dtype=np.float32)
        assert as_matrix(array, writable=True).row_view(0).dtype == np.float32


class TestNewDense:
    def test_zeros(self):
        array = new_dense(3, 2)
        assert array.shape == (3, 2)
        assert array.dtype == np.float64
        assert not array.any()

    def test_empty_shapes(self):
        assert new_dense(0, 4).shape == (0, 4)
        assert new_dense(2, 0).shape == (2, 0)

    def test_negative_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            new_dense(-1, 2)
