"""Core matrix, parallel and configuration utilities."""

from .config import ParallelConfig, config_context, get_config, set_config
from .dataframe import frame_to_numpy
from .matrix import (
    DenseMatrix,
    Matrix,
    MutableMatrix,
    RowViewer,
    SparseMatrix,
    StridedMatrix,
    as_matrix,
    new_dense,
)
from .parallel import parallel_for, partition_rows, resolve_n_jobs

__all__ = [
    "DenseMatrix",
    "Matrix",
    "MutableMatrix",
    "ParallelConfig",
    "RowViewer",
    "SparseMatrix",
    "StridedMatrix",
    "as_matrix",
    "config_context",
    "frame_to_numpy",
    "get_config",
    "new_dense",
    "parallel_for",
    "partition_rows",
    "resolve_n_jobs",
    "set_config",
]
