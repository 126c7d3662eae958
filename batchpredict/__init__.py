"""Apply single-sample predictors across the rows of a matrix in parallel."""

from batchpredict.core.config import ParallelConfig, config_context, get_config, set_config
from batchpredict.core.matrix import (
    DenseMatrix,
    Matrix,
    MutableMatrix,
    RowViewer,
    SparseMatrix,
    StridedMatrix,
    as_matrix,
)
from batchpredict.predict import (
    BatchPredictError,
    BatchPredictor,
    DimensionMismatch,
    FunctionBatchPredictor,
    FunctionPredictor,
    Predictor,
    RowCountMismatch,
    batch_predict,
)

__version__ = "0.1.0"

__all__ = [
    "BatchPredictError",
    "BatchPredictor",
    "DenseMatrix",
    "DimensionMismatch",
    "FunctionBatchPredictor",
    "FunctionPredictor",
    "Matrix",
    "MutableMatrix",
    "ParallelConfig",
    "Predictor",
    "RowCountMismatch",
    "RowViewer",
    "SparseMatrix",
    "StridedMatrix",
    "as_matrix",
    "batch_predict",
    "config_context",
    "get_config",
    "set_config",
]
