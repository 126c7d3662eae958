"""Batch prediction driver and predictor adapters."""

from .batch import batch_predict
from .errors import BatchPredictError, DimensionMismatch, RowCountMismatch
from .predictors import (
    BatchPredictor,
    FunctionBatchPredictor,
    FunctionPredictor,
    Predictor,
    resolve_factory,
)

__all__ = [
    "BatchPredictError",
    "BatchPredictor",
    "DimensionMismatch",
    "FunctionBatchPredictor",
    "FunctionPredictor",
    "Predictor",
    "RowCountMismatch",
    "batch_predict",
    "resolve_factory",
]
