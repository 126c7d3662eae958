"""Exceptions raised by batch prediction."""

__all__ = [
    "BatchPredictError",
    "DimensionMismatch",
    "RowCountMismatch",
]


class BatchPredictError(ValueError):
    """Base class for shape errors detected before prediction starts."""


class DimensionMismatch(BatchPredictError):
    """A matrix column count disagrees with the declared dimension."""


class RowCountMismatch(BatchPredictError):
    """The output matrix row count disagrees with the input row count."""
