"""Predictor protocols and adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

__all__ = [
    "BatchPredictor",
    "FunctionBatchPredictor",
    "FunctionPredictor",
    "Predictor",
    "resolve_factory",
]


@runtime_checkable
class Predictor(Protocol):
    """Maps one input vector to one output vector.

    Implementations may keep scratch buffers between calls, so an instance
    must not be shared across threads.
    """

    def predict(self, input: np.ndarray, output: np.ndarray) -> None:
        """Write the prediction for ``input`` into ``output`` in place."""


@runtime_checkable
class BatchPredictor(Protocol):
    """Produces independent :class:`Predictor` instances.

    ``new_predictor`` may be called concurrently from several threads.
    """

    def new_predictor(self) -> Predictor:
        """Return a fresh predictor."""


class FunctionPredictor:
    """Adapt a plain function ``func(x) -> y`` to the :class:`Predictor` protocol.

    Parameters
    ----------
    func : callable
        Takes a 1-D input vector and returns an array_like of length equal to
        the output buffer.
    """

    def __init__(self, func):
        self.func = func

    def predict(self, input, output):
        result = np.asarray(self.func(input), dtype=output.dtype).reshape(-1)
        if result.shape[0] != output.shape[0]:
            raise ValueError(f"Prediction has length {result.shape[0]}, expected {output.shape[0]}")
        output[:] = result


class FunctionBatchPredictor:
    """Factory of :class:`FunctionPredictor` instances sharing one function.

    ``func`` must be safe to call from several threads at once.
    """

    def __init__(self, func):
        if not callable(func):
            raise TypeError(f"func must be callable, got {type(func).__name__}")
        self.func = func

    def new_predictor(self):
        return FunctionPredictor(self.func)


def resolve_factory(factory):
    """Return a zero-argument callable that produces predictors.

    Parameters
    ----------
    factory : BatchPredictor or callable
        Either an object with a ``new_predictor`` method or a callable that
        returns a new predictor each time it is called.

    Returns
    -------
    callable
        ``factory.new_predictor`` or ``factory`` itself.

    Raises
    ------
    TypeError
        If ``factory`` is neither.
    """
    if isinstance(factory, BatchPredictor) and not isinstance(factory, type):
        return factory.new_predictor
    if callable(factory):
        return factory
    raise TypeError(
        f"factory must have a 'new_predictor' method or be callable, got {type(factory).__name__}"
    )
