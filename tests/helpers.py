"""Shared test helpers for batchpredict."""

import threading

import numpy as np
import pytest


def importorskip(modname, minversion=None):
    """Import ``modname`` or skip the calling module."""
    return pytest.importorskip(modname, minversion=minversion)


class ListMatrix:
    """Matrix backed by nested lists, with no row views."""

    def __init__(self, rows):
        self.rows = [list(map(float, row)) for row in rows]
        self.n_cols = len(self.rows[0]) if self.rows else 0
        self.writes = 0

    @classmethod
    def zeros(cls, n_rows, n_cols):
        matrix = cls([[0.0] * n_cols for _ in range(n_rows)])
        matrix.n_cols = n_cols
        return matrix

    def dims(self):
        return len(self.rows), self.n_cols

    def at(self, i, j):
        return self.rows[i][j]

    def set(self, i, j, value):
        self.writes += 1
        self.rows[i][j] = value

    def to_numpy(self):
        return np.array(self.rows, dtype=float).reshape(len(self.rows), self.n_cols)


class CopyPredictor:
    """Copies the first ``len(output)`` input entries."""

    def predict(self, input, output):
        output[:] = input[: output.shape[0]]


class CopyFactory:
    def new_predictor(self):
        return CopyPredictor()


class AffinePredictor:
    """Row-local predictor: ``output[k] = sum(input) * (k + 1) + input[0]``."""

    def __init__(self):
        self.scratch = None

    def predict(self, input, output):
        if self.scratch is None:
            self.scratch = np.empty_like(output)
        total = float(np.sum(input))
        for k in range(output.shape[0]):
            self.scratch[k] = total * (k + 1) + input[0]
        output[:] = self.scratch


class AffineFactory:
    def new_predictor(self):
        return AffinePredictor()


def affine_reference(x, output_dim):
    x = np.asarray(x, dtype=float)
    scale = np.arange(1, output_dim + 1, dtype=float)
    return x.sum(axis=1)[:, None] * scale + x[:, :1]


class CounterPredictor:
    """Writes a per-instance call counter into every output entry."""

    def __init__(self):
        self.count = 0

    def predict(self, input, output):
        output[:] = self.count
        self.count += 1


class CountingFactory:
    """Factory that records how many predictors it created."""

    def __init__(self, predictor_cls=CounterPredictor):
        self.predictor_cls = predictor_cls
        self.created = 0
        self._lock = threading.Lock()

    def new_predictor(self):
        with self._lock:
            self.created += 1
        return self.predictor_cls()


class FailingPredictor:
    """Raises on a chosen row, identified by ``input[0]``."""

    def __init__(self, bad_value):
        self.bad_value = bad_value

    def predict(self, input, output):
        if input[0] == self.bad_value:
            raise RuntimeError(f"cannot predict row {self.bad_value}")
        output[:] = input[0]
