"""DataFrame compatibility layer for matrix inputs."""

import warnings
from typing import Any

import narwhals as nw
import numpy as np
import polars as pl

DataFrame = Any  # Any object implementing __arrow_c_stream__


def is_dataframe(obj: Any) -> bool:
    """Return True if ``obj`` can be read by :func:`frame_to_numpy`."""
    return isinstance(obj, pl.DataFrame) or hasattr(obj, "__arrow_c_stream__")


def frame_to_numpy(df: DataFrame) -> np.ndarray:
    """Convert a numeric DataFrame to a row-major float64 array.

    Polars frames are read directly. Anything else is imported through the
    Arrow PyCapsule interface (``__arrow_c_stream__``), which covers pandas
    2.2+, pyarrow tables and record batches, and duckdb results. Column ``j``
    of the frame becomes column ``j`` of the matrix and nulls become NaN.

    Parameters
    ----------
    df : DataFrame
        Arrow-compatible DataFrame with numeric columns only.

    Returns
    -------
    ndarray
        C-contiguous array of shape ``(height, width)``.

    Raises
    ------
    TypeError
        If ``df`` is not a DataFrame or any column is not numeric.
    """
    if isinstance(df, pl.DataFrame):
        frame = df
    elif hasattr(df, "__arrow_c_stream__"):
        frame = nw.from_arrow(df, backend=pl).to_native()
    else:
        raise TypeError(f"Expected a DataFrame implementing '__arrow_c_stream__', got: {type(df).__name__}")

    non_numeric = [name for name, dtype in frame.schema.items() if not dtype.is_numeric()]
    if non_numeric:
        raise TypeError(f"DataFrame columns must be numeric; non-numeric columns: {non_numeric}")

    n_nulls = sum(frame.null_count().row(0)) if frame.width else 0
    if n_nulls:
        warnings.warn(f"{n_nulls} null value(s) in the DataFrame were converted to NaN", UserWarning, stacklevel=2)

    array = frame.select(pl.all().cast(pl.Float64)).to_numpy()
    return np.ascontiguousarray(array, dtype=np.float64).reshape(frame.height, frame.width)
