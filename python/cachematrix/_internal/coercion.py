from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np

from .errors import ShapeError


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def coerce_sequence_rows(candidate: Any) -> list[list[Any]]:
    if not is_sequence_like(candidate):
        raise TypeError(
            "Matrix data must be provided as a square nested sequence or a NumPy array."
        )
    rows = [row for row in candidate]
    if not rows:
        raise ShapeError("Matrix data must not be empty.")
    size = len(rows)
    for row in rows:
        if not is_sequence_like(row):
            raise ShapeError("Each matrix row must be a sequence of entries.")
        if len(row) != size:
            raise ShapeError(
                "Matrix data must describe a square matrix (same number of rows and columns)."
            )
    return [list(row) for row in rows]


def coerce_square_array(candidate: Any) -> np.ndarray:
    """Return a fresh float64 2D square array built from ``candidate``.

    Accepts NumPy arrays, objects exposing ``__array__`` (including
    cachematrix values) and nested Python sequences.
    """

    if isinstance(candidate, np.ndarray) or hasattr(candidate, "__array__"):
        source = candidate
    else:
        source = coerce_sequence_rows(candidate)
    try:
        array = np.array(source, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise TypeError("Matrix entries must be real numbers.") from exc

    if array.ndim != 2:
        raise ShapeError(f"Matrix input must be 2D, got {array.ndim}D.")
    rows_n, cols_n = array.shape
    if rows_n == 0 or cols_n == 0:
        raise ShapeError("Matrix data must not be empty.")
    if rows_n != cols_n:
        raise ShapeError(
            f"Matrix input must be square (rows == columns), got shape {array.shape}."
        )
    return array
