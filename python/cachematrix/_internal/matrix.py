from __future__ import annotations

from typing import Any, Callable

import numpy as np

from . import formatting as _formatting
from .coercion import coerce_square_array
from .errors import ShapeError


_tolerance_resolver: Callable[[float | None, float | None], tuple[float, float]] | None = None


def configure(*, tolerance_resolver: Callable[[float | None, float | None], tuple[float, float]]) -> None:
    global _tolerance_resolver
    _tolerance_resolver = tolerance_resolver


def resolve_tolerance(rtol: float | None, atol: float | None) -> tuple[float, float]:
    if _tolerance_resolver is None:
        raise RuntimeError("cachematrix Matrix API not configured")
    return _tolerance_resolver(rtol, atol)


def as_array(value: Any) -> np.ndarray:
    """Read-only view of the payload of a cachematrix value, or a coerced copy."""
    unwrap = getattr(value, "unwrap", None)
    if callable(unwrap):
        value = unwrap()
    if isinstance(value, Matrix):
        return value._data
    return coerce_square_array(value)


def allclose(a: Any, b: Any, *, rtol: float | None = None, atol: float | None = None) -> bool:
    """Tolerance-based matrix equality (``numpy.allclose`` semantics).

    Matrices of different shapes are never equal. NaN entries never compare
    equal, so a matrix containing NaN never matches a cached key.
    Explicit ``rtol``/``atol`` fill in over the configured tolerance and are
    validated the same way (``ValueError`` if negative or non-finite).
    """

    rtol, atol = resolve_tolerance(rtol, atol)
    left = as_array(a)
    right = as_array(b)
    if left.shape != right.shape:
        return False
    return bool(np.allclose(left, right, rtol=rtol, atol=atol, equal_nan=False))


class Matrix(_formatting.MatrixMixin):
    """Immutable square float64 matrix.

    Equality is approximate (see :func:`allclose`), so instances are not
    hashable.
    """

    __hash__ = None  # type: ignore[assignment]
    # Let Python dispatch ndarray @ Matrix to __rmatmul__.
    __array_ufunc__ = None

    def __init__(self, source: Any) -> None:
        if isinstance(source, Matrix):
            data = source._data
        else:
            data = coerce_square_array(source)
            data.setflags(write=False)
        self._data = data

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        n = int(n)
        if n <= 0:
            raise ShapeError("identity size must be positive")
        return cls(np.eye(n, dtype=np.float64))

    def rows(self) -> int:
        return int(self._data.shape[0])

    def cols(self) -> int:
        return int(self._data.shape[1])

    def size(self) -> int:
        return self.rows()

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows(), self.cols())

    def get(self, i: int, j: int) -> float:
        return float(self._data[i, j])

    def __getitem__(self, key: Any) -> Any:
        i, j = key
        return self.get(int(i), int(j))

    def __len__(self) -> int:
        return self.rows()

    def unwrap(self) -> "Matrix":
        return self

    def with_entry(self, i: int, j: int, value: float) -> "Matrix":
        """Return a copy of this matrix with entry ``(i, j)`` replaced."""
        data = self._data.copy()
        data[int(i), int(j)] = float(value)
        return Matrix(data)

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def tolist(self) -> list[list[float]]:
        return self._data.tolist()

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        if dtype is None:
            return self._data.copy()
        return self._data.astype(dtype)

    def approx_equal(self, other: Any, *, rtol: float | None = None, atol: float | None = None) -> bool:
        return allclose(self, other, rtol=rtol, atol=atol)

    def __eq__(self, other: Any) -> Any:
        try:
            return allclose(self, other)
        except (TypeError, ShapeError):
            return NotImplemented

    def __ne__(self, other: Any) -> Any:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __matmul__(self, other: Any) -> "Matrix":
        right = as_array(other)
        if right.shape[0] != self.cols():
            raise ShapeError("matmul dimension mismatch")
        return Matrix(self._data @ right)

    def __rmatmul__(self, other: Any) -> "Matrix":
        left = as_array(other)
        if left.shape[1] != self.rows():
            raise ShapeError("matmul dimension mismatch")
        return Matrix(left @ self._data)
