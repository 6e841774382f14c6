from __future__ import annotations

from typing import Any, Callable

import numpy as np

from . import formatting as _formatting
from . import observability as _obs
from .errors import ShapeError, SolveError
from .matrix import Matrix, allclose, resolve_tolerance


_solver_getter: Callable[[], Callable[..., Any]] | None = None


def configure(*, solver_getter: Callable[[], Callable[..., Any]]) -> None:
    global _solver_getter
    _solver_getter = solver_getter


def _active_solver(override: Callable[..., Any] | None) -> Callable[..., Any]:
    if override is not None:
        return override
    if _solver_getter is None:
        raise RuntimeError("cachematrix cache API not configured")
    return _solver_getter()


def run_solver(solver: Callable[..., Any], m: Matrix, options: dict[str, Any]) -> Matrix:
    """Call the solve primitive and validate its result.

    Anything a custom solver raises other than ``SolveError`` is re-raised
    as ``SolveError`` with the original chained.
    """
    try:
        result = solver(m, **options)
    except SolveError:
        raise
    except Exception as exc:
        raise SolveError(f"solver failed: {exc}") from exc

    try:
        inv = Matrix(result)
    except (TypeError, ShapeError) as exc:
        raise SolveError(f"solver returned an invalid inverse: {exc}") from exc
    if inv.shape != m.shape:
        raise SolveError(f"solver returned shape {inv.shape}, expected {m.shape}")
    return inv


class CachedInvertible(_formatting.MatrixMixin):
    """A square matrix that remembers its last computed inverse.

    ``invert`` only calls the solve primitive when the content no longer
    matches the cached key (within tolerance). The returned object is itself
    pre-seeded: the inverse of the inverse is the original, so inverting the
    result again is free.
    """

    def __init__(self, source: Any) -> None:
        if isinstance(source, CachedInvertible):
            source = source.unwrap()
        self._content = source if isinstance(source, Matrix) else Matrix(source)
        self._cached_input: Matrix | None = None
        self._cached_output: Matrix | None = None

    @classmethod
    def _seeded(cls, content: Matrix, inverse: Matrix) -> "CachedInvertible":
        result = cls(content)
        result._store(content, inverse)
        return result

    def _store(self, key: Matrix, value: Matrix) -> None:
        # Key and value always move together.
        self._cached_input = key
        self._cached_output = value

    @property
    def content(self) -> Matrix:
        return self._content

    def unwrap(self) -> Matrix:
        """Return the raw wrapped matrix, bypassing the cache."""
        return self._content

    @property
    def cached_input(self) -> Matrix | None:
        return self._cached_input

    @property
    def cached_output(self) -> Matrix | None:
        return self._cached_output

    @property
    def is_cached(self) -> bool:
        return self._cached_input is not None

    def clear_cache(self) -> None:
        self._cached_input = None
        self._cached_output = None

    def cache_matches(self, *, rtol: float | None = None, atol: float | None = None) -> bool:
        rtol, atol = resolve_tolerance(rtol, atol)
        if self._cached_input is None:
            return False
        return allclose(self._content, self._cached_input, rtol=rtol, atol=atol)

    def invert(
        self,
        *,
        solver: Callable[..., Any] | None = None,
        rtol: float | None = None,
        atol: float | None = None,
        **solve_options: Any,
    ) -> "CachedInvertible":
        """Return the inverse, seeded with this matrix as *its* inverse.

        Args:
            solver: Overrides the configured solve primitive for this call.
            rtol, atol: Override the cache comparison tolerance for this call.
            **solve_options: Forwarded unchanged to the solve primitive on a miss.

        Raises:
            SolveError: The primitive failed; the cache is left as it was.
        """
        m = self.unwrap()
        active = _active_solver(solver)
        observability = _obs.default_instance()

        if self.cache_matches(rtol=rtol, atol=atol):
            assert self._cached_output is not None
            inv = self._cached_output
            observability.record(_obs.CACHE_HIT, m, solver=active, options=solve_options)
        else:
            observability.record(_obs.CACHE_MISS, m, solver=active, options=solve_options)
            inv = run_solver(active, m, solve_options)

        self._store(m, inv)
        return CachedInvertible._seeded(inv, m)

    def with_entry(self, i: int, j: int, value: float) -> "CachedInvertible":
        """Return a new wrapper around the edited matrix; its cache starts empty."""
        return CachedInvertible(self._content.with_entry(i, j, value))

    # Matrix-like surface so a CachedInvertible can stand in for a plain matrix.

    def rows(self) -> int:
        return self._content.rows()

    def cols(self) -> int:
        return self._content.cols()

    def size(self) -> int:
        return self._content.size()

    @property
    def shape(self) -> tuple[int, int]:
        return self._content.shape

    def get(self, i: int, j: int) -> float:
        return self._content.get(i, j)

    def __getitem__(self, key: Any) -> Any:
        return self._content[key]

    def __len__(self) -> int:
        return len(self._content)

    def to_numpy(self) -> np.ndarray:
        return self._content.to_numpy()

    def tolist(self) -> list[list[float]]:
        return self._content.tolist()

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        return self._content.__array__(dtype)

    def __eq__(self, other: Any) -> Any:
        return self._content.__eq__(other)

    def __ne__(self, other: Any) -> Any:
        return self._content.__ne__(other)

    __hash__ = None  # type: ignore[assignment]
    # Let Python dispatch ndarray @ CachedInvertible to __rmatmul__.
    __array_ufunc__ = None

    def __matmul__(self, other: Any) -> Matrix:
        return self._content.__matmul__(other)

    def __rmatmul__(self, other: Any) -> Matrix:
        return self._content.__rmatmul__(other)

    def _format_info(self) -> list[str]:
        return [f"cached={self.is_cached}"]
