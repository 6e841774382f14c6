"""Square matrices that remember their inverse."""
from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    __version__ = _dist_version("cachematrix")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "unknown"

from typing import Any, Callable, ContextManager

from ._internal import cache as _cache
from ._internal import config as _config_mod
from ._internal import formatting as _formatting
from ._internal import matrix as _matrix
from ._internal import observability as _observability
from ._internal import ops as _ops
from ._internal.cache import CachedInvertible
from ._internal.errors import CacheMatrixError, ShapeError, SolveError
from ._internal.matrix import Matrix
from ._internal.observability import CACHE_HIT, CACHE_MISS, NO_CACHE
from ._internal.ops import Invertible
from ._internal.solver import available_methods, default_solve
from ._internal.warnings import CacheCapabilityWarning, CacheMatrixWarning


_config = _config_mod.Config(default_solver=default_solve)

_matrix.configure(tolerance_resolver=_config.resolve_tolerance)
_cache.configure(solver_getter=_config.get_solver)
_formatting.configure(edge_items=4)


def matrix(source: Any) -> Matrix:
    """Create an immutable square ``Matrix`` from data.

    Raises:
        ShapeError: If the data is empty, not 2D, or not square.
    """
    return Matrix(source)


def make_cache_matrix(source: Any) -> CachedInvertible:
    """Wrap a square matrix so that its inverse is cached.

    The returned object starts with an empty cache. Passing an existing
    ``CachedInvertible`` wraps its content with a fresh cache.
    """
    return CachedInvertible(source)


def identity(n: int) -> Matrix:
    return Matrix.identity(n)


def cache_solve(
    x: Any,
    *,
    solver: Callable[..., Any] | None = None,
    rtol: float | None = None,
    atol: float | None = None,
    **solve_options: Any,
) -> Matrix:
    """Return the inverse of ``x``, using the cache when ``x`` has one.

    Args:
        x: A ``CachedInvertible`` (cache-aware) or any plain square matrix
            (always recomputed, with a ``CacheCapabilityWarning``).
        solver: Solve primitive for this call instead of the configured one.
        rtol, atol: Cache comparison tolerance for this call.
        **solve_options: Passed unchanged to the solve primitive.

    Returns:
        The inverse as a plain ``Matrix``.

    Raises:
        ShapeError: If a plain ``x`` is not square.
        SolveError: If the matrix cannot be inverted.
    """
    return _ops.cache_solve(x, solver=solver, rtol=rtol, atol=atol, **solve_options)


def solve(
    x: Any,
    *,
    solver: Callable[..., Any] | None = None,
    rtol: float | None = None,
    atol: float | None = None,
    **solve_options: Any,
) -> Any:
    """Invert ``x`` and return a value of the same kind.

    A ``CachedInvertible`` yields a seeded ``CachedInvertible``; plain input
    yields a ``Matrix`` and is always recomputed.
    """
    return _ops.solve(x, solver=solver, rtol=rtol, atol=atol, **solve_options)


def get_tolerance() -> tuple[float, float]:
    """Return the ``(rtol, atol)`` used to compare a matrix with its cached key."""
    return _config.get_tolerance()


def set_tolerance(rtol: float | None = None, atol: float | None = None) -> tuple[float, float]:
    return _config.set_tolerance(rtol=rtol, atol=atol)


def reset_tolerance() -> None:
    _config.reset_tolerance()


def tolerance(rtol: float | None = None, atol: float | None = None) -> ContextManager[tuple[float, float]]:
    """Context manager that temporarily overrides the comparison tolerance."""
    return _config.tolerance(rtol=rtol, atol=atol)


def get_solver() -> Callable[..., Any]:
    return _config.get_solver()


def set_solver(solver: Callable[..., Any] | None) -> Callable[..., Any]:
    """Install the solve primitive used on cache misses (``None`` restores the default)."""
    return _config.set_solver(solver)


def last_cache_trace(event: str | None = None) -> dict[str, Any] | None:
    """Return the most recent cache decision, optionally of one event kind."""
    return _observability.default_instance().last(event)


def clear_cache_traces() -> None:
    _observability.default_instance().clear()


def cache_stats() -> dict[str, int]:
    """Return how many times each of CACHE_HIT / CACHE_MISS / NO_CACHE occurred."""
    return _observability.default_instance().stats()


__all__ = [
    "CACHE_HIT",
    "CACHE_MISS",
    "NO_CACHE",
    "CacheCapabilityWarning",
    "CacheMatrixError",
    "CacheMatrixWarning",
    "CachedInvertible",
    "Invertible",
    "Matrix",
    "ShapeError",
    "SolveError",
    "available_methods",
    "cache_solve",
    "cache_stats",
    "clear_cache_traces",
    "default_solve",
    "get_solver",
    "get_tolerance",
    "identity",
    "last_cache_trace",
    "make_cache_matrix",
    "matrix",
    "reset_tolerance",
    "set_solver",
    "set_tolerance",
    "solve",
    "tolerance",
]
