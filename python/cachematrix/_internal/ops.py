from __future__ import annotations

import warnings
from typing import Any, Callable, Protocol, Union

from . import observability as _obs
from .cache import CachedInvertible, _active_solver, run_solver
from .matrix import Matrix
from .warnings import CacheCapabilityWarning


class Invertible(Protocol):
    """Static type of what :func:`cache_solve` inverts.

    Both ``Matrix`` (plain) and ``CachedInvertible`` satisfy it, so it cannot
    tell the variants apart; dispatch matches on ``CachedInvertible`` itself.
    """

    @property
    def shape(self) -> tuple[int, int]: ...

    def unwrap(self) -> Matrix: ...


def _solve_plain(x: Any, solver: Callable[..., Any] | None, options: dict[str, Any]) -> Matrix:
    m = x if isinstance(x, Matrix) else Matrix(x)
    active = _active_solver(solver)
    _obs.default_instance().record(_obs.NO_CACHE, m, solver=active, options=options)
    return run_solver(active, m, options)


def cache_solve(
    x: Union[Invertible, Any],
    *,
    solver: Callable[..., Any] | None = None,
    rtol: float | None = None,
    atol: float | None = None,
    **solve_options: Any,
) -> Matrix:
    """Return the inverse of ``x`` as a plain ``Matrix``.

    A ``CachedInvertible`` is inverted through its cache. Anything else is a
    plain matrix: a ``CacheCapabilityWarning`` is emitted and the solve
    primitive runs every time (``rtol``/``atol`` have nothing to compare).
    """
    if isinstance(x, CachedInvertible):
        return x.invert(solver=solver, rtol=rtol, atol=atol, **solve_options).unwrap()

    warnings.warn(
        "cache_solve uses a cached inverse for CachedInvertible objects only; "
        "the inverse of a plain matrix is recalculated on every call.",
        CacheCapabilityWarning,
        # ops <- package facade <- caller
        stacklevel=3,
    )
    return _solve_plain(x, solver, solve_options)


def solve(
    x: Union[Invertible, Any],
    *,
    solver: Callable[..., Any] | None = None,
    rtol: float | None = None,
    atol: float | None = None,
    **solve_options: Any,
) -> Any:
    """Invert ``x``, keeping its kind.

    ``CachedInvertible`` in, seeded ``CachedInvertible`` out (cache-aware);
    plain input in, ``Matrix`` out (always recomputed, no warning).
    """
    if isinstance(x, CachedInvertible):
        return x.invert(solver=solver, rtol=rtol, atol=atol, **solve_options)
    return _solve_plain(x, solver, solve_options)
