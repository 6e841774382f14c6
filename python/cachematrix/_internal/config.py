from __future__ import annotations

import math
import os
from contextlib import contextmanager
from typing import Any, Callable, Iterator


DEFAULT_RTOL = 1e-05
DEFAULT_ATOL = 1e-08


def _read_env_tolerance(env_var: str, default: float) -> float:
    raw = os.environ.get(env_var)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be a float, got {raw!r}") from exc
    return _validate_tolerance(env_var, value)


def _validate_tolerance(name: str, value: Any) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0.0:
        raise ValueError(f"{name} must be a finite non-negative float, got {value!r}")
    return value


class Config:
    """Process-wide knobs: comparison tolerance and the active solve primitive."""

    def __init__(
        self,
        *,
        default_solver: Callable[..., Any],
        rtol_env_var: str = "CACHEMATRIX_RTOL",
        atol_env_var: str = "CACHEMATRIX_ATOL",
    ) -> None:
        self._default_solver = default_solver
        self._solver: Callable[..., Any] = default_solver
        self._rtol_env_var = rtol_env_var
        self._atol_env_var = atol_env_var
        self._tolerance_cache: tuple[float, float] | None = None

    def get_tolerance(self) -> tuple[float, float]:
        if self._tolerance_cache is not None:
            return self._tolerance_cache

        rtol = _read_env_tolerance(self._rtol_env_var, DEFAULT_RTOL)
        atol = _read_env_tolerance(self._atol_env_var, DEFAULT_ATOL)
        self._tolerance_cache = (rtol, atol)
        return self._tolerance_cache

    def set_tolerance(self, rtol: float | None = None, atol: float | None = None) -> tuple[float, float]:
        self._tolerance_cache = self.resolve_tolerance(rtol, atol)
        return self._tolerance_cache

    def reset_tolerance(self) -> None:
        """Forget overrides; the next lookup re-reads the environment."""
        self._tolerance_cache = None

    def resolve_tolerance(self, rtol: float | None, atol: float | None) -> tuple[float, float]:
        """Configured tolerance with validated per-call overrides applied."""
        cur_rtol, cur_atol = self.get_tolerance()
        if rtol is not None:
            cur_rtol = _validate_tolerance("rtol", rtol)
        if atol is not None:
            cur_atol = _validate_tolerance("atol", atol)
        return cur_rtol, cur_atol

    def get_solver(self) -> Callable[..., Any]:
        return self._solver

    def set_solver(self, solver: Callable[..., Any] | None) -> Callable[..., Any]:
        if solver is None:
            solver = self._default_solver
        if not callable(solver):
            raise TypeError("solver must be callable as solver(matrix, **options)")
        self._solver = solver
        return self._solver

    @contextmanager
    def tolerance(self, rtol: float | None = None, atol: float | None = None) -> Iterator[tuple[float, float]]:
        """Temporarily override the comparison tolerance.

        The previous values are restored on exit even if the body raises.
        Process-global; not intended to provide thread isolation.
        """

        prev = self.get_tolerance()
        try:
            yield self.set_tolerance(rtol=rtol, atol=atol)
        finally:
            self._tolerance_cache = prev
