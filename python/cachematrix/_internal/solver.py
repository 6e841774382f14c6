"""Default solve primitive.

The cache layer treats the solver as an opaque collaborator
``solver(matrix, **options) -> array-like``; this module supplies the one
used when the caller does not configure their own.
"""
from __future__ import annotations

from typing import Any, Callable

import numpy as np

from .errors import SolveError
from .matrix import Matrix, as_array


DEFAULT_SVD_RCOND = 1e-10
QR_RTOL = 1e-12


def _check_finite(a: np.ndarray) -> None:
    if not np.all(np.isfinite(a)):
        raise SolveError("matrix contains non-finite entries")


def invert_lu(a: np.ndarray) -> np.ndarray:
    """Invert using LAPACK (LU with partial pivoting)."""
    try:
        return np.linalg.inv(a)
    except np.linalg.LinAlgError as exc:
        raise SolveError(f"matrix is singular: {exc}") from exc


def invert_gauss_jordan(a: np.ndarray) -> np.ndarray:
    """Invert using Gauss-Jordan elimination with partial pivoting."""
    n = a.shape[0]
    aug = np.hstack([np.array(a, dtype=np.float64), np.identity(n)])
    scale = max(float(np.max(np.abs(a))), 1.0)
    eps = np.finfo(np.float64).eps * n * scale

    for i in range(n):
        pivot_row = int(np.argmax(np.abs(aug[i:, i]))) + i
        if abs(aug[pivot_row, i]) <= eps:
            raise SolveError("matrix is singular: zero pivot in Gauss-Jordan elimination")
        if pivot_row != i:
            aug[[i, pivot_row]] = aug[[pivot_row, i]]

        aug[i] /= aug[i, i]
        for j in range(n):
            if j != i:
                aug[j] -= aug[i] * aug[j, i]

    return aug[:, n:]


def invert_qr(a: np.ndarray) -> np.ndarray:
    """Invert via A = QR, so A^-1 = R^-1 Q^T."""
    q, r = np.linalg.qr(a)
    diag = np.abs(np.diag(r))
    if diag.max() == 0.0 or diag.min() <= QR_RTOL * diag.max():
        raise SolveError("matrix is singular: R factor has a vanishing diagonal entry")
    return np.linalg.solve(r, q.T)


def invert_svd(a: np.ndarray, *, rcond: float | None = None) -> np.ndarray:
    """Invert via SVD; raises on singular values below ``rcond * s_max``.

    Unlike a pseudo-inverse this refuses rank-deficient input, so every
    method agrees on what counts as invertible.
    """

    cutoff = DEFAULT_SVD_RCOND if rcond is None else float(rcond)
    u, s, vt = np.linalg.svd(a)
    if s[0] == 0.0 or s[-1] <= cutoff * s[0]:
        raise SolveError("matrix is singular: smallest singular value below cutoff")
    return (vt.T / s) @ u.T


_METHODS: dict[str, Callable[..., np.ndarray]] = {
    "lu": invert_lu,
    "gauss": invert_gauss_jordan,
    "qr": invert_qr,
    "svd": invert_svd,
}


def available_methods() -> list[str]:
    return ["auto", *sorted(_METHODS)]


def default_solve(
    matrix: Any,
    *,
    method: str = "auto",
    rcond: float | None = None,
    **unknown: Any,
) -> Matrix:
    """Invert a square matrix.

    Args:
        matrix: The matrix to invert (``Matrix`` or any square matrix-like).
        method: ``"auto"`` / ``"lu"``, ``"gauss"``, ``"qr"`` or ``"svd"``.
        rcond: Relative singular-value cutoff; only meaningful for ``"svd"``.

    Returns:
        The inverse as a ``Matrix``.

    Raises:
        SolveError: If the matrix is singular, non-finite, or the method is unknown.
    """
    if unknown:
        raise SolveError(f"Unknown solve option(s): {sorted(unknown)}")

    a = as_array(matrix)
    _check_finite(a)

    if method == "auto":
        method = "lu"
    fn = _METHODS.get(method)
    if fn is None:
        raise SolveError(f"Unknown method: {method!r} (expected one of {available_methods()})")

    if method == "svd":
        inv = fn(a, rcond=rcond)
    else:
        if rcond is not None:
            raise SolveError("rcond is only supported by method='svd'")
        inv = fn(a)

    if not np.all(np.isfinite(inv)):
        raise SolveError("matrix is numerically singular: inverse has non-finite entries")
    return Matrix(inv)
