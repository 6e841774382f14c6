"""cachematrix exception types.

Both concrete errors also derive from the builtin they refine, so existing
``except ValueError`` / ``except RuntimeError`` handlers keep working.
"""


class CacheMatrixError(Exception):
    """Base class for all cachematrix errors."""


class ShapeError(CacheMatrixError, ValueError):
    """Input is not a non-empty square 2D matrix."""


class SolveError(CacheMatrixError, RuntimeError):
    """The solve primitive could not invert the matrix (e.g. it is singular)."""
