"""cachematrix warning categories.

These exist so users can filter/suppress cachematrix warnings without
catching all UserWarning.

Keep this module lightweight and dependency-free to avoid import cycles.
"""


class CacheMatrixWarning(UserWarning):
    """Base warning category for all cachematrix user-facing warnings."""


class CacheCapabilityWarning(CacheMatrixWarning):
    """An inverse was requested for a value that cannot hold a cache."""
