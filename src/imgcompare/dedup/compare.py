"""Lexicographic ordering of fingerprint grids."""

from functools import cmp_to_key
from typing import Optional

import numpy as np

from .fingerprint import Fingerprint, ImageFingerprint

# A missing grid on either side contributes nothing to the ordering, so it
# compares equal to anything. Unreadable images then never break a sort.
MISSING_COMPARES_EQUAL = 0


class ShapeMismatchError(ValueError):
    """Raised when two grids of different dimensions are compared."""


def _grid(value) -> Optional[np.ndarray]:
    if value is None:
        return None
    if isinstance(value, Fingerprint):
        return value.values
    return np.asarray(value)


def check_same_shape(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise ShapeMismatchError(f"Cannot compare grids of shape {a.shape} and {b.shape}")


def compare_grids(a, b) -> int:
    """
    Compare two grids cell by cell in row-major order.

    Args:
        a: First grid (fingerprint, array-like or None)
        b: Second grid (fingerprint, array-like or None)

    Returns:
        Signed difference of the first unequal cell pair, 0 if every cell
        matches or if either grid is missing

    Raises:
        ShapeMismatchError: If both grids are present with different shapes
    """
    grid_a, grid_b = _grid(a), _grid(b)
    if grid_a is None or grid_b is None:
        return MISSING_COMPARES_EQUAL

    check_same_shape(grid_a, grid_b)

    diff = grid_a.astype(np.int64).ravel() - grid_b.astype(np.int64).ravel()
    unequal = np.flatnonzero(diff)
    if unequal.size == 0:
        return 0
    return int(diff[unequal[0]])


def compare_fingerprints(a: ImageFingerprint, b: ImageFingerprint) -> int:
    """Order two identifier/fingerprint pairs by their fingerprints only."""
    return compare_grids(
        a.fingerprint if a is not None else None,
        b.fingerprint if b is not None else None,
    )


fingerprint_sort_key = cmp_to_key(compare_fingerprints)
