"""Difference metrics between two image fingerprints."""

import math

import numpy as np

from .compare import check_same_shape
from .fingerprint import CELL_COUNT, as_fingerprint
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 3


class DegenerateInputError(ValueError):
    """Raised when a grid cannot be normalized because it sums to zero."""


def difference_grid(a, b) -> np.ndarray:
    """
    Per-cell absolute difference of two fingerprints.

    Args:
        a: First fingerprint, image, path or bytes
        b: Second fingerprint, image, path or bytes

    Returns:
        16x16 uint8 grid where each cell is |a - b|
    """
    values_a = as_fingerprint(a).values
    values_b = as_fingerprint(b).values
    check_same_shape(values_a, values_b)
    diff = np.abs(values_a.astype(np.int16) - values_b.astype(np.int16))
    return diff.astype(np.uint8)


def percentage_difference(a, b, threshold: int = DEFAULT_THRESHOLD) -> float:
    """
    Fraction of cells whose difference exceeds ``threshold``.

    The result is a fraction in [0, 1] (differing cells / 256), not a
    percentage.

    Args:
        a: First fingerprint, image, path or bytes
        b: Second fingerprint, image, path or bytes
        threshold: Largest difference (out of 255) that is ignored

    Returns:
        Share of differing cells
    """
    if not 0 <= threshold <= 255:
        raise ValueError(f"threshold must be between 0 and 255, got {threshold}")

    differences = difference_grid(a, b)
    differing = int(np.count_nonzero(differences > threshold))
    return differing / float(CELL_COUNT)


def normalize_grid(values: np.ndarray) -> np.ndarray:
    """
    Scale a grid so its cells sum to 1.

    Raises:
        DegenerateInputError: If the grid sums to zero (an all-black image)
    """
    total = float(values.sum(dtype=np.float64))
    if total == 0.0:
        raise DegenerateInputError("Cannot normalize a grid that sums to zero")
    return values.astype(np.float64) / total


def bhattacharyya_distance(a, b) -> float:
    """
    Bhattacharyya distance between the normalized lightness grids.

    This reflects the brightness distribution of the images as a whole rather
    than where they differ. Two all-black images have distance 0.0; an
    all-black image is at distance 1.0 from any other image.

    Args:
        a: First fingerprint, image, path or bytes
        b: Second fingerprint, image, path or bytes

    Returns:
        Distance in [0, 1], rounded to 8 decimals at single precision
    """
    values_a = as_fingerprint(a).values
    values_b = as_fingerprint(b).values
    check_same_shape(values_a, values_b)

    try:
        p = normalize_grid(values_a)
        q = normalize_grid(values_b)
    except DegenerateInputError:
        black_a = not values_a.any()
        black_b = not values_b.any()
        logger.debug(f"Degenerate Bhattacharyya input (black_a={black_a}, black_b={black_b})")
        return 0.0 if black_a and black_b else 1.0

    coefficient = float(np.sqrt(p * q).sum())
    dist = round(1.0 - coefficient, 8)
    # Rounding noise can leave a tiny negative value for identical grids.
    distance = round(math.sqrt(max(0.0, dist)), 8)
    return float(np.float32(distance))
