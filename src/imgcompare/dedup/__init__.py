"""Fingerprint-based duplicate detection and image difference metrics."""

from .fingerprint import Fingerprint, ImageFingerprint, compute_fingerprint, load_fingerprint
from .compare import MISSING_COMPARES_EQUAL, ShapeMismatchError, compare_grids
from .distance import (
    DegenerateInputError,
    difference_grid,
    percentage_difference,
    bhattacharyya_distance,
)
from .histogram import ColorHistogram, compute_histogram, load_histogram
from .cluster import DuplicateGroup, find_duplicate_groups
from .batch import BatchCancelledError, SkippedImage, extract_fingerprints
from .model import (
    DuplicateScan,
    find_duplicate_images,
    find_duplicates_in_folder,
    get_percentage_difference,
    get_bhattacharyya_difference,
)

__all__ = [
    "Fingerprint",
    "ImageFingerprint",
    "compute_fingerprint",
    "load_fingerprint",
    "MISSING_COMPARES_EQUAL",
    "ShapeMismatchError",
    "compare_grids",
    "DegenerateInputError",
    "difference_grid",
    "percentage_difference",
    "bhattacharyya_distance",
    "ColorHistogram",
    "compute_histogram",
    "load_histogram",
    "DuplicateGroup",
    "find_duplicate_groups",
    "BatchCancelledError",
    "SkippedImage",
    "extract_fingerprints",
    "DuplicateScan",
    "find_duplicate_images",
    "find_duplicates_in_folder",
    "get_percentage_difference",
    "get_bhattacharyya_difference",
]
