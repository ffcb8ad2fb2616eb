"""Presentation helpers for difference grids and histograms."""

from .difference import (
    DifferenceMap,
    build_difference_map,
    get_difference_map,
    render_difference_image,
    format_grid,
)
from .histogram import render_histogram

__all__ = [
    "DifferenceMap",
    "build_difference_map",
    "get_difference_map",
    "render_difference_image",
    "format_grid",
    "render_histogram",
]
