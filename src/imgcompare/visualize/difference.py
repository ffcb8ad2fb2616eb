"""
Difference maps between two images.

A DifferenceMap carries everything a presentation layer needs to draw the
16x16 difference grid (values, colour scaling, colours and labels).
``render_difference_image`` draws it with Pillow.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ..config import Settings
from ..dedup.distance import difference_grid
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_CELL_SIZE = 16
MAX_DIFFERENCE = 255

# Colour ramp from black (no difference) to bright pink (maximum difference).
DIFFERENCE_COLORS: Tuple[Tuple[int, int, int], ...] = tuple(
    (i, i // 3, i // 2) for i in range(256)
)
BORDER_COLOR = (0, 0, 255)
BACKGROUND_COLOR = (0, 0, 0)


@dataclass(frozen=True)
class DifferenceMap:
    """Renderable description of a difference grid."""
    values: List[List[int]]                 # Differences, indexed [y][x]
    max_difference: int                     # Difference drawn at full intensity
    color_indices: List[List[int]]          # Index into DIFFERENCE_COLORS per cell
    labels: List[List[str]]                 # Text drawn in each cell
    cell_size: int = DEFAULT_CELL_SIZE      # Suggested cell size in pixels

    @property
    def grid_size(self) -> Tuple[int, int]:
        return len(self.values[0]) if self.values else 0, len(self.values)

    def colors(self) -> List[List[Tuple[int, int, int]]]:
        return [[DIFFERENCE_COLORS[i] for i in row] for row in self.color_indices]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "values": self.values,
            "max_difference": self.max_difference,
            "color_indices": self.color_indices,
            "colors": [[list(color) for color in row] for row in self.colors()],
            "labels": self.labels,
            "cell_size": self.cell_size,
        }


def build_difference_map(
    differences: np.ndarray,
    adjust_to_max: bool = False,
    absolute_text: bool = False,
    cell_size: int = DEFAULT_CELL_SIZE,
) -> DifferenceMap:
    """
    Describe a difference grid for display.

    Args:
        differences: Grid of absolute differences
        adjust_to_max: Scale colours so the largest difference found is drawn
            at full intensity, instead of 255
        absolute_text: Label cells with the plain value instead of "<value>%"
        cell_size: Suggested cell size in pixels

    Returns:
        DifferenceMap for the grid
    """
    grid = np.asarray(differences, dtype=np.uint8)
    max_difference = MAX_DIFFERENCE
    if adjust_to_max:
        max_difference = max(int(grid.max(initial=0)), 1)

    indices = (255 * (grid.astype(np.float64) / max_difference)).astype(np.int64)
    if absolute_text:
        labels = [[str(int(v)) for v in row] for row in grid]
    else:
        labels = [[f"{int(v)}%" for v in row] for row in grid]

    return DifferenceMap(
        values=grid.astype(int).tolist(),
        max_difference=max_difference,
        color_indices=indices.tolist(),
        labels=labels,
        cell_size=cell_size,
    )


def get_difference_map(a, b, adjust_to_max: bool = False, absolute_text: bool = False,
                       cell_size: Optional[int] = None,
                       settings: Optional[Settings] = None) -> DifferenceMap:
    """
    Difference map of two fingerprints, images, paths or encoded images.

    ``cell_size`` overrides ``settings.cell_size`` when given.
    """
    if cell_size is None:
        cell_size = (settings or Settings()).cell_size
    return build_difference_map(difference_grid(a, b), adjust_to_max, absolute_text, cell_size)


def render_difference_image(difference_map: DifferenceMap) -> Image.Image:
    """Draw a difference map as a grid of coloured, labelled cells."""
    cell = difference_map.cell_size
    columns, rows = difference_map.grid_size
    # One extra pixel for the closing border at right/bottom.
    image = Image.new("RGB", (columns * cell + 1, rows * cell + 1), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    colors = difference_map.colors()

    for y in range(rows):
        for x in range(columns):
            left, top = x * cell, y * cell
            draw.rectangle([left, top, left + cell, top + cell], fill=colors[y][x], outline=BORDER_COLOR)

            text = difference_map.labels[y][x]
            x0, y0, x1, y1 = draw.textbbox((0, 0), text, font=font)
            text_x = left + cell / 2 - (x1 - x0) / 2
            text_y = top + cell / 2 - (y1 - y0) / 2
            draw.text((text_x + 1, text_y + 1), text, fill=(0, 0, 0), font=font)
            draw.text((text_x, text_y), text, fill=(255, 255, 255), font=font)

    logger.debug(f"Rendered difference image {image.size}")
    return image


def format_grid(grid) -> str:
    """Text dump of a grid, one bracketed row per line."""
    rows = np.asarray(grid)
    lines = []
    for row in rows:
        lines.append("[" + "".join(f"{int(v):3d}," for v in row) + "]")
    return "\n".join(lines)
