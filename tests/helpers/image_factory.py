"""Helper functions for creating synthetic test images."""

from pathlib import Path
from typing import Iterable, List, Tuple

import numpy as np
from PIL import Image

from imgcompare.dedup.fingerprint import Fingerprint


def solid_image(gray: int, size: Tuple[int, int] = (32, 32)) -> Image.Image:
    """Create a solid gray RGB image."""
    return Image.new('RGB', size, (gray, gray, gray))


def gray_with_cell(cell_value: int, background: int = 128, position: Tuple[int, int] = (5, 5)) -> Image.Image:
    """
    Create a 16x16 gray image with a single pixel set to ``cell_value``.

    At 16x16 the resize is an identity, so the pixel maps to one fingerprint cell.
    """
    img = Image.new('RGB', (16, 16), (background, background, background))
    img.putpixel(position, (cell_value, cell_value, cell_value))
    return img


def save_solid_images(directory: Path, grays: Iterable[int], prefix: str = "img",
                      size: Tuple[int, int] = (32, 32)) -> List[Path]:
    """Save one solid image per gray value and return their paths."""
    paths = []
    for i, gray in enumerate(grays):
        path = directory / f"{prefix}_{i:02d}.png"
        solid_image(gray, size).save(path)
        paths.append(path)
    return paths


def uniform_fingerprint(value: int) -> Fingerprint:
    return Fingerprint(np.full((16, 16), value, dtype=np.uint8))


def fingerprint_from_list(values: List[int]) -> Fingerprint:
    return Fingerprint(np.array(values, dtype=np.uint8).reshape(16, 16))
