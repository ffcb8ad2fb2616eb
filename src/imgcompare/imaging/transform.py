from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from PIL import Image

# Luminance weights applied identically to the R, G and B outputs.
GRAYSCALE_MATRIX: Tuple[float, ...] = (
    0.3, 0.59, 0.11, 0.0,
    0.3, 0.59, 0.11, 0.0,
    0.3, 0.59, 0.11, 0.0,
)


@contextmanager
def _as_rgb(image: Image.Image) -> Iterator[Image.Image]:
    """Yield an RGB view of ``image``; a converted copy is closed on exit."""
    if image.mode == "RGB":
        yield image
        return

    converted = image.convert("RGB")
    try:
        yield converted
    finally:
        converted.close()


def resize(image: Image.Image, width: int, height: int) -> Image.Image:
    """Resize to exactly width x height using bicubic interpolation."""
    with _as_rgb(image) as rgb:
        return rgb.resize((width, height), Image.Resampling.BICUBIC)


def to_grayscale(image: Image.Image) -> Image.Image:
    """Return an RGB image where R == G == B == weighted luminance."""
    with _as_rgb(image) as rgb:
        return rgb.convert("RGB", GRAYSCALE_MATRIX)


def sample_pixel(image: Image.Image, x: int, y: int) -> Tuple[int, int, int]:
    with _as_rgb(image) as rgb:
        r, g, b = rgb.getpixel((x, y))[:3]
    return r, g, b
