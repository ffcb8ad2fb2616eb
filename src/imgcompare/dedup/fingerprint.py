"""Lightness fingerprints for image comparison."""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

from ..imaging import ImageSource, open_image, resize, to_grayscale
from ..logging import get_logger

logger = get_logger(__name__)

GRID_SIZE = 16
CELL_COUNT = GRID_SIZE * GRID_SIZE


@dataclass(frozen=True, eq=False)
class Fingerprint:
    """
    A 16x16 grid of grayscale lightness samples.

    ``values`` is indexed ``[y, x]`` and is read-only.
    """
    values: np.ndarray

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.uint8, copy=True)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def shape(self):
        return self.values.shape

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fingerprint):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    def __hash__(self) -> int:
        return hash((self.values.shape, self.values.tobytes()))

    def __repr__(self) -> str:
        return f"Fingerprint(shape={self.values.shape}, mean={self.values.mean():.1f})"


@dataclass(frozen=True)
class ImageFingerprint:
    """An image identifier paired with its fingerprint (``None`` if unreadable)."""
    image_id: str
    fingerprint: Optional[Fingerprint]


def compute_fingerprint(image: Image.Image) -> Fingerprint:
    """
    Reduce a decoded image to its lightness fingerprint.

    The image is resized to 16x16 with bicubic interpolation, converted to
    grayscale and the red channel of every pixel is read as the cell's
    lightness.

    Args:
        image: Decoded Pillow image

    Returns:
        Fingerprint of the image
    """
    small = resize(image, GRID_SIZE, GRID_SIZE)
    try:
        gray = to_grayscale(small)
        try:
            values = np.asarray(gray, dtype=np.uint8)[:, :, 0]
        finally:
            gray.close()
    finally:
        small.close()
    return Fingerprint(values)


def load_fingerprint(source: ImageSource) -> Fingerprint:
    """
    Decode an image and compute its fingerprint.

    Args:
        source: Path, encoded bytes or an already decoded image

    Returns:
        Fingerprint of the image

    Raises:
        ImageNotFoundError: If the path does not exist
        ImageDecodeError: If the image cannot be decoded
    """
    with open_image(source) as img:
        fingerprint = compute_fingerprint(img)
    logger.debug(f"Computed fingerprint for {_describe(source)}: {fingerprint!r}")
    return fingerprint


def as_fingerprint(value) -> Fingerprint:
    """Accept a fingerprint as-is, otherwise load one from an image source."""
    if isinstance(value, Fingerprint):
        return value
    return load_fingerprint(value)


def _describe(source: ImageSource) -> str:
    if isinstance(source, Image.Image):
        return f"<{source.mode} image {source.size[0]}x{source.size[1]}>"
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return str(source)
