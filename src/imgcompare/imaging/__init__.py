"""Thin Pillow wrappers used by the fingerprinting core."""

from .loader import (
    ImageLoadError,
    ImageNotFoundError,
    ImageDecodeError,
    ImageSource,
    decode_image,
    open_image,
)
from .transform import GRAYSCALE_MATRIX, resize, to_grayscale, sample_pixel

__all__ = [
    "ImageLoadError",
    "ImageNotFoundError",
    "ImageDecodeError",
    "ImageSource",
    "decode_image",
    "open_image",
    "GRAYSCALE_MATRIX",
    "resize",
    "to_grayscale",
    "sample_pixel",
]
