from __future__ import annotations

import io
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from PIL import Image, UnidentifiedImageError

ImageSource = Union[str, Path, bytes, Image.Image]


class ImageLoadError(Exception):
    """Raised when an image cannot be loaded."""


class ImageNotFoundError(ImageLoadError):
    """Raised when an image path does not exist."""


class ImageDecodeError(ImageLoadError):
    """Raised when an image file is unreadable or corrupt."""


def decode_image(source: str | Path | bytes) -> Image.Image:
    """
    Decode an image from a path or raw bytes.

    The pixel data is loaded eagerly so the underlying file handle is
    released before this function returns.

    Args:
        source: Path to an image file, or the encoded image bytes

    Returns:
        Decoded Pillow image

    Raises:
        ImageNotFoundError: If a path is given and does not exist
        ImageDecodeError: If the data cannot be decoded
    """
    if isinstance(source, (bytes, bytearray)):
        label = f"<{len(source)} bytes>"
        stream = io.BytesIO(source)
    else:
        path = Path(source)
        if not path.is_file():
            raise ImageNotFoundError(f"Image file does not exist: {path}")
        label = str(path)
        stream = path

    try:
        with Image.open(stream) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Failed to decode image: {label}") from exc


@contextmanager
def open_image(source: ImageSource) -> Iterator[Image.Image]:
    """
    Yield a decoded image for the duration of a block.

    Images decoded here are closed on exit; an already decoded image passed
    in by the caller stays open and remains owned by the caller.
    """
    if isinstance(source, Image.Image):
        yield source
        return

    img = decode_image(source)
    try:
        yield img
    finally:
        img.close()
