"""RGB histograms over the 16x16 colour downsample."""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from .fingerprint import GRID_SIZE
from ..imaging import ImageSource, open_image, resize

BUCKETS = 256
# Largest possible mean squared bucket difference per channel.
MAX_CHANNEL_VARIANCE = 512.0


@dataclass(frozen=True, eq=False)
class ColorHistogram:
    """Per-channel bucket counts of the 256 sampled cells of an image."""
    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            counts = np.array(getattr(self, name), dtype=np.int64, copy=True)
            if counts.shape != (BUCKETS,):
                raise ValueError(f"{name} histogram must have {BUCKETS} buckets, got {counts.shape}")
            counts.setflags(write=False)
            object.__setattr__(self, name, counts)

    @property
    def channels(self):
        return (self.red, self.green, self.blue)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColorHistogram):
            return NotImplemented
        return all(np.array_equal(mine, theirs) for mine, theirs in zip(self.channels, other.channels))

    def __hash__(self) -> int:
        return hash(tuple(channel.tobytes() for channel in self.channels))

    def variance(self, other: "ColorHistogram") -> float:
        """
        Variance between two histograms as a share of the maximum possible
        variance (a white image against a black one).
        """
        total = 0.0
        for mine, theirs in zip(self.channels, other.channels):
            diff = (mine - theirs).astype(np.float64)
            total += float(np.sum(diff * diff)) / BUCKETS / MAX_CHANNEL_VARIANCE
        return float(np.float32(total / 3))

    def to_text(self) -> str:
        lines = []
        for i in range(BUCKETS):
            lines.append(f"RGB {i:3d} : ({self.red[i]:3d},{self.green[i]:3d},{self.blue[i]:3d})")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_text()


def compute_histogram(image: Image.Image) -> ColorHistogram:
    """Count the RGB values of the 256 cells of the 16x16 downsample."""
    small = resize(image, GRID_SIZE, GRID_SIZE)
    try:
        pixels = np.asarray(small, dtype=np.uint8).reshape(-1, 3)
    finally:
        small.close()
    counts = [np.bincount(pixels[:, channel], minlength=BUCKETS) for channel in range(3)]
    return ColorHistogram(*counts)


def load_histogram(source: ImageSource) -> ColorHistogram:
    with open_image(source) as img:
        return compute_histogram(img)
