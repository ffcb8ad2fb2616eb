from dataclasses import dataclass, field
from typing import Tuple

ON_ERROR_POLICIES = ("skip", "abort")

DEFAULT_IMAGE_EXTENSIONS: Tuple[str, ...] = (
    ".bmp", ".gif", ".jpeg", ".jpg", ".png", ".tif", ".tiff", ".webp",
)


@dataclass
class Settings:
    threshold: int = 3
    workers: int = 4
    on_error: str = "skip"
    recursive: bool = False
    image_extensions: Tuple[str, ...] = field(default=DEFAULT_IMAGE_EXTENSIONS)
    cell_size: int = 16

    def __post_init__(self) -> None:
        if not 0 <= self.threshold <= 255:
            raise ValueError(f"threshold must be between 0 and 255, got {self.threshold}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.on_error not in ON_ERROR_POLICIES:
            raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got {self.on_error!r}")
        if self.cell_size < 1:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        self.image_extensions = tuple(ext.lower() for ext in self.image_extensions)

    def accepts(self, suffix: str) -> bool:
        """Whether a file suffix names an image this scan should read."""
        return suffix.lower() in self.image_extensions
