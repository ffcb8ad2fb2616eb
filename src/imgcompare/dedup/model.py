"""Public API for duplicate detection and image comparison."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import Settings
from ..imaging import ImageNotFoundError, ImageSource
from .batch import SkippedImage, extract_fingerprints
from .cluster import DuplicateGroup, find_duplicate_groups
from .distance import bhattacharyya_distance, percentage_difference
from .fingerprint import load_fingerprint
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DuplicateScan:
    """Outcome of a duplicate search over a set of images."""
    groups: List[DuplicateGroup]
    skipped: List[SkippedImage] = field(default_factory=list)
    images_scanned: int = 0

    @property
    def duplicate_count(self) -> int:
        """Images that could be removed while keeping one of each group."""
        return sum(len(group.image_ids) - 1 for group in self.groups)

    def as_path_lists(self) -> List[List[str]]:
        return [list(group.image_ids) for group in self.groups]


def find_duplicate_images(
    paths: Iterable[str | Path],
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
) -> DuplicateScan:
    """
    Find groups of images with identical fingerprints.

    Args:
        paths: Paths of the images to check
        settings: Worker count and failure policy
        cancel_event: Set from another thread to stop fingerprinting
        timeout: Seconds fingerprinting may take

    Returns:
        DuplicateScan with the groups found and any skipped images
    """
    settings = settings or Settings()
    paths = list(paths)
    if not paths:
        return DuplicateScan(groups=[])

    fingerprints, skipped = extract_fingerprints(
        paths,
        workers=settings.workers,
        on_error=settings.on_error,
        cancel_event=cancel_event,
        timeout=timeout,
    )

    if len(fingerprints) < 2:
        logger.info("Less than 2 images with valid fingerprints, no duplicates possible")
        return DuplicateScan(groups=[], skipped=skipped, images_scanned=len(fingerprints))

    groups = find_duplicate_groups(fingerprints)
    scan = DuplicateScan(groups=groups, skipped=skipped, images_scanned=len(fingerprints))
    logger.info(f"Found {len(groups)} duplicate groups covering {scan.duplicate_count + len(groups)} images")
    return scan


def list_image_files(folder: str | Path, recursive: bool = False, settings: Optional[Settings] = None) -> List[Path]:
    """List the image files of a folder, sorted by path."""
    settings = settings or Settings()
    folder = Path(folder)
    if not folder.is_dir():
        raise ImageNotFoundError(f"Folder does not exist: {folder}")

    candidates = folder.rglob("*") if recursive else folder.iterdir()
    files = sorted(p for p in candidates if p.is_file() and settings.accepts(p.suffix))
    logger.debug(f"Found {len(files)} image files in {folder}")
    return files


def find_duplicates_in_folder(
    folder: str | Path,
    recursive: Optional[bool] = None,
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
) -> DuplicateScan:
    """Find duplicate images in a folder, and optionally its subfolders."""
    settings = settings or Settings()
    if recursive is None:
        recursive = settings.recursive
    paths = list_image_files(folder, recursive=recursive, settings=settings)
    return find_duplicate_images(paths, settings=settings, cancel_event=cancel_event, timeout=timeout)


def get_percentage_difference(
    image_a: ImageSource,
    image_b: ImageSource,
    threshold: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> float:
    """
    Share of differing cells between two images given as paths, bytes or images.

    ``threshold`` overrides ``settings.threshold`` when given.
    """
    if threshold is None:
        threshold = (settings or Settings()).threshold
    return percentage_difference(load_fingerprint(image_a), load_fingerprint(image_b), threshold)


def get_bhattacharyya_difference(image_a: ImageSource, image_b: ImageSource) -> float:
    """Bhattacharyya distance between two images given as paths, bytes or images."""
    return bhattacharyya_distance(load_fingerprint(image_a), load_fingerprint(image_b))
