"""Clustering logic for grouping duplicate images."""

from dataclasses import dataclass
from typing import Iterable, List

from .compare import compare_fingerprints, fingerprint_sort_key
from .fingerprint import ImageFingerprint
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DuplicateGroup:
    """A group of images sharing an identical fingerprint."""
    group_id: str
    image_ids: List[str]

    def __len__(self) -> int:
        return len(self.image_ids)


def find_duplicate_groups(items: Iterable[ImageFingerprint]) -> List[DuplicateGroup]:
    """
    Group images with equal fingerprints using a sort-then-scan pass.

    Items are sorted by fingerprint so equal fingerprints sit next to each
    other, then scanned once. Each item is compared only with the first item
    of the current run; a run is reported when it holds at least two images.

    Args:
        items: Identifier/fingerprint pairs

    Returns:
        Duplicate groups in fingerprint sort order
    """
    present = []
    for item in items:
        if item.fingerprint is None:
            # A missing fingerprint compares equal to everything and would
            # join whatever run it happened to land next to.
            logger.warning(f"No fingerprint for {item.image_id}, excluding it from clustering")
            continue
        present.append(item)

    if len(present) < 2:
        return []

    ordered = sorted(present, key=fingerprint_sort_key)

    runs: List[List[ImageFingerprint]] = []
    current: List[ImageFingerprint] = []
    for item in ordered:
        if current and compare_fingerprints(current[0], item) != 0:
            if len(current) > 1:
                runs.append(current)
            current = []
        current.append(item)

    if len(current) > 1:
        runs.append(current)

    groups = []
    for counter, run in enumerate(runs, start=1):
        group = DuplicateGroup(
            group_id=f"dup_{counter:03d}",
            image_ids=[item.image_id for item in run],
        )
        groups.append(group)
        logger.info(f"Created duplicate group {group.group_id} with {len(group)} images")

    return groups
