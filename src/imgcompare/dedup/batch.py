"""Parallel fingerprint extraction for many images."""

from __future__ import annotations

import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from time import monotonic
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import ON_ERROR_POLICIES
from ..imaging import ImageLoadError
from .fingerprint import ImageFingerprint, load_fingerprint
from ..logging import get_logger

logger = get_logger(__name__)


class BatchCancelledError(Exception):
    """Raised when a batch extraction is cancelled or times out."""


@dataclass(frozen=True)
class SkippedImage:
    """An image left out of a batch because it could not be loaded."""
    image_id: str
    reason: str


def extract_fingerprints(
    paths: Sequence[str | Path],
    workers: int = 4,
    on_error: str = "skip",
    cancel_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
) -> Tuple[List[ImageFingerprint], List[SkippedImage]]:
    """
    Compute fingerprints for many images on a bounded thread pool.

    Args:
        paths: Image paths; each path string is used as the identifier
        workers: Maximum number of images decoded at once
        on_error: "skip" to record unreadable images and continue,
            "abort" to re-raise the first load error
        cancel_event: Set from another thread to stop the batch
        timeout: Seconds the whole batch may take

    Returns:
        Fingerprints in input order, and the images that were skipped

    Raises:
        ImageLoadError: On the first unreadable image when on_error="abort"
        BatchCancelledError: If cancel_event is set or the timeout expires

    On cancellation or abort the call returns without waiting for decodes
    that are already running.
    """
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    image_ids = [str(path) for path in paths]
    if not image_ids:
        return [], []

    deadline = monotonic() + timeout if timeout is not None else None
    results: Dict[int, ImageFingerprint] = {}
    skipped: Dict[int, SkippedImage] = {}

    logger.info(f"Fingerprinting {len(image_ids)} images with {workers} workers")

    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        pending: Dict[Future, int] = {}
        next_index = 0

        while next_index < len(image_ids) or pending:
            _check_cancelled(cancel_event, deadline)

            # Keep at most two tasks per worker queued.
            while next_index < len(image_ids) and len(pending) < workers * 2:
                future = executor.submit(load_fingerprint, image_ids[next_index])
                pending[future] = next_index
                next_index += 1

            done, _ = wait(pending, timeout=_poll_interval(deadline), return_when=FIRST_COMPLETED)
            for future in done:
                index = pending.pop(future)
                image_id = image_ids[index]
                try:
                    results[index] = ImageFingerprint(image_id, future.result())
                except ImageLoadError as exc:
                    if on_error == "abort":
                        logger.error(f"Aborting batch: {exc}")
                        raise
                    logger.warning(f"Skipping {image_id}: {exc}")
                    skipped[index] = SkippedImage(image_id=image_id, reason=str(exc))
    except BaseException:
        # Queued tasks are dropped; decodes already running finish in the
        # background and their results are discarded.
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    executor.shutdown(wait=True)

    fingerprints = [results[i] for i in sorted(results)]
    skipped_images = [skipped[i] for i in sorted(skipped)]
    logger.info(f"Fingerprinted {len(fingerprints)} images, skipped {len(skipped_images)}")
    return fingerprints, skipped_images


def _poll_interval(deadline: Optional[float]) -> float:
    if deadline is None:
        return 0.1
    return max(0.0, min(0.1, deadline - monotonic()))


def _check_cancelled(cancel_event: Optional[threading.Event], deadline: Optional[float]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise BatchCancelledError("Fingerprint extraction was cancelled")
    if deadline is not None and monotonic() >= deadline:
        raise BatchCancelledError("Fingerprint extraction timed out")
