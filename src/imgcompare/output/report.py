"""
JSON reports for duplicate scans.

A report records which images were grouped as duplicates and which images
could not be read.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from ..dedup.model import DuplicateScan
from ..logging import get_logger

logger = get_logger(__name__)

REPORT_VERSION = "1.0.0"


@dataclass(frozen=True)
class ReportGroup:
    """Single duplicate group in a report."""
    group_id: str                           # Group identifier (dup_001, ...)
    image_ids: List[str]                    # Images sharing one fingerprint
    size: int                               # Number of images in the group

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScanReport:
    """Complete report of a duplicate scan."""
    version: str                            # Report format version
    source: str                             # Folder or description of the input
    scan_timestamp: str                     # When the scan was performed
    images_scanned: int                     # Images fingerprinted successfully
    summary: Dict[str, int]                 # Summary statistics
    groups: List[ReportGroup]               # Duplicate groups
    skipped: List[Dict[str, str]]           # Unreadable images and why

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "source": self.source,
            "scan_timestamp": self.scan_timestamp,
            "images_scanned": self.images_scanned,
            "summary": self.summary,
            "groups": [group.to_dict() for group in self.groups],
            "skipped": self.skipped,
        }


def build_report(scan: DuplicateScan, source: str) -> ScanReport:
    groups = [
        ReportGroup(group_id=group.group_id, image_ids=list(group.image_ids), size=len(group.image_ids))
        for group in scan.groups
    ]
    summary = {
        "duplicate_groups": len(groups),
        "images_in_groups": sum(group.size for group in groups),
        "removable_duplicates": scan.duplicate_count,
        "skipped_images": len(scan.skipped),
    }
    report = ScanReport(
        version=REPORT_VERSION,
        source=source,
        scan_timestamp=datetime.now().isoformat(),
        images_scanned=scan.images_scanned,
        summary=summary,
        groups=groups,
        skipped=[{"image_id": s.image_id, "reason": s.reason} for s in scan.skipped],
    )
    logger.info(f"Built report with {len(groups)} groups")
    return report


def write_json(data: Dict[str, Any], path: Path) -> Path:
    """Write a JSON-serializable dictionary, creating parent folders."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def write_report_json(report: ScanReport, report_path: Path) -> Path:
    """
    Write a report to a JSON file.

    Args:
        report: Report to write
        report_path: Destination file; parent folders are created

    Returns:
        Path to the written report
    """
    try:
        written = write_json(report.to_dict(), report_path)
    except OSError as exc:
        logger.error(f"Failed to write report to {report_path}: {exc}")
        raise

    logger.info(f"Wrote report to {written}")
    return written
