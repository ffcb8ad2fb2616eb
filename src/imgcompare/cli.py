from pathlib import Path
from typing import Optional

import typer

from .config import Settings
from .logging import get_logger
from .imaging import ImageLoadError
from .dedup.batch import BatchCancelledError
from .dedup.histogram import load_histogram
from .dedup.model import find_duplicates_in_folder, get_bhattacharyya_difference, get_percentage_difference
from .output.report import build_report, write_json, write_report_json
from .visualize.difference import get_difference_map, render_difference_image
from .visualize.histogram import render_histogram

app = typer.Typer(help="imgcompare – find duplicate images and show how images differ", no_args_is_help=True)

DEFAULTS = Settings()


def safe_echo(message: str) -> None:
    """Echo message, falling back to ASCII when the console cannot encode it."""
    try:
        typer.echo(message)
    except UnicodeEncodeError:
        typer.echo(message.encode("ascii", errors="replace").decode("ascii"))


def _build_settings(logger, **options) -> Settings:
    """Build Settings from command options; invalid values exit with code 2."""
    try:
        return Settings(**options)
    except ValueError as exc:
        logger.error(f"Invalid option: {exc}")
        raise typer.Exit(code=2) from exc


@app.command()
def duplicates(
    folder: Path = typer.Argument(..., exists=True, file_okay=False, help="Folder to search for duplicate images"),
    recursive: bool = typer.Option(DEFAULTS.recursive, "--recursive/--no-recursive", "-r", help="Also search subfolders"),
    workers: int = typer.Option(DEFAULTS.workers, help="Number of images decoded in parallel"),
    on_error: str = typer.Option(DEFAULTS.on_error, help="Unreadable images: 'skip' or 'abort'"),
    timeout: Optional[float] = typer.Option(None, help="Seconds the scan may take"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON report to this path"),
) -> None:
    """
    Find groups of images with identical fingerprints in a folder.
    """
    logger = get_logger(__name__)

    settings = _build_settings(logger, workers=workers, on_error=on_error, recursive=recursive)

    try:
        logger.info(f"Scanning {folder} for duplicates")
        scan = find_duplicates_in_folder(folder, settings=settings, timeout=timeout)
    except ImageLoadError as exc:
        logger.error(f"Scan aborted: {exc}")
        raise typer.Exit(code=1) from exc
    except BatchCancelledError as exc:
        logger.error(f"Scan stopped: {exc}")
        raise typer.Exit(code=1) from exc

    for group in scan.groups:
        safe_echo(f"{group.group_id} ({len(group.image_ids)} images):")
        for image_id in group.image_ids:
            safe_echo(f"   {image_id}")

    safe_echo(f"\nImages scanned: {scan.images_scanned}")
    safe_echo(f"Duplicate groups: {len(scan.groups)}")
    safe_echo(f"Removable duplicates: {scan.duplicate_count}")
    if scan.skipped:
        safe_echo(f"Skipped unreadable images: {len(scan.skipped)}")

    if report is not None:
        report_path = write_report_json(build_report(scan, str(folder)), report)
        safe_echo(f"Report: {report_path}")


@app.command()
def compare(
    image_a: Path = typer.Argument(..., help="First image"),
    image_b: Path = typer.Argument(..., help="Second image"),
    threshold: int = typer.Option(DEFAULTS.threshold, help="Largest cell difference (out of 255) that is ignored"),
) -> None:
    """
    Print the percentage difference and Bhattacharyya distance of two images.
    """
    logger = get_logger(__name__)
    settings = _build_settings(logger, threshold=threshold)

    try:
        difference = get_percentage_difference(image_a, image_b, settings=settings)
        distance = get_bhattacharyya_difference(image_a, image_b)
    except ImageLoadError as exc:
        logger.error(f"Cannot compare images: {exc}")
        raise typer.Exit(code=1) from exc

    safe_echo(f"Percentage difference: {difference:.4f}")
    safe_echo(f"Bhattacharyya distance: {distance:.8f}")


@app.command("diff-image")
def diff_image(
    image_a: Path = typer.Argument(..., help="First image"),
    image_b: Path = typer.Argument(..., help="Second image"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the rendered difference image here"),
    json_out: Optional[Path] = typer.Option(None, "--json", help="Write the difference map as JSON here"),
    adjust: bool = typer.Option(False, "--adjust/--no-adjust", help="Scale colours to the largest difference found"),
    absolute: bool = typer.Option(False, "--absolute/--percent", help="Label cells with plain values"),
    cell_size: int = typer.Option(DEFAULTS.cell_size, help="Cell size in pixels"),
) -> None:
    """
    Show where two images differ as a 16x16 grid.
    """
    logger = get_logger(__name__)
    settings = _build_settings(logger, cell_size=cell_size)

    if out is None and json_out is None:
        logger.error("Nothing to write: pass --out and/or --json")
        raise typer.Exit(code=2)

    try:
        difference_map = get_difference_map(image_a, image_b, adjust_to_max=adjust,
                                             absolute_text=absolute, settings=settings)
    except ImageLoadError as exc:
        logger.error(f"Cannot compare images: {exc}")
        raise typer.Exit(code=1) from exc

    if json_out is not None:
        write_json(difference_map.to_dict(), json_out)
        safe_echo(f"Difference map: {json_out}")

    if out is not None:
        # Rendering is optional output; a failure here leaves the JSON intact.
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            render_difference_image(difference_map).save(out)
        except (OSError, ValueError) as exc:
            logger.error(f"Failed to render difference image: {exc}")
            raise typer.Exit(code=1) from exc
        safe_echo(f"Difference image: {out}")


@app.command()
def histogram(
    image: Path = typer.Argument(..., help="Image to build the RGB histogram for"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the rendered histogram here"),
    text: bool = typer.Option(False, "--text", help="Print the bucket counts"),
) -> None:
    """
    Build the RGB histogram of an image.
    """
    logger = get_logger(__name__)

    try:
        result = load_histogram(image)
    except ImageLoadError as exc:
        logger.error(f"Cannot read image: {exc}")
        raise typer.Exit(code=1) from exc

    if text or out is None:
        safe_echo(result.to_text())

    if out is not None:
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            render_histogram(result).save(out)
        except (OSError, ValueError) as exc:
            logger.error(f"Failed to render histogram: {exc}")
            raise typer.Exit(code=1) from exc
        safe_echo(f"Histogram image: {out}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
