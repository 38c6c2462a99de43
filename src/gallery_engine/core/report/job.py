"""Report job: validate the selection, preload images, compose the PDF."""

import asyncio
import time
from collections.abc import Iterable, Mapping, Sequence

from loguru import logger
from PIL import Image

from gallery_engine.config import DEFAULT_ITEM_LIMIT, ITEM_LIMIT_KEY, PRELOAD_CONCURRENCY
from gallery_engine.core.report.compositor import compose
from gallery_engine.core.report.preloader import preload
from gallery_engine.core.report.progress import LAYOUT_END, ProgressTracker
from gallery_engine.errors import (
    JobFailureError,
    LimitExceededError,
    SelectionEmptyError,
)
from gallery_engine.models.catalog import Alert, ReportJob, ReportOutput, Severity, Tag
from gallery_engine.protocols import (
    CatalogProtocol,
    ImageLoaderProtocol,
    ProgressCallback,
    ReporterProtocol,
)


def resolve_item_limit(catalog: CatalogProtocol) -> int:
    """Read the export ceiling from system configuration.

    Falls back to DEFAULT_ITEM_LIMIT when the setting is missing, not a
    number, or the store cannot be reached.
    """
    try:
        raw = catalog.get_system_config(ITEM_LIMIT_KEY)
    except (RuntimeError, OSError):
        logger.warning("Cannot read {!r} from the store, using default", ITEM_LIMIT_KEY, exc_info=True)
        return DEFAULT_ITEM_LIMIT

    if raw is None:
        return DEFAULT_ITEM_LIMIT
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric {!r} setting: {!r}", ITEM_LIMIT_KEY, raw)
        return DEFAULT_ITEM_LIMIT


def build_report_job(
    filtered_ids: Sequence[str], selected_ids: Iterable[str], item_limit: int
) -> ReportJob:
    """Intersect the selection with the filtered result, in filter order.

    Raises:
        SelectionEmptyError: If no selected item is currently visible.
        LimitExceededError: If more than ``item_limit`` items remain.
    """
    selected = set(selected_ids)
    ids = tuple(item_id for item_id in filtered_ids if item_id in selected)

    if not ids:
        msg = "No items are both selected and visible"
        raise SelectionEmptyError(msg)
    if len(ids) > item_limit:
        raise LimitExceededError(item_limit, len(ids))

    return ReportJob(item_ids=ids, item_limit=item_limit)


def report_filename(now: float | None = None) -> str:
    """Timestamped filename for a generated report."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"gallery_{millis}.pdf"


async def _load_mask(loader: ImageLoaderProtocol, source: str | None) -> Image.Image | None:
    if not source:
        return None
    try:
        return await asyncio.to_thread(loader.load, source)
    except Exception:
        logger.opt(exception=True).warning(
            "Mask {!r} unavailable, pages will have no band there", source
        )
        return None


async def generate_report(
    job: ReportJob,
    *,
    catalog: CatalogProtocol,
    image_loader: ImageLoaderProtocol,
    tags_by_id: Mapping[str, Tag],
    header_mask: str | None = None,
    footer_mask: str | None = None,
    concurrency: int = PRELOAD_CONCURRENCY,
    on_progress: ProgressCallback | None = None,
) -> ReportOutput:
    """Preload the job's images and compose them into a PDF.

    Masks and item images load concurrently. Unreadable images degrade to
    placeholders or missing mask bands.

    Raises:
        JobFailureError: If anything else goes wrong; no document is returned.
    """
    if len(job.item_ids) > job.item_limit:
        raise LimitExceededError(job.item_limit, len(job.item_ids))

    try:
        header, footer, preloaded = await asyncio.gather(
            _load_mask(image_loader, header_mask),
            _load_mask(image_loader, footer_mask),
            preload(
                job.item_ids,
                catalog.get_items_by_ids,
                image_loader.load,
                concurrency=concurrency,
                on_progress=on_progress,
            ),
        )
        composed = compose(
            preloaded.items,
            preloaded.images,
            tags_by_id,
            header_mask=header,
            footer_mask=footer,
            on_progress=on_progress,
        )
    except Exception as e:
        msg = f"Report generation failed: {e}"
        raise JobFailureError(msg) from e

    missing = len(preloaded.items) - len(preloaded.images)
    logger.info(
        "Report ready: {} items on {} pages ({} without image)",
        len(preloaded.items),
        composed.page_count,
        missing,
    )
    return ReportOutput(
        document=composed.document, filename=report_filename(), page_count=composed.page_count
    )


async def run_report_job(
    filtered_ids: Sequence[str],
    selected_ids: Iterable[str],
    *,
    catalog: CatalogProtocol,
    image_loader: ImageLoaderProtocol,
    reporter: ReporterProtocol,
    item_limit: int | None = None,
    tags: Sequence[Tag] | None = None,
    header_mask: str | None = None,
    footer_mask: str | None = None,
    concurrency: int = PRELOAD_CONCURRENCY,
    on_progress: ProgressCallback | None = None,
) -> ReportOutput | None:
    """Run one export end to end, reporting problems through ``reporter``.

    Selection problems are reported as warnings before any fetch starts.
    Any failure after that is reported as an operational error, progress is
    reset, and no document is returned. A finished job is announced with a
    success alert. A started job cannot be cancelled.

    Args:
        filtered_ids: Current filter result, in display order.
        selected_ids: Ids the user marked for export.
        catalog: Store used for full records (and settings/tags if not given).
        image_loader: Fetches and decodes item images and masks.
        reporter: Receives user-facing alerts.
        item_limit: Export ceiling; read from system configuration when None.
        tags: Tag definitions; fetched from the catalog when None.
        header_mask: Source of the header artwork.
        footer_mask: Source of the footer artwork.
        concurrency: Maximum image decodes in flight.
        on_progress: Receives 0-100 progress.

    Returns:
        The finished report, or None if nothing was produced.
    """
    limit = resolve_item_limit(catalog) if item_limit is None else item_limit

    try:
        job = build_report_job(filtered_ids, selected_ids, limit)
    except SelectionEmptyError:
        reporter(Alert("Attention", "No items selected or visible for export.", Severity.WARNING))
        return None
    except LimitExceededError as e:
        reporter(
            Alert(
                "Export limit",
                f"Export limit exceeded. Select at most {e.limit} items to generate "
                f"the PDF. (Current: {e.count})",
                Severity.WARNING,
            )
        )
        return None

    tracker = ProgressTracker(on_progress)
    try:
        tag_list = catalog.get_tags() if tags is None else tags
        output = await generate_report(
            job,
            catalog=catalog,
            image_loader=image_loader,
            tags_by_id={tag.id: tag for tag in tag_list},
            header_mask=header_mask,
            footer_mask=footer_mask,
            concurrency=concurrency,
            on_progress=tracker.update,
        )
    except Exception:
        logger.exception("Report job failed")
        tracker.reset()
        reporter(
            Alert(
                "Operational error",
                "Could not generate the PDF. Check that the mask and item images are reachable.",
                Severity.ERROR,
            )
        )
        return None

    tracker.update(LAYOUT_END)
    reporter(
        Alert(
            "PDF ready",
            f"Generated {output.page_count} pages: {output.filename}",
            Severity.SUCCESS,
        )
    )
    return output
