"""Fetch full item records and decode their images in bounded batches."""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from loguru import logger
from PIL import Image

from gallery_engine.config import PRELOAD_CONCURRENCY
from gallery_engine.core.report.progress import PRELOAD_END, PRELOAD_START, band_value
from gallery_engine.models.catalog import FullItem
from gallery_engine.protocols import ProgressCallback


@dataclass
class PreloadResult:
    """Records in request order, plus the images that decoded successfully."""

    items: list[FullItem]
    images: dict[str, Image.Image] = field(default_factory=dict)


async def _decode_item(
    item: FullItem, decode: Callable[[str], Image.Image]
) -> Image.Image | None:
    try:
        return await asyncio.to_thread(decode, item.image_url)
    except Exception:
        logger.opt(exception=True).warning(
            "Error pre-loading image for item {} ({!r})", item.id, item.image_url
        )
        return None


async def preload(
    ids: Sequence[str],
    fetch_full: Callable[[list[str]], list[FullItem]],
    decode: Callable[[str], Image.Image],
    *,
    concurrency: int = PRELOAD_CONCURRENCY,
    on_progress: ProgressCallback | None = None,
) -> PreloadResult:
    """Fetch records for ``ids`` in one call, then decode their images.

    Decodes run in batches of ``concurrency``; each batch is awaited as a
    group before the next starts, and progress is reported once per batch
    in the 5-85 band. A failed decode leaves its id out of ``images``
    without stopping the batch. A failed record fetch propagates.

    Args:
        ids: Item ids, already filtered and intersected with the selection.
        fetch_full: Blocking batched lookup of full records.
        decode: Blocking fetch-and-decode of one image URL.
        concurrency: Maximum decodes in flight.
        on_progress: Receives the job progress after each batch.
    """
    if concurrency < 1:
        msg = f"concurrency must be positive, got {concurrency}"
        raise ValueError(msg)

    items = await asyncio.to_thread(fetch_full, list(ids))
    if len(items) != len(ids):
        logger.warning("Store returned {} of {} requested items", len(items), len(ids))

    result = PreloadResult(items=items)
    total = len(items)
    if total == 0 and on_progress is not None:
        on_progress(PRELOAD_END)

    for start in range(0, total, concurrency):
        batch = items[start : start + concurrency]
        decoded = await asyncio.gather(*(_decode_item(item, decode) for item in batch))
        for item, image in zip(batch, decoded, strict=True):
            if image is not None:
                result.images[item.id] = image

        done = start + len(batch)
        logger.debug("Preloaded {}/{} images", done, total)
        if on_progress is not None:
            on_progress(band_value(PRELOAD_START, PRELOAD_END, done, total))

    return result
