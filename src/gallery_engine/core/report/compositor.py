"""Lay out items two per page into a PDF with header/footer masks."""

import io
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from loguru import logger
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from gallery_engine.core.report.progress import LAYOUT_END, PRELOAD_END, band_value
from gallery_engine.models.catalog import FullItem, Tag
from gallery_engine.protocols import ProgressCallback

ITEMS_PER_PAGE = 2

MARGIN_X = 6 * mm
MARGIN_Y = 4 * mm

# Offsets from the top of a slot.
TITLE_OFFSET = 2 * mm
META_OFFSET = 6 * mm
IMAGE_OFFSET = 9 * mm
PLACEHOLDER_OFFSET = 15 * mm
# Slot height not available to the image: header text plus bottom padding.
IMAGE_HEIGHT_RESERVE = 11 * mm

TITLE_FONT = ("Helvetica-Bold", 10)
META_FONT = ("Helvetica", 7)
CAPTION_FONT = ("Helvetica", 8)

TITLE_COLOR = (30 / 255, 41 / 255, 59 / 255)
META_COLOR = (100 / 255, 116 / 255, 139 / 255)
ERROR_COLOR = (200 / 255, 0, 0)
CAPTION_COLOR = (150 / 255, 150 / 255, 150 / 255)

PLACEHOLDER_TEXT = "[Image failed to load]"


@dataclass(frozen=True)
class SlotPlacement:
    """Where one item landed in the document."""

    item_id: str
    page: int
    slot: int
    has_image: bool


@dataclass(frozen=True)
class ComposedReport:
    """A finished document and the placement of every item in it."""

    document: bytes
    page_count: int
    placements: tuple[SlotPlacement, ...]


def slot_position(index: int) -> tuple[int, int]:
    """Return the (1-based page, 0-based slot) of the item at ``index``."""
    return index // ITEMS_PER_PAGE + 1, index % ITEMS_PER_PAGE


def page_count_for(n_items: int) -> int:
    return math.ceil(n_items / ITEMS_PER_PAGE)


def mask_height(mask: Image.Image | None, page_width: float) -> float:
    """Height of a mask scaled to the full page width. No mask means zero."""
    if mask is None or mask.width <= 0:
        return 0.0
    return mask.height * page_width / mask.width


def fit_image(width: float, height: float, box_width: float, box_height: float) -> tuple[float, float]:
    """Scale (width, height) to fit the box, preserving aspect ratio."""
    draw_width = box_width
    draw_height = height * box_width / width
    if draw_height > box_height:
        draw_height = box_height
        draw_width = width * box_height / height
    return draw_width, draw_height


def _fit_text(text: str, font: tuple[str, int], max_width: float) -> str:
    """Truncate ``text`` with an ellipsis so it fits ``max_width``."""
    name, size = font
    if stringWidth(text, name, size) <= max_width:
        return text
    while text and stringWidth(text + "...", name, size) > max_width:
        text = text[:-1]
    return text + "..."


def metadata_line(item: FullItem, tags_by_id: Mapping[str, Tag]) -> str:
    """Tag names joined by bullets, plus the author when known."""
    names = [tags_by_id[t].name for t in item.tag_ids if t in tags_by_id]
    line = " • ".join(names)
    if item.author_name:
        author = f"Registered by {item.author_name}"
        line = f"{line} | {author}" if line else author
    return line


class _PageLayout:
    """Geometry of one page, given the mask heights actually drawn."""

    def __init__(self, page_width: float, page_height: float, header: float, footer: float) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.header = header
        self.footer = footer
        available = page_height - header - footer - MARGIN_Y * (ITEMS_PER_PAGE + 1)
        self.slot_height = available / ITEMS_PER_PAGE

    def slot_top(self, slot: int) -> float:
        """Distance from the page top to the top of ``slot``."""
        return self.header + MARGIN_Y + slot * (self.slot_height + MARGIN_Y)

    def y(self, from_top: float) -> float:
        """Convert a top-based offset into PDF coordinates."""
        return self.page_height - from_top


def _draw_mask(canvas: Canvas, mask: Image.Image | None, y: float, width: float, height: float) -> float:
    if mask is None or height <= 0:
        return 0.0
    try:
        canvas.drawImage(ImageReader(mask), 0, y, width=width, height=height, mask="auto")
    except (OSError, ValueError):
        logger.opt(exception=True).warning("Cannot draw page mask, leaving band empty")
        return 0.0
    return height


def _start_page(
    canvas: Canvas,
    page: int,
    page_size: tuple[float, float],
    header_mask: Image.Image | None,
    footer_mask: Image.Image | None,
) -> _PageLayout:
    page_width, page_height = page_size
    header_h = mask_height(header_mask, page_width)
    footer_h = mask_height(footer_mask, page_width)
    header_h = _draw_mask(canvas, header_mask, page_height - header_h, page_width, header_h)
    footer_h = _draw_mask(canvas, footer_mask, 0, page_width, footer_h)

    canvas.setFont(*CAPTION_FONT)
    canvas.setFillColorRGB(*CAPTION_COLOR)
    canvas.drawCentredString(page_width / 2, max(footer_h / 2, MARGIN_Y), f"Page {page}")

    return _PageLayout(page_width, page_height, header_h, footer_h)


def _draw_slot(
    canvas: Canvas,
    layout: _PageLayout,
    slot: int,
    item: FullItem,
    image: Image.Image | None,
    tags_by_id: Mapping[str, Tag],
) -> None:
    top = layout.slot_top(slot)
    text_width = layout.page_width - MARGIN_X * 2

    canvas.setFont(*TITLE_FONT)
    canvas.setFillColorRGB(*TITLE_COLOR)
    canvas.drawString(MARGIN_X, layout.y(top + TITLE_OFFSET), _fit_text(item.name, TITLE_FONT, text_width))

    canvas.setFont(*META_FONT)
    canvas.setFillColorRGB(*META_COLOR)
    meta = _fit_text(metadata_line(item, tags_by_id), META_FONT, text_width)
    canvas.drawString(MARGIN_X, layout.y(top + META_OFFSET), meta)

    if image is None:
        canvas.setFillColorRGB(*ERROR_COLOR)
        canvas.drawString(MARGIN_X, layout.y(top + PLACEHOLDER_OFFSET), PLACEHOLDER_TEXT)
        return

    area_width = layout.page_width - MARGIN_X * 2
    area_height = layout.slot_height - IMAGE_HEIGHT_RESERVE
    draw_width, draw_height = fit_image(image.width, image.height, area_width, area_height)
    x = MARGIN_X + (area_width - draw_width) / 2
    y = layout.y(top + IMAGE_OFFSET + draw_height)
    canvas.drawImage(ImageReader(image), x, y, width=draw_width, height=draw_height, mask="auto")


def compose(
    items: Sequence[FullItem],
    images: Mapping[str, Image.Image],
    tags_by_id: Mapping[str, Tag],
    *,
    header_mask: Image.Image | None = None,
    footer_mask: Image.Image | None = None,
    on_progress: ProgressCallback | None = None,
    page_size: tuple[float, float] = A4,
) -> ComposedReport:
    """Render ``items`` two per page, in order, into one PDF document.

    Items without a decoded image get a placeholder string in their image
    area. The item limit is the caller's concern and is not checked here.

    Args:
        items: Records to render, in document order.
        images: Decoded images by item id; missing ids render a placeholder.
        tags_by_id: Tag definitions used for the metadata line.
        header_mask: Artwork drawn across the top of every page.
        footer_mask: Artwork drawn across the bottom of every page.
        on_progress: Receives job progress in the 85-100 band after each item.
        page_size: Page geometry in points.
    """
    if not items:
        msg = "Cannot compose a report without items"
        raise ValueError(msg)

    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=page_size)
    canvas.setTitle("Gallery report")
    canvas.setCreator("gallery-engine")

    placements: list[SlotPlacement] = []
    total = len(items)

    for first in range(0, total, ITEMS_PER_PAGE):
        page, _ = slot_position(first)
        layout = _start_page(canvas, page, page_size, header_mask, footer_mask)

        for i in range(first, min(first + ITEMS_PER_PAGE, total)):
            item = items[i]
            _, slot = slot_position(i)
            image = images.get(item.id)
            _draw_slot(canvas, layout, slot, item, image, tags_by_id)
            placements.append(SlotPlacement(item.id, page, slot, image is not None))

            if on_progress is not None:
                on_progress(band_value(PRELOAD_END, LAYOUT_END, i + 1, total))

        canvas.showPage()

    canvas.save()

    page_count = page_count_for(total)
    logger.debug("Composed {} items on {} pages", total, page_count)
    return ComposedReport(
        document=buffer.getvalue(), page_count=page_count, placements=tuple(placements)
    )
