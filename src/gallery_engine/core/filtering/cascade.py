"""Hierarchical tag filtering over the shuffled item index."""

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime

from loguru import logger

from gallery_engine.config import PAGE_SIZE
from gallery_engine.core.shuffle import new_seed, shuffle
from gallery_engine.core.text import simplify_text
from gallery_engine.models.catalog import (
    FilterResult,
    FilterState,
    ItemSummary,
    Tag,
    TagCategory,
)


def _created_timestamp(item: ItemSummary) -> float:
    """Sort key for recency. Missing or malformed dates sort as the oldest."""
    if not item.created_at:
        return 0.0
    try:
        return datetime.fromisoformat(item.created_at).timestamp()
    except ValueError:
        return 0.0


def _matches_text(item: ItemSummary, query: str, tag_names: dict[str, str]) -> bool:
    if query in simplify_text(item.name):
        return True
    return any(query in tag_names.get(tag_id, "") for tag_id in item.tag_ids)


def _tags_by_category(tags: Iterable[Tag]) -> dict[str, set[str]]:
    grouped: dict[str, set[str]] = {}
    for tag in tags:
        grouped.setdefault(tag.category_id, set()).add(tag.id)
    return grouped


def compute_filter_result(
    index: Sequence[ItemSummary],
    tags: Sequence[Tag],
    categories: Sequence[TagCategory],
    state: FilterState,
) -> FilterResult:
    """Filter the (already shuffled) index and compute per-level availability.

    Text and author filters apply first. Categories are then walked in
    ascending ``order``: a level with selected tags keeps only items carrying
    at least one of them (OR within a level, AND across levels). Before a
    level narrows the working set, the tags of that level still present on
    the working set are recorded as that level's available tags, so a
    level's choices depend only on the levels above it.

    Args:
        index: Item summaries in shuffle order.
        tags: All tag definitions.
        categories: All category definitions.
        state: Current filter inputs. Never modified.

    Returns:
        A freshly computed FilterResult.
    """
    working = list(index)

    query = simplify_text(state.search_text)
    if query:
        tag_names = {tag.id: simplify_text(tag.name) for tag in tags}
        working = [item for item in working if _matches_text(item, query, tag_names)]

    if state.author_id is not None:
        working = [item for item in working if item.author_id == state.author_id]

    selected = set(state.selected_tag_ids)
    category_tags = _tags_by_category(tags)
    available_by_level: dict[int, frozenset[str]] = {}

    # sorted() is stable, so categories sharing an order keep their input order
    for category in sorted(categories, key=lambda c: c.order):
        level_tags = category_tags.get(category.id, set())
        present = {tag_id for item in working for tag_id in item.tag_ids if tag_id in level_tags}
        available_by_level[category.order] = available_by_level.get(
            category.order, frozenset()
        ) | frozenset(present)

        chosen = level_tags & selected
        if chosen:
            working = [item for item in working if not chosen.isdisjoint(item.tag_ids)]

    if state.sort_by_recency:
        working = sorted(working, key=_created_timestamp, reverse=True)

    lineage: frozenset[str] = frozenset()
    if selected:
        lineage = frozenset(tag_id for item in working for tag_id in item.tag_ids)

    logger.debug(
        "Filter: {} of {} items, {} tags selected", len(working), len(index), len(selected)
    )
    return FilterResult(
        ordered_ids=tuple(item.id for item in working),
        available_tags_by_level=available_by_level,
        lineage_tags=lineage,
    )


def toggle_tag(state: FilterState, tag_id: str) -> FilterState:
    """Return a new state with ``tag_id`` added to or removed from the selection."""
    if tag_id in state.selected_tag_ids:
        selected = tuple(t for t in state.selected_tag_ids if t != tag_id)
    else:
        selected = (*state.selected_tag_ids, tag_id)
    return replace(state, selected_tag_ids=selected)


def clear_filters(state: FilterState, *, keep_author: bool = False) -> FilterState:
    """Reset search text and tag selection.

    The author filter is only reset when ``keep_author`` is False; viewers
    without permission to browse other authors keep theirs.
    """
    return FilterState(
        author_id=state.author_id if keep_author else None,
        sort_by_recency=state.sort_by_recency,
    )


def visible_ids(result: FilterResult, display_count: int) -> tuple[str, ...]:
    """Return the prefix of the result currently revealed by "load more"."""
    return result.ordered_ids[: max(display_count, 0)]


def next_display_count(result: FilterResult, display_count: int, page_size: int = PAGE_SIZE) -> int:
    """Return the display count after one more "load more" step."""
    if display_count < len(result.ordered_ids):
        return display_count + page_size
    return display_count


class GallerySession:
    """Filter state holder for one gallery view.

    The shuffle seed is drawn once per session; filter changes never reseed,
    so the randomized order stays stable while the user narrows it down.
    """

    def __init__(
        self,
        index: Sequence[ItemSummary],
        tags: Sequence[Tag],
        categories: Sequence[TagCategory],
        *,
        seed: int | None = None,
    ) -> None:
        self.seed = new_seed() if seed is None else seed
        self.tags = list(tags)
        self.categories = list(categories)
        self._index: Sequence[ItemSummary] = ()
        self._shuffled: list[ItemSummary] = []
        self.set_index(index)

    @property
    def shuffled_index(self) -> list[ItemSummary]:
        return self._shuffled

    def set_index(self, index: Sequence[ItemSummary]) -> None:
        """Replace the item index, reshuffling it with the session seed."""
        if index is self._index:
            return
        self._index = index
        self._shuffled = shuffle(list(index), self.seed)
        logger.debug("Shuffled {} items with seed {}", len(self._shuffled), self.seed)

    def compute(self, state: FilterState) -> FilterResult:
        """Run the cascade filter for ``state`` over the shuffled index."""
        return compute_filter_result(self._shuffled, self.tags, self.categories, state)
