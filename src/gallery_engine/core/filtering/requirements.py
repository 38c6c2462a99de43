"""Catalog rules: required category groups and tag ordering."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from gallery_engine.models.catalog import Tag, TagCategory


@dataclass(frozen=True)
class OrderCollision:
    """Two or more tags of one category sharing an ``order`` value."""

    category_id: str
    order: int
    tag_ids: tuple[str, ...]


def missing_required_groups(
    tag_ids: Iterable[str],
    tags: Sequence[Tag],
    categories: Sequence[TagCategory],
) -> list[tuple[TagCategory, ...]]:
    """Return the required category groups that ``tag_ids`` leaves unsatisfied.

    A required category and its peers form one group. The group is satisfied
    when any tag from any of its categories is chosen. Groups reached from
    several member categories are checked once.

    Args:
        tag_ids: Tags chosen for an item.
        tags: All tag definitions.
        categories: All category definitions.

    Returns:
        One tuple of categories per unsatisfied group, in category order.
    """
    chosen = set(tag_ids)
    by_id = {category.id: category for category in categories}
    seen_groups: set[tuple[str, ...]] = set()
    missing: list[tuple[TagCategory, ...]] = []

    for category in sort_categories(categories):
        if not category.is_required:
            continue
        group_key = tuple(sorted({category.id, *category.peer_category_ids}))
        if group_key in seen_groups:
            continue
        seen_groups.add(group_key)

        group_tags = {tag.id for tag in tags if tag.category_id in group_key}
        if chosen.isdisjoint(group_tags):
            members = tuple(by_id[cid] for cid in group_key if cid in by_id)
            missing.append(tuple(sort_categories(members)))

    return missing


def describe_missing_groups(groups: Sequence[Sequence[TagCategory]]) -> str:
    """Render unsatisfied groups as one line each: ``"Type" or "Style"``."""
    return "\n".join(" or ".join(f'"{c.name}"' for c in group) for group in groups)


def find_order_collisions(tags: Iterable[Tag]) -> list[OrderCollision]:
    """Find tags sharing an ``order`` within one category.

    Collisions are tolerated; each one is logged as a warning and returned
    so callers can decide whether to act on it.
    """
    buckets: dict[tuple[str, int], list[str]] = {}
    for tag in tags:
        buckets.setdefault((tag.category_id, tag.order), []).append(tag.id)

    collisions: list[OrderCollision] = []
    for (category_id, order), ids in sorted(buckets.items()):
        if len(ids) > 1:
            logger.warning(
                "Category {} has {} tags with order {}: {}", category_id, len(ids), order, ids
            )
            collisions.append(OrderCollision(category_id, order, tuple(ids)))
    return collisions


def sort_tags(tags: Iterable[Tag]) -> list[Tag]:
    """Order tags for display: by ``order``, then creation time."""
    return sorted(tags, key=lambda t: (t.order, t.created_at))


def sort_categories(categories: Iterable[TagCategory]) -> list[TagCategory]:
    """Order categories by level, then creation time."""
    return sorted(categories, key=lambda c: (c.order, c.created_at))
