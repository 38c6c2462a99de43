"""Parse raw catalog rows (REST responses or JSON snapshots) into domain models."""

from collections.abc import Iterable
from typing import Any

from gallery_engine.config import SYSTEM_CONFIG_CATEGORY
from gallery_engine.models.catalog import FullItem, ItemSummary, Tag, TagCategory


def _author_name(users: Any) -> str | None:
    """Extract the author name from a joined ``users`` value.

    The store returns joined relations either as an object or as a
    single-item list, depending on the relation's cardinality.
    """
    if not users:
        return None
    if isinstance(users, list):
        return users[0].get("name") if users else None
    return users.get("name")


def _tag_ids(row: dict[str, Any]) -> tuple[str, ...]:
    if "tag_ids" in row:
        return tuple(row["tag_ids"] or ())
    return tuple(link["tag_id"] for link in row.get("item_tags") or ())


def _require(row: dict[str, Any], key: str, kind: str) -> Any:
    try:
        return row[key]
    except KeyError:
        msg = f"{kind} row is missing {key!r}: {row!r}"
        raise ValueError(msg) from None


def parse_item_summary(row: dict[str, Any]) -> ItemSummary:
    """Parse an index row into an ItemSummary."""
    return ItemSummary(
        id=_require(row, "id", "item"),
        name=row.get("name") or "",
        tag_ids=frozenset(_tag_ids(row)),
        author_id=row.get("user_id") or "",
        created_at=row.get("created_at") or "",
    )


def parse_full_item(row: dict[str, Any]) -> FullItem:
    """Parse a full item row, including the image URL and author name."""
    return FullItem(
        id=_require(row, "id", "item"),
        name=row.get("name") or "",
        tag_ids=_tag_ids(row),
        author_id=row.get("user_id") or "",
        image_url=_require(row, "url", "item"),
        author_name=row.get("user_name") or _author_name(row.get("users")),
        created_at=row.get("created_at") or "",
    )


def parse_tag(row: dict[str, Any]) -> Tag:
    """Parse a tag row."""
    return Tag(
        id=_require(row, "id", "tag"),
        name=row.get("name") or "",
        category_id=_require(row, "category_id", "tag"),
        order=int(row.get("order") or 0),
        created_at=row.get("created_at") or "",
    )


def parse_category(row: dict[str, Any]) -> TagCategory:
    """Parse a category row."""
    return TagCategory(
        id=_require(row, "id", "category"),
        name=row.get("name") or "",
        order=int(row.get("order") or 0),
        is_required=bool(row.get("is_required")),
        peer_category_ids=frozenset(row.get("peer_category_ids") or ()),
        created_at=row.get("created_at") or "",
    )


def split_system_config(
    categories: Iterable[TagCategory], tags: Iterable[Tag]
) -> tuple[list[TagCategory], list[Tag], dict[str, int]]:
    """Separate the hidden settings category from the visible catalog.

    Settings are stored as tags of the ``__SYSCONFIG__`` category, with the
    value in the tag's ``order`` field.

    Returns:
        Tuple of (visible categories, visible tags, settings by name).
    """
    categories = list(categories)
    config_ids = {c.id for c in categories if c.name == SYSTEM_CONFIG_CATEGORY}
    visible_categories = [c for c in categories if c.id not in config_ids]

    visible_tags: list[Tag] = []
    settings: dict[str, int] = {}
    for tag in tags:
        if tag.category_id in config_ids:
            settings[tag.name] = tag.order
        else:
            visible_tags.append(tag)

    return visible_categories, visible_tags, settings
