"""Tests for required category groups and tag ordering rules."""

import pytest

from gallery_engine.core.filtering.requirements import (
    OrderCollision,
    describe_missing_groups,
    find_order_collisions,
    missing_required_groups,
    sort_categories,
    sort_tags,
)
from gallery_engine.models.catalog import Tag, TagCategory

STYLE = TagCategory(id="style", name="Style", order=2, is_required=True, peer_category_ids=frozenset({"theme"}))
THEME = TagCategory(id="theme", name="Theme", order=3, is_required=True, peer_category_ids=frozenset({"style"}))
ROOM = TagCategory(id="room", name="Room", order=1, is_required=True)
EXTRA = TagCategory(id="extra", name="Extra", order=4)

GROUP_TAGS = [
    Tag(id="modern", name="Modern", category_id="style", order=1),
    Tag(id="beach", name="Beach", category_id="theme", order=1),
    Tag(id="kitchen", name="Kitchen", category_id="room", order=1),
    Tag(id="led", name="LED", category_id="extra", order=1),
]
GROUP_CATEGORIES = [STYLE, THEME, ROOM, EXTRA]


def test_all_requirements_satisfied() -> None:
    assert missing_required_groups(["kitchen", "modern"], GROUP_TAGS, GROUP_CATEGORIES) == []


def test_peer_category_satisfies_shared_requirement() -> None:
    """A Theme tag satisfies the Style/Theme group."""
    assert missing_required_groups(["kitchen", "beach"], GROUP_TAGS, GROUP_CATEGORIES) == []


def test_missing_groups_reported_once_per_group() -> None:
    missing = missing_required_groups(["led"], GROUP_TAGS, GROUP_CATEGORIES)

    assert missing == [(ROOM,), (STYLE, THEME)]


def test_optional_category_is_never_required() -> None:
    missing = missing_required_groups(["kitchen", "modern"], GROUP_TAGS, [EXTRA, ROOM, STYLE])

    assert missing == []


def test_one_sided_peer_link_still_groups() -> None:
    """Only one side lists the peer; the group is still shared."""
    lonely = TagCategory(id="a", name="A", order=1, is_required=True, peer_category_ids=frozenset({"b"}))
    other = TagCategory(id="b", name="B", order=2)
    tags = [Tag(id="tb", name="TB", category_id="b", order=1)]

    assert missing_required_groups(["tb"], tags, [lonely, other]) == []


def test_describe_missing_groups() -> None:
    text = describe_missing_groups([(ROOM,), (STYLE, THEME)])

    assert text == '"Room"\n"Style" or "Theme"'


def test_find_order_collisions_reports_shared_orders() -> None:
    tags = [
        Tag(id="a", name="A", category_id="c1", order=1),
        Tag(id="b", name="B", category_id="c1", order=1),
        Tag(id="c", name="C", category_id="c2", order=1),
    ]

    assert find_order_collisions(tags) == [OrderCollision("c1", 1, ("a", "b"))]


def test_find_order_collisions_empty_when_unique() -> None:
    assert find_order_collisions(GROUP_TAGS) == []


@pytest.mark.parametrize(
    ("orders", "expected"),
    [
        ([(2, ""), (1, "")], ["1", "0"]),
        ([(1, "2024-02"), (1, "2024-01")], ["1", "0"]),
    ],
)
def test_sort_tags_by_order_then_creation(orders: list[tuple[int, str]], expected: list[str]) -> None:
    tags = [Tag(id=str(i), name="", category_id="c", order=o, created_at=c) for i, (o, c) in enumerate(orders)]

    assert [t.id for t in sort_tags(tags)] == expected


def test_sort_categories_by_level() -> None:
    assert [c.id for c in sort_categories(GROUP_CATEGORIES)] == ["room", "style", "theme", "extra"]
