"""Tests for parsing raw catalog rows."""

import pytest

from gallery_engine.catalog.rows import (
    parse_category,
    parse_full_item,
    parse_item_summary,
    parse_tag,
    split_system_config,
)
from tests.unit.samples import SNAPSHOT


def test_parse_item_summary_reads_join_rows() -> None:
    item = parse_item_summary(SNAPSHOT["items"][0])

    assert item.id == "A"
    assert item.tag_ids == frozenset({"t-built", "t-20"})
    assert item.author_id == "u1"


def test_parse_item_summary_reads_plain_tag_list() -> None:
    item = parse_item_summary(SNAPSHOT["items"][2])

    assert item.tag_ids == frozenset({"t-basic", "t-20"})


@pytest.mark.parametrize(
    ("users", "expected"),
    [({"name": "Ana"}, "Ana"), ([{"name": "Bruno"}], "Bruno"), ([], None), (None, None)],
)
def test_parse_full_item_author_name_shapes(users: object, expected: str | None) -> None:
    row = {"id": "x", "url": "https://cdn/x.jpg", "users": users}

    assert parse_full_item(row).author_name == expected


def test_parse_full_item_keeps_tag_order() -> None:
    row = {"id": "x", "url": "u", "item_tags": [{"tag_id": "b"}, {"tag_id": "a"}]}

    assert parse_full_item(row).tag_ids == ("b", "a")


def test_parse_full_item_requires_url() -> None:
    with pytest.raises(ValueError, match="missing 'url'"):
        parse_full_item({"id": "x"})


def test_parse_tag_and_category() -> None:
    tag = parse_tag({"id": "t", "name": "T", "category_id": "c", "order": "3"})
    cat = parse_category({"id": "c", "name": "C", "order": 2, "peer_category_ids": ["d"]})

    assert tag.order == 3
    assert cat.peer_category_ids == frozenset({"d"})
    assert cat.is_required is False


def test_split_system_config_hides_settings_category() -> None:
    categories = [parse_category(r) for r in SNAPSHOT["categories"]]
    tags = [parse_tag(r) for r in SNAPSHOT["tags"]]

    visible_categories, visible_tags, settings = split_system_config(categories, tags)

    assert [c.id for c in visible_categories] == ["cat-type", "cat-size"]
    assert "cfg-limit" not in {t.id for t in visible_tags}
    assert settings == {"pdf_limit": 2}
