"""Catalog backed by a JSON export of the hosted store."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from gallery_engine.catalog.rows import (
    parse_category,
    parse_full_item,
    parse_item_summary,
    parse_tag,
    split_system_config,
)
from gallery_engine.models.catalog import FullItem, ItemSummary, Tag, TagCategory


class SnapshotCatalog:
    """In-memory catalog read from a JSON snapshot.

    The snapshot holds ``items`` (full item rows), ``tags``, ``categories`` and
    an optional ``config`` mapping. Settings may also live in the hidden
    system category, as they do in the hosted store.
    """

    def __init__(self, data: dict[str, Any]) -> None:
        if not isinstance(data, dict) or "items" not in data:
            msg = "snapshot must be an object with an 'items' list"
            raise ValueError(msg)

        self._rows: list[dict[str, Any]] = list(data["items"])
        self._full: dict[str, FullItem] = {}
        for row in self._rows:
            item = parse_full_item(row)
            self._full[item.id] = item

        categories = [parse_category(r) for r in data.get("categories", [])]
        tags = [parse_tag(r) for r in data.get("tags", [])]
        self._categories, self._tags, stored = split_system_config(categories, tags)

        self._config: dict[str, str] = {k: str(v) for k, v in stored.items()}
        self._config.update({k: str(v) for k, v in (data.get("config") or {}).items()})

        logger.debug(
            "Snapshot ready: {} items, {} tags, {} categories",
            len(self._full),
            len(self._tags),
            len(self._categories),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "SnapshotCatalog":
        """Load a snapshot from a JSON file."""
        with open(path, encoding="utf-8") as f:
            return cls(json.load(f))

    def get_item_index(self) -> list[ItemSummary]:
        return [parse_item_summary(row) for row in self._rows]

    def get_tags(self) -> list[Tag]:
        return list(self._tags)

    def get_categories(self) -> list[TagCategory]:
        return list(self._categories)

    def get_items_by_ids(self, ids: list[str]) -> list[FullItem]:
        return [self._full[i] for i in ids if i in self._full]

    def get_system_config(self, key: str) -> str | None:
        return self._config.get(key)
