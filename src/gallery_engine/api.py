"""REST client for the hosted catalog store."""

from typing import Any

import requests
from loguru import logger

from gallery_engine.catalog.rows import (
    parse_category,
    parse_full_item,
    parse_item_summary,
    parse_tag,
    split_system_config,
)
from gallery_engine.config import API_BASE_URL, API_TOKEN_FILES, SYSTEM_CONFIG_CATEGORY
from gallery_engine.models.catalog import FullItem, ItemSummary, Tag, TagCategory

_INDEX_SELECT = "id,name,user_id,created_at,item_tags(tag_id)"
_FULL_SELECT = "*,users(name),item_tags(tag_id)"


class CatalogApi:
    """Read-only access to items, tags, categories and settings."""

    def __init__(self, *, base_url: str | None = None) -> None:
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.sess = requests.Session()

        api_token_name: str | None = None
        for token_path in API_TOKEN_FILES:
            try:
                self.api_token = token_path.read_text(encoding="utf-8").strip()
                api_token_name = str(token_path)
                break
            except FileNotFoundError:
                pass
        else:
            msg = f"Cannot find catalog token file, was looking at {API_TOKEN_FILES!r}"
            raise RuntimeError(msg)

        self.sess.headers.update(
            {"apikey": self.api_token, "Authorization": f"Bearer {self.api_token}"}
        )
        logger.debug("API ready: token from {!r}, base_url {!r}", api_token_name, self.base_url)

    def call(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """Query a table, return the decoded rows."""
        logger.debug("Making request: {!r} {}", table, repr(params)[:48])

        r = self.sess.get(f"{self.base_url}/{table}", params=params)
        r.raise_for_status()
        rv = r.json()
        if not isinstance(rv, list):
            msg = f"API call failed: ({table!r}, {params!r}) -> {rv!r}"
            raise RuntimeError(msg)
        return rv

    def get_item_index(self) -> list[ItemSummary]:
        rows = self.call("items", {"select": _INDEX_SELECT, "order": "created_at.desc"})
        return [parse_item_summary(row) for row in rows]

    def _all_categories(self) -> list[TagCategory]:
        return [parse_category(row) for row in self.call("tag_categories", {"select": "*"})]

    def get_tags(self) -> list[Tag]:
        """Return tag definitions, without the settings stored as tags."""
        tags = [parse_tag(row) for row in self.call("tags", {"select": "*"})]
        _, visible_tags, _ = split_system_config(self._all_categories(), tags)
        return visible_tags

    def get_categories(self) -> list[TagCategory]:
        visible_categories, _, _ = split_system_config(self._all_categories(), [])
        return visible_categories

    def get_items_by_ids(self, ids: list[str]) -> list[FullItem]:
        """Fetch full records in one request, returned in ``ids`` order."""
        if not ids:
            return []
        rows = self.call("items", {"select": _FULL_SELECT, "id": f"in.({','.join(ids)})"})
        by_id = {item.id: item for item in (parse_full_item(row) for row in rows)}
        return [by_id[i] for i in ids if i in by_id]

    def get_system_config(self, key: str) -> str | None:
        """Read a numeric setting stored in the hidden settings category."""
        cats = self.call(
            "tag_categories", {"select": "id", "name": f"eq.{SYSTEM_CONFIG_CATEGORY}", "limit": "1"}
        )
        if not cats:
            return None
        tags = self.call(
            "tags",
            {"select": "order", "category_id": f"eq.{cats[0]['id']}", "name": f"eq.{key}", "limit": "1"},
        )
        return str(tags[0]["order"]) if tags else None
