"""Fake implementations for testing the gallery engine."""

from PIL import Image

from gallery_engine.errors import AssetLoadError
from gallery_engine.models.catalog import Alert, FullItem, ItemSummary, Tag, TagCategory


class FakeCatalog:
    """In-memory fake for CatalogApi.

    Holds full item records and records every lookup for assertions.
    """

    def __init__(
        self,
        items: list[FullItem] | None = None,
        tags: list[Tag] | None = None,
        categories: list[TagCategory] | None = None,
        config: dict[str, str] | None = None,
    ) -> None:
        self.items = {item.id: item for item in items or []}
        self.tags = list(tags or [])
        self.categories = list(categories or [])
        self.config = dict(config or {})
        self.fetch_calls: list[list[str]] = []
        self.fail_fetch: Exception | None = None

    def get_item_index(self) -> list[ItemSummary]:
        return [
            ItemSummary(
                id=item.id,
                name=item.name,
                tag_ids=frozenset(item.tag_ids),
                author_id=item.author_id,
                created_at=item.created_at,
            )
            for item in self.items.values()
        ]

    def get_tags(self) -> list[Tag]:
        return list(self.tags)

    def get_categories(self) -> list[TagCategory]:
        return list(self.categories)

    def get_items_by_ids(self, ids: list[str]) -> list[FullItem]:
        """Return known records in request order and record the call."""
        self.fetch_calls.append(list(ids))
        if self.fail_fetch is not None:
            raise self.fail_fetch
        return [self.items[i] for i in ids if i in self.items]

    def get_system_config(self, key: str) -> str | None:
        return self.config.get(key)


class FakeImageLoader:
    """In-memory fake for HttpImageLoader.

    Sources not registered raise AssetLoadError, like an unreachable URL.
    """

    def __init__(self, images: dict[str, Image.Image] | None = None) -> None:
        self.images = dict(images or {})
        self.calls: list[str] = []

    def add(self, source: str, width: int = 40, height: int = 30) -> Image.Image:
        """Register a solid-colour image for ``source``."""
        image = Image.new("RGB", (width, height), (120, 90, 60))
        self.images[source] = image
        return image

    def load(self, source: str) -> Image.Image:
        self.calls.append(source)
        if source not in self.images:
            msg = f"FakeImageLoader: unreachable {source!r}"
            raise AssetLoadError(msg)
        return self.images[source]


class RecordingReporter:
    """Collects alerts passed to it."""

    def __init__(self) -> None:
        self.alerts: list[Alert] = []

    def __call__(self, alert: Alert) -> None:
        self.alerts.append(alert)
