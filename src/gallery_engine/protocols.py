"""Protocols for the collaborators the engine depends on."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from PIL import Image

from gallery_engine.models.catalog import Alert, FullItem, ItemSummary, Tag, TagCategory

ProgressCallback = Callable[[int], None]


@runtime_checkable
class CatalogProtocol(Protocol):
    """Protocol for stores holding item records, tags and categories."""

    def get_item_index(self) -> list[ItemSummary]:
        """Return summaries for every item in the catalog."""
        ...

    def get_tags(self) -> list[Tag]:
        """Return all tag definitions."""
        ...

    def get_categories(self) -> list[TagCategory]:
        """Return all category definitions."""
        ...

    def get_items_by_ids(self, ids: list[str]) -> list[FullItem]:
        """Return full records for ``ids``, in ``ids`` order, skipping unknown ids."""
        ...

    def get_system_config(self, key: str) -> str | None:
        """Return a system setting, or None if it is not configured."""
        ...


@runtime_checkable
class ImageLoaderProtocol(Protocol):
    """Protocol for fetching and decoding images."""

    def load(self, source: str) -> Image.Image:
        """Fetch ``source`` (URL or path) and return the decoded image."""
        ...


@runtime_checkable
class ReporterProtocol(Protocol):
    """Protocol for the caller-supplied alert sink."""

    def __call__(self, alert: Alert) -> None:
        """Surface an alert to the user."""
        ...
