"""Exceptions raised while preparing and running report jobs."""


class GalleryError(Exception):
    """Base class for gallery engine errors."""


class SelectionEmptyError(GalleryError):
    """No item is both selected and visible under the current filter."""


class LimitExceededError(GalleryError):
    """The selection is larger than the configured item ceiling."""

    def __init__(self, limit: int, count: int) -> None:
        self.limit = limit
        self.count = count
        super().__init__(f"Selected {count} items, the limit is {limit}")


class AssetLoadError(GalleryError):
    """An image (item picture or page mask) could not be fetched or decoded."""


class JobFailureError(GalleryError):
    """A report job aborted; no document was produced."""
