"""Progress reporting on a 0-100 scale shared by the stages of a report job."""

from gallery_engine.protocols import ProgressCallback

# Stage bands: preloading fills 5-85, layout fills 85-100.
PRELOAD_START = 5
PRELOAD_END = 85
LAYOUT_END = 100


def band_value(start: int, end: int, done: int, total: int) -> int:
    """Map ``done``/``total`` into the ``start``-``end`` band, rounding half up."""
    if total <= 0:
        return end
    return start + int((done / total) * (end - start) + 0.5)


class ProgressTracker:
    """Forward progress to a callback, never letting it go backwards.

    Updates happen between awaited steps on the event loop thread, so no
    locking is needed.
    """

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self.value = 0

    def update(self, value: int) -> None:
        self.value = max(self.value, min(value, LAYOUT_END))
        if self._callback is not None:
            self._callback(self.value)

    def reset(self) -> None:
        """Drop back to zero after a failed job."""
        self.value = 0
        if self._callback is not None:
            self._callback(0)
