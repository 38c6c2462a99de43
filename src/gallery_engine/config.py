"""Configuration constants for the gallery engine."""

import os
from pathlib import Path

# API token location. First file found is used.
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/gallery-engine-token.txt").expanduser(),
    Path("~/.config/secret/gallery-engine-token.txt").expanduser(),
    Path(f"/run/user/{os.getuid()}/gallery-engine-token"),
]

# REST endpoint of the hosted catalog store.
API_BASE_URL: str = os.environ.get("GALLERY_API_URL", "http://localhost:54321/rest/v1")

# Hidden category holding numeric settings in its tags' order values.
SYSTEM_CONFIG_CATEGORY: str = "__SYSCONFIG__"
ITEM_LIMIT_KEY: str = "pdf_limit"

# Ceiling used when the store has no configured item limit.
DEFAULT_ITEM_LIMIT: int = 30

# In-flight image decodes per preload batch.
PRELOAD_CONCURRENCY: int = 5

# Items revealed per "load more" step.
PAGE_SIZE: int = 24

# Header/footer artwork drawn on every report page. Missing files mean no mask band.
MASKS_DIR: Path = Path("~/.config/gallery-engine").expanduser()
HEADER_MASK_PATH: Path = MASKS_DIR / "mask_header.jpg"
FOOTER_MASK_PATH: Path = MASKS_DIR / "mask_footer.jpg"

# Where reports are written by the CLI. First directory which is found is used.
OUTPUT_DIRECTORIES: list[Path] = [
    Path("~/.local/share/gallery-engine/reports").expanduser(),
    Path("~/Downloads").expanduser(),
    Path("/tmp/gallery-engine"),
]


def resolve_output_directory() -> Path:
    """Return the first existing output directory, or the last candidate."""
    for candidate in OUTPUT_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return OUTPUT_DIRECTORIES[-1]
