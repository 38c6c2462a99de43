"""Domain models for the gallery catalog and report jobs."""

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class ItemSummary:
    """Lightweight index entry for one gallery item."""

    id: str
    name: str
    tag_ids: frozenset[str]
    author_id: str
    created_at: str = ""


@dataclass(frozen=True)
class FullItem:
    """A complete item record, fetched only for items being exported."""

    id: str
    name: str
    tag_ids: tuple[str, ...]
    author_id: str
    image_url: str
    author_name: str | None = None
    created_at: str = ""


@dataclass(frozen=True)
class Tag:
    """A tag belonging to exactly one category."""

    id: str
    name: str
    category_id: str
    order: int
    created_at: str = ""


@dataclass(frozen=True)
class TagCategory:
    """A filter level. Lower ``order`` values narrow first."""

    id: str
    name: str
    order: int
    is_required: bool = False
    peer_category_ids: frozenset[str] = frozenset()
    created_at: str = ""


@dataclass(frozen=True)
class FilterState:
    """User-controlled filter inputs, owned by the caller."""

    search_text: str = ""
    selected_tag_ids: tuple[str, ...] = ()
    author_id: str | None = None
    sort_by_recency: bool = False


@dataclass(frozen=True)
class FilterResult:
    """Output of one full filter recomputation."""

    ordered_ids: tuple[str, ...]
    available_tags_by_level: dict[int, frozenset[str]] = field(default_factory=dict)
    lineage_tags: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ReportJob:
    """One export invocation: the items to compose, in filter order."""

    item_ids: tuple[str, ...]
    item_limit: int


class Severity(StrEnum):
    """Severity of a user-facing alert."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Alert:
    """A structured message handed to the caller's reporter."""

    title: str
    message: str
    severity: Severity = Severity.INFO


@dataclass(frozen=True)
class ReportOutput:
    """A finished report, ready for preview, download or sharing."""

    document: bytes
    filename: str
    page_count: int
