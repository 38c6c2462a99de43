"""Cascading tag filters and PDF reports for a tagged media gallery."""

from gallery_engine.catalog.snapshot import SnapshotCatalog
from gallery_engine.core.filtering.cascade import GallerySession, compute_filter_result
from gallery_engine.core.report.job import run_report_job
from gallery_engine.models.catalog import FilterResult, FilterState
from gallery_engine.protocols import CatalogProtocol, ImageLoaderProtocol, ReporterProtocol

__all__ = [
    "CatalogProtocol",
    "FilterResult",
    "FilterState",
    "GallerySession",
    "ImageLoaderProtocol",
    "ReporterProtocol",
    "SnapshotCatalog",
    "compute_filter_result",
    "run_report_job",
]
