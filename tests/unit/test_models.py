"""Tests for domain models."""

import pytest

from gallery_engine.models.catalog import Alert, FilterState, Severity
from gallery_engine.protocols import ReporterProtocol
from tests.unit.fakes import RecordingReporter


def test_filter_state_is_frozen() -> None:
    state = FilterState()
    with pytest.raises(AttributeError):
        state.search_text = "changed"  # type: ignore[misc]


def test_filter_state_defaults_to_no_filter() -> None:
    state = FilterState()

    assert state.selected_tag_ids == ()
    assert state.author_id is None
    assert not state.sort_by_recency


def test_alert_defaults_to_info() -> None:
    assert Alert("t", "m").severity is Severity.INFO
    assert str(Severity.WARNING) == "warning"


def test_recording_reporter_is_a_reporter() -> None:
    assert isinstance(RecordingReporter(), ReporterProtocol)
