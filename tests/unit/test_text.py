"""Tests for accent- and case-insensitive matching."""

from gallery_engine.core.text import simplify_text, smart_includes


def test_simplify_strips_accents_and_case() -> None:
    assert simplify_text("Cozinha Planejada Básica") == "cozinhaplanejadabasica"


def test_simplify_removes_all_whitespace() -> None:
    assert simplify_text("  São\tPaulo \n") == "saopaulo"


def test_simplify_handles_empty_and_none() -> None:
    assert simplify_text("") == ""
    assert simplify_text(None) == ""


def test_smart_includes_ignores_accents() -> None:
    assert smart_includes("Ação Rápida", "acao rap")


def test_smart_includes_rejects_non_substring() -> None:
    assert not smart_includes("Garden shed", "kitchen")


def test_smart_includes_empty_query_matches() -> None:
    assert smart_includes("anything", "")
