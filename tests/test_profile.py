import logging

from interior_estimator.measurement.units import RoundingMode
from interior_estimator.report.profile import (
    DEFAULT_TERMS,
    DocumentProfile,
    PageGeometry,
    load_document_profile,
)


def test_bundled_profile_matches_defaults() -> None:
    profile = load_document_profile()
    defaults = DocumentProfile()

    assert profile.company_name == defaults.company_name
    assert profile.terms == DEFAULT_TERMS
    assert profile.geometry == PageGeometry()
    assert profile.area_display_rounding is RoundingMode.WHOLE


def test_missing_profile_falls_back(tmp_path, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        profile = load_document_profile(tmp_path / "missing.yaml")
    assert profile == DocumentProfile()
    assert "Could not load document profile" in caplog.text


def test_malformed_profile_falls_back(tmp_path, caplog) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("company: [unclosed\n")
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")

    with caplog.at_level(logging.WARNING):
        assert load_document_profile(broken) == DocumentProfile()
        assert load_document_profile(listing) == DocumentProfile()
    assert caplog.text.count("Could not load document profile") == 2


def test_partial_profile_keeps_defaults(tmp_path) -> None:
    path = tmp_path / "profile.yaml"
    path.write_text(
        "company:\n"
        "  name: Acme Interiors\n"
        "money:\n"
        "  currency_prefix: 'INR '\n"
        "area_display_rounding: half\n"
        "geometry:\n"
        "  page_end_y: 270\n"
        "  frame: [10, 10, 190, 277]\n"
    )
    profile = load_document_profile(path)

    assert profile.company_name == "Acme Interiors"
    assert profile.currency_prefix == "INR "
    assert profile.receipt_currency_prefix == "Rs. "
    assert profile.area_display_rounding is RoundingMode.HALF
    assert profile.geometry.page_end_y == 270
    assert profile.geometry.frame == (10, 10, 190, 277)
    assert profile.geometry.page_start_y == 20
    assert profile.geometry.usable_height == 250
