import logging

import pytest

from interior_estimator.models.estimate_schema import DiscountType, Estimate
from interior_estimator.pricing.pricer import new_custom_item
from interior_estimator.pricing.totals import (
    EstimateTotals,
    apply_totals,
    calculate_discount,
    calculate_totals,
    estimate_totals,
)


@pytest.fixture
def ten_thousand():
    return [new_custom_item("pieces", "Hall", "TV Unit", "Plywood", amount_per_unit=10000, pieces=1)]


def test_percentage_discount(ten_thousand) -> None:
    totals = calculate_totals(ten_thousand, 10, "percentage")
    assert totals == EstimateTotals(subtotal=10000, discount_amount=1000, grand_total=9000)


def test_fixed_discount(ten_thousand) -> None:
    totals = calculate_totals(ten_thousand, 500, DiscountType.FIXED)
    assert totals.discount_amount == 500
    assert totals.grand_total == 9500


def test_missing_discount_type_is_percentage(ten_thousand) -> None:
    assert calculate_totals(ten_thousand, 5, None).discount_amount == 500
    assert calculate_discount(200, "", "percentage") == 0


def test_totals_sum_item_totals(area_item, pieces_item, running_item) -> None:
    totals = calculate_totals([area_item, pieces_item, running_item])
    assert totals.subtotal == pytest.approx(3250 + 1000 + 3280.84, abs=0.01)
    assert totals.discount_amount == 0
    assert totals.grand_total == totals.subtotal


def test_out_of_range_percentage_is_logged_not_clamped(ten_thousand, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        totals = calculate_totals(ten_thousand, 150, "percentage")

    assert totals.discount_amount == 15000
    assert totals.grand_total == -5000
    assert "outside 0-100" in caplog.text
    assert "Grand total is negative" in caplog.text


def test_fixed_discount_above_subtotal_is_logged(ten_thousand, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        totals = calculate_totals(ten_thousand, 12000, "fixed")
    assert totals.grand_total == -2000
    assert "Grand total is negative" in caplog.text
    assert "outside 0-100" not in caplog.text


def test_empty_estimate_totals_are_zero() -> None:
    assert estimate_totals(Estimate()) == EstimateTotals()


def test_apply_totals_refreshes_cached_total(estimate) -> None:
    stale = estimate.model_copy(update={"total_amount": 1.0})
    refreshed = apply_totals(stale)

    assert stale.total_amount == 1.0
    assert refreshed.total_amount == pytest.approx(estimate_totals(estimate).grand_total)
    assert refreshed.total_amount == pytest.approx(7530.84 * 0.9, abs=0.01)


def test_totals_to_dict(ten_thousand) -> None:
    assert calculate_totals(ten_thousand, 10).to_dict() == {
        "subtotal": 10000,
        "discount_amount": 1000,
        "grand_total": 9000,
    }


def test_stored_item_totals_are_recomputed(stale_record) -> None:
    stale = Estimate.from_record(stale_record)
    assert stale.items[0].total_amount == 0

    assert estimate_totals(stale).grand_total == 3250
    refreshed = apply_totals(stale)
    assert refreshed.items[0].total_amount == 3250
    assert refreshed.total_amount == 3250
