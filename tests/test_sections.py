import pytest

from interior_estimator.errors import EmptyGroupError, UnsupportedItemTypeError
from interior_estimator.measurement.units import RoundingMode
from interior_estimator.models.estimate_schema import Estimate, ItemType
from interior_estimator.pricing.pricer import new_custom_item, reprice
from interior_estimator.report.profile import DocumentProfile
from interior_estimator.report.sections import (
    EMPTY_CELL,
    OTHER_SUBCATEGORY,
    UNCATEGORIZED,
    build_table_rows,
    organize_sections,
    prepare_for_export,
    select_columns,
)


def test_sections_keep_first_seen_order(area_item, pieces_item, running_item) -> None:
    sections = organize_sections([area_item, running_item, pieces_item])

    assert list(sections) == ["Kitchen", "Living Room"]
    assert list(sections["Kitchen"]) == ["Base Cabinets", "Hardware"]
    assert sections["Kitchen"]["Hardware"] == [pieces_item]


def test_missing_names_get_default_groups() -> None:
    item = new_custom_item("pieces", "", "", "Knob", amount_per_unit=10, pieces=1)
    sections = organize_sections([item])
    assert sections == {UNCATEGORIZED: {OTHER_SUBCATEGORY: [item]}}


def test_single_type_columns(area_item, pieces_item, running_item) -> None:
    assert select_columns([area_item]).headers == (
        "Description", "Length (cm)", "Breadth (cm)", "Sq Ft", "Amount per sq ft", "Total",
    )
    assert select_columns([pieces_item]).headers == (
        "Description", "Pieces", "Amount per piece", "Total",
    )
    assert select_columns([running_item]).headers == (
        "Description", "Run (cm)", "Feet", "Amount per ft", "Total",
    )


def test_mixed_group_gets_union_of_columns(area_item, running_item) -> None:
    layout = select_columns([running_item, area_item])

    assert layout.is_mixed
    assert layout.item_types == (ItemType.AREA, ItemType.RUNNING)
    assert layout.headers == (
        "Description", "Length (cm)", "Breadth (cm)", "Sq Ft", "Run (cm)", "Feet", "Rate", "Total",
    )


def test_column_widths_fill_table(area_item, pieces_item) -> None:
    widths = select_columns([area_item, pieces_item]).column_widths(180)
    assert sum(widths) == pytest.approx(180)
    assert widths[0] == max(widths)


def test_empty_group_is_rejected() -> None:
    with pytest.raises(EmptyGroupError, match="Kitchen / Base"):
        select_columns([], group="Kitchen / Base")


def test_unknown_item_is_rejected(area_item) -> None:
    with pytest.raises(UnsupportedItemTypeError):
        select_columns([area_item, object()])


def test_area_rows_list_every_patch(profile, area_item) -> None:
    item = reprice(area_item, measurements=[{"length": 100, "breadth": 100}])
    layout = select_columns([item])

    assert build_table_rows([item], layout, profile) == [[
        "Base cabinet carcass\nMaterial: BWP Plywood",
        "300\n100",
        "200\n100",
        "75.0",
        "Rs 50.0",
        "Rs 3750.0",
    ]]


def test_pieces_and_running_rows(profile, pieces_item, running_item) -> None:
    (pieces_row,) = build_table_rows([pieces_item], select_columns([pieces_item]), profile)
    assert pieces_row[1:] == ["4", "Rs 250.0", "Rs 1000.0"]

    (running_row,) = build_table_rows([running_item], select_columns([running_item]), profile)
    assert running_row[1:] == ["1000", "32.81", "Rs 100.0", "Rs 3280.8"]


def test_mixed_rows_fill_unused_columns(profile, area_item, pieces_item) -> None:
    layout = select_columns([area_item, pieces_item])
    area_row, pieces_row = build_table_rows([area_item, pieces_item], layout, profile)

    assert pieces_row[layout.column_index("Length (cm)")] == EMPTY_CELL
    assert pieces_row[layout.column_index("Sq Ft")] == EMPTY_CELL
    assert pieces_row[layout.column_index("Pieces")] == "4"
    assert area_row[layout.column_index("Pieces")] == EMPTY_CELL
    assert area_row[layout.column_index("Rate")] == "Rs 50.0"


def test_half_display_rounding_does_not_change_price() -> None:
    # 150 x 100 cm = 16.15 sq ft: shown as 16.5, priced on 16
    item = new_custom_item("area", "Bath", "Vanity", "WPC", amount_per_unit=100, length=150, breadth=100)
    profile = DocumentProfile(area_display_rounding=RoundingMode.HALF)

    (row,) = build_table_rows([item], select_columns([item]), profile)
    assert row[3] == "16.5"
    assert row[-1] == "Rs 1600.0"


def test_description_without_material() -> None:
    item = new_custom_item("pieces", "Bath", "Mirror", "", description="Oval mirror", pieces=1)
    (row,) = build_table_rows([item], select_columns([item]), DocumentProfile())
    assert row[0] == "Oval mirror"


def test_prepare_for_export_reprices_and_groups(estimate) -> None:
    stale_items = [item.model_copy(update={"total_amount": 1.0}) for item in estimate.items]
    stale = estimate.model_copy(update={"items": stale_items, "total_amount": 0.0})

    ready = prepare_for_export(stale)

    assert [i.total_amount for i in ready.estimate.items] == [i.total_amount for i in estimate.items]
    assert ready.estimate.total_amount == pytest.approx(estimate.total_amount)
    assert ready.totals.grand_total == pytest.approx(estimate.total_amount)
    assert [(b.category, b.subcategory, b.first_in_category) for b in ready.blocks] == [
        ("Kitchen", "Base Cabinets", True),
        ("Kitchen", "Hardware", False),
        ("Living Room", "False Ceiling", True),
    ]


def test_prepare_for_export_rejects_unknown_items(area_item) -> None:
    broken = Estimate.model_construct(items=[area_item, object()])
    with pytest.raises(UnsupportedItemTypeError):
        prepare_for_export(broken)
