import json

import pytest

from interior_estimator import RULES_DIR
from interior_estimator.models.estimate_schema import ItemType
from interior_estimator.store.estimate_store import (
    JsonDirectoryStore,
    catalog_by_id,
    load_catalog,
    load_estimate,
)


def test_save_refreshes_total_and_timestamps(estimate, tmp_path) -> None:
    store = JsonDirectoryStore(tmp_path / "estimates")
    stale = estimate.model_copy(update={"total_amount": 0.0, "updated_at": None})

    stored = store.save(stale)

    assert stored.total_amount == pytest.approx(estimate.total_amount)
    assert stored.created_at == estimate.created_at
    assert stored.updated_at is not None

    record = json.loads((tmp_path / "estimates" / f"{estimate.id}.json").read_text())
    assert record["_id"] == estimate.id
    assert record["totalAmount"] == pytest.approx(estimate.total_amount)


def test_get_returns_saved_estimate(estimate, tmp_path) -> None:
    store = JsonDirectoryStore(tmp_path)
    stored = store.save(estimate)

    assert store.get(estimate.id) == stored
    assert store.list_ids() == [estimate.id]


def test_get_missing_estimate(tmp_path) -> None:
    with pytest.raises(KeyError):
        JsonDirectoryStore(tmp_path).get("nope")


def test_load_estimate_from_record(estimate, write_json) -> None:
    path = write_json("estimate.json", estimate.to_record())
    assert load_estimate(path) == estimate


def test_bundled_catalog() -> None:
    sections = load_catalog(RULES_DIR / "catalog.yaml")

    assert len(sections) == 6
    assert sections[0].category_name == "Kitchen"
    assert sections[-1].type is ItemType.RUNNING
    assert set(catalog_by_id(sections)) == {s.id for s in sections}


def test_json_catalog_list(write_json) -> None:
    path = write_json("catalog.json", [
        {"_id": "s1", "categoryName": "Bath", "material": "Mirror", "amount": 900, "type": "pieces"},
    ])
    (section,) = load_catalog(path)
    assert section.id == "s1"
    assert section.type is ItemType.PIECES


def test_save_reprices_stale_items(stale_record, write_json, tmp_path) -> None:
    store = JsonDirectoryStore(tmp_path / "estimates")
    stored = store.save(load_estimate(write_json("stale.json", stale_record)))

    assert stored.items[0].total_amount == 3250
    record = json.loads((tmp_path / "estimates" / "0000000000stale1.json").read_text())
    assert record["items"][0]["totalAmount"] == 3250
    assert record["totalAmount"] == 3250
