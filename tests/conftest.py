from __future__ import annotations

import io
import json
from datetime import datetime
from pathlib import Path
from typing import Callable, List

import pytest

from interior_estimator.models.estimate_schema import (
    BankAccount,
    Client,
    Estimate,
    PaymentPhase,
)
from interior_estimator.pricing.pricer import new_custom_item
from interior_estimator.pricing.totals import apply_totals
from interior_estimator.report.profile import DocumentProfile


@pytest.fixture
def profile() -> DocumentProfile:
    return DocumentProfile()


@pytest.fixture
def area_item():
    return new_custom_item(
        "area", "Kitchen", "Base Cabinets", "BWP Plywood",
        description="Base cabinet carcass", amount_per_unit=50,
        length=300, breadth=200, item_id="area-1",
    )


@pytest.fixture
def pieces_item():
    return new_custom_item(
        "pieces", "Kitchen", "Hardware", "Profile handle",
        description="Aluminium handles", amount_per_unit=250,
        pieces=4, item_id="pieces-1",
    )


@pytest.fixture
def running_item():
    return new_custom_item(
        "running", "Living Room", "False Ceiling", "LED profile",
        description="Recessed LED profile", amount_per_unit=100,
        running_length=1000, item_id="running-1",
    )


@pytest.fixture
def estimate(area_item, pieces_item, running_item) -> Estimate:
    return apply_totals(Estimate(
        id="65f1c2ab9d3e4f5a6b7c8d9e",
        user_id="user-1",
        client_id="client-1",
        estimate_name="Villa interiors",
        items=[area_item, pieces_item, running_item],
        discount=10,
        discount_type="percentage",
        created_at=datetime(2025, 3, 14, 10, 30),
    ))


@pytest.fixture
def client() -> Client:
    return Client(
        id="client-1",
        name="Anu  Mathew",
        email="anu@example.com",
        phone="+91 90000 00000",
        location="Kattappana",
    )


@pytest.fixture
def phases() -> List[PaymentPhase]:
    return [
        PaymentPhase(id="phase-0000a1", amount=5000, status="completed", method="cash",
                     date=datetime(2025, 4, 1)),
        PaymentPhase(id="phase-0000b2", amount=2500, status="completed", method="bank",
                     date=datetime(2025, 5, 1)),
        PaymentPhase(id="phase-0000c3", amount=3000, status="pending"),
    ]


@pytest.fixture
def bank() -> BankAccount:
    return BankAccount(
        bank_name="Federal Bank",
        account_name="Takshaga Spatial Solutions",
        account_number="12340100056789",
        account_type="Current",
        ifsc_code="FDRL0001234",
        upi_id="takshaga@fbl",
    )


@pytest.fixture
def make_estimate() -> Callable[..., Estimate]:
    """Estimate with `categories` x `subcategories` x `rows` area items."""

    def _make(categories: int = 1, subcategories: int = 1, rows: int = 1) -> Estimate:
        items = []
        for c in range(categories):
            for s in range(subcategories):
                for r in range(rows):
                    items.append(new_custom_item(
                        "area", f"Category {c + 1}", f"Subcategory {c + 1}.{s + 1}",
                        f"Material {r + 1}", description=f"Item {c + 1}.{s + 1}.{r + 1}",
                        amount_per_unit=100, length=200, breadth=150,
                    ))
        return apply_totals(Estimate(
            id="000000000000abcdef",
            estimate_name="Generated",
            items=items,
            created_at=datetime(2025, 1, 5),
        ))

    return _make


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, object], Path]:
    def _write(name: str, data: object) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data, default=str))
        return path

    return _write


@pytest.fixture
def pdf_page_texts() -> Callable[[bytes], List[str]]:
    """Text of every page of a PDF, read back with pypdf."""
    from pypdf import PdfReader

    def _texts(pdf: bytes) -> List[str]:
        reader = PdfReader(io.BytesIO(pdf))
        return [page.extract_text() or "" for page in reader.pages]

    return _texts


@pytest.fixture
def stale_record() -> dict:
    """Persisted estimate whose cached totals were never computed."""
    return {
        "_id": "0000000000stale1",
        "estimateName": "Stale totals",
        "items": [{
            "id": "stale-area",
            "type": "area",
            "categoryName": "Kitchen",
            "subCategoryName": "Base Cabinets",
            "materialName": "BWP Plywood",
            "length": 300,
            "breadth": 200,
            "amountPerUnit": 50,
            "totalAmount": 0,
        }],
        "totalAmount": 0,
        "discount": 0,
        "discountType": "percentage",
    }
