from datetime import date

import pytest

from interior_estimator.errors import DocumentStructureError, NoCompletedPaymentsError
from interior_estimator.models.estimate_schema import PaymentPhase
from interior_estimator.pricing.totals import estimate_totals
from interior_estimator.report.pdf_receipt import (
    COMPUTER_GENERATED,
    THANK_YOU,
    completed_phases,
    export_receipt_pdf,
    payment_summary,
    phase_number,
    render_all_payments_receipt,
    render_phase_receipt,
)

ISSUED = date(2025, 6, 1)


def test_summary_counts_completed_phases_only(phases) -> None:
    summary = payment_summary(10000, phases)
    assert summary.total_project_amount == 10000
    assert summary.total_paid == 7500
    assert summary.balance == 2500
    assert [p.id for p in completed_phases(phases)] == ["phase-0000a1", "phase-0000b2"]


def test_phase_number_is_schedule_position(phases) -> None:
    assert phase_number(phases, phases[2]) == 3
    with pytest.raises(DocumentStructureError):
        phase_number(phases, PaymentPhase(id="elsewhere"))


def test_bank_phase_receipt(estimate, client, phases, bank, profile, pdf_page_texts) -> None:
    result = render_phase_receipt(estimate, client, phases, phases[1], bank, profile, ISSUED)
    text = "\n".join(pdf_page_texts(result.pdf))

    assert "PAYMENT RECEIPT" in text
    assert "RCP-2025-0000B2" in text
    assert "Date: 01/05/2025" in text
    assert "Phase 2 Payment" in text
    assert "Rs. 2,500" in text
    assert "Total Amount Paid" in text and "Rs. 7,500" in text
    assert "BANK DETAILS" in text
    assert "FDRL0001234" in text
    assert THANK_YOU in text
    assert ("bank", "Federal Bank") in [b for page in result.pages for b in page.blocks]


def test_cash_phase_receipt_has_no_bank_block(estimate, client, phases, bank, profile, pdf_page_texts) -> None:
    result = render_phase_receipt(estimate, client, phases, phases[0], bank, profile, ISSUED)
    text = "\n".join(pdf_page_texts(result.pdf))

    assert result.page_count == 1
    assert "Phase 1 Payment" in text
    assert "Cash" in text
    assert "BANK DETAILS" not in text
    assert result.pages[0].footer == "Page 1 of 1"


def test_receipt_balance_uses_estimate_total(estimate, client, phases, profile, pdf_page_texts) -> None:
    assert estimate_totals(estimate).grand_total == pytest.approx(6777.76, abs=0.01)
    result = render_phase_receipt(estimate, client, phases, phases[0], profile=profile, issued_on=ISSUED)
    text = "\n".join(pdf_page_texts(result.pdf))

    assert "Total Project Amount" in text
    assert "Rs. 6,778" in text
    assert "Rs. -722" in text


def test_all_payments_receipt(estimate, client, phases, profile, pdf_page_texts) -> None:
    result = render_all_payments_receipt(estimate, client, phases, profile, ISSUED)
    text = "\n".join(pdf_page_texts(result.pdf))

    assert "PAYMENT RECEIPT - ALL PAYMENTS" in text
    assert "RCP-ALL-2025-7C8D9E" in text
    assert "Total Payments: 2" in text
    assert "Phase 1 Payment" in text
    assert "Phase 2 Payment" in text
    assert "Phase 3 Payment" not in text
    assert COMPUTER_GENERATED in text


def test_all_payments_needs_a_completed_phase(estimate, client, profile) -> None:
    pending = [PaymentPhase(id="p1", amount=100)]
    with pytest.raises(NoCompletedPaymentsError):
        render_all_payments_receipt(estimate, client, pending, profile, ISSUED)


def test_export_phase_receipt_name(estimate, client, phases, bank, profile, tmp_path) -> None:
    path = export_receipt_pdf(estimate, client, phases, "phase-0000b2", bank, tmp_path, profile, ISSUED)
    assert path == tmp_path / "Receipt_Phase_2_Anu_Mathew_01-06-2025.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_export_all_payments_name(estimate, client, phases, profile, tmp_path) -> None:
    path = export_receipt_pdf(estimate, client, phases, output_path=tmp_path, profile=profile, issued_on=ISSUED)
    assert path == tmp_path / "Receipt_All_Payments_Anu_Mathew_01-06-2025.pdf"


def test_export_failures_return_none(estimate, client, phases, profile, tmp_path, caplog) -> None:
    assert export_receipt_pdf(estimate, client, phases, "missing", output_path=tmp_path,
                              profile=profile, issued_on=ISSUED) is None
    assert export_receipt_pdf(estimate, client, [phases[2]], output_path=tmp_path,
                              profile=profile, issued_on=ISSUED) is None
    assert "Failed to generate receipt" in caplog.text
    assert list(tmp_path.iterdir()) == []
