"""
Interior Estimator - CLI Entry Point

Commands:
    totals   - Print subtotal, discount and grand total of an estimate
    render   - Write the estimate PDF
    receipt  - Write a payment receipt PDF (one phase or all payments)
    text     - Print the shareable plain-text estimate
    excel    - Write the estimate spreadsheet
"""

import argparse
import logging
import sys
from pathlib import Path

from .models.estimate_schema import BankAccount, Client, PaymentPhase
from .pricing.totals import apply_totals, estimate_totals
from .report.formatting import format_money
from .report.pdf_estimate import export_estimate_pdf
from .report.pdf_receipt import export_receipt_pdf
from .report.profile import load_document_profile
from .store.estimate_store import load_estimate, load_json

logger = logging.getLogger(__name__)

FAILED_MESSAGE = "Failed to generate document"


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )


def _load_client(path):
    return Client.model_validate(load_json(path)) if path else None


def cmd_totals(args):
    """Print estimate totals."""
    estimate = load_estimate(args.estimate)
    profile = load_document_profile(args.profile)
    totals = estimate_totals(estimate)

    def money(value):
        return format_money(value, profile.totals_decimals, profile.currency_prefix)

    print(f"Items:       {len(estimate.items)}")
    print(f"Sub Total:   {money(totals.subtotal)}")
    print(f"Discount:    {money(totals.discount_amount)}")
    print(f"Grand Total: {money(totals.grand_total)}")

    stored = estimate.total_amount
    if abs(stored - totals.grand_total) > 0.005:
        logger.warning(f"Stored total {stored:.2f} differs from recomputed {totals.grand_total:.2f}")
    return 0


def cmd_render(args):
    """Write the estimate PDF."""
    estimate = load_estimate(args.estimate)
    client = _load_client(args.client)
    profile = load_document_profile(args.profile)

    path = export_estimate_pdf(estimate, client, args.out, profile)
    if path is None:
        print(FAILED_MESSAGE)
        return 1
    print(f"Estimate PDF: {path}")
    return 0


def cmd_receipt(args):
    """Write a payment receipt."""
    estimate = load_estimate(args.estimate)
    client = _load_client(args.client)
    profile = load_document_profile(args.profile)

    data = load_json(args.payments)
    if isinstance(data, dict):
        data = data.get("phases", [])
    phases = [PaymentPhase.model_validate(entry) for entry in data]
    bank = BankAccount.model_validate(load_json(args.bank)) if args.bank else None

    path = export_receipt_pdf(
        estimate, client, phases,
        phase_id=args.phase, bank=bank, output_path=args.out, profile=profile,
    )
    if path is None:
        print(FAILED_MESSAGE)
        return 1
    print(f"Receipt PDF: {path}")
    return 0


def cmd_text(args):
    """Print the plain-text estimate."""
    from .export.text_export import render_estimate_text

    estimate = load_estimate(args.estimate)
    client = _load_client(args.client)
    print(render_estimate_text(estimate, client, load_document_profile(args.profile)))
    return 0


def cmd_excel(args):
    """Write the estimate spreadsheet."""
    from .export.excel_export import export_estimate_to_excel

    estimate = apply_totals(load_estimate(args.estimate))
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(export_estimate_to_excel(estimate).getvalue())
    print(f"Excel: {out}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Interior estimate pricing and documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show totals
  python -m interior_estimator totals estimate.json

  # Estimate PDF
  python -m interior_estimator render estimate.json --client client.json --out ./out

  # Receipt for one phase / all completed payments
  python -m interior_estimator receipt estimate.json --client client.json --payments payments.json --phase p1
  python -m interior_estimator receipt estimate.json --client client.json --payments payments.json
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging')

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--profile', default=None,
                        help='Document profile YAML (default: bundled profile)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    totals_parser = subparsers.add_parser('totals', parents=[common], help='Print estimate totals')
    totals_parser.add_argument('estimate', help='Estimate JSON file')
    totals_parser.set_defaults(func=cmd_totals)

    render_parser = subparsers.add_parser('render', parents=[common], help='Write the estimate PDF')
    render_parser.add_argument('estimate', help='Estimate JSON file')
    render_parser.add_argument('--client', '-c', help='Client JSON file')
    render_parser.add_argument('--out', '-o', default=None,
                               help='Output file or directory')
    render_parser.set_defaults(func=cmd_render)

    receipt_parser = subparsers.add_parser('receipt', parents=[common], help='Write a payment receipt PDF')
    receipt_parser.add_argument('estimate', help='Estimate JSON file')
    receipt_parser.add_argument('--client', '-c', help='Client JSON file')
    receipt_parser.add_argument('--payments', '-p', required=True,
                                help='Payment phases JSON file')
    receipt_parser.add_argument('--phase', default=None,
                                help='Phase id (omit for all completed payments)')
    receipt_parser.add_argument('--bank', default=None,
                                help='Bank account JSON file')
    receipt_parser.add_argument('--out', '-o', default=None,
                                help='Output file or directory')
    receipt_parser.set_defaults(func=cmd_receipt)

    text_parser = subparsers.add_parser('text', parents=[common], help='Print the plain-text estimate')
    text_parser.add_argument('estimate', help='Estimate JSON file')
    text_parser.add_argument('--client', '-c', help='Client JSON file')
    text_parser.set_defaults(func=cmd_text)

    excel_parser = subparsers.add_parser('excel', parents=[common], help='Write the estimate spreadsheet')
    excel_parser.add_argument('estimate', help='Estimate JSON file')
    excel_parser.add_argument('--out', '-o', required=True, help='Output .xlsx file')
    excel_parser.set_defaults(func=cmd_excel)

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command:
        return args.func(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
