from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from invoice_engine.core.calculations.totals_calculator import calculate_due_date, calculate_totals
from invoice_engine.core.models.invoice import InvoiceRecord
from invoice_engine.core.services.invoice import InvoiceDataError, build_invoice_record, validation_issues
from invoice_engine.core.services.labels import load_labels, make_resolver
from invoice_engine.core.services.settings import EngineSettings, load_settings
from invoice_engine.utils.pdf.core.formatting import format_currency, format_date, format_rate, number_format
from invoice_engine.utils.pdf.exports.invoice import export_invoice_pdf
from invoice_engine.utils.pdf.templates import TEMPLATES

logger = logging.getLogger("invoice_engine")


def _load_invoice(path: Path) -> InvoiceRecord:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise InvoiceDataError("invoice", "expected a JSON object")
    return build_invoice_record(data)


def _resolver(settings: EngineSettings, language: str | None):
    label_sets = load_labels(Path(settings.labels_path)) if settings.labels_path else load_labels()
    return make_resolver(language or settings.language, label_sets)


def _cmd_render(args: argparse.Namespace, settings: EngineSettings) -> int:
    invoice = _load_invoice(args.invoice)
    for issue in validation_issues(invoice):
        logger.warning("%s", issue)
    output = args.output or Path(settings.output_dir or ".")
    document = export_invoice_pdf(
        output,
        invoice,
        logo_image=args.logo,
        template=args.template or settings.template,
        labels=_resolver(settings, args.language),
        qr=settings.qr_enabled and not args.no_qr,
    )
    for warning in document.warnings:
        logger.warning("%s", warning)
    target = output / document.filename if output.is_dir() else output
    print(f"{target} ({document.page_count} page(s))")
    return 0


def _cmd_totals(args: argparse.Namespace, settings: EngineSettings) -> int:
    invoice = _load_invoice(args.invoice)
    resolve = _resolver(settings, args.language)
    fmt = number_format(resolve)
    totals = calculate_totals(invoice.line_items, invoice.tax_rate_percent)
    due = calculate_due_date(invoice.issue_date, invoice.payment_term_code)
    print(f"{resolve('totals.subtotal')}: {format_currency(totals.subtotal, invoice.currency_code, fmt)}")
    print(f"{resolve('totals.tax').replace('{rate}', format_rate(invoice.tax_rate_percent))}: {format_currency(totals.tax_amount, invoice.currency_code, fmt)}")
    print(f"{resolve('totals.total')}: {format_currency(totals.total, invoice.currency_code, fmt)}")
    print(f"{resolve('meta.due_date')}: {format_date(due, fmt)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="invoice-engine", description="Invoice totals and PDF rendering.")
    parser.add_argument("--settings", type=Path, default=None, help="settings JSON (default: data/settings.json)")
    parser.add_argument("--language", default=None, help="label language, e.g. en or nl")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="render an invoice JSON draft to PDF")
    render_cmd.add_argument("invoice", type=Path)
    render_cmd.add_argument("-o", "--output", type=Path, default=None, help="output file or directory")
    render_cmd.add_argument("--template", choices=sorted(TEMPLATES), default=None)
    render_cmd.add_argument("--logo", type=Path, default=None)
    render_cmd.add_argument("--no-qr", action="store_true", help="omit the payment QR code")
    render_cmd.set_defaults(handler=_cmd_render)

    totals_cmd = sub.add_parser("totals", help="print totals and due date")
    totals_cmd.add_argument("invoice", type=Path)
    totals_cmd.set_defaults(handler=_cmd_totals)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="[%(levelname)s] %(message)s")
    settings = load_settings(args.settings)
    try:
        return args.handler(args, settings)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
