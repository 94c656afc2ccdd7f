#!/usr/bin/env python3
"""
Render an HTML invoice from a YAML invoice description.

Reads the invoice, fills defaults from the config file, computes line-item
amounts and totals, and prints the invoice template filled with the result.

Usage:
    invoicegen [options] <invoice.yaml>
    invoicegen -g <monthOffset>

Example:
    invoicegen -t ~/.genInvoice/Invoice.html.tmpl invoices/2024-01.yaml > invoice.html
    invoicegen -g 1 > invoices/last-month.yaml
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_CONFIG_PATH, DEFAULT_TEMPLATE_PATH
from core.diagnostics import RunLog
from core.errors import InvoiceError
from models.invoice import RunOptions
from services.invoices import generate_invoice
from services.sample import generate_sample_invoice


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invoicegen",
        description="Generate an HTML invoice from a YAML invoice description",
    )
    parser.add_argument(
        "invoice_file",
        nargs="?",
        type=Path,
        help="Path to the invoice YAML file",
    )
    parser.add_argument(
        "-t",
        dest="template",
        type=Path,
        default=DEFAULT_TEMPLATE_PATH,
        help=f"Template file path (default: {DEFAULT_TEMPLATE_PATH})",
    )
    parser.add_argument(
        "-c",
        dest="config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Config file path (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "-g",
        dest="month_offset",
        type=int,
        metavar="MONTH_OFFSET",
        help="Print a sample invoice for the month MONTH_OFFSET months ago and exit",
    )
    parser.add_argument(
        "--raw-cells",
        action="store_true",
        help="Don't escape HTML special characters in table cells",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print diagnostics such as the detected amount/hours columns",
    )
    return parser


def parse_options(argv: list[str] | None = None) -> RunOptions:
    args = build_parser().parse_args(argv)
    return RunOptions(
        invoice_path=args.invoice_file,
        template_path=args.template.expanduser(),
        config_path=args.config.expanduser(),
        generate_offset=args.month_offset,
        escape_cells=not args.raw_cells,
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None) -> int:
    options = parse_options(argv)

    if options.generate_offset is not None:
        sys.stdout.write(generate_sample_invoice(options.generate_offset))
        return 0

    if options.invoice_path is None:
        build_parser().print_help(sys.stderr)
        return 2

    log = RunLog(verbose=options.verbose)
    try:
        html = generate_invoice(options, log)
    except InvoiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
