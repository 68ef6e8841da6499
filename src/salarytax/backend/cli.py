"""Command line front end printing a per-bracket tax breakdown."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Sequence, TextIO

from salarytax.backend.config.year_config import available_years
from salarytax.backend.logging_config import configure_logging
from salarytax.backend.services.bracket_provider import (
    API_BASE_URL_ENV,
    BracketProvider,
    HttpBracketProvider,
    LocalBracketProvider,
)
from salarytax.backend.services.calculation_service import (
    CalculationOutcome,
    CalculationStatus,
    TaxCalculationSession,
)
from salarytax.backend.services.calculators import (
    CalculationResult,
    format_bracket_range,
    format_currency,
    format_effective_rate,
    format_rate,
)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2

TABLE_HEADERS = ("Income Range", "Rate", "Amount in Bracket", "Tax")

_LOGGER = logging.getLogger("salarytax.cli")


def render_breakdown(result: CalculationResult) -> str:
    """Render ``result`` as a fixed-width table followed by the totals."""

    rows = [
        (
            format_bracket_range(allocation.bracket),
            format_rate(allocation.bracket.rate),
            format_currency(allocation.taxable_amount),
            format_currency(allocation.tax_paid),
        )
        for allocation in result.allocations
    ]
    widths = [
        max(len(header), *(len(row[index]) for row in rows)) if rows else len(header)
        for index, header in enumerate(TABLE_HEADERS)
    ]

    def _line(cells: Sequence[str]) -> str:
        first, *numeric = cells
        parts = [first.ljust(widths[0])]
        parts.extend(cell.rjust(width) for cell, width in zip(numeric, widths[1:]))
        return "  ".join(parts).rstrip()

    lines = [_line(TABLE_HEADERS), "  ".join("-" * width for width in widths)]
    lines.extend(_line(row) for row in rows)
    lines.append("")
    lines.append(f"Total Tax: {format_currency(result.total_tax)}")
    lines.append(f"Effective Tax Rate: {format_effective_rate(result.effective_rate)}")
    return "\n".join(lines)


def _build_argument_parser() -> argparse.ArgumentParser:
    years = available_years()
    parser = argparse.ArgumentParser(
        prog="salarytax",
        description="Break an annual salary down across progressive tax brackets.",
    )
    parser.add_argument("--salary", required=True, help="Annual income in CAD")
    parser.add_argument(
        "--year",
        default=str(years[-1]) if years else None,
        help="Tax year (defaults to the latest configured year)",
    )
    parser.add_argument(
        "--api-base-url",
        default=os.getenv(API_BASE_URL_ENV) or None,
        help=(
            "Fetch brackets from a remote SalaryTax API instead of the bundled "
            f"configuration (defaults to ${API_BASE_URL_ENV})"
        ),
    )
    parser.add_argument("--log-level", default=None, help="Logging level override")
    return parser


def _select_provider(base_url: str | None) -> BracketProvider:
    if base_url:
        return HttpBracketProvider(base_url)
    return LocalBracketProvider()


def _report(outcome: CalculationOutcome, stream: TextIO) -> int:
    if outcome.status is CalculationStatus.INVALID:
        for field, message in outcome.errors.as_dict().items():
            print(f"{field}: {message}", file=stream)
        return EXIT_INVALID

    if outcome.status is CalculationStatus.COMPLETED and outcome.result is not None:
        print(render_breakdown(outcome.result), file=stream)
        return EXIT_OK

    print(f"Error: {outcome.message or 'calculation did not complete'}", file=stream)
    return EXIT_FAILED


def main(argv: Sequence[str] | None = None, *, stream: TextIO | None = None) -> int:
    """Entry point for the ``salarytax`` console script."""

    args = _build_argument_parser().parse_args(argv)
    configure_logging(args.log_level)

    session = TaxCalculationSession(_select_provider(args.api_base_url), logger=_LOGGER)
    outcome = asyncio.run(session.submit(args.salary, args.year))
    return _report(outcome, stream or sys.stdout)


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
