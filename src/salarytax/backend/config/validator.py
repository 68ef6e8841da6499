"""Utilities for validating bracket configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .year_config import (
    ConfigurationError,
    TaxBracket,
    TaxYearBrackets,
    available_years,
    load_year_brackets,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _amount(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _describe(bracket: TaxBracket) -> str:
    upper = "open" if bracket.upper_bound is None else _amount(bracket.upper_bound)
    return f"[{_amount(bracket.lower_bound)}, {upper})"


def _validate_bracket_values(scope: str, bracket: TaxBracket) -> list[str]:
    errors: list[str] = []
    label = _describe(bracket)

    if bracket.lower_bound < 0:
        errors.append(_format_scope(scope, f"bracket {label} has a negative lower bound"))

    if bracket.rate < 0 or bracket.rate > 1:
        errors.append(
            _format_scope(
                scope,
                f"bracket {label} rate {bracket.rate} must be between 0 and 1",
            )
        )

    upper = bracket.upper_bound
    if upper is not None and upper <= bracket.lower_bound:
        errors.append(
            _format_scope(scope, f"bracket {label} upper bound must exceed its lower bound")
        )

    return errors


def validate_bracket_set(
    brackets: Sequence[TaxBracket], *, scope: str = "tax_brackets"
) -> list[str]:
    """Return issues that break the contiguous, non-overlapping band invariant."""

    if not brackets:
        return [_format_scope(scope, "at least one tax bracket must be defined")]

    errors: list[str] = []
    for bracket in brackets:
        errors.extend(_validate_bracket_values(scope, bracket))

    open_ended = [bracket for bracket in brackets if bracket.is_open_ended]
    if len(open_ended) > 1:
        errors.append(
            _format_scope(
                scope,
                f"{len(open_ended)} open-ended brackets defined; at most one is allowed",
            )
        )

    ordered = sorted(brackets, key=lambda bracket: bracket.lower_bound)
    if ordered[0].lower_bound != 0:
        errors.append(
            _format_scope(
                scope,
                f"lowest bracket starts at {_amount(ordered[0].lower_bound)} instead of 0",
            )
        )

    for previous, current in zip(ordered, ordered[1:]):
        upper = previous.upper_bound
        if upper is None:
            errors.append(
                _format_scope(
                    scope,
                    f"open-ended bracket {_describe(previous)} is followed by "
                    f"{_describe(current)}",
                )
            )
            continue
        if current.lower_bound > upper:
            errors.append(
                _format_scope(
                    scope,
                    f"gap between {_describe(previous)} and {_describe(current)}",
                )
            )
        elif current.lower_bound < upper:
            errors.append(
                _format_scope(
                    scope,
                    f"overlap between {_describe(previous)} and {_describe(current)}",
                )
            )

    if ordered[-1].upper_bound is not None:
        errors.append(_format_scope(scope, "final tax bracket must have an open upper bound"))

    return errors


def validate_year_brackets(config: TaxYearBrackets) -> list[str]:
    """Validate a tax year's bracket set and return human-readable issues."""

    errors = validate_bracket_set(config.tax_brackets)

    if not config.currency or len(config.currency) != 3:
        errors.append(
            _format_scope("currency", f"'{config.currency}' is not an ISO 4217 code"),
        )

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_brackets(year)
        results[int(year)] = validate_year_brackets(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax year brackets and report issues helpful to "
            "contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_brackets(year)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_brackets(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
