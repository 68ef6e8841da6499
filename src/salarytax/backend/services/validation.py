"""Guard functions validating calculation inputs before any bracket lookup.

Each guard returns a message for the offending field (or ``None``) instead of
raising, so callers can surface every field-level problem at once.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from numbers import Real
from typing import Any

from salarytax.backend.config.year_config import (
    ValidationPolicy,
    available_years,
    load_validation_policy,
)

SALARY_NOT_A_NUMBER = "Salary must be a number"
SALARY_NOT_POSITIVE = "Salary must be positive"
TAX_YEAR_REQUIRED = "Tax year is required"
TAX_YEAR_NOT_A_NUMBER = "Tax year must be a number"
TAX_YEAR_NOT_SUPPORTED = "Tax year is not supported"


@dataclass(frozen=True)
class ValidationErrors:
    """Per-field validation messages; absent fields passed validation."""

    salary: str | None = None
    tax_year: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.salary is None and self.tax_year is None

    def as_dict(self) -> dict[str, str]:
        return {field: message for field, message in asdict(self).items() if message}


class CalculationValidationError(ValueError):
    """Raised by callers that need validation failures as exceptions."""

    def __init__(self, errors: ValidationErrors) -> None:
        self.errors = errors
        details = "; ".join(f"{field}: {message}" for field, message in errors.as_dict().items())
        super().__init__(f"Invalid calculation input: {details}")


@dataclass(frozen=True)
class CalculationInput:
    """Validated salary and tax year."""

    salary: float
    tax_year: int


def _parse_number(value: Any) -> float | None:
    """Return ``value`` as a float, or ``None`` when it is not numeric.

    Blank strings count as zero, matching how form inputs report an empty
    field. Integers too large for a float become signed infinity so the range
    guards report them. Thousands separators are not accepted.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        try:
            number = float(value)
        except OverflowError:
            number = math.inf if value > 0 else -math.inf
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def _compact_amount(amount: float) -> str:
    if amount >= 1_000_000 and amount % 1_000_000 == 0:
        return f"{int(amount // 1_000_000)}M"
    if amount >= 1_000 and amount % 1_000 == 0:
        return f"{int(amount // 1_000)}K"
    return f"{amount:,.2f}"


def validate_salary(value: Any, policy: ValidationPolicy | None = None) -> str | None:
    """Return an error message when ``value`` is not an acceptable salary."""

    limits = policy or load_validation_policy()
    salary = _parse_number(value)
    if salary is None:
        return SALARY_NOT_A_NUMBER
    if salary <= limits.min_income:
        return SALARY_NOT_POSITIVE
    if salary > limits.max_income:
        return f"Salary cannot exceed {_compact_amount(limits.max_income)}"
    return None


def _parse_year(value: Any) -> float | None:
    """Return ``value`` as a whole number (or signed infinity), else ``None``."""

    number = _parse_number(value)
    if number is None or not (math.isinf(number) or number.is_integer()):
        return None
    return number


def validate_tax_year(value: Any, years: Sequence[int] | None = None) -> str | None:
    """Return an error message when ``value`` is not a supported tax year."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return TAX_YEAR_REQUIRED

    year = _parse_year(value)
    if year is None:
        return TAX_YEAR_NOT_A_NUMBER

    supported = sorted(years if years is not None else available_years())
    if not supported:
        return TAX_YEAR_NOT_SUPPORTED
    if year < supported[0]:
        return f"Tax year must be {supported[0]} or later"
    if year > supported[-1]:
        return f"Tax year cannot exceed {supported[-1]}"
    if int(year) not in supported:
        return f"Tax year {int(year)} is not supported"
    return None


def validate_calculation_input(
    salary: Any,
    tax_year: Any,
    policy: ValidationPolicy | None = None,
    years: Sequence[int] | None = None,
) -> ValidationErrors:
    """Run every guard and collect the messages per field."""

    return ValidationErrors(
        salary=validate_salary(salary, policy),
        tax_year=validate_tax_year(tax_year, years),
    )


def parse_calculation_input(
    salary: Any,
    tax_year: Any,
    policy: ValidationPolicy | None = None,
    years: Sequence[int] | None = None,
) -> CalculationInput:
    """Validate and coerce the raw inputs, raising on any field error."""

    errors = validate_calculation_input(salary, tax_year, policy, years)
    parsed_salary = _parse_number(salary)
    parsed_year = _parse_year(tax_year)
    if not errors.is_valid or parsed_salary is None or parsed_year is None:
        raise CalculationValidationError(errors)
    return CalculationInput(salary=parsed_salary, tax_year=int(parsed_year))


__all__ = [
    "CalculationInput",
    "CalculationValidationError",
    "ValidationErrors",
    "parse_calculation_input",
    "validate_calculation_input",
    "validate_salary",
    "validate_tax_year",
]
