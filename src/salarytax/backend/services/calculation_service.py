"""Orchestrate input validation, bracket lookup and the tax allocation.

The allocator in :mod:`calculators.allocator` is pure; everything with side
effects (logging, awaiting a bracket provider, tracking the latest result)
lives here. Loggers are injected so hosts decide where diagnostics go.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from salarytax.backend.config.year_config import TaxBracket, ValidationPolicy

from .bracket_provider import BracketProvider, LocalBracketProvider
from .calculators import CalculationResult, allocate
from .validation import (
    CalculationInput,
    ValidationErrors,
    parse_calculation_input,
    validate_calculation_input,
)

_LOGGER = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "An error occurred"


class CalculationStatus(str, Enum):
    COMPLETED = "completed"
    INVALID = "invalid"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CalculationOutcome:
    """What a single submission produced."""

    status: CalculationStatus
    inputs: CalculationInput | None = None
    result: CalculationResult | None = None
    errors: ValidationErrors = field(default_factory=ValidationErrors)
    message: str | None = None

    def completed(self) -> tuple[CalculationInput, CalculationResult]:
        """Return the inputs and result, raising unless the submission completed."""

        finished = self.status is CalculationStatus.COMPLETED
        if not finished or self.inputs is None or self.result is None:
            raise RuntimeError(f"Calculation did not complete (status={self.status.value})")
        return self.inputs, self.result


def _log_result(logger: logging.Logger, income: float, result: CalculationResult) -> None:
    for allocation in result.allocations:
        bracket = allocation.bracket
        logger.debug(
            "Tax calculated for bracket (min=%s, max=%s, rate=%s, taxable=%s, tax=%s)",
            bracket.lower_bound,
            "unlimited" if bracket.upper_bound is None else bracket.upper_bound,
            bracket.rate,
            allocation.taxable_amount,
            allocation.tax_paid,
        )
    logger.info(
        "Tax calculation completed (income=%s, total_tax=%s, effective_rate=%s, brackets_used=%d)",
        income,
        result.total_tax,
        result.effective_rate,
        len(result.allocations),
    )


def _run_allocation(
    logger: logging.Logger, income: float, brackets: Sequence[TaxBracket]
) -> CalculationResult:
    logger.info("Calculating taxes (income=%s, brackets=%d)", income, len(brackets))
    result = allocate(income, brackets)
    _log_result(logger, income, result)
    return result


def calculate_tax(
    salary: Any,
    tax_year: Any,
    *,
    provider: LocalBracketProvider | None = None,
    logger: logging.Logger | None = None,
    policy: ValidationPolicy | None = None,
    years: Sequence[int] | None = None,
) -> CalculationOutcome:
    """Validate the inputs and run the allocation against bundled brackets.

    Raises :class:`CalculationValidationError` when a guard fails and
    :class:`BracketProviderError` when the year has no bracket set.
    """

    log = logger or _LOGGER
    log.info("Tax calculation initiated (salary=%s, tax_year=%s)", salary, tax_year)

    inputs = parse_calculation_input(salary, tax_year, policy, years)
    source = provider or LocalBracketProvider()
    brackets = source.get_brackets(inputs.tax_year)
    log.debug("Tax brackets loaded (year=%s, count=%d)", inputs.tax_year, len(brackets))

    result = _run_allocation(log, inputs.salary, brackets)
    return CalculationOutcome(status=CalculationStatus.COMPLETED, inputs=inputs, result=result)


class TaxCalculationSession:
    """Fetch brackets asynchronously, then allocate the salary across them.

    Only the latest submission may publish a result. Calling :meth:`cancel` or
    starting a new submission supersedes any in-flight fetch, and brackets
    that arrive for a superseded submission are discarded without reaching the
    allocator.
    """

    def __init__(
        self,
        provider: BracketProvider,
        *,
        logger: logging.Logger | None = None,
        policy: ValidationPolicy | None = None,
        years: Sequence[int] | None = None,
    ) -> None:
        self.provider = provider
        self.logger = logger or _LOGGER
        self._policy = policy
        self._years = years
        self._generation = 0
        self._pending: asyncio.Future[list[TaxBracket]] | None = None

        self.result: CalculationResult | None = None
        self.errors = ValidationErrors()
        self.error_message: str | None = None
        self.loading = False

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _cancel_pending(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and not pending.done():
            pending.cancel()

    def cancel(self) -> None:
        """Abandon the in-flight submission, if any."""

        self._generation += 1
        self._cancel_pending()
        self.loading = False

    async def submit(self, salary: Any, tax_year: Any) -> CalculationOutcome:
        """Validate, fetch the year's brackets and compute the breakdown."""

        self.logger.info("Tax calculation initiated (salary=%s, tax_year=%s)", salary, tax_year)

        self._generation += 1
        generation = self._generation
        self._cancel_pending()

        self.result = None
        self.error_message = None
        self.errors = validate_calculation_input(salary, tax_year, self._policy, self._years)

        if not self.errors.is_valid:
            self.logger.warning(
                "Tax calculation aborted due to validation errors (salary_valid=%s, tax_year_valid=%s)",
                self.errors.salary is None,
                self.errors.tax_year is None,
            )
            self.loading = False
            return CalculationOutcome(status=CalculationStatus.INVALID, errors=self.errors)

        inputs = parse_calculation_input(salary, tax_year, self._policy, self._years)

        self.loading = True
        self.logger.info("Fetching tax brackets (year=%s)", inputs.tax_year)
        fetch = asyncio.ensure_future(self.provider.fetch_brackets(inputs.tax_year))
        self._pending = fetch

        try:
            brackets = await fetch
        except asyncio.CancelledError:
            if self._is_current(generation):
                raise
            return self._discard(inputs, generation)
        except Exception as error:
            if not self._is_current(generation):
                return self._discard(inputs, generation)
            message = str(error) or GENERIC_FAILURE_MESSAGE
            self.error_message = message
            self.logger.error(
                "Tax calculation failed (salary=%s, tax_year=%s)",
                salary,
                tax_year,
                exc_info=error,
            )
            return CalculationOutcome(
                status=CalculationStatus.FAILED, inputs=inputs, message=message
            )
        finally:
            if self._pending is fetch:
                self._pending = None
            if self._is_current(generation):
                self.loading = False

        if not self._is_current(generation):
            return self._discard(inputs, generation)

        self.logger.debug(
            "Tax brackets fetched successfully (year=%s, count=%d)",
            inputs.tax_year,
            len(brackets),
        )
        result = _run_allocation(self.logger, inputs.salary, brackets)
        self.result = result
        return CalculationOutcome(
            status=CalculationStatus.COMPLETED, inputs=inputs, result=result
        )

    def _discard(self, inputs: CalculationInput, generation: int) -> CalculationOutcome:
        self.logger.debug(
            "Discarding superseded bracket fetch (year=%s, submission=%d)",
            inputs.tax_year,
            generation,
        )
        return CalculationOutcome(status=CalculationStatus.CANCELLED, inputs=inputs)


__all__ = [
    "CalculationOutcome",
    "CalculationStatus",
    "GENERIC_FAILURE_MESSAGE",
    "TaxCalculationSession",
    "calculate_tax",
]
