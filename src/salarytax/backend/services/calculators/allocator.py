"""Progressive bracket allocation.

Partitions a gross income across marginal rate bands and derives the tax owed
per band, the total tax and the effective rate. The functions here are pure:
no I/O, no logging and no shared state, so callers may invoke them from any
context.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from salarytax.backend.config.schema import TaxBracket


@dataclass(frozen=True)
class BracketAllocation:
    """Portion of income that falls inside ``bracket`` and the tax it attracts."""

    bracket: TaxBracket
    taxable_amount: float
    tax_paid: float


@dataclass(frozen=True)
class CalculationResult:
    """Per-band allocations (ascending by lower bound) and derived totals."""

    allocations: tuple[BracketAllocation, ...]
    total_tax: float
    effective_rate: float

    @property
    def taxable_total(self) -> float:
        return sum(allocation.taxable_amount for allocation in self.allocations)


def taxable_in_band(income: float, bracket: TaxBracket) -> float:
    """Return the share of ``income`` inside ``[min, max)`` clamped to the band width."""

    lower = bracket.lower_bound
    upper = math.inf if bracket.upper_bound is None else bracket.upper_bound
    return max(0.0, min(income - lower, upper - lower))


def sort_brackets(brackets: Iterable[TaxBracket]) -> list[TaxBracket]:
    """Order ``brackets`` by lower bound; ties keep their input order."""

    return sorted(brackets, key=lambda bracket: bracket.lower_bound)


def allocate(income: float, brackets: Iterable[TaxBracket]) -> CalculationResult:
    """Allocate ``income`` across ``brackets`` and compute the resulting tax.

    Bands that receive no income are omitted from the allocations. Degenerate
    bands (``max`` below ``min``) contribute nothing. Input validation is the
    caller's responsibility; for zero income the effective rate is ``nan``.
    """

    allocations: list[BracketAllocation] = []
    total_tax = 0.0

    for bracket in sort_brackets(brackets):
        amount = taxable_in_band(income, bracket)
        if amount > 0:
            tax_paid = amount * bracket.rate
            allocations.append(
                BracketAllocation(bracket=bracket, taxable_amount=amount, tax_paid=tax_paid)
            )
            total_tax += tax_paid

    effective_rate = total_tax / income if income else math.nan

    return CalculationResult(
        allocations=tuple(allocations),
        total_tax=total_tax,
        effective_rate=effective_rate,
    )


__all__ = [
    "BracketAllocation",
    "CalculationResult",
    "allocate",
    "sort_brackets",
    "taxable_in_band",
]
