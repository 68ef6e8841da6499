"""Pydantic models describing the public API surface."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from salarytax.backend.config.year_config import TaxBracket
from salarytax.backend.services.calculators import (
    CalculationResult,
    format_bracket_range,
    format_currency,
    format_effective_rate,
    format_rate,
    round_currency,
    round_rate,
)
from salarytax.backend.services.validation import CalculationInput

__all__ = [
    "AllocationEntry",
    "AllocationLabels",
    "BracketPayload",
    "CalculationResponse",
    "ResponseMeta",
    "Summary",
    "SummaryLabels",
    "TaxBracketsResponse",
]


class BracketPayload(BaseModel):
    """Wire representation of a bracket (``max`` omitted when open-ended)."""

    model_config = ConfigDict(extra="forbid")

    min: float
    max: float | None = None
    rate: float

    @classmethod
    def from_bracket(cls, bracket: TaxBracket) -> "BracketPayload":
        return cls(min=bracket.lower_bound, max=bracket.upper_bound, rate=bracket.rate)


class AllocationLabels(BaseModel):
    """Display strings for a breakdown row."""

    model_config = ConfigDict(extra="forbid")

    income_range: str
    rate: str
    taxable_amount: str
    tax_paid: str


class AllocationEntry(BaseModel):
    """One row of the per-bracket breakdown."""

    model_config = ConfigDict(extra="forbid")

    bracket: BracketPayload
    taxable_amount: float
    tax_paid: float
    labels: AllocationLabels


class SummaryLabels(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_tax: str
    effective_rate: str


class Summary(BaseModel):
    """Aggregated calculation results."""

    model_config = ConfigDict(extra="forbid")

    total_tax: float
    effective_rate: float
    effective_rate_percent: float
    labels: SummaryLabels


class ResponseMeta(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tax_year: int
    salary: float
    currency: str = "CAD"


class CalculationResponse(BaseModel):
    """Full response payload produced for a calculation request."""

    model_config = ConfigDict(extra="forbid")

    allocations: list[AllocationEntry]
    summary: Summary
    meta: ResponseMeta

    @classmethod
    def from_result(
        cls, inputs: CalculationInput, result: CalculationResult
    ) -> "CalculationResponse":
        allocations = [
            AllocationEntry(
                bracket=BracketPayload.from_bracket(allocation.bracket),
                taxable_amount=round_currency(allocation.taxable_amount),
                tax_paid=round_currency(allocation.tax_paid),
                labels=AllocationLabels(
                    income_range=format_bracket_range(allocation.bracket),
                    rate=format_rate(allocation.bracket.rate),
                    taxable_amount=format_currency(allocation.taxable_amount),
                    tax_paid=format_currency(allocation.tax_paid),
                ),
            )
            for allocation in result.allocations
        ]
        summary = Summary(
            total_tax=round_currency(result.total_tax),
            effective_rate=round_rate(result.effective_rate),
            effective_rate_percent=round_currency(result.effective_rate * 100),
            labels=SummaryLabels(
                total_tax=format_currency(result.total_tax),
                effective_rate=format_effective_rate(result.effective_rate),
            ),
        )
        meta = ResponseMeta(tax_year=inputs.tax_year, salary=inputs.salary)
        return cls(allocations=allocations, summary=summary, meta=meta)


class TaxBracketsResponse(BaseModel):
    """Payload served by the bracket provider endpoint."""

    model_config = ConfigDict(extra="forbid")

    tax_brackets: list[BracketPayload]

    def as_payload(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
