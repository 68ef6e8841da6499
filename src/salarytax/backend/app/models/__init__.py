"""Public API models."""

from .api import (
    AllocationEntry,
    AllocationLabels,
    BracketPayload,
    CalculationResponse,
    ResponseMeta,
    Summary,
    SummaryLabels,
    TaxBracketsResponse,
)

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
