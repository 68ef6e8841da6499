"""Domain-specific calculation helpers."""

from .allocator import (
    BracketAllocation,
    CalculationResult,
    allocate,
    sort_brackets,
    taxable_in_band,
)
from .utils import (
    format_bracket_range,
    format_currency,
    format_effective_rate,
    format_rate,
    round_currency,
    round_rate,
)

__all__ = [
    "BracketAllocation",
    "CalculationResult",
    "allocate",
    "format_bracket_range",
    "format_currency",
    "format_effective_rate",
    "format_rate",
    "round_currency",
    "round_rate",
    "sort_brackets",
    "taxable_in_band",
]
