"""Service-layer helpers for the SalaryTax backend."""

from .bracket_provider import (
    BracketProvider,
    BracketProviderError,
    HttpBracketProvider,
    LocalBracketProvider,
)
from .calculation_service import (
    CalculationOutcome,
    CalculationStatus,
    TaxCalculationSession,
    calculate_tax,
)
from .request_parser import parse_calculation_payload
from .validation import CalculationValidationError, ValidationErrors

__all__ = [
    "BracketProvider",
    "BracketProviderError",
    "CalculationOutcome",
    "CalculationStatus",
    "CalculationValidationError",
    "HttpBracketProvider",
    "LocalBracketProvider",
    "TaxCalculationSession",
    "ValidationErrors",
    "calculate_tax",
    "parse_calculation_payload",
]
