"""Pydantic models describing the tax year bracket configuration schema."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """A half-open income band ``[min, max)`` taxed at a single marginal rate.

    Degenerate bands (``max`` below ``min``) and out-of-range rates are
    accepted here; the configuration validator reports them.
    """

    lower_bound: float = Field(alias="min")
    upper_bound: float | None = Field(default=None, alias="max")
    rate: float

    @property
    def is_open_ended(self) -> bool:
        return self.upper_bound is None


class TaxYearBrackets(ImmutableModel):
    """Bracket set published for a single tax year."""

    year: int
    currency: str = "CAD"
    meta: Mapping[str, Any] = Field(default_factory=dict)
    tax_brackets: Sequence[TaxBracket] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _require_mapping(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")
        prepared = dict(data)
        if prepared.get("meta") is None:
            prepared["meta"] = {}
        if prepared.get("tax_brackets") is None:
            prepared["tax_brackets"] = []
        return prepared


class ValidationPolicy(ImmutableModel):
    """Income limits enforced before a calculation is attempted."""

    min_income: float = 0.0
    max_income: float = 10_000_000.0

    @model_validator(mode="after")
    def _validate_limits(self) -> ValidationPolicy:
        if self.min_income < 0:
            raise ConfigurationError("Minimum income must be non-negative")
        if self.max_income <= self.min_income:
            raise ConfigurationError("Maximum income must exceed the minimum income")
        return self


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]
    limits: ValidationPolicy = Field(default_factory=ValidationPolicy)

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "ConfigurationError",
    "ImmutableModel",
    "TaxBracket",
    "TaxYearBrackets",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "ValidationPolicy",
]
