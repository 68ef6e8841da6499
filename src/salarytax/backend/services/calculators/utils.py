"""Formatting and rounding helpers shared by the presentation layers."""

from __future__ import annotations

from salarytax.backend.config.schema import TaxBracket

OPEN_ENDED_LABEL = "∞"


def format_currency(amount: float) -> str:
    """Return ``amount`` as Canadian dollars, e.g. ``$75,000.00``."""

    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_rate(rate: float) -> str:
    """Return a marginal rate with one decimal, e.g. ``20.5%``."""

    return f"{rate * 100:.1f}%"


def format_effective_rate(ratio: float) -> str:
    """Return an effective rate ratio as a percentage with two decimals."""

    return f"{ratio * 100:.2f}%"


def format_bracket_range(bracket: TaxBracket) -> str:
    """Return the ``min - max`` label for ``bracket``."""

    lower = format_currency(bracket.lower_bound)
    if bracket.upper_bound is None:
        return f"{lower} - {OPEN_ENDED_LABEL}"
    return f"{lower} - {format_currency(bracket.upper_bound)}"


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
