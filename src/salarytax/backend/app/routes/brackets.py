"""Bracket provider endpoint consumed by remote calculator clients."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from salarytax.backend.app.http import problem_response
from salarytax.backend.app.models import BracketPayload, TaxBracketsResponse
from salarytax.backend.config.year_config import load_year_brackets

blueprint = Blueprint("tax_brackets", __name__, url_prefix="/api/v1/tax-calculator")


@blueprint.get("/tax-year/<int:year>")
def get_tax_brackets(year: int) -> tuple[Any, int]:
    """Return the bracket set configured for ``year``."""

    try:
        configuration = load_year_brackets(year)
    except FileNotFoundError:
        return problem_response(
            "not_found", status=404, message=f"No tax brackets configured for {year}"
        ).to_response()

    response = TaxBracketsResponse(
        tax_brackets=[
            BracketPayload.from_bracket(bracket) for bracket in configuration.tax_brackets
        ]
    )
    return jsonify(response.as_payload()), 200
