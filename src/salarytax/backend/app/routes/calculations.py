"""REST endpoints for tax calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from salarytax.backend.app.models import CalculationResponse
from salarytax.backend.services import calculate_tax, parse_calculation_payload

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Break the submitted salary down across the tax year's brackets."""

    payload = parse_calculation_payload(request)
    inputs, result = calculate_tax(payload.get("salary"), payload.get("tax_year")).completed()

    response = CalculationResponse.from_result(inputs, result)
    return jsonify(response.model_dump()), 200
