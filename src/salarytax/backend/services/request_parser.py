"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from salarytax.backend.config.year_config import available_years

_FIELD_ALIASES = {"taxYear": "tax_year", "income": "salary"}


def _resolve_tax_year(req: Request, payload: dict[str, Any]) -> None:
    """Populate ``tax_year`` from the query string or the latest supported year."""

    if "tax_year" in payload:
        return

    year_param = req.args.get("tax_year") or req.args.get("year")
    if year_param:
        payload["tax_year"] = year_param
        return

    years = available_years()
    if years:
        payload["tax_year"] = years[-1]


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON payload from ``req`` with canonical field names."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload: dict[str, Any] = {}
    for key, value in data.items():
        payload[_FIELD_ALIASES.get(key, key)] = value

    _resolve_tax_year(req, payload)

    return payload
