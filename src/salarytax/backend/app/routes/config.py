"""Expose configuration metadata consumed by calculator front-ends.

Clients use these endpoints to populate the tax year selector and to mirror
the income limits enforced by the validation guards.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from salarytax.backend.config.year_config import load_manifest
from salarytax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


@blueprint.get("/meta")
def get_meta():
    """Return the running application version."""

    return jsonify({"version": get_project_version()}), 200


@blueprint.get("/years")
def list_years():
    """List supported tax years with their status and the income limits."""

    manifest = load_manifest()
    metadata = get_configuration_metadata()
    years = [
        {"year": entry.year, "status": entry.status}
        for entry in sorted(manifest.years, key=lambda entry: entry.year)
    ]
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "limits": {
            "min_income": manifest.limits.min_income,
            "max_income": manifest.limits.max_income,
        },
    }
    return jsonify(payload), 200
