"""Integration tests for the tax calculation REST endpoint."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient


def test_calculation_endpoint_returns_breakdown(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations", json={"salary": 75_000, "tax_year": 2022})

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()

    allocations = payload["allocations"]
    assert [entry["bracket"]["min"] for entry in allocations] == [0, 50_197]
    assert allocations[0]["taxable_amount"] == pytest.approx(50_197)
    assert allocations[0]["tax_paid"] == pytest.approx(7_529.55)
    assert allocations[1]["taxable_amount"] == pytest.approx(24_803)
    assert allocations[0]["labels"] == {
        "income_range": "$0.00 - $50,197.00",
        "rate": "15.0%",
        "taxable_amount": "$50,197.00",
        "tax_paid": "$7,529.55",
    }

    summary = payload["summary"]
    assert summary["total_tax"] == pytest.approx(12_614.17, abs=0.01)
    assert summary["effective_rate"] == pytest.approx(0.1682)
    assert summary["effective_rate_percent"] == pytest.approx(16.82)
    assert summary["labels"]["effective_rate"] == "16.82%"
    assert payload["meta"] == {"tax_year": 2022, "salary": 75_000, "currency": "CAD"}


def test_calculation_endpoint_omits_max_for_open_ended_band(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations", json={"salary": 300_000, "taxYear": "2019"})

    assert response.status_code == HTTPStatus.OK
    allocations = response.get_json()["allocations"]
    assert len(allocations) == 5
    assert allocations[-1]["bracket"]["max"] is None
    assert allocations[-1]["labels"]["income_range"] == "$210,371.00 - ∞"


def test_calculation_endpoint_defaults_to_latest_year(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations", json={"salary": 10_000})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["meta"]["tax_year"] == 2022


@pytest.mark.parametrize(
    ("body", "fields"),
    [
        ({"salary": -1_000, "tax_year": 2022}, {"salary": "Salary must be positive"}),
        ({"salary": 20_000_000, "tax_year": 2022}, {"salary": "Salary cannot exceed 10M"}),
        ({"salary": 75_000, "tax_year": 2018}, {"tax_year": "Tax year must be 2019 or later"}),
        ({"salary": 75_000, "tax_year": None}, {"tax_year": "Tax year is required"}),
        (
            {"salary": "abc", "tax_year": 2031},
            {"salary": "Salary must be a number", "tax_year": "Tax year cannot exceed 2022"},
        ),
    ],
)
def test_calculation_endpoint_returns_field_errors(
    client: FlaskClient, body: dict[str, object], fields: dict[str, str]
) -> None:
    response = client.post("/api/v1/calculations", json=body)

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["fields"] == fields


def test_calculation_endpoint_rejects_malformed_json(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations", data="{", content_type="application/json"
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json() == {
        "error": "bad_request",
        "message": "Request body must be valid JSON",
    }


def test_calculation_endpoint_rejects_oversized_integers(client: FlaskClient) -> None:
    huge = "9" * 400
    response = client.post(
        "/api/v1/calculations",
        data=f'{{"salary": {huge}, "tax_year": {huge}}}',
        content_type="application/json",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["fields"] == {
        "salary": "Salary cannot exceed 10M",
        "tax_year": "Tax year cannot exceed 2022",
    }
